"""
page_blocks — FastAPI app (surface d'édition + affichage des pages)
Démarrer : uvicorn page_blocks.app:app --reload --port 8001
"""
import logging

from fastapi import FastAPI

from .router import router as pages_router

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s — %(message)s")
log = logging.getLogger(__name__)

app = FastAPI(title="page_blocks — Composition de pages par blocs", version="1.0.0", docs_url="/docs")

app.include_router(pages_router)


@app.on_event("startup")
def startup():
    from .database import init_db
    init_db()
    log.info("DB initialisée (SQLite)")


@app.get("/health")
def health():
    return {"status": "ok"}

"""SQLite — init + session + lecture/écriture des documents de page"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from . import config
from .document import Page, deserialize, serialize
from .errors import VersionConflict
from .models import Base, PageDocumentDB

log = logging.getLogger(__name__)

ENGINE = None
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def init_db(db_path: Optional[str] = None):
    """Crée l'engine SQLite (DB_PATH par défaut) et les tables."""
    global ENGINE
    path = db_path or config.DB_PATH
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    ENGINE = create_engine(f"sqlite:///{path}", connect_args={"check_same_thread": False})
    SessionLocal.configure(bind=ENGINE)
    Base.metadata.create_all(bind=ENGINE)
    return ENGINE


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ── JSON helpers ──
def jd(o) -> str:
    return json.dumps(o, ensure_ascii=False)


# ── Documents ──
def db_get_document(db: Session, page_id: str) -> Optional[Tuple[Dict[str, Any], int]]:
    """(document, version) ou None si la page n'a jamais été sauvegardée."""
    row = db.get(PageDocumentDB, page_id)
    if row is None:
        return None
    return json.loads(row.document or "{}"), row.version


def db_replace_document(
    db: Session,
    page_id: str,
    document: Dict[str, Any],
    expected_version: Optional[int] = None,
) -> int:
    """
    Remplace le document entier (jamais de diff). Retourne la nouvelle version.

    Sans `expected_version`, la dernière écriture gagne ; avec, VersionConflict
    si le document a été sauvegardé entre-temps.
    """
    row = db.get(PageDocumentDB, page_id)
    current = row.version if row is not None else 0
    if expected_version is not None and expected_version != current:
        raise VersionConflict(page_id, expected_version, current)

    if row is None:
        row = PageDocumentDB(page_id=page_id, version=0)
        db.add(row)
    row.document = jd(document)
    row.version = current + 1
    db.commit()
    log.info("Page %s sauvegardée (version %d, %d blocs)",
             page_id, row.version, len(document.get("blocks") or []))
    return row.version


def load_page(db: Session, page_id: str, strict: bool = False) -> Tuple[Page, int]:
    """Page désérialisée + version (page vide, version 0, si absente)."""
    found = db_get_document(db, page_id)
    if found is None:
        return Page(), 0
    document, version = found
    return deserialize(document, strict=strict), version


def save_page(db: Session, page_id: str, page: Page, expected_version: Optional[int] = None) -> int:
    return db_replace_document(db, page_id, serialize(page), expected_version=expected_version)

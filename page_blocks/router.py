"""
Router FastAPI — surface d'édition des blocs d'une page.

GET    /pages/catalog                                    → variantes + JSON schemas
GET    /pages/{page_id}/blocks                           → séquence courante de la session
POST   /pages/{page_id}/blocks                           → add(type)
PUT    /pages/{page_id}/blocks/{block_id}                → update(id, config)
DELETE /pages/{page_id}/blocks/{block_id}                → remove(id)
POST   /pages/{page_id}/blocks/{index}/move-up|move-down → réordonnancement
GET    /pages/{page_id}/editor                           → formulaires HTML
POST   /pages/{page_id}/save                             → écriture du document complet
GET    /pages/{page_id}                                  → page rendue (document stocké)
POST   /pages/{page_id}/blocks/{block_id}/slots/{slot}/upload → upload d'image asynchrone
GET    /pages/{page_id}/uploads                          → état des slots
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from .assets import UploadRejected
from .database import get_db, load_page
from .document import serialize_block
from .editor import edit_all, render_forms
from .errors import InvalidConfig, NotFound, VersionConflict
from .models import AddBlockRequest, SaveRequest, UpdateBlockRequest
from .registry import catalog as block_catalog
from .renderer import render_page
from .session import EditingSession, SessionRegistry

log = logging.getLogger(__name__)

router = APIRouter(prefix="/pages", tags=["page_blocks"])

_REGISTRY = SessionRegistry()


def get_sessions() -> SessionRegistry:
    return _REGISTRY


def _session(page_id: str, db: Session, sessions: SessionRegistry) -> EditingSession:
    return sessions.open(db, page_id)


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, NotFound):
        return HTTPException(404, str(e))
    if isinstance(e, InvalidConfig):
        return HTTPException(422, str(e))
    if isinstance(e, VersionConflict):
        return HTTPException(409, str(e))
    return HTTPException(400, str(e))


def _sequence(session: EditingSession) -> dict:
    return {
        "page_id": session.page_id,
        "version": session.version,
        "blocks":  [serialize_block(b) for b in session.store.to_sequence()],
    }


@router.get("/catalog", summary="Liste les variantes de blocs et leurs schemas")
def catalog() -> dict:
    return {"blocks": block_catalog()}


@router.get("/{page_id}/blocks")
def list_blocks(page_id: str, db: Session = Depends(get_db), sessions: SessionRegistry = Depends(get_sessions)):
    return _sequence(_session(page_id, db, sessions))


@router.post("/{page_id}/blocks", status_code=201)
def add_block(page_id: str, req: AddBlockRequest, db: Session = Depends(get_db),
              sessions: SessionRegistry = Depends(get_sessions)):
    session = _session(page_id, db, sessions)
    return serialize_block(session.store.add(req.type))


@router.put("/{page_id}/blocks/{block_id}")
def update_block(page_id: str, block_id: str, req: UpdateBlockRequest, db: Session = Depends(get_db),
                 sessions: SessionRegistry = Depends(get_sessions)):
    session = _session(page_id, db, sessions)
    try:
        return serialize_block(session.store.update(block_id, req.config))
    except (NotFound, InvalidConfig) as e:
        raise _http_error(e)


@router.delete("/{page_id}/blocks/{block_id}")
def remove_block(page_id: str, block_id: str, db: Session = Depends(get_db),
                 sessions: SessionRegistry = Depends(get_sessions)):
    session = _session(page_id, db, sessions)
    try:
        session.remove(block_id)
    except NotFound as e:
        raise _http_error(e)
    return _sequence(session)


@router.post("/{page_id}/blocks/{index}/move-up")
def move_up(page_id: str, index: int, db: Session = Depends(get_db),
            sessions: SessionRegistry = Depends(get_sessions)):
    session = _session(page_id, db, sessions)
    session.store.move_up(index)
    return _sequence(session)


@router.post("/{page_id}/blocks/{index}/move-down")
def move_down(page_id: str, index: int, db: Session = Depends(get_db),
              sessions: SessionRegistry = Depends(get_sessions)):
    session = _session(page_id, db, sessions)
    session.store.move_down(index)
    return _sequence(session)


@router.get("/{page_id}/editor", response_class=HTMLResponse)
def editor(page_id: str, db: Session = Depends(get_db), sessions: SessionRegistry = Depends(get_sessions)):
    session = _session(page_id, db, sessions)
    return HTMLResponse(render_forms(edit_all(session.store)))


@router.post("/{page_id}/save")
def save(page_id: str, req: Optional[SaveRequest] = None, db: Session = Depends(get_db),
         sessions: SessionRegistry = Depends(get_sessions)):
    session = _session(page_id, db, sessions)
    try:
        version = session.save(db, expected_version=req.expected_version if req else None)
    except VersionConflict as e:
        raise _http_error(e)
    return {"saved": True, "version": version, "blocks": len(session.store)}


@router.post("/{page_id}/blocks/{block_id}/slots/{slot}/upload", status_code=202)
def upload_slot(
    page_id: str,
    block_id: str,
    slot: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    sessions: SessionRegistry = Depends(get_sessions),
):
    session = _session(page_id, db, sessions)
    content = file.file.read()
    try:
        status = session.uploader.start(
            session.store, block_id, slot, file.filename or "upload.bin", content,
            file.content_type or "",
        )
    except (UploadRejected, NotFound, InvalidConfig) as e:
        raise _http_error(e)
    return {"block_id": block_id, "slot": slot, "status": status.value}


@router.get("/{page_id}/uploads")
def uploads(page_id: str, db: Session = Depends(get_db), sessions: SessionRegistry = Depends(get_sessions)):
    return {"slots": _session(page_id, db, sessions).tracker.snapshot()}


@router.get("/{page_id}", response_class=HTMLResponse)
def view(page_id: str, db: Session = Depends(get_db)):
    """Page rendue depuis le document stocké (pas depuis la session en cours)."""
    page, _ = load_page(db, page_id)
    return HTMLResponse(render_page(page, title=str(page.fields.get("name", ""))))

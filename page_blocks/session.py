"""
Session d'édition — un BlockStore vivant par page (un seul éditeur à la fois).

La session assemble le store, le suivi des uploads et le nettoyage des assets,
puis sérialise la page entière à la sauvegarde. Les assets retirés ne sont
supprimés du bucket qu'après une sauvegarde réussie : tant que le document
stocké les référence, ils restent en place.
"""
import logging
import threading
from typing import Callable, Dict, Iterable, Optional

from sqlalchemy.orm import Session

from .assets import AssetJanitor, AssetUploader, ObjectStorage, UploadTracker, spawn
from .blocks import Block
from .database import load_page, save_page
from .document import Page
from .store import BlockStore, asset_refs

log = logging.getLogger(__name__)


class EditingSession:
    def __init__(
        self,
        page_id: str,
        page: Page,
        version: int = 0,
        storage: Optional[ObjectStorage] = None,
        runner: Callable = spawn,
    ):
        self.page_id = page_id
        self.fields = dict(page.fields)
        self.version = version
        self.storage = storage or ObjectStorage()
        self.janitor = AssetJanitor(self.storage, runner)
        self.tracker = UploadTracker()
        self.store = BlockStore(page.blocks)
        self.uploader = AssetUploader(self.storage, self.tracker, self.janitor, runner)

        # Références du dernier document stocké + toutes celles passées par le store depuis
        self._persisted = asset_refs(page.blocks)
        self._seen = set(self._persisted)
        self._refs_lock = threading.Lock()
        self.store.subscribe(self._track_refs)

    def page(self) -> Page:
        return Page(blocks=self.store.to_sequence(), fields=self.fields)

    def remove(self, block_id: str) -> Block:
        removed = self.store.remove(block_id)
        self.tracker.forget(block_id)
        return removed

    def save(self, db: Session, expected_version: Optional[int] = None) -> int:
        """Écriture du document complet ; la version de la session suit celle stockée."""
        page = self.page()
        self.version = save_page(db, self.page_id, page, expected_version=expected_version)
        self._release_stale(asset_refs(page.blocks))
        return self.version

    def _track_refs(self, sequence: Iterable[Block]) -> None:
        refs = asset_refs(sequence)
        with self._refs_lock:
            self._seen |= refs

    def _release_stale(self, saved: set) -> None:
        # Un upload peut avoir écrit dans le store depuis la capture sauvegardée
        live = asset_refs(self.store.to_sequence())
        with self._refs_lock:
            stale = (self._seen | self._persisted) - saved - live
            self._seen -= stale
            self._persisted = saved
        for ref in sorted(stale):
            self.janitor.release(ref)
        if stale:
            log.info("Page %s : %d asset(s) retiré(s) libéré(s)", self.page_id, len(stale))


class SessionRegistry:
    """Sessions ouvertes, par page_id (en mémoire, process unique)."""

    def __init__(self, storage_factory: Callable[[], ObjectStorage] = ObjectStorage, runner: Callable = spawn):
        self.storage_factory = storage_factory
        self.runner = runner
        self._sessions: Dict[str, EditingSession] = {}
        self._lock = threading.Lock()

    def open(self, db: Session, page_id: str) -> EditingSession:
        with self._lock:
            session = self._sessions.get(page_id)
            if session is None:
                page, version = load_page(db, page_id)
                session = EditingSession(page_id, page, version, self.storage_factory(), self.runner)
                self._sessions[page_id] = session
                log.info("Session d'édition ouverte : %s (%d blocs, v%d)", page_id, len(session.store), version)
            return session

    def close(self, page_id: str) -> None:
        with self._lock:
            self._sessions.pop(page_id, None)

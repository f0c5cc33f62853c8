"""
Uploads d'assets en arrière-plan + nettoyage best-effort.

Chaque upload est suivi par slot (block_id, index) : idle → uploading → idle | failed.
Le suivi est indépendant du BlockStore ; seule la fin d'un upload réussi écrit
dans le store (store.set_asset). Un échec laisse la référence précédente du slot.
"""
import logging
import threading
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from ..errors import InvalidConfig, NotFound
from ..store import BlockStore
from .storage import ObjectStorage

log = logging.getLogger(__name__)

SlotKey = Tuple[str, int]
Runner = Callable[[Callable[[], None]], None]


def spawn(fn: Callable[[], None]) -> None:
    """Exécute `fn` dans un thread daemon (même approche que les jobs admin)."""
    threading.Thread(target=fn, daemon=True).start()


class SlotStatus(str, Enum):
    IDLE      = "idle"
    UPLOADING = "uploading"
    FAILED    = "failed"


class UploadTracker:
    """État des uploads par slot. Un slot absent est IDLE."""

    def __init__(self):
        self._slots: Dict[SlotKey, SlotStatus] = {}
        self._errors: Dict[SlotKey, str] = {}
        self._priors: Dict[SlotKey, Optional[str]] = {}
        self._lock = threading.Lock()

    def status(self, block_id: str, slot: int) -> SlotStatus:
        with self._lock:
            return self._slots.get((block_id, slot), SlotStatus.IDLE)

    def error(self, block_id: str, slot: int) -> Optional[str]:
        with self._lock:
            return self._errors.get((block_id, slot))

    def begin(self, block_id: str, slot: int, prior: Optional[str] = None) -> bool:
        """
        Passe le slot en UPLOADING et retient sa référence actuelle `prior`.
        False si un upload y est déjà en cours.
        """
        with self._lock:
            key = (block_id, slot)
            if self._slots.get(key) == SlotStatus.UPLOADING:
                return False
            self._slots[key] = SlotStatus.UPLOADING
            self._errors.pop(key, None)
            self._priors[key] = prior
            return True

    def prior(self, block_id: str, slot: int) -> Optional[str]:
        with self._lock:
            return self._priors.get((block_id, slot))

    def succeed(self, block_id: str, slot: int) -> None:
        with self._lock:
            self._slots.pop((block_id, slot), None)
            self._errors.pop((block_id, slot), None)
            self._priors.pop((block_id, slot), None)

    def fail(self, block_id: str, slot: int, message: str) -> None:
        with self._lock:
            self._slots[(block_id, slot)] = SlotStatus.FAILED
            self._errors[(block_id, slot)] = message
            self._priors.pop((block_id, slot), None)

    def forget(self, block_id: str) -> None:
        """Oublie tous les slots d'un bloc supprimé."""
        with self._lock:
            for key in [k for k in self._slots if k[0] == block_id]:
                self._slots.pop(key, None)
                self._errors.pop(key, None)
                self._priors.pop(key, None)

    def pending(self) -> List[SlotKey]:
        with self._lock:
            return [k for k, s in self._slots.items() if s == SlotStatus.UPLOADING]

    def snapshot(self) -> List[dict]:
        with self._lock:
            return [
                {"block_id": b, "slot": i, "status": s.value, "error": self._errors.get((b, i))}
                for (b, i), s in sorted(self._slots.items())
            ]


class AssetJanitor:
    """Suppression asynchrone best-effort des assets retirés des blocs."""

    def __init__(self, storage: ObjectStorage, runner: Runner = spawn):
        self.storage = storage
        self.runner = runner

    def release(self, ref: str) -> bool:
        """Planifie la suppression si `ref` est dans notre bucket. Ne lève jamais."""
        if not self.storage.is_managed(ref):
            return False
        self.runner(lambda: self._delete(ref))
        return True

    def _delete(self, ref: str) -> None:
        try:
            self.storage.delete(self.storage.path_from_ref(ref))
            log.info("Asset supprimé : %s", ref)
        except Exception as e:
            # Le state des blocs fait foi : l'échec du nettoyage est seulement journalisé
            log.warning("Suppression de l'asset %s échouée : %s", ref, e)


class AssetUploader:
    """
    Lance les uploads en arrière-plan et écrit la référence obtenue dans le slot.

    Usage:
        >>> uploader = AssetUploader(ObjectStorage(), UploadTracker())
        >>> uploader.start(store, block_id, 0, "photo.png", data, "image/png")
        <SlotStatus.UPLOADING: 'uploading'>
    """

    def __init__(
        self,
        storage: ObjectStorage,
        tracker: UploadTracker,
        janitor: Optional[AssetJanitor] = None,
        runner: Runner = spawn,
    ):
        self.storage = storage
        self.tracker = tracker
        self.janitor = janitor
        self.runner = runner

    def start(
        self,
        store: BlockStore,
        block_id: str,
        slot: int,
        filename: str,
        content: bytes,
        content_type: str,
    ) -> SlotStatus:
        """Valide puis démarre l'upload. UploadRejected / NotFound levées avant tout état."""
        self.storage.validate(content, content_type)
        prior = store.get(block_id).config.asset_at(slot)

        if not self.tracker.begin(block_id, slot, prior):
            return SlotStatus.UPLOADING
        path = self.storage.new_path(filename)
        self.runner(lambda: self._run(store, block_id, slot, path, content, content_type))
        return self.tracker.status(block_id, slot)

    def _run(self, store: BlockStore, block_id: str, slot: int, path: str,
             content: bytes, content_type: str) -> None:
        prior = self.tracker.prior(block_id, slot)
        try:
            ref = self.storage.upload(path, content, content_type)
        except Exception as e:
            log.error("Upload %s[%d] échoué : %s", block_id, slot, e)
            self.tracker.fail(block_id, slot, str(e))
            return

        try:
            # Le slot doit encore contenir la référence vue au départ (éléments retirés/déplacés)
            store.set_asset(block_id, slot, ref, expected=prior)
        except NotFound:
            log.warning("Bloc %s supprimé pendant l'upload, asset libéré", block_id)
            self.tracker.forget(block_id)
            self._discard(ref)
            return
        except InvalidConfig as e:
            log.warning("Slot %s[%d] modifié ou disparu pendant l'upload : %s", block_id, slot, e)
            self.tracker.fail(block_id, slot, str(e))
            self._discard(ref)
            return
        self.tracker.succeed(block_id, slot)

    def _discard(self, ref: str) -> None:
        if self.janitor is not None:
            self.janitor.release(ref)

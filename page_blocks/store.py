"""
BlockStore — séquence ordonnée des blocs d'une page, seul point de mutation.

Invariant : après toute opération, to_sequence()[i].order == i (0..n-1, sans trou
ni doublon). Les opérations sont synchrones et en mémoire ; une erreur (NotFound,
InvalidConfig) laisse le store inchangé.
"""
import logging
import threading
import time
import uuid
from typing import Any, Callable, Iterable, Iterator, List, Mapping, Optional

from pydantic import BaseModel, ValidationError

from .blocks import Block, BlockConfig, BlockType
from .errors import BlockError, InvalidConfig, NotFound
from .registry import block_class, config_class, default_config

log = logging.getLogger(__name__)

Listener = Callable[[List[Block]], None]

# set_asset sans contrôle de la valeur précédente du slot
UNCHECKED = object()


def new_block_id() -> str:
    """Identifiant opaque `block-<ms>-<9 hex>`."""
    return f"block-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def assert_order_dense(blocks: Iterable[Block]) -> None:
    """Lève BlockError si les `order` ne valent pas exactement 0..n-1 dans l'ordre lu."""
    orders = [b.order for b in blocks]
    if orders != list(range(len(orders))):
        raise BlockError(f"Ordres de blocs non consécutifs depuis 0 : {orders}")


def asset_refs(blocks: Iterable[Block]) -> set:
    """Toutes les références d'assets portées par une séquence de blocs."""
    return {ref for blk in blocks for ref in blk.config.asset_refs()}


class BlockStore:
    """
    Propriétaire exclusif des blocs d'une page.

    Usage:
        >>> store = BlockStore()
        >>> b = store.add("text")
        >>> store.update(b.id, {"content": "Bonjour", "alignment": "center"})
        >>> [blk.type for blk in store.to_sequence()]
        ['text']

    Args:
        blocks: Blocs initiaux (triés par `order` puis renumérotés)
        id_factory: Générateur d'ids (tests)
    """

    def __init__(
        self,
        blocks: Optional[Iterable[Block]] = None,
        id_factory: Callable[[], str] = new_block_id,
    ):
        self._blocks: List[Block] = []
        self._listeners: List[Listener] = []
        self._new_id = id_factory
        # Les fins d'upload écrivent depuis un thread : mutations sérialisées
        self._lock = threading.RLock()

        seen = set()
        for blk in sorted(blocks or [], key=lambda b: b.order):
            if blk.id in seen:
                raise BlockError(f"Id de bloc dupliqué : {blk.id!r}")
            seen.add(blk.id)
            self._blocks.append(blk.model_copy(deep=True))
        self._renumber()

    # ── Lecture ─────────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(self.to_sequence())

    def to_sequence(self) -> List[Block]:
        """Blocs triés par `order` (copies : le store reste seul propriétaire)."""
        with self._lock:
            return [b.model_copy(deep=True) for b in sorted(self._blocks, key=lambda b: b.order)]

    def get(self, block_id: str) -> Block:
        with self._lock:
            return self._blocks[self.index_of(block_id)].model_copy(deep=True)

    def index_of(self, block_id: str) -> int:
        for i, blk in enumerate(self._blocks):
            if blk.id == block_id:
                return i
        raise NotFound(block_id)

    # ── Mutations ───────────────────────────────────────────────────────────
    # Les listeners sont appelés hors du verrou, avec la séquence capturée dessous.

    def add(self, block_type: BlockType) -> Block:
        """Ajoute un bloc en fin de séquence avec la config par défaut de sa variante."""
        cls = block_class(block_type)
        with self._lock:
            existing = {b.id for b in self._blocks}
            block_id = self._new_id()
            while block_id in existing:
                block_id = self._new_id()

            blk = cls(id=block_id, order=len(self._blocks), config=default_config(block_type))
            self._blocks.append(blk)
            added, sequence = blk.model_copy(deep=True), self._snapshot()
        self._notify(sequence)
        return added

    def update(self, block_id: str, config: Any) -> Block:
        """Remplace intégralement la config du bloc ; id, type et order inchangés."""
        with self._lock:
            idx = self.index_of(block_id)
            new_config = _validate_config(self._blocks[idx].type, config)
            updated, sequence = self._replace_config(idx, new_config)
        self._notify(sequence)
        return updated

    def set_asset(self, block_id: str, slot: int, ref: str, expected: Any = UNCHECKED) -> Block:
        """
        Place `ref` dans le slot d'asset `slot` (image de galerie, photo de membre).

        Avec `expected`, le slot doit encore contenir cette valeur (compare-and-set) :
        sinon InvalidConfig, le slot a été déplacé ou remplacé entre-temps.
        """
        with self._lock:
            idx = self.index_of(block_id)
            current = self._blocks[idx]
            if expected is not UNCHECKED and (current.config.asset_at(slot) or "") != (expected or ""):
                raise InvalidConfig(current.type, f"slot {slot} modifié pendant l'upload")
            new_config = _validate_config(current.type, current.config.with_asset(slot, ref))
            updated, sequence = self._replace_config(idx, new_config)
        self._notify(sequence)
        return updated

    def remove(self, block_id: str) -> Block:
        """Supprime le bloc puis renumérote les suivants (ordre relatif conservé)."""
        with self._lock:
            removed = self._blocks.pop(self.index_of(block_id))
            self._renumber()
            sequence = self._snapshot()
        self._notify(sequence)
        return removed

    def move_up(self, index: int) -> None:
        """Échange le bloc `index` avec le précédent. No-op sur le premier (ou hors bornes)."""
        with self._lock:
            if not 0 < index < len(self._blocks):
                return
            sequence = self._swap(index - 1, index)
        self._notify(sequence)

    def move_down(self, index: int) -> None:
        """Échange le bloc `index` avec le suivant. No-op sur le dernier (ou hors bornes)."""
        with self._lock:
            if not 0 <= index < len(self._blocks) - 1:
                return
            sequence = self._swap(index, index + 1)
        self._notify(sequence)

    def move(self, index: int, new_index: int) -> None:
        """Déplace le bloc `index` à la position `new_index`."""
        with self._lock:
            n = len(self._blocks)
            if not (0 <= index < n and 0 <= new_index < n):
                raise IndexError(f"Déplacement {index} → {new_index} hors bornes (n={n})")
            if index == new_index:
                return
            blk = self._blocks.pop(index)
            self._blocks.insert(new_index, blk)
            self._renumber()
            sequence = self._snapshot()
        self._notify(sequence)

    # ── Notifications ───────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Abonne `listener` (appelé avec la séquence après chaque mutation). Retourne le désabonnement."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ── Interne ─────────────────────────────────────────────────────────────

    def _replace_config(self, idx: int, new_config: BlockConfig):
        self._blocks[idx] = self._blocks[idx].model_copy(update={"config": new_config})
        return self._blocks[idx].model_copy(deep=True), self._snapshot()

    def _swap(self, i: int, j: int) -> Optional[List[Block]]:
        self._blocks[i], self._blocks[j] = self._blocks[j], self._blocks[i]
        self._renumber()
        return self._snapshot()

    def _renumber(self) -> None:
        for i, blk in enumerate(self._blocks):
            blk.order = i

    def _snapshot(self) -> Optional[List[Block]]:
        return self.to_sequence() if self._listeners else None

    def _notify(self, sequence: Optional[List[Block]]) -> None:
        if sequence is None:
            return
        for listener in list(self._listeners):
            try:
                listener(sequence)
            except Exception as e:
                log.exception("Listener BlockStore en échec : %s", e)


def _validate_config(block_type: str, config: Any) -> BlockConfig:
    """Valide `config` (dict ou modèle) contre le schéma de la variante `block_type`."""
    config_cls = config_class(block_type)
    if isinstance(config, BaseModel):
        if not isinstance(config, config_cls):
            raise InvalidConfig(
                block_type, f"{type(config).__name__} reçu, {config_cls.__name__} attendu"
            )
        config = config.model_dump(by_alias=True)
    if not isinstance(config, Mapping):
        raise InvalidConfig(block_type, f"objet attendu, {type(config).__name__} reçu")
    try:
        return config_cls.model_validate(dict(config))
    except ValidationError as e:
        raise InvalidConfig(block_type, str(e)) from e

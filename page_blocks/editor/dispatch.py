"""
Dispatch éditeur — bloc → formulaire de sa variante.
"""
from typing import Dict, Type

from ..blocks import Block
from ..registry import check_exhaustive
from ..store import BlockStore
from .forms import BlockForm
from .variants import (
    TextBlockForm, GalleryBlockForm, EventsBlockForm, LeadershipBlockForm,
    AchievementsBlockForm, StatsBlockForm, CTABlockForm,
)

_EDITORS: Dict[str, Type[BlockForm]] = {
    "text":         TextBlockForm,
    "gallery":      GalleryBlockForm,
    "events":       EventsBlockForm,
    "leadership":   LeadershipBlockForm,
    "achievements": AchievementsBlockForm,
    "stats":        StatsBlockForm,
    "cta":          CTABlockForm,
}

check_exhaustive(_EDITORS, "_EDITORS")


def edit(block: Block, store: BlockStore) -> BlockForm:
    """Formulaire lié au bloc `block` de `store` (NotFound si le bloc n'y est pas)."""
    form_cls = _EDITORS.get(block.type)
    if form_cls is None:
        raise TypeError(f"Aucun éditeur pour le type {block.type!r}")
    store.index_of(block.id)
    return form_cls(store, block.id)


def edit_all(store: BlockStore) -> list:
    """Un formulaire par bloc, dans l'ordre de la page."""
    return [edit(blk, store) for blk in store.to_sequence()]

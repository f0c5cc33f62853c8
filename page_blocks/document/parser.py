"""
Frontière de sérialisation — Page ⇄ document persisté.

Loi d'aller-retour : deserialize(serialize(p)) == p pour toute Page valide
(mêmes ids, mêmes order, mêmes configs y compris les sous-listes ordonnées).
"""
import logging
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from ..blocks import Block, BlockAdapter
from ..errors import SerializationMismatch
from ..registry import is_known_type
from .schema import DocumentBlock, Page

log = logging.getLogger(__name__)

BLOCKS_KEY = "blocks"


def serialize_block(block: Block) -> Dict[str, Any]:
    return block.model_dump(by_alias=True, exclude_none=True)


def serialize(page: Page) -> Dict[str, Any]:
    """Document complet : champs de page + tableau `blocks` trié par order."""
    doc = dict(page.fields)
    doc[BLOCKS_KEY] = [serialize_block(b) for b in sorted(page.blocks, key=lambda b: b.order)]
    return doc


def _parse_block(raw: Any) -> Block:
    """Instancie un bloc typé depuis son enregistrement brut."""
    if not isinstance(raw, Mapping):
        raise SerializationMismatch(raw, f"Bloc illisible (objet attendu) : {raw!r}")
    if not is_known_type(raw.get("type")):
        raise SerializationMismatch(raw, f"Type de bloc inconnu : {raw.get('type')!r}")
    try:
        record = DocumentBlock.model_validate(raw)
        return BlockAdapter.validate_python(record.model_dump())
    except ValidationError as e:
        raise SerializationMismatch(raw, f"Bloc {raw.get('id')!r} invalide : {e}") from e


def deserialize(document: Mapping[str, Any], strict: bool = False) -> Page:
    """
    Convertit un document persisté en Page.

    1. Instancie chaque bloc (type vérifié contre l'ensemble fermé)
    2. Trie par `order` (l'ordre de stockage n'est jamais supposé)
    3. Renumérote 0..n-1

    Un bloc illisible (type inconnu, config malformée, id dupliqué) est ignoré
    avec un warning ; avec strict=True, SerializationMismatch est levée.
    """
    fields = {k: v for k, v in document.items() if k != BLOCKS_KEY}
    raw_blocks = document.get(BLOCKS_KEY) or []

    parsed: List[tuple] = []
    seen = set()
    for position, raw in enumerate(raw_blocks):
        try:
            blk = _parse_block(raw)
            if blk.id in seen:
                raise SerializationMismatch(raw, f"Id de bloc dupliqué : {blk.id!r}")
        except SerializationMismatch as e:
            if strict:
                raise
            log.warning("Bloc ignoré au chargement : %s", e)
            continue
        seen.add(blk.id)
        parsed.append((blk.order, position, blk))

    blocks = [blk for _, _, blk in sorted(parsed, key=lambda t: (t[0], t[1]))]
    renumbered = False
    for i, blk in enumerate(blocks):
        if blk.order != i:
            blk.order = i
            renumbered = True
    if renumbered:
        log.info("Ordres de blocs renumérotés au chargement (%d blocs)", len(blocks))

    return Page(blocks=blocks, fields=fields)

"""
Schéma du document persisté — forme complète d'une page échangée avec le stockage.

    {
      "_id": "...", "name": "...", "category": "...",   ← champs de page (opaques)
      "blocks": [
        {"id": "block-...", "type": "text", "order": 0,
         "config": {"content": "", "alignment": "left", "fontSize": "medium"}},
        ...
      ]
    }

Les blocs peuvent arriver dans un ordre de stockage quelconque : seul `order` compte.
"""
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from ..blocks import Block


class DocumentBlock(BaseModel):
    """Enregistrement brut d'un bloc dans le document (type non encore vérifié)."""
    id: str
    type: str
    order: int = 0
    config: Dict[str, Any] = Field(default_factory=dict)


class Page(BaseModel):
    """Page en mémoire : blocs typés + champs de page hors périmètre, conservés tels quels."""
    blocks: List[Block] = Field(default_factory=list)
    fields: Dict[str, Any] = Field(default_factory=dict)

"""
Blocs de base pour page_blocks.
Config par variante + BaseBlock discriminé par `type`.
"""
from typing import ClassVar, List, Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..errors import InvalidConfig

# Ensemble fermé des variantes — toute nouvelle valeur doit être enregistrée
# dans registry.py, l'éditeur et le renderer (vérifié à l'import).
BlockType = Literal["text", "gallery", "events", "leadership", "achievements", "stats", "cta"]
BLOCK_TYPES: tuple = get_args(BlockType)


class BlockConfig(BaseModel):
    """Config d'un bloc. Clés persistées en camelCase (fontSize, gridView, imageUrl)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    variant: ClassVar[str] = ""
    # Champs obligatoires qui ne doivent pas rester vides au rendu / à la publication
    required_fields: ClassVar[tuple] = ()

    def missing_fields(self) -> List[str]:
        """Champs obligatoires encore vides."""
        return [f for f in self.required_fields if not str(getattr(self, f) or "").strip()]

    def asset_refs(self) -> List[str]:
        """Références d'assets (images) portées par la config, dans l'ordre."""
        return []

    def asset_at(self, slot: int) -> Optional[str]:
        """Référence actuellement dans le slot `slot` (InvalidConfig si le slot n'existe pas)."""
        raise InvalidConfig(self.variant, "aucun slot d'asset pour cette variante")

    def with_asset(self, slot: int, ref: str) -> "BlockConfig":
        """Copie de la config avec `ref` placée dans le slot `slot`."""
        raise InvalidConfig(self.variant, "aucun slot d'asset pour cette variante")


class BaseBlock(BaseModel):
    """Bloc de base (classe parente des sept variantes)."""
    id: str
    type: str
    order: int = 0
    config: BlockConfig

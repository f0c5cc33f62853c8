"""Bloc Gallery — grille d'images (1 à 4 colonnes)."""
from typing import ClassVar, List, Literal, Optional
from pydantic import Field
from .base import BaseBlock, BlockConfig
from ..errors import InvalidConfig


class GalleryConfig(BlockConfig):
    variant: ClassVar[str] = "gallery"

    title: str
    description: Optional[str] = None
    grid_view: Literal[1, 2, 3, 4] = 1
    images: List[str] = Field(default_factory=list)

    required_fields: ClassVar[tuple] = ("title",)

    def asset_refs(self) -> List[str]:
        return [ref for ref in self.images if ref]

    def _check_slot(self, slot: int) -> None:
        if not 0 <= slot < len(self.images):
            raise InvalidConfig("gallery", f"slot image {slot} hors limites ({len(self.images)} images)")

    def asset_at(self, slot: int) -> Optional[str]:
        self._check_slot(slot)
        return self.images[slot]

    def with_asset(self, slot: int, ref: str) -> "GalleryConfig":
        self._check_slot(slot)
        images = list(self.images)
        images[slot] = ref
        return self.model_copy(update={"images": images})


class GalleryBlock(BaseBlock):
    type: Literal["gallery"] = "gallery"
    config: GalleryConfig = Field(default_factory=lambda: GalleryConfig(title=""))

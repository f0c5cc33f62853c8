"""Bloc CTA — appel à l'action avec lien obligatoire."""
from typing import ClassVar, Literal, Optional
from pydantic import Field
from .base import BaseBlock, BlockConfig


class CTAConfig(BlockConfig):
    variant: ClassVar[str] = "cta"

    title: str
    link: str
    description: Optional[str] = None

    required_fields: ClassVar[tuple] = ("title", "link")


class CTABlock(BaseBlock):
    type: Literal["cta"] = "cta"
    config: CTAConfig = Field(default_factory=lambda: CTAConfig(title="", link=""))

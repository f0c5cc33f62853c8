"""Bloc Text — paragraphe libre avec alignement et taille de police."""
from typing import ClassVar, Literal
from pydantic import Field
from .base import BaseBlock, BlockConfig


class TextConfig(BlockConfig):
    variant: ClassVar[str] = "text"

    content: str
    alignment: Literal["left", "center", "right"] = "left"
    font_size: Literal["small", "medium", "large"] = "medium"


class TextBlock(BaseBlock):
    type: Literal["text"] = "text"
    config: TextConfig = Field(default_factory=lambda: TextConfig(content=""))

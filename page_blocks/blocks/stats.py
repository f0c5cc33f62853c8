"""Bloc Stats — chiffres clés avec icône optionnelle."""
from typing import ClassVar, List, Literal, Optional
from pydantic import BaseModel, Field
from .base import BaseBlock, BlockConfig


class StatItem(BaseModel):
    label: str = ""
    value: str = ""
    icon: Optional[str] = None


class StatsConfig(BlockConfig):
    variant: ClassVar[str] = "stats"

    layout: Literal["horizontal", "grid"] = "horizontal"
    stats: List[StatItem] = Field(default_factory=list)


class StatsBlock(BaseBlock):
    type: Literal["stats"] = "stats"
    config: StatsConfig = Field(default_factory=StatsConfig)

"""Bloc Achievements — palmarès en liste ou en badges."""
from typing import ClassVar, List, Literal, Optional
from pydantic import Field
from .base import BaseBlock, BlockConfig


class AchievementsConfig(BlockConfig):
    variant: ClassVar[str] = "achievements"

    title: Optional[str] = None
    style: Literal["list", "badges"] = "list"
    achievements: List[str] = Field(default_factory=list)


class AchievementsBlock(BaseBlock):
    type: Literal["achievements"] = "achievements"
    config: AchievementsConfig = Field(default_factory=AchievementsConfig)

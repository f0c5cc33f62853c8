"""
Blocs — exports publics + Block (union discriminée par `type`).
"""
from typing import Annotated, Union
from pydantic import Field, TypeAdapter

from .base import BaseBlock, BlockConfig, BlockType, BLOCK_TYPES
from .text import TextBlock, TextConfig
from .gallery import GalleryBlock, GalleryConfig
from .events import EventsBlock, EventsConfig, EventItem
from .leadership import LeadershipBlock, LeadershipConfig, LeadershipMember
from .achievements import AchievementsBlock, AchievementsConfig
from .stats import StatsBlock, StatsConfig, StatItem
from .cta import CTABlock, CTAConfig

# Union discriminée par type — utilisable dans Pydantic avec discriminator
Block = Annotated[
    Union[
        TextBlock,
        GalleryBlock,
        EventsBlock,
        LeadershipBlock,
        AchievementsBlock,
        StatsBlock,
        CTABlock,
    ],
    Field(discriminator="type"),
]

BlockAdapter: TypeAdapter = TypeAdapter(Block)

__all__ = [
    # Base
    "BaseBlock", "BlockConfig", "BlockType", "BLOCK_TYPES",
    # Variantes
    "TextBlock", "TextConfig",
    "GalleryBlock", "GalleryConfig",
    "EventsBlock", "EventsConfig", "EventItem",
    "LeadershipBlock", "LeadershipConfig", "LeadershipMember",
    "AchievementsBlock", "AchievementsConfig",
    "StatsBlock", "StatsConfig", "StatItem",
    "CTABlock", "CTAConfig",
    # Union
    "Block", "BlockAdapter",
]

"""
page_blocks v1.0 — composition de pages par blocs typés.

Usage:
    >>> from page_blocks import BlockStore, edit, render_blocks, serialize, deserialize, Page
    >>> store = BlockStore()
    >>> b = store.add("cta")
    >>> edit(b, store).set_field("link", "/join")
    >>> doc = serialize(Page(blocks=store.to_sequence()))
    >>> html = render_blocks(deserialize(doc).blocks)
"""
from .blocks import (
    BaseBlock, BlockConfig, BlockType, BLOCK_TYPES, Block,
    TextBlock, TextConfig,
    GalleryBlock, GalleryConfig,
    EventsBlock, EventsConfig, EventItem,
    LeadershipBlock, LeadershipConfig, LeadershipMember,
    AchievementsBlock, AchievementsConfig,
    StatsBlock, StatsConfig, StatItem,
    CTABlock, CTAConfig,
)
from .errors import BlockError, NotFound, InvalidConfig, SerializationMismatch, VersionConflict
from .registry import default_config, block_label, catalog
from .store import BlockStore, assert_order_dense
from .document import Page, serialize, deserialize
from .editor import BlockForm, edit, edit_all, render_form
from .renderer import render_block, render_blocks, render_page

__version__ = "1.0.0"

__all__ = [
    # Blocs
    "BaseBlock", "BlockConfig", "BlockType", "BLOCK_TYPES", "Block",
    "TextBlock", "TextConfig", "GalleryBlock", "GalleryConfig",
    "EventsBlock", "EventsConfig", "EventItem",
    "LeadershipBlock", "LeadershipConfig", "LeadershipMember",
    "AchievementsBlock", "AchievementsConfig",
    "StatsBlock", "StatsConfig", "StatItem",
    "CTABlock", "CTAConfig",
    # Erreurs
    "BlockError", "NotFound", "InvalidConfig", "SerializationMismatch", "VersionConflict",
    # Registry / Store
    "default_config", "block_label", "catalog", "BlockStore", "assert_order_dense",
    # Sérialisation
    "Page", "serialize", "deserialize",
    # Édition / rendu
    "BlockForm", "edit", "edit_all", "render_form",
    "render_block", "render_blocks", "render_page",
]

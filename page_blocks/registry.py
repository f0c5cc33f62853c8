"""
Registry des variantes — type de bloc → classe, config par défaut, libellé.

Le registry est vérifié à l'import : un type de BlockType sans entrée (ou une
entrée hors BlockType) fait échouer l'import du package, jamais un fallback.
"""
from typing import Any, Dict, Tuple, Type

from .blocks import (
    BLOCK_TYPES, BaseBlock, BlockConfig, BlockType,
    TextBlock, TextConfig,
    GalleryBlock, GalleryConfig,
    EventsBlock, EventsConfig,
    LeadershipBlock, LeadershipConfig,
    AchievementsBlock, AchievementsConfig,
    StatsBlock, StatsConfig,
    CTABlock, CTAConfig,
)

# type → (classe bloc, classe config, libellé du menu "Add Section")
_BLOCK_REGISTRY: Dict[str, Tuple[Type[BaseBlock], Type[BlockConfig], str]] = {
    "text":         (TextBlock,         TextConfig,         "Text Block"),
    "gallery":      (GalleryBlock,      GalleryConfig,      "Gallery Block"),
    "events":       (EventsBlock,       EventsConfig,       "Events Block"),
    "leadership":   (LeadershipBlock,   LeadershipConfig,   "Leadership Block"),
    "achievements": (AchievementsBlock, AchievementsConfig, "Achievements Block"),
    "stats":        (StatsBlock,        StatsConfig,        "Stats Block"),
    "cta":          (CTABlock,          CTAConfig,          "Call-to-Action Block"),
}

# Valeurs initiales des champs obligatoires (les autres champs ont leur défaut Pydantic)
_REQUIRED_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "text":    {"content": ""},
    "gallery": {"title": ""},
    "cta":     {"title": "", "link": ""},
}


def check_exhaustive(registry: dict, name: str) -> None:
    """Lève TypeError si `registry` ne couvre pas exactement BLOCK_TYPES."""
    missing = set(BLOCK_TYPES) - set(registry)
    extra = set(registry) - set(BLOCK_TYPES)
    if missing or extra:
        raise TypeError(
            f"{name} non exhaustif : manquants={sorted(missing)} inconnus={sorted(extra)}"
        )


check_exhaustive(_BLOCK_REGISTRY, "_BLOCK_REGISTRY")


def _entry(block_type: str) -> Tuple[Type[BaseBlock], Type[BlockConfig], str]:
    try:
        return _BLOCK_REGISTRY[block_type]
    except KeyError:
        # Inatteignable avec un BlockType valide : erreur de programmation
        raise TypeError(f"Type de bloc hors registry : {block_type!r}") from None


def default_config(block_type: BlockType) -> BlockConfig:
    """Config par défaut d'une variante (nouvelle instance à chaque appel, déterministe)."""
    _, config_cls, _ = _entry(block_type)
    return config_cls(**_REQUIRED_DEFAULTS.get(block_type, {}))


def block_class(block_type: BlockType) -> Type[BaseBlock]:
    return _entry(block_type)[0]


def config_class(block_type: BlockType) -> Type[BlockConfig]:
    return _entry(block_type)[1]


def block_label(block_type: BlockType) -> str:
    return _entry(block_type)[2]


def is_known_type(value: Any) -> bool:
    return isinstance(value, str) and value in _BLOCK_REGISTRY


def catalog() -> list:
    """Catalogue des variantes avec leurs JSON schemas Pydantic (pour le menu d'ajout)."""
    return [
        {
            "type":   block_type,
            "label":  label,
            "schema": config_cls.model_json_schema(by_alias=True),
        }
        for block_type, (_, config_cls, label) in _BLOCK_REGISTRY.items()
    ]

"""
Renderer HTML — représentation d'affichage (lecture seule) des blocs.
Dispatch exhaustif par `type` ; fonctions pures, aucune mutation.
"""
import logging
from html import escape
from typing import Callable, Dict, Iterable

from ..blocks import (
    Block,
    TextBlock, GalleryBlock, EventsBlock, LeadershipBlock,
    AchievementsBlock, StatsBlock, CTABlock,
)
from ..document.schema import Page
from ..errors import InvalidConfig
from ..registry import check_exhaustive

log = logging.getLogger(__name__)

CTA_BUTTON_LABEL = "Join Now"


def _e(value) -> str:
    return escape(str(value or ""), quote=True)


def _heading(title) -> str:
    return f'<h3 class="block__title">{_e(title)}</h3>\n' if title else ""


# ── Point d'entrée public ───────────────────────────────────────────────────

def render_page(page: Page, title: str = "", extra_head: str = "") -> str:
    """Génère le HTML complet d'une page (blocs dans l'ordre)."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{_e(title)}</title>
  {extra_head}
</head>
<body>
<main class="page">
{render_blocks(page.blocks)}
</main>
</body>
</html>"""


def render_blocks(blocks: Iterable[Block]) -> str:
    """
    Rend une séquence de blocs triée par `order`.
    Un bloc mal configuré est remplacé par un commentaire ; les autres sont rendus.
    """
    parts = []
    for blk in sorted(blocks, key=lambda b: b.order):
        try:
            inner = render_block(blk)
        except InvalidConfig as e:
            log.warning("Bloc %s non rendu : %s", blk.id, e)
            parts.append(f"<!-- Bloc {_e(blk.id)} non rendu : configuration incomplète -->")
            continue
        parts.append(
            f'<section class="block block--{blk.type}" data-block-id="{_e(blk.id)}">\n{inner}\n</section>'
        )
    return "\n".join(parts)


# ── Dispatch bloc ───────────────────────────────────────────────────────────

def render_block(block: Block) -> str:
    """Dispatch vers le renderer de la variante."""
    renderer = _RENDERERS.get(block.type)
    if renderer is None:
        raise TypeError(f"Aucun renderer pour le type {block.type!r}")
    return renderer(block)


# ── Renderers par variante ──────────────────────────────────────────────────

def render_text_block(b: TextBlock) -> str:
    c = b.config
    classes = ["text-block", f"text-block--align-{c.alignment}", f"text-block--size-{c.font_size}"]
    return f'<div class="{" ".join(classes)}">{_e(c.content)}</div>'


def render_gallery_block(b: GalleryBlock) -> str:
    c = b.config

    items_html = ""
    for i, ref in enumerate(c.images):
        if ref:
            inner = f'<img src="{_e(ref)}" alt="Gallery image {i + 1}" class="gallery__img" loading="lazy">'
        else:
            inner = '<div class="gallery__placeholder"></div>'
        items_html += f'\n    <div class="gallery__item">{inner}</div>'

    desc_html = f'<p class="block__description">{_e(c.description)}</p>\n' if c.description else ""
    return f"""<div class="gallery gallery--cols-{c.grid_view}">
{_heading(c.title)}{desc_html}  <div class="gallery__grid" style="grid-template-columns:repeat({c.grid_view},1fr)">{items_html}
  </div>
</div>"""


def render_events_block(b: EventsBlock) -> str:
    c = b.config

    items_html = ""
    for ev in c.events:
        desc_html = f'\n    <p class="events__description">{_e(ev.description)}</p>' if ev.description else ""
        items_html += f"""
  <div class="events__item">
    <h4 class="events__title">{_e(ev.title)}</h4>
    <div class="events__meta">
      <span class="events__date">{_e(ev.date)}</span>
      <span class="events__time">{_e(ev.time)}</span>
      <span class="events__location">{_e(ev.location)}</span>
    </div>{desc_html}
  </div>"""

    return f"""<div class="events events--{c.layout}">
{_heading(c.title)}<div class="events__items">{items_html}
</div>
</div>"""


def render_leadership_block(b: LeadershipBlock) -> str:
    c = b.config

    items_html = ""
    for m in c.members:
        if m.image_url:
            photo = f'<img src="{_e(m.image_url)}" alt="{_e(m.name)}" class="leadership__photo">'
        else:
            photo = f'<div class="leadership__initials">{_e(m.initials())}</div>'
        items_html += f"""
  <div class="leadership__member">
    {photo}
    <h4 class="leadership__name">{_e(m.name)}</h4>
    <p class="leadership__role">{_e(m.role)}</p>
    <p class="leadership__year">{_e(m.year)}</p>
    <p class="leadership__course">{_e(m.course)}</p>
  </div>"""

    return f"""<div class="leadership leadership--{c.layout}">
{_heading(c.title)}<div class="leadership__members">{items_html}
</div>
</div>"""


def render_achievements_block(b: AchievementsBlock) -> str:
    c = b.config
    if c.style == "badges":
        items = "".join(f'<span class="achievements__badge">{_e(a)}</span>' for a in c.achievements)
        body = f'<div class="achievements__badges">{items}</div>'
    else:
        items = "".join(f'<li class="achievements__item">{_e(a)}</li>' for a in c.achievements)
        body = f'<ul class="achievements__list">{items}</ul>'
    return f"""<div class="achievements achievements--{c.style}">
{_heading(c.title)}{body}
</div>"""


def render_stats_block(b: StatsBlock) -> str:
    c = b.config

    items_html = ""
    for item in c.stats:
        icon_html = f'<div class="stats__icon">{_e(item.icon)}</div>' if item.icon else ""
        items_html += f"""
  <div class="stats__item">
    {icon_html}<div class="stats__value">{_e(item.value)}</div>
    <div class="stats__label">{_e(item.label)}</div>
  </div>"""

    return f'<div class="stats stats--{c.layout}">{items_html}\n</div>'


def render_cta_block(b: CTABlock) -> str:
    c = b.config
    missing = c.missing_fields()
    if missing:
        # Un CTA sans destination n'a pas de sens à l'affichage
        raise InvalidConfig("cta", f"champs obligatoires vides : {', '.join(missing)}")

    desc_html = f'\n  <p class="cta__description">{_e(c.description)}</p>' if c.description else ""
    return f"""<div class="cta">
  <h3 class="cta__title">{_e(c.title)}</h3>{desc_html}
  <a href="{_e(c.link)}" class="btn btn-primary">{CTA_BUTTON_LABEL}</a>
</div>"""


_RENDERERS: Dict[str, Callable[..., str]] = {
    "text":         render_text_block,
    "gallery":      render_gallery_block,
    "events":       render_events_block,
    "leadership":   render_leadership_block,
    "achievements": render_achievements_block,
    "stats":        render_stats_block,
    "cta":          render_cta_block,
}

check_exhaustive(_RENDERERS, "_RENDERERS")

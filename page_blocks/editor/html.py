"""
Rendu HTML des formulaires d'édition (surface admin).
"""
from html import escape
from typing import Any, List

from ..registry import block_label
from .forms import BlockForm, FieldSpec


def _e(value: Any) -> str:
    return escape("" if value is None else str(value), quote=True)


def _input(spec: FieldSpec, name: str, value: Any) -> str:
    req = " required" if spec.required else ""
    ph = f' placeholder="{_e(spec.placeholder)}"' if spec.placeholder else ""
    if spec.kind == "textarea":
        return f'<textarea name="{name}" rows="3"{ph}{req}>{_e(value)}</textarea>'
    if spec.kind == "choice":
        opts = "".join(
            f'<option value="{_e(c)}"{" selected" if c == value else ""}>{_e(c)}</option>'
            for c in spec.choices or ()
        )
        return f'<select name="{name}">{opts}</select>'
    if spec.kind == "asset":
        preview = f'<img src="{_e(value)}" alt="" class="editor__thumb">' if value else ""
        return (f'{preview}<input type="text" name="{name}" value="{_e(value)}"{ph}>'
                f'<input type="file" name="{name}__file" accept="image/jpeg,image/png,image/webp">')
    return f'<input type="text" name="{name}" value="{_e(value)}"{ph}{req}>'


def _field(spec: FieldSpec, value: Any) -> str:
    star = " *" if spec.required else ""
    label = f'<label class="editor__label">{_e(spec.label)}{star}</label>'

    if spec.kind == "list":
        rows = []
        for i, item in enumerate(value or []):
            item_spec = spec.model_copy(update={"kind": "asset" if spec.asset_slots else "text"})
            rows.append(
                f'<div class="editor__row" data-index="{i}">{_input(item_spec, f"{spec.name}[{i}]", item)}'
                f'<button type="button" data-action="remove" data-index="{i}">Remove</button></div>'
            )
        body = "".join(rows) + f'<button type="button" data-action="add" data-collection="{spec.name}">+ Add</button>'
        return f'<div class="editor__field editor__field--list">{label}{body}</div>'

    if spec.kind == "items":
        groups = []
        for i, item in enumerate(value or []):
            sub = "".join(
                f'<div class="editor__subfield"><label>{_e(f.label)}</label>'
                f'{_input(f, f"{spec.name}[{i}].{f.name}", item.get(f.name))}</div>'
                for f in spec.item_fields
            )
            groups.append(
                f'<fieldset class="editor__item" data-index="{i}">{sub}'
                f'<button type="button" data-action="remove" data-index="{i}">Remove</button></fieldset>'
            )
        body = "".join(groups) + f'<button type="button" data-action="add" data-collection="{spec.name}">+ Add</button>'
        return f'<div class="editor__field editor__field--items">{label}{body}</div>'

    return f'<div class="editor__field">{label}{_input(spec, spec.name, value)}</div>'


def render_form(form: BlockForm) -> str:
    """HTML du formulaire d'un bloc, champs manquants signalés."""
    blk = form.block
    data = blk.config.model_dump()
    fields_html = "\n  ".join(_field(spec, data.get(spec.name)) for spec in form.fields)

    missing = form.missing_fields()
    warn = ""
    if missing:
        warn = f'\n  <p class="editor__missing">Required: {_e(", ".join(missing))}</p>'

    return f"""<form class="block-editor block-editor--{blk.type}" data-block-id="{_e(blk.id)}" data-order="{blk.order}">
  <h3 class="block-editor__title">{_e(block_label(blk.type))}</h3>{warn}
  {fields_html}
</form>"""


def render_forms(forms: List[BlockForm]) -> str:
    if not forms:
        return '<div class="editor__empty"><p>No sections added yet</p><p>Click "Add Section" to get started</p></div>'
    return "\n".join(render_form(f) for f in forms)

from .forms import BlockForm, FieldSpec
from .dispatch import edit, edit_all
from .html import render_form, render_forms

__all__ = ["BlockForm", "FieldSpec", "edit", "edit_all", "render_form", "render_forms"]

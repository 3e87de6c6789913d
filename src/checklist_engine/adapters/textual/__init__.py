"""Textual host adapter; the controller has no Textual dependency."""

from .controller import ChecklistEditorAdapter, RowView, UIHooks, build_rows, render_row

__all__ = [
    "ChecklistEditorAdapter",
    "RowView",
    "UIHooks",
    "build_rows",
    "render_row",
]

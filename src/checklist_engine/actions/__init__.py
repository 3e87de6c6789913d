"""Shortcut handlers executed by keymap bindings."""

from . import core, history, items, selection

__all__ = ["core", "history", "items", "selection"]

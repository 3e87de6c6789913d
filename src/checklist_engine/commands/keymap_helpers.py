"""Helpers translating host key events into keymap tokens."""

from __future__ import annotations

from checklist_engine.keymaps import KeyStroke

from .base import KeyInput

# Host key names that differ from the tokens used in keymaps.
KEY_ALIASES = {
    "esc": "escape",
    "return": "enter",
    "del": "delete",
    "arrowup": "up",
    "arrowdown": "down",
    "backtab": "shift+tab",
    " ": "space",
}


def key_to_token(key: KeyInput) -> str:
    """Normalize ``key`` to the ``ctrl+shift+z`` token form."""

    name = key.key
    if len(name) > 1 or name == " ":
        name = KEY_ALIASES.get(name.lower(), name)
    stroke = KeyStroke.parse(name) if len(name) > 1 else KeyStroke(name)
    modifiers = stroke.modifiers + tuple(key.modifiers)
    key_name = stroke.key
    # With a modifier held, letters match case-insensitively ("ctrl+Z").
    if modifiers and len(key_name) == 1:
        key_name = key_name.lower()
    return KeyStroke(key_name, modifiers).token


__all__ = ["KEY_ALIASES", "key_to_token"]

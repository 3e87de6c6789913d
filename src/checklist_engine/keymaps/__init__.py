"""Declarative shortcut registry and default editor bindings."""

from .models import ActionRef, Binding, KeySequence, KeyStroke, WhenClause
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats, ShortcutHint
from .resolver import KeymapResolver, ResolutionMatch, ResolutionResult
from .defaults import EDITOR_MODE, load_default_keymaps

__all__ = [
    "ActionRef",
    "Binding",
    "KeySequence",
    "KeyStroke",
    "WhenClause",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "ShortcutHint",
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
    "EDITOR_MODE",
    "load_default_keymaps",
]

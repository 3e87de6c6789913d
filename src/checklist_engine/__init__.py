"""UI-agnostic document model and structural-editing engine for checklists."""

__all__ = [
    "actions",
    "adapters",
    "commands",
    "document",
    "keymaps",
    "runtime",
    "session",
]

__version__ = "0.1.0"

"""Key input, command context and shortcut dispatch."""

from .base import CommandContext, CommandResult, KeyInput

__all__ = [
    "KeyInput",
    "CommandContext",
    "CommandResult",
]

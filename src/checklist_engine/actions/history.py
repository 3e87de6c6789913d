"""Undo and redo shortcuts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from checklist_engine.commands.base import CommandContext, CommandResult

from .core import outcome

if TYPE_CHECKING:
    from checklist_engine.keymaps import ResolutionMatch


def undo(context: CommandContext, match: "ResolutionMatch") -> CommandResult:
    del match
    return outcome(context.store.undo(), "undo", "nothing_to_undo")


def redo(context: CommandContext, match: "ResolutionMatch") -> CommandResult:
    del match
    return outcome(context.store.redo(), "redo", "nothing_to_redo")


__all__ = ["undo", "redo"]

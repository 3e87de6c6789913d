"""Navigation, range extension and editing-marker shortcuts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from checklist_engine.commands.base import CommandContext, CommandResult

from .core import applied, noop, outcome

if TYPE_CHECKING:
    from checklist_engine.keymaps import ResolutionMatch


def _navigate(context: CommandContext, direction: int) -> CommandResult:
    target = context.store.navigate(direction)
    if target is None:
        return noop("at_boundary")
    return applied("navigate", target)


def navigate_up(context: CommandContext, match: "ResolutionMatch") -> CommandResult:
    del match
    return _navigate(context, -1)


def navigate_down(context: CommandContext, match: "ResolutionMatch") -> CommandResult:
    del match
    return _navigate(context, 1)


def extend_up(context: CommandContext, match: "ResolutionMatch") -> CommandResult:
    del match
    return outcome(context.store.extend_selection(-1), "extend", "at_boundary")


def extend_down(context: CommandContext, match: "ResolutionMatch") -> CommandResult:
    del match
    return outcome(context.store.extend_selection(1), "extend", "at_boundary")


def start_editing(context: CommandContext, match: "ResolutionMatch") -> CommandResult:
    del match
    store = context.store
    if store.active_item_id is None:
        return noop("no_active_item")
    return outcome(
        store.set_editing_item(store.active_item_id), "editing", "already_editing"
    )


def stop_editing(context: CommandContext, match: "ResolutionMatch") -> CommandResult:
    del match
    return outcome(context.store.set_editing_item(None), "editing_done", "not_editing")


def clear_selection(context: CommandContext, match: "ResolutionMatch") -> CommandResult:
    del match
    return outcome(context.store.select_item(None), "selection_cleared", "nothing_selected")


def toggle_collapsed(context: CommandContext, match: "ResolutionMatch") -> CommandResult:
    del match
    store = context.store
    if store.active_item_id is None:
        return noop("no_active_item")
    return outcome(store.toggle_collapsed(store.active_item_id), "toggle_collapsed", "unknown_item")


__all__ = [
    "navigate_up",
    "navigate_down",
    "extend_up",
    "extend_down",
    "start_editing",
    "stop_editing",
    "clear_selection",
    "toggle_collapsed",
]

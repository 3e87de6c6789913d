"""Structural shortcuts acting on the active checklist.

Batch handlers go through the store's scope resolution: with a
multi-selection that contains the active item they act on every selected
item, otherwise on the active item alone.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from checklist_engine.commands.base import CommandContext, CommandResult
from checklist_engine.document.model import ItemKind

from .core import applied, noop, outcome

if TYPE_CHECKING:
    from checklist_engine.keymaps import ResolutionMatch

NEW_CHECKLIST_NAME = "New Checklist"


def add_item(context: CommandContext, match: "ResolutionMatch") -> CommandResult:
    """Insert a challenge/response row after the active item (or at the end)."""

    del match
    store = context.store
    if store.get_checklist() is None:
        return noop("no_checklist_selected")
    item_id = store.add_item(ItemKind.CHALLENGE_RESPONSE, after_id=store.active_item_id)
    if item_id is None:
        return noop("insert_refused")
    return applied("add_item", item_id)


def add_checklist(context: CommandContext, match: "ResolutionMatch") -> CommandResult:
    del match
    store = context.store
    checklist_file = store.active_file
    if checklist_file is None:
        return noop("no_file_open")
    if not checklist_file.groups:
        return noop("no_groups")
    checklist_id = store.add_checklist(
        checklist_file.id, checklist_file.groups[0].id, NEW_CHECKLIST_NAME
    )
    if checklist_id is None:
        return noop("add_checklist_refused")
    return applied("add_checklist", checklist_id)


def duplicate(context: CommandContext, match: "ResolutionMatch") -> CommandResult:
    del match
    store = context.store
    if store.active_item_id is None:
        return noop("no_active_item")
    clones = store.duplicate_scope()
    if not clones:
        return noop("duplicate_refused")
    return applied("duplicate", f"{len(clones)} item(s)")


def indent(context: CommandContext, match: "ResolutionMatch") -> CommandResult:
    del match
    return outcome(context.store.shift_scope(1), "indent", "indent_refused")


def outdent(context: CommandContext, match: "ResolutionMatch") -> CommandResult:
    del match
    return outcome(context.store.shift_scope(-1), "outdent", "outdent_refused")


def remove(context: CommandContext, match: "ResolutionMatch") -> CommandResult:
    del match
    store = context.store
    if store.active_item_id is None:
        return noop("no_active_item")
    return outcome(store.remove_scope(), "remove", "remove_refused")


__all__ = [
    "NEW_CHECKLIST_NAME",
    "add_item",
    "add_checklist",
    "duplicate",
    "indent",
    "outdent",
    "remove",
]

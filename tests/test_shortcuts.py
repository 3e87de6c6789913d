from __future__ import annotations

import itertools
from typing import List

from checklist_engine.commands import KeyInput
from checklist_engine.commands.dispatcher import ShortcutDispatcher
from checklist_engine.commands.keymap_helpers import key_to_token
from checklist_engine.document.model import Checklist, ChecklistFile, Group, Item, ItemKind
from checklist_engine.keymaps import (
    EDITOR_MODE,
    Binding,
    KeySequence,
    KeymapRegistry,
    load_default_keymaps,
)
from checklist_engine.session import ChecklistPath, DocumentStore

PATH = ChecklistPath("f1", "g1", "c1")


def make_store() -> DocumentStore:
    counter = itertools.count(1)
    store = DocumentStore(clock=lambda: 5.0, id_factory=lambda: f"id{next(counter)}")
    items = (
        Item(id="cabin", kind=ItemKind.TITLE, challenge_text="CABIN"),
        Item(id="a", challenge_text="Seats", depth=1),
        Item(id="b", challenge_text="Belts", depth=1),
    )
    store.open_file(
        ChecklistFile(
            id="f1",
            name="Skyhawk",
            groups=(Group(id="g1", name="Normal", checklists=(Checklist(id="c1", items=items),)),),
        )
    )
    store.set_active_checklist(PATH)
    return store


def make_dispatcher(**kwargs) -> ShortcutDispatcher:
    return ShortcutDispatcher(make_store(), **kwargs)


def press(dispatcher: ShortcutDispatcher, key: str, *modifiers: str):
    return dispatcher.handle_key(KeyInput(key=key, modifiers=modifiers))


def depth_of(dispatcher: ShortcutDispatcher, item_id: str) -> int:
    return dispatcher.store.get_checklist().get_item(item_id).depth


def test_key_tokens() -> None:
    assert key_to_token(KeyInput("Z", ("ctrl", "shift"))) == "ctrl+shift+z"
    assert key_to_token(KeyInput("ctrl+d")) == "ctrl+d"
    assert key_to_token(KeyInput("Escape")) == "escape"
    assert key_to_token(KeyInput("esc")) == "escape"
    assert key_to_token(KeyInput(" ")) == "space"
    assert key_to_token(KeyInput("backtab")) == "shift+tab"
    assert key_to_token(KeyInput("A")) == "A"


def test_tab_indents_and_ctrl_z_undoes() -> None:
    dispatcher = make_dispatcher()
    dispatcher.store.select_item("a")

    indented = press(dispatcher, "tab")
    assert (indented.status, indented.action_id) == ("indent", "items.indent")
    assert depth_of(dispatcher, "a") == 2

    undone = press(dispatcher, "z", "ctrl")
    assert undone.status == "undo"
    assert depth_of(dispatcher, "a") == 1

    redone = press(dispatcher, "Z", "ctrl", "shift")
    assert redone.status == "redo"
    assert depth_of(dispatcher, "a") == 2


def test_structural_keys_ignored_while_editing() -> None:
    dispatcher = make_dispatcher()
    dispatcher.store.select_item("a")
    dispatcher.store.set_editing_item("a")

    result = press(dispatcher, "tab")

    assert result.consumed is False
    assert result.status == "miss"
    assert depth_of(dispatcher, "a") == 1


def test_escape_depends_on_editing_state() -> None:
    dispatcher = make_dispatcher()
    store = dispatcher.store
    store.select_item("a")
    store.set_editing_item("a")

    first = press(dispatcher, "escape")
    assert first.status == "editing_done"
    assert store.editing_item_id is None
    assert store.active_item_id == "a"

    second = press(dispatcher, "escape")
    assert second.status == "selection_cleared"
    assert store.active_item_id is None


def test_ctrl_n_adds_item_after_active() -> None:
    dispatcher = make_dispatcher()
    store = dispatcher.store
    store.select_item("a")

    result = press(dispatcher, "n", "ctrl")

    assert result.status == "add_item"
    assert result.message == "id1"
    assert store.get_checklist().item_ids() == ("cabin", "a", "id1", "b")
    assert store.editing_item_id == "id1"


def test_ctrl_shift_n_adds_checklist_to_first_group() -> None:
    dispatcher = make_dispatcher()

    result = press(dispatcher, "N", "ctrl", "shift")

    assert result.status == "add_checklist"
    group = dispatcher.store.get_file("f1").get_group("g1")
    assert [c.name for c in group.checklists][-1] == "New Checklist"


def test_duplicate_without_active_item_is_noop() -> None:
    dispatcher = make_dispatcher()
    before = dispatcher.store.workspace

    result = press(dispatcher, "d", "ctrl")

    assert result.consumed is True
    assert (result.status, result.message) == ("noop", "no_active_item")
    assert dispatcher.store.workspace is before


def test_arrows_navigate_and_extend() -> None:
    dispatcher = make_dispatcher()
    store = dispatcher.store

    assert press(dispatcher, "down").message == "cabin"
    assert press(dispatcher, "down").message == "a"
    press(dispatcher, "down", "shift")
    assert store.selected_ids == ("a", "b")

    removed = press(dispatcher, "delete")
    assert removed.status == "remove"
    assert store.get_checklist().item_ids() == ("cabin",)


def test_space_and_enter() -> None:
    dispatcher = make_dispatcher()
    store = dispatcher.store
    store.select_item("cabin")

    press(dispatcher, " ")
    assert store.visible_ids() == ["cabin"]

    started = press(dispatcher, "enter")
    assert started.status == "editing"
    assert store.editing_item_id == "cabin"


def test_pending_chord_times_out() -> None:
    now: List[float] = [0.0]
    registry = KeymapRegistry()
    chord = Binding(
        id="editor.chord_undo",
        mode=EDITOR_MODE,
        sequence=KeySequence.from_strings("ctrl+k", "u", timeout_ms=500),
        action_id="history.undo",
    )
    load_default_keymaps(registry, extra_bindings=[chord])
    dispatcher = make_dispatcher(keymap_registry=registry, clock=lambda: now[0])

    pending = press(dispatcher, "k", "ctrl")
    assert (pending.status, pending.timeout_ms) == ("pending", 500)
    assert dispatcher.pending_tokens == ("ctrl+k",)

    now[0] = 0.2
    assert dispatcher.process_timeouts() is None

    now[0] = 1.0
    expired = dispatcher.process_timeouts()
    assert expired is not None and expired.status == "timeout"
    assert dispatcher.pending_tokens == ()


def test_pending_chord_completes() -> None:
    registry = KeymapRegistry()
    chord = Binding(
        id="editor.chord_undo",
        mode=EDITOR_MODE,
        sequence=KeySequence.from_strings("ctrl+k", "u"),
        action_id="history.undo",
    )
    load_default_keymaps(registry, extra_bindings=[chord])
    dispatcher = make_dispatcher(keymap_registry=registry)
    dispatcher.store.indent_item("a")

    press(dispatcher, "k", "ctrl")
    result = press(dispatcher, "u")

    assert result.status == "undo"
    assert result.action_id == "history.undo"
    assert depth_of(dispatcher, "a") == 1


def test_shortcut_hints_follow_state() -> None:
    dispatcher = make_dispatcher()

    idle = dispatcher.shortcut_hints()
    dispatcher.store.select_item("a")
    dispatcher.store.set_editing_item("a")
    editing = dispatcher.shortcut_hints()

    assert ("ctrl+z", "Undo") in idle
    assert ("tab", "Indent") in idle
    assert ("tab", "Indent") not in editing
    assert ("escape", "Stop editing") in editing

from __future__ import annotations

from typing import Any, List, Sequence, Tuple

from checklist_engine.adapters.textual.controller import (
    ChecklistEditorAdapter,
    RowView,
    UIHooks,
    render_row,
)
from checklist_engine.commands.dispatcher import ShortcutDispatcher
from checklist_engine.document.model import Checklist, ChecklistFile, Group, Item, ItemKind
from checklist_engine.session import ChecklistPath, DocumentStore


def make_dispatcher() -> ShortcutDispatcher:
    store = DocumentStore()
    items = (
        Item(id="cabin", kind=ItemKind.TITLE, challenge_text="CABIN"),
        Item(id="a", challenge_text="Seats", response_text="ADJUSTED", depth=1),
        Item(id="n", kind=ItemKind.NOTE, challenge_text="Check rails", depth=1),
    )
    store.open_file(
        ChecklistFile(
            id="f1",
            groups=(Group(id="g1", checklists=(Checklist(id="c1", items=items),)),),
        )
    )
    store.set_active_checklist(ChecklistPath("f1", "g1", "c1"))
    return ShortcutDispatcher(store)


def make_adapter(
    rows: List[Sequence[RowView]],
    statuses: List[str] | None = None,
    events: List[Tuple[str, Any]] | None = None,
    logs: List[str] | None = None,
) -> ChecklistEditorAdapter:
    hooks = UIHooks(
        update_rows=rows.append,
        update_status=(statuses.append if statuses is not None else lambda _: None),
        handle_event=(
            (lambda name, payload: events.append((name, payload)))
            if events is not None
            else lambda _name, _payload: None
        ),
        log=(logs.append if logs is not None else lambda _: None),
    )
    return ChecklistEditorAdapter(make_dispatcher(), hooks)


def test_adapter_publishes_rows_on_start() -> None:
    rows: List[Sequence[RowView]] = []

    make_adapter(rows)

    assert [row.id for row in rows[-1]] == ["cabin", "a", "n"]
    title = rows[-1][0]
    assert title.child_count == 2
    assert rows[-1][1].text == "Seats .... ADJUSTED"
    assert rows[-1][2].text == "NOTE: Check rails"


def test_space_collapses_active_title() -> None:
    rows: List[Sequence[RowView]] = []
    adapter = make_adapter(rows)
    adapter.store.select_item("cabin")

    adapter.handle_textual_key("space", text=" ")

    (title,) = rows[-1]
    assert title.collapsed and title.active
    assert render_row(title) == "> [+] # CABIN"


def test_draft_editing_commits_on_enter() -> None:
    rows: List[Sequence[RowView]] = []
    statuses: List[str] = []
    adapter = make_adapter(rows, statuses)
    store = adapter.store
    store.select_item("a")

    adapter.handle_textual_key("enter")
    assert store.editing_item_id == "a"
    assert adapter.draft == "Seats"

    adapter.handle_textual_key("backspace")
    adapter.handle_textual_key("S", text="S")
    editing_row = next(row for row in rows[-1] if row.id == "a")
    assert editing_row.editing and editing_row.text == "SeatS"

    committed = adapter.handle_textual_key("enter")

    assert committed.status == "edit_committed"
    assert store.get_checklist().get_item("a").challenge_text == "SeatS"
    assert store.editing_item_id is None
    assert adapter.draft is None
    assert statuses[-1] == "SeatS"


def test_escape_discards_the_draft() -> None:
    rows: List[Sequence[RowView]] = []
    adapter = make_adapter(rows)
    store = adapter.store
    store.select_item("a")
    adapter.handle_textual_key("enter")
    adapter.handle_textual_key("x", text="x")

    adapter.handle_textual_key("escape")

    assert store.editing_item_id is None
    # An uncommitted draft is discarded.
    assert store.get_checklist().get_item("a").challenge_text == "Seats"


def test_adapter_relays_store_events() -> None:
    rows: List[Sequence[RowView]] = []
    events: List[Tuple[str, Any]] = []
    adapter = make_adapter(rows, events=events)
    adapter.store.select_item("a")

    adapter.handle_textual_key("tab")
    adapter.handle_textual_key("z", modifiers=("ctrl",))

    names = [name for name, _ in events]
    assert "selection.changed" in names
    assert names.count("document.changed") == 2
    assert "history.undo" in names


def test_adapter_emits_log_lines() -> None:
    rows: List[Sequence[RowView]] = []
    logs: List[str] = []
    adapter = make_adapter(rows, logs=logs)

    adapter.handle_textual_key("down")

    assert any(line.startswith("key ->") for line in logs)
    assert any("status='navigate'" in line for line in logs)


def test_close_stops_event_relay() -> None:
    rows: List[Sequence[RowView]] = []
    events: List[Tuple[str, Any]] = []
    adapter = make_adapter(rows, events=events)

    adapter.close()
    adapter.store.toggle_collapsed("cabin")

    assert events == []

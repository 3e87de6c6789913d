"""Host-side controller that turns store state into renderable rows.

The controller knows nothing about Textual widgets. It relays key events to
the :class:`ShortcutDispatcher`, keeps an in-progress text draft while an
item is being edited, and pushes :class:`RowView` lists and status strings
through :class:`UIHooks` whenever the store reports a change.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from checklist_engine.commands import CommandResult, KeyInput
from checklist_engine.commands.dispatcher import ShortcutDispatcher
from checklist_engine.document.hierarchy import child_count, visible_indices
from checklist_engine.document.model import Item, ItemKind
from checklist_engine.session import DocumentStore
from checklist_engine.session.bus import EDITING_CHANGED, STORE_EVENTS

KIND_LABELS = {
    ItemKind.CHALLENGE_RESPONSE: "",
    ItemKind.CHALLENGE_ONLY: "",
    ItemKind.TITLE: "#",
    ItemKind.NOTE: "NOTE",
    ItemKind.WARNING: "WARNING",
    ItemKind.CAUTION: "CAUTION",
}


def _noop(*_args: object, **_kwargs: object) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class UIHooks:
    """Callbacks invoked by the controller to update host widgets."""

    update_rows: Callable[[Sequence["RowView"]], None]
    update_status: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


@dataclass(frozen=True, slots=True)
class RowView:
    """Everything a host needs to draw one visible checklist row."""

    id: str
    index: int
    depth: int
    kind: ItemKind
    text: str
    child_count: int
    collapsed: bool
    active: bool
    selected: bool
    editing: bool


def item_text(item: Item) -> str:
    if item.kind is ItemKind.CHALLENGE_RESPONSE and item.response_text:
        return f"{item.challenge_text} .... {item.response_text}"
    label = KIND_LABELS[item.kind]
    if label and item.kind is not ItemKind.TITLE:
        return f"{label}: {item.challenge_text}"
    return item.challenge_text


def build_rows(store: DocumentStore, *, draft: Optional[str] = None) -> List[RowView]:
    """Visible rows of the active checklist, in display order."""

    checklist = store.get_checklist()
    if checklist is None:
        return []
    items = checklist.items
    collapsed = store.collapsed_ids
    selected = set(store.selected_ids)
    rows = []
    for index in visible_indices(items, collapsed):
        item = items[index]
        editing = item.id == store.editing_item_id
        rows.append(
            RowView(
                id=item.id,
                index=index,
                depth=item.depth,
                kind=item.kind,
                text=draft if editing and draft is not None else item_text(item),
                child_count=child_count(items, index),
                collapsed=item.id in collapsed,
                active=item.id == store.active_item_id,
                selected=item.id in selected,
                editing=editing,
            )
        )
    return rows


def render_row(row: RowView) -> str:
    """Plain-text rendering used by the demo app."""

    marker = ">" if row.active else ("*" if row.selected else " ")
    fold = ""
    if row.child_count:
        fold = "[+] " if row.collapsed else "[-] "
    prefix = "# " if row.kind is ItemKind.TITLE else ""
    cursor = "_" if row.editing else ""
    return f"{marker} {'    ' * row.depth}{fold}{prefix}{row.text}{cursor}"


class ChecklistEditorAdapter:
    """Bridges dispatcher + store bus events to a host-friendly surface."""

    def __init__(self, dispatcher: ShortcutDispatcher, hooks: UIHooks) -> None:
        self.dispatcher = dispatcher
        self.hooks = hooks
        self._draft: Optional[str] = None
        self._unsubscribers = [
            dispatcher.store.bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )
            for event in STORE_EVENTS
        ]
        self._refresh_rows()

    @property
    def store(self) -> DocumentStore:
        return self.dispatcher.store

    @property
    def draft(self) -> Optional[str]:
        return self._draft

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> CommandResult:
        """Route one host key event.

        While an item is being edited, ``enter`` commits the draft, and
        ``backspace`` and printable characters edit it; everything else goes
        through the shortcut dispatcher.
        """

        normalized_modifiers = tuple(str(mod).lower() for mod in modifiers)
        self._log_state("key ->", key=key, text=text, mods=normalized_modifiers)

        result = self._edit_draft(key, text, normalized_modifiers)
        if result is None:
            result = self.dispatcher.handle_key(
                KeyInput(key=key, text=text, modifiers=normalized_modifiers)
            )
        self._after_result(result)
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            message=result.message,
            action=result.action_id,
        )
        return result

    def process_timeouts(self) -> Optional[CommandResult]:
        result = self.dispatcher.process_timeouts()
        if result is not None:
            self.hooks.update_status(f"{self.dispatcher.mode}:{result.status}")
            self._refresh_rows()
        return result

    def rows(self) -> List[RowView]:
        return build_rows(self.store, draft=self._draft)

    def _edit_draft(
        self, key: str, text: Optional[str], modifiers: tuple[str, ...]
    ) -> Optional[CommandResult]:
        editing_id = self.store.editing_item_id
        if editing_id is None or self._draft is None:
            return None
        if key == "enter" and not modifiers:
            draft = self._draft
            self.store.update_item(editing_id, challenge_text=draft)
            self.store.set_editing_item(None)
            return CommandResult(consumed=True, status="edit_committed", message=draft)
        if key == "backspace":
            self._draft = self._draft[:-1]
            return CommandResult(consumed=True, status="editing")
        if text and text.isprintable() and not {"ctrl", "alt", "meta"} & set(modifiers):
            self._draft += text
            return CommandResult(consumed=True, status="editing")
        return None

    def _after_result(self, result: CommandResult) -> None:
        status = result.message or result.status
        if status:
            self.hooks.update_status(status)
        self._refresh_rows()

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        if name == EDITING_CHANGED:
            self._draft = self._draft_for(payload if isinstance(payload, str) else None)
        self.hooks.handle_event(name, payload)
        self._refresh_rows()

    def _draft_for(self, item_id: Optional[str]) -> Optional[str]:
        if item_id is None:
            return None
        checklist = self.store.get_checklist()
        item = checklist.get_item(item_id) if checklist else None
        return item.challenge_text if item else ""

    def _refresh_rows(self) -> None:
        self.hooks.update_rows(self.rows())

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        store = self.store
        return {
            "file": store.active_file_id,
            "checklist": store.active_path.checklist_id if store.active_path else None,
            "active": store.active_item_id,
            "selected": len(store.selected_ids),
            "editing": store.editing_item_id,
            "pending": self.dispatcher.pending_tokens,
        }


__all__ = [
    "ChecklistEditorAdapter",
    "UIHooks",
    "RowView",
    "build_rows",
    "item_text",
    "render_row",
]

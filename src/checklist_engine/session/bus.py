"""Synchronous event bus the store uses to notify consumers."""

from __future__ import annotations

from typing import Callable, Dict

Listener = Callable[[object], None]

DOCUMENT_CHANGED = "document.changed"
SELECTION_CHANGED = "selection.changed"
COLLAPSE_CHANGED = "collapse.changed"
EDITING_CHANGED = "editing.changed"
HISTORY_UNDO = "history.undo"
HISTORY_REDO = "history.redo"

STORE_EVENTS = (
    DOCUMENT_CHANGED,
    SELECTION_CHANGED,
    COLLAPSE_CHANGED,
    EDITING_CHANGED,
    HISTORY_UNDO,
    HISTORY_REDO,
)


class StoreBus:
    """Minimal pub/sub; listeners run in subscription order on ``emit``."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Listener]] = {}

    def subscribe(self, event: str, callback: Listener) -> Callable[[], None]:
        self._subscribers.setdefault(event, []).append(callback)

        def unsubscribe() -> None:
            listeners = self._subscribers.get(event, [])
            if callback in listeners:
                listeners.remove(callback)

        return unsubscribe

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)


__all__ = [
    "StoreBus",
    "Listener",
    "STORE_EVENTS",
    "DOCUMENT_CHANGED",
    "SELECTION_CHANGED",
    "COLLAPSE_CHANGED",
    "EDITING_CHANGED",
    "HISTORY_UNDO",
    "HISTORY_REDO",
]

"""Stateful editing session: store, selection, history and event bus."""

from .bus import StoreBus
from .history import HistoryEntry, HistoryTimeline
from .selection import SelectionManager, SelectionState
from .store import ChecklistPath, DocumentStore

__all__ = [
    "StoreBus",
    "HistoryEntry",
    "HistoryTimeline",
    "SelectionManager",
    "SelectionState",
    "ChecklistPath",
    "DocumentStore",
]

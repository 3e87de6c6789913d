"""Linear undo/redo timeline over workspace snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from checklist_engine.document.model import Workspace


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    label: str
    before: Workspace
    after: Workspace


class HistoryTimeline:
    """Entries plus a cursor; committing after an undo discards the redo tail.

    Only the tracked workspace is stored. Selection, collapse state and the
    editing marker never enter the timeline.
    """

    def __init__(self, *, limit: Optional[int] = None) -> None:
        if limit is not None and limit <= 0:
            raise ValueError("limit must be positive")
        self._entries: List[HistoryEntry] = []
        self._index: int = -1
        self._limit = limit

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def position(self) -> int:
        return self._index

    def commit(self, before: Workspace, after: Workspace, label: str) -> bool:
        if before == after:
            return False
        if self._index < len(self._entries) - 1:
            self._entries = self._entries[: self._index + 1]
        self._entries.append(HistoryEntry(label=label, before=before, after=after))
        if self._limit is not None and len(self._entries) > self._limit:
            del self._entries[: len(self._entries) - self._limit]
        self._index = len(self._entries) - 1
        return True

    def can_undo(self) -> bool:
        return self._index >= 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def undo(self) -> Optional[Workspace]:
        if not self.can_undo():
            return None
        entry = self._entries[self._index]
        self._index -= 1
        return entry.before

    def redo(self) -> Optional[Workspace]:
        if not self.can_redo():
            return None
        self._index += 1
        return self._entries[self._index].after

    def peek_undo(self) -> Optional[HistoryEntry]:
        return self._entries[self._index] if self.can_undo() else None

    def peek_redo(self) -> Optional[HistoryEntry]:
        return self._entries[self._index + 1] if self.can_redo() else None

    def clear(self) -> None:
        self._entries.clear()
        self._index = -1


__all__ = ["HistoryEntry", "HistoryTimeline"]

from __future__ import annotations

import pytest

from checklist_engine.document.model import ChecklistFile, Workspace
from checklist_engine.session.history import HistoryTimeline


def make_workspace(version: int) -> Workspace:
    return Workspace(files=(ChecklistFile(id="f", name=f"v{version}"),))


def make_timeline(count: int, **kwargs) -> HistoryTimeline:
    timeline = HistoryTimeline(**kwargs)
    for version in range(count):
        timeline.commit(make_workspace(version), make_workspace(version + 1), f"edit {version}")
    return timeline


def test_undo_all_restores_first_state() -> None:
    timeline = make_timeline(4)

    restored = None
    while timeline.can_undo():
        restored = timeline.undo()

    assert restored == make_workspace(0)
    assert timeline.undo() is None


def test_redo_replays_after_states() -> None:
    timeline = make_timeline(2)
    timeline.undo()
    timeline.undo()

    assert timeline.redo() == make_workspace(1)
    assert timeline.redo() == make_workspace(2)
    assert timeline.redo() is None


def test_commit_after_undo_truncates_redo_tail() -> None:
    timeline = make_timeline(3)
    timeline.undo()
    timeline.undo()

    timeline.commit(make_workspace(1), make_workspace(99), "branch")

    assert not timeline.can_redo()
    assert len(timeline) == 2
    assert timeline.peek_undo().label == "branch"


def test_equal_states_are_not_recorded() -> None:
    timeline = HistoryTimeline()

    assert timeline.commit(make_workspace(1), make_workspace(1), "noop") is False
    assert len(timeline) == 0


def test_limit_drops_oldest_entries() -> None:
    timeline = make_timeline(5, limit=2)

    assert len(timeline) == 2
    timeline.undo()
    assert timeline.undo() == make_workspace(3)
    assert not timeline.can_undo()


def test_invalid_limit() -> None:
    with pytest.raises(ValueError):
        HistoryTimeline(limit=0)

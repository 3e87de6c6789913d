"""Validation helpers for documents handed in by the format layer."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .model import ChecklistFile, Item, is_valid_depth


class DocumentValidationError(ValueError):
    """Raised when an inbound file breaks the document invariants."""

    def __init__(self, message: str, *, problems: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.problems = tuple(problems)


def item_problems(items: Sequence[Item]) -> List[str]:
    problems: List[str] = []
    seen: set[str] = set()
    for position, item in enumerate(items):
        if item.id in seen:
            problems.append(f"duplicate item id {item.id!r} at position {position}")
        seen.add(item.id)
        if not is_valid_depth(item.depth):
            problems.append(f"item {item.id!r} has depth {item.depth!r}")
    return problems


def find_problems(checklist_file: ChecklistFile) -> Tuple[str, ...]:
    """Every invariant violation in ``checklist_file``, as readable strings.

    Ids must be unique at each level across the file; item depths must lie in
    ``[0, 3]``. Depth jumps relative to the inferred parent are *not*
    problems: they are accepted document state.
    """

    problems: List[str] = []
    group_ids: set[str] = set()
    checklist_ids: set[str] = set()
    all_items: List[Item] = []
    for group in checklist_file.groups:
        if group.id in group_ids:
            problems.append(f"duplicate group id {group.id!r}")
        group_ids.add(group.id)
        for checklist in group.checklists:
            if checklist.id in checklist_ids:
                problems.append(f"duplicate checklist id {checklist.id!r}")
            checklist_ids.add(checklist.id)
            all_items.extend(checklist.items)
    # Collapse and selection state is keyed by item id alone.
    problems.extend(item_problems(all_items))
    return tuple(problems)


def ensure_valid(checklist_file: ChecklistFile) -> ChecklistFile:
    problems = find_problems(checklist_file)
    if problems:
        raise DocumentValidationError(
            f"File {checklist_file.id!r} failed validation", problems=problems
        )
    return checklist_file


def ensure_disjoint(
    checklist_file: ChecklistFile, others: Iterable[ChecklistFile]
) -> ChecklistFile:
    """Reject ``checklist_file`` if it shares item ids with any of ``others``."""

    incoming = {
        item.id
        for _, checklist in checklist_file.iter_checklists()
        for item in checklist.items
    }
    problems: List[str] = []
    for other in others:
        if other.id == checklist_file.id:
            continue
        shared = sorted(
            item.id
            for _, checklist in other.iter_checklists()
            for item in checklist.items
            if item.id in incoming
        )
        problems.extend(
            f"item id {item_id!r} already open in file {other.id!r}" for item_id in shared
        )
    if problems:
        raise DocumentValidationError(
            f"File {checklist_file.id!r} clashes with open files", problems=problems
        )
    return checklist_file


__all__ = [
    "DocumentValidationError",
    "item_problems",
    "find_problems",
    "ensure_valid",
    "ensure_disjoint",
]

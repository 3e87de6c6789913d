"""Active item, multi-selection and scope resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import AbstractSet, Iterable, Optional, Sequence, Tuple


@dataclass(slots=True)
class SelectionState:
    """Mutable selection snapshot owned by one store.

    ``selected`` keeps insertion order so scope tuples are stable; callers
    that need document order re-sort against the item sequence.
    """

    active_id: Optional[str] = None
    selected: Tuple[str, ...] = ()

    def contains(self, item_id: str) -> bool:
        return item_id in self.selected


@dataclass(slots=True)
class SelectionManager:
    state: SelectionState = field(default_factory=SelectionState)

    @property
    def active_id(self) -> Optional[str]:
        return self.state.active_id

    @property
    def selected(self) -> Tuple[str, ...]:
        return self.state.selected

    def select_single(self, item_id: Optional[str]) -> bool:
        """Make ``item_id`` the active item and the whole selection."""

        selected = (item_id,) if item_id is not None else ()
        if self.state.active_id == item_id and self.state.selected == selected:
            return False
        self.state.active_id = item_id
        self.state.selected = selected
        return True

    def assign(self, selected: Sequence[str], active_id: Optional[str]) -> bool:
        """Replace the selection wholesale (e.g. with freshly created clones)."""

        selected = tuple(dict.fromkeys(selected))
        if self.state.active_id == active_id and self.state.selected == selected:
            return False
        self.state.active_id = active_id
        self.state.selected = selected
        return True

    def select_range(self, target_id: str, visible_ids: Sequence[str]) -> bool:
        """Select the visible span between the previous active item and ``target_id``.

        The anchor is the previously active item (or the target itself when
        nothing was active). Hidden items never join the range. A target that
        is not visible makes this a no-op; an anchor that is not visible
        collapses the selection to just the target.
        """

        try:
            target_pos = visible_ids.index(target_id)
        except ValueError:
            return False

        anchor_id = self.state.active_id or target_id
        try:
            anchor_pos = visible_ids.index(anchor_id)
        except ValueError:
            selected: Tuple[str, ...] = (target_id,)
        else:
            low, high = sorted((anchor_pos, target_pos))
            selected = tuple(visible_ids[low : high + 1])

        changed = self.state.selected != selected or self.state.active_id != target_id
        self.state.selected = selected
        self.state.active_id = target_id
        return changed

    def resolve_scope(self, target_id: str) -> Tuple[str, ...]:
        """Operand set for a batch command aimed at ``target_id``."""

        if len(self.state.selected) > 1 and target_id in self.state.selected:
            return self.state.selected
        return (target_id,)

    def revalidate(self, existing_ids: AbstractSet[str]) -> bool:
        """Drop every id that no longer exists in the document."""

        selected = tuple(i for i in self.state.selected if i in existing_ids)
        active = self.state.active_id
        if active is not None and active not in existing_ids:
            active = None
        changed = selected != self.state.selected or active != self.state.active_id
        self.state.selected = selected
        self.state.active_id = active
        return changed

    def forget(self, item_ids: Iterable[str]) -> bool:
        dropped = set(item_ids)
        selected = tuple(i for i in self.state.selected if i not in dropped)
        active = None if self.state.active_id in dropped else self.state.active_id
        changed = selected != self.state.selected or active != self.state.active_id
        self.state.selected = selected
        self.state.active_id = active
        return changed

    def clear(self) -> bool:
        return self.select_single(None)


__all__ = ["SelectionState", "SelectionManager"]

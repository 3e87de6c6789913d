"""Pure hierarchy queries over a flat item sequence.

Parent/child structure is never stored. It is re-derived on demand from each
item's position, ``depth`` and ``kind``:

* the parent of an item is the nearest preceding item with a strictly lower
  depth;
* the descendants of an item are the run of following items that its
  :class:`ContainmentPolicy` keeps inside the span.

Two policies exist. Title items use *section* containment: the span runs up
to, but excludes, the next Title whose depth is at or above the title's own,
so a depth-0 Title owns the depth-0 steps below it. Every other kind uses
*depth* containment: the span is the run of strictly deeper items.

``child_count`` and ``visible_indices`` share the same policy objects, so the
two rules have a single implementation path.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, List, Optional, Sequence

from .model import Item, ItemKind


@dataclass(frozen=True, slots=True)
class ContainmentPolicy:
    """Decides where the descendant span of an owning item ends."""

    name: str
    boundary_kind: Optional[ItemKind] = None

    def closes(self, owner_depth: int, candidate: Item) -> bool:
        """Return True when ``candidate`` is the first item outside the span."""

        if candidate.depth > owner_depth:
            return False
        if self.boundary_kind is None:
            return True
        return candidate.kind is self.boundary_kind


SECTION = ContainmentPolicy(name="section", boundary_kind=ItemKind.TITLE)
DEPTH = ContainmentPolicy(name="depth")


def policy_for(item: Item) -> ContainmentPolicy:
    return SECTION if item.is_title else DEPTH


def _in_range(items: Sequence[Item], index: int) -> bool:
    return 0 <= index < len(items)


def child_count(items: Sequence[Item], index: int) -> int:
    """Number of following items considered descendants of ``items[index]``.

    Returns ``0`` for an index that does not resolve.
    """

    if not _in_range(items, index):
        return 0
    owner = items[index]
    policy = policy_for(owner)
    count = 0
    for candidate in items[index + 1 :]:
        if policy.closes(owner.depth, candidate):
            break
        count += 1
    return count


def descendant_span(items: Sequence[Item], index: int) -> range:
    """Positions of the descendants of ``items[index]`` (empty if invalid)."""

    if not _in_range(items, index):
        return range(0)
    return range(index + 1, index + 1 + child_count(items, index))


def parent_index(items: Sequence[Item], index: int) -> Optional[int]:
    """Nearest preceding position with a strictly lower depth, if any."""

    if not _in_range(items, index):
        return None
    depth = items[index].depth
    for position in range(index - 1, -1, -1):
        if items[position].depth < depth:
            return position
    return None


def visible_indices(
    items: Sequence[Item], collapsed_ids: AbstractSet[str]
) -> List[int]:
    """Positions not hidden beneath a collapsed ancestor, in order.

    One linear scan. While skipping, only the collapsing item's depth and
    policy matter; a collapsed item that is itself hidden never starts a new
    skip, so nested collapses add nothing.
    """

    visible: List[int] = []
    skip_depth: Optional[int] = None
    skip_policy = DEPTH

    for index, item in enumerate(items):
        if skip_depth is not None:
            if not skip_policy.closes(skip_depth, item):
                continue
            skip_depth = None

        visible.append(index)

        if item.id in collapsed_ids:
            skip_depth = item.depth
            skip_policy = policy_for(item)

    return visible


def visible_ids(items: Sequence[Item], collapsed_ids: AbstractSet[str]) -> List[str]:
    return [items[index].id for index in visible_indices(items, collapsed_ids)]


__all__ = [
    "ContainmentPolicy",
    "SECTION",
    "DEPTH",
    "policy_for",
    "child_count",
    "descendant_span",
    "parent_index",
    "visible_indices",
    "visible_ids",
]

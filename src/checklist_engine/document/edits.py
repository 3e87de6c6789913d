"""Item-level structural edits.

Every function takes a :class:`Checklist` value and returns an
:class:`EditResult`. An edit either produces a complete new checklist or is
refused, in which case the result carries the *same* checklist with
``applied=False`` and a short ``reason``. Stale ids and out-of-range indices
are refusals, not exceptions, because UI state can lag the model by an event.

None of these edits cascade to inferred descendants: removing, indenting or
moving an item leaves every other item's depth untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Collection, Generic, Iterable, List, Optional, Tuple, TypeVar

from .model import (
    TEXT_KINDS,
    Checklist,
    Item,
    ItemKind,
    is_valid_depth,
    new_id,
)

T = TypeVar("T")

EDITABLE_FIELDS = frozenset(
    {"kind", "challenge_text", "response_text", "depth", "centered", "collapsible"}
)


@dataclass(frozen=True)
class EditResult(Generic[T]):
    """Outcome of an edit: the new (or untouched) value plus bookkeeping."""

    value: T
    applied: bool
    reason: str = "ok"
    item_ids: Tuple[str, ...] = ()


def refused(value: T, reason: str) -> EditResult[T]:
    return EditResult(value=value, applied=False, reason=reason)


def _ordered_indices(checklist: Checklist, item_ids: Collection[str]) -> List[int]:
    wanted = set(item_ids)
    return [i for i, item in enumerate(checklist.items) if item.id in wanted]


def insert_item(
    checklist: Checklist,
    kind: ItemKind | str,
    after_index: Optional[int] = None,
    *,
    item_id: Optional[str] = None,
) -> EditResult[Checklist]:
    """Insert a blank item after ``after_index`` (``-1`` = start, ``None`` = end).

    The new depth copies the item that ends up directly before it, or 0 at
    the very start. Neighbouring depths are not touched.
    """

    items = checklist.items
    if after_index is None:
        position = len(items)
    elif -1 <= after_index < len(items):
        position = after_index + 1
    else:
        return refused(checklist, "invalid_index")

    try:
        resolved = ItemKind(kind)
    except ValueError:
        return refused(checklist, "invalid_kind")

    depth = items[position - 1].depth if position > 0 else 0
    item = Item(id=item_id or new_id(), kind=resolved, depth=depth)
    updated = items[:position] + (item,) + items[position:]
    return EditResult(checklist.with_items(updated), True, item_ids=(item.id,))


def remove_item(checklist: Checklist, item_id: str) -> EditResult[Checklist]:
    """Delete exactly one item; its inferred descendants stay where they are."""

    index = checklist.index_of(item_id)
    if index < 0:
        return refused(checklist, "unknown_item")
    updated = checklist.items[:index] + checklist.items[index + 1 :]
    return EditResult(checklist.with_items(updated), True, item_ids=(item_id,))


def remove_items(
    checklist: Checklist, item_ids: Collection[str]
) -> EditResult[Checklist]:
    indices = _ordered_indices(checklist, item_ids)
    if not indices:
        return refused(checklist, "empty_scope")
    dropped = {checklist.items[i].id for i in indices}
    kept = [item for item in checklist.items if item.id not in dropped]
    removed = tuple(checklist.items[i].id for i in indices)
    return EditResult(checklist.with_items(kept), True, item_ids=removed)


def duplicate_item(checklist: Checklist, item_id: str) -> EditResult[Checklist]:
    """Clone one item (fresh id, same fields) directly after the original."""

    index = checklist.index_of(item_id)
    if index < 0:
        return refused(checklist, "unknown_item")
    clone = checklist.items[index].clone()
    items = checklist.items
    updated = items[: index + 1] + (clone,) + items[index + 1 :]
    return EditResult(checklist.with_items(updated), True, item_ids=(clone.id,))


def duplicate_items(
    checklist: Checklist, item_ids: Collection[str]
) -> EditResult[Checklist]:
    """Clone several items, in document order, after the last of them."""

    indices = _ordered_indices(checklist, item_ids)
    if not indices:
        return refused(checklist, "empty_scope")
    clones = tuple(checklist.items[i].clone() for i in indices)
    last = indices[-1]
    items = checklist.items
    updated = items[: last + 1] + clones + items[last + 1 :]
    return EditResult(
        checklist.with_items(updated),
        True,
        item_ids=tuple(clone.id for clone in clones),
    )


def set_depth(checklist: Checklist, item_id: str, delta: int) -> EditResult[Checklist]:
    """Move one item exactly one level in or out.

    Refused when ``delta`` is not ``+1``/``-1`` or the result would leave
    ``[0, 3]``. The new depth is not checked against the inferred parent.
    """

    if delta not in (1, -1):
        return refused(checklist, "invalid_delta")
    index = checklist.index_of(item_id)
    if index < 0:
        return refused(checklist, "unknown_item")
    item = checklist.items[index]
    depth = item.depth + delta
    if not is_valid_depth(depth):
        return refused(checklist, "depth_out_of_range")
    updated = _replace_at(checklist.items, index, replace(item, depth=depth))
    return EditResult(checklist.with_items(updated), True, item_ids=(item_id,))


def shift_depths(
    checklist: Checklist, item_ids: Collection[str], delta: int
) -> EditResult[Checklist]:
    """Batch :func:`set_depth`: every item moves, or none does."""

    if delta not in (1, -1):
        return refused(checklist, "invalid_delta")
    indices = _ordered_indices(checklist, item_ids)
    if not indices:
        return refused(checklist, "empty_scope")
    items = list(checklist.items)
    for index in indices:
        depth = items[index].depth + delta
        if not is_valid_depth(depth):
            return refused(checklist, "depth_out_of_range")
        items[index] = replace(items[index], depth=depth)
    return EditResult(
        checklist.with_items(items),
        True,
        item_ids=tuple(items[i].id for i in indices),
    )


def reorder_item(
    checklist: Checklist, from_index: int, to_index: int
) -> EditResult[Checklist]:
    """Move the item at ``from_index`` so it ends up at ``to_index``."""

    moved = move_element(checklist.items, from_index, to_index)
    if moved is None:
        return refused(checklist, "invalid_index")
    if from_index == to_index:
        return refused(checklist, "unchanged")
    return EditResult(
        checklist.with_items(moved),
        True,
        item_ids=(checklist.items[from_index].id,),
    )


def reorder_items(
    checklist: Checklist, item_ids: Collection[str], target_index: int
) -> EditResult[Checklist]:
    """Move a (possibly non-contiguous) set of items as one block.

    The selected items keep their relative order and are inserted at
    ``target_index`` of the *remaining* sequence, clamped to its end.
    """

    if target_index < 0:
        return refused(checklist, "invalid_index")
    wanted = set(item_ids)
    extracted = [item for item in checklist.items if item.id in wanted]
    if not extracted:
        return refused(checklist, "empty_scope")
    remaining = [item for item in checklist.items if item.id not in wanted]
    position = min(target_index, len(remaining))
    updated = tuple(remaining[:position] + extracted + remaining[position:])
    if updated == checklist.items:
        return refused(checklist, "unchanged")
    return EditResult(
        checklist.with_items(updated),
        True,
        item_ids=tuple(item.id for item in extracted),
    )


def update_item(
    checklist: Checklist, item_id: str, **changes: Any
) -> EditResult[Checklist]:
    """Apply field edits to one item; the id itself is never editable."""

    index = checklist.index_of(item_id)
    if index < 0:
        return refused(checklist, "unknown_item")
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        return refused(checklist, "unknown_field")
    if "depth" in changes and not is_valid_depth(changes["depth"]):
        return refused(checklist, "depth_out_of_range")
    if "kind" in changes:
        try:
            changes["kind"] = ItemKind(changes["kind"])
        except ValueError:
            return refused(checklist, "invalid_kind")

    current = checklist.items[index]
    updated = replace(current, **changes)
    if updated == current:
        return refused(checklist, "unchanged")
    return EditResult(
        checklist.with_items(_replace_at(checklist.items, index, updated)),
        True,
        item_ids=(item_id,),
    )


def uppercase_item(item: Item) -> Item:
    if item.kind not in TEXT_KINDS:
        return item
    return replace(
        item,
        challenge_text=item.challenge_text.upper(),
        response_text=item.response_text.upper(),
    )


def uppercase_items(
    checklist: Checklist, item_ids: Optional[Collection[str]] = None
) -> EditResult[Checklist]:
    """Uppercase challenge/response text; ``None`` means the whole checklist."""

    wanted = None if item_ids is None else set(item_ids)
    touched: List[str] = []
    items: List[Item] = []
    for item in checklist.items:
        if wanted is None or item.id in wanted:
            converted = uppercase_item(item)
            if converted != item:
                touched.append(item.id)
            items.append(converted)
        else:
            items.append(item)
    if not touched:
        return refused(checklist, "unchanged")
    return EditResult(checklist.with_items(items), True, item_ids=tuple(touched))


def move_element(
    values: Tuple[T, ...], from_index: int, to_index: int
) -> Optional[Tuple[T, ...]]:
    """Splice-style move shared by item, checklist and group reordering."""

    size = len(values)
    if not (0 <= from_index < size and 0 <= to_index < size):
        return None
    working = list(values)
    moved = working.pop(from_index)
    working.insert(to_index, moved)
    return tuple(working)


def _replace_at(items: Tuple[Item, ...], index: int, item: Item) -> Iterable[Item]:
    return items[:index] + (item,) + items[index + 1 :]


__all__ = [
    "EDITABLE_FIELDS",
    "EditResult",
    "refused",
    "insert_item",
    "remove_item",
    "remove_items",
    "duplicate_item",
    "duplicate_items",
    "set_depth",
    "shift_depths",
    "reorder_item",
    "reorder_items",
    "update_item",
    "uppercase_item",
    "uppercase_items",
    "move_element",
]

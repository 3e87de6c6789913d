"""Group, checklist and file level edits.

These operate on whole item sequences at once. A checklist that moves or is
copied keeps its items (and therefore every relative depth) intact, so no
depth renormalisation ever happens here.
"""

from __future__ import annotations

from dataclasses import fields, replace
from typing import Any, Iterable, Optional, Tuple

from .edits import EditResult, move_element, refused, uppercase_item
from .model import (
    Checklist,
    ChecklistFile,
    FileMetadata,
    Group,
    GroupCategory,
    new_id,
)

COPY_SUFFIX = " (Copy)"


def clone_checklist(checklist: Checklist, *, name: Optional[str] = None) -> Checklist:
    """Deep copy under fresh checklist and item identities."""

    return Checklist(
        id=new_id(),
        name=checklist.name if name is None else name,
        items=tuple(item.clone() for item in checklist.items),
    )


def _insert_at(
    values: Tuple[Any, ...], value: Any, index: Optional[int]
) -> Optional[Tuple[Any, ...]]:
    if index is None:
        return values + (value,)
    if not 0 <= index <= len(values):
        return None
    return values[:index] + (value,) + values[index:]


# -- checklists within a group ---------------------------------------------


def add_checklist(
    group: Group, name: str, *, checklist_id: Optional[str] = None
) -> EditResult[Group]:
    checklist = Checklist(id=checklist_id or new_id(), name=name)
    return EditResult(
        group.with_checklists(group.checklists + (checklist,)),
        True,
        item_ids=(checklist.id,),
    )


def remove_checklist(group: Group, checklist_id: str) -> EditResult[Group]:
    if group.index_of(checklist_id) < 0:
        return refused(group, "unknown_checklist")
    kept = [c for c in group.checklists if c.id != checklist_id]
    return EditResult(group.with_checklists(kept), True, item_ids=(checklist_id,))


def replace_checklist(group: Group, checklist: Checklist) -> EditResult[Group]:
    index = group.index_of(checklist.id)
    if index < 0:
        return refused(group, "unknown_checklist")
    checklists = list(group.checklists)
    checklists[index] = checklist
    return EditResult(group.with_checklists(checklists), True, item_ids=(checklist.id,))


def rename_checklist(group: Group, checklist_id: str, name: str) -> EditResult[Group]:
    checklist = group.get_checklist(checklist_id)
    if checklist is None:
        return refused(group, "unknown_checklist")
    if checklist.name == name:
        return refused(group, "unchanged")
    return replace_checklist(group, replace(checklist, name=name))


def duplicate_checklist(group: Group, checklist_id: str) -> EditResult[Group]:
    """Clone a checklist as ``"<name> (Copy)"`` right after the source."""

    index = group.index_of(checklist_id)
    if index < 0:
        return refused(group, "unknown_checklist")
    source = group.checklists[index]
    clone = clone_checklist(source, name=f"{source.name}{COPY_SUFFIX}")
    checklists = group.checklists
    updated = checklists[: index + 1] + (clone,) + checklists[index + 1 :]
    return EditResult(group.with_checklists(updated), True, item_ids=(clone.id,))


def reorder_checklists(
    group: Group, from_index: int, to_index: int
) -> EditResult[Group]:
    moved = move_element(group.checklists, from_index, to_index)
    if moved is None:
        return refused(group, "invalid_index")
    if from_index == to_index:
        return refused(group, "unchanged")
    return EditResult(
        group.with_checklists(moved),
        True,
        item_ids=(group.checklists[from_index].id,),
    )


def add_checklists(group: Group, checklists: Iterable[Checklist]) -> EditResult[Group]:
    """Append clones of ``checklists`` (e.g. imported from another file)."""

    clones = tuple(clone_checklist(checklist) for checklist in checklists)
    if not clones:
        return refused(group, "empty_scope")
    return EditResult(
        group.with_checklists(group.checklists + clones),
        True,
        item_ids=tuple(clone.id for clone in clones),
    )


def insert_checklist(
    group: Group, checklist: Checklist, index: Optional[int] = None
) -> EditResult[Group]:
    """Place an existing checklist value into ``group`` (end by default)."""

    if group.index_of(checklist.id) >= 0:
        return refused(group, "duplicate_checklist")
    placed = _insert_at(group.checklists, checklist, index)
    if placed is None:
        return refused(group, "invalid_index")
    return EditResult(group.with_checklists(placed), True, item_ids=(checklist.id,))


def move_checklist(
    source_group: Group,
    target_group: Group,
    checklist_id: str,
    target_index: Optional[int] = None,
) -> EditResult[Tuple[Group, Group]]:
    """Relocate a checklist, with its whole item sequence, to another group.

    The result value is ``(source_group, target_group)``. When both refer to
    the same group the move acts as a reorder and both entries are equal.
    ``target_index`` defaults to the end of the target group.
    """

    pair = (source_group, target_group)
    index = source_group.index_of(checklist_id)
    if index < 0:
        return refused(pair, "unknown_checklist")
    moving = source_group.checklists[index]
    remaining = source_group.checklists[:index] + source_group.checklists[index + 1 :]

    if source_group.id == target_group.id:
        placed = _insert_at(remaining, moving, target_index)
        if placed is None:
            return refused(pair, "invalid_index")
        if placed == source_group.checklists:
            return refused(pair, "unchanged")
        same = source_group.with_checklists(placed)
        return EditResult((same, same), True, item_ids=(checklist_id,))

    placed = _insert_at(target_group.checklists, moving, target_index)
    if placed is None:
        return refused(pair, "invalid_index")
    return EditResult(
        (source_group.with_checklists(remaining), target_group.with_checklists(placed)),
        True,
        item_ids=(checklist_id,),
    )


def copy_checklist(
    source_group: Group,
    target_group: Group,
    checklist_id: str,
    target_index: Optional[int] = None,
) -> EditResult[Group]:
    """Clone a checklist (same name, fresh ids) into ``target_group``."""

    source = source_group.get_checklist(checklist_id)
    if source is None:
        return refused(target_group, "unknown_checklist")
    clone = clone_checklist(source)
    placed = _insert_at(target_group.checklists, clone, target_index)
    if placed is None:
        return refused(target_group, "invalid_index")
    return EditResult(target_group.with_checklists(placed), True, item_ids=(clone.id,))


# -- groups within a file ---------------------------------------------------


def add_group(
    checklist_file: ChecklistFile,
    name: str,
    category: GroupCategory | str = GroupCategory.NORMAL,
    *,
    group_id: Optional[str] = None,
) -> EditResult[ChecklistFile]:
    try:
        resolved = GroupCategory(category)
    except ValueError:
        return refused(checklist_file, "invalid_category")
    group = Group(id=group_id or new_id(), name=name, category=resolved)
    return EditResult(
        checklist_file.with_groups(checklist_file.groups + (group,)),
        True,
        item_ids=(group.id,),
    )


def remove_group(checklist_file: ChecklistFile, group_id: str) -> EditResult[ChecklistFile]:
    if checklist_file.index_of(group_id) < 0:
        return refused(checklist_file, "unknown_group")
    kept = [g for g in checklist_file.groups if g.id != group_id]
    return EditResult(checklist_file.with_groups(kept), True, item_ids=(group_id,))


def replace_group(checklist_file: ChecklistFile, group: Group) -> EditResult[ChecklistFile]:
    index = checklist_file.index_of(group.id)
    if index < 0:
        return refused(checklist_file, "unknown_group")
    groups = list(checklist_file.groups)
    groups[index] = group
    return EditResult(checklist_file.with_groups(groups), True, item_ids=(group.id,))


def rename_group(
    checklist_file: ChecklistFile, group_id: str, name: str
) -> EditResult[ChecklistFile]:
    group = checklist_file.get_group(group_id)
    if group is None:
        return refused(checklist_file, "unknown_group")
    if group.name == name:
        return refused(checklist_file, "unchanged")
    return replace_group(checklist_file, replace(group, name=name))


def set_group_category(
    checklist_file: ChecklistFile, group_id: str, category: GroupCategory | str
) -> EditResult[ChecklistFile]:
    group = checklist_file.get_group(group_id)
    if group is None:
        return refused(checklist_file, "unknown_group")
    try:
        resolved = GroupCategory(category)
    except ValueError:
        return refused(checklist_file, "invalid_category")
    if group.category is resolved:
        return refused(checklist_file, "unchanged")
    return replace_group(checklist_file, replace(group, category=resolved))


def reorder_groups(
    checklist_file: ChecklistFile, from_index: int, to_index: int
) -> EditResult[ChecklistFile]:
    moved = move_element(checklist_file.groups, from_index, to_index)
    if moved is None:
        return refused(checklist_file, "invalid_index")
    if from_index == to_index:
        return refused(checklist_file, "unchanged")
    return EditResult(
        checklist_file.with_groups(moved),
        True,
        item_ids=(checklist_file.groups[from_index].id,),
    )


# -- file level --------------------------------------------------------------


def rename_file(checklist_file: ChecklistFile, name: str) -> EditResult[ChecklistFile]:
    if checklist_file.name == name:
        return refused(checklist_file, "unchanged")
    return EditResult(replace(checklist_file, name=name), True)


def update_metadata(
    checklist_file: ChecklistFile, **changes: str
) -> EditResult[ChecklistFile]:
    """Merge metadata fields (registration, make/model, copyright)."""

    allowed = {f.name for f in fields(FileMetadata)}
    if set(changes) - allowed:
        return refused(checklist_file, "unknown_field")
    metadata = replace(checklist_file.metadata, **changes)
    if metadata == checklist_file.metadata:
        return refused(checklist_file, "unchanged")
    return EditResult(replace(checklist_file, metadata=metadata), True)


def uppercase_file(checklist_file: ChecklistFile) -> EditResult[ChecklistFile]:
    groups = tuple(
        group.with_checklists(
            checklist.with_items(uppercase_item(item) for item in checklist.items)
            for checklist in group.checklists
        )
        for group in checklist_file.groups
    )
    if groups == checklist_file.groups:
        return refused(checklist_file, "unchanged")
    return EditResult(checklist_file.with_groups(groups), True)


__all__ = [
    "COPY_SUFFIX",
    "clone_checklist",
    "add_checklist",
    "remove_checklist",
    "replace_checklist",
    "rename_checklist",
    "duplicate_checklist",
    "reorder_checklists",
    "add_checklists",
    "insert_checklist",
    "move_checklist",
    "copy_checklist",
    "add_group",
    "remove_group",
    "replace_group",
    "rename_group",
    "set_group_category",
    "reorder_groups",
    "rename_file",
    "update_metadata",
    "uppercase_file",
]

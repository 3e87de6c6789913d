"""Immutable value types for checklist files, groups, checklists and items."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Optional, Tuple

MIN_DEPTH = 0
MAX_DEPTH = 3


def new_id() -> str:
    return uuid.uuid4().hex


class ItemKind(str, Enum):
    """Closed set of item kinds; drives rendering and containment."""

    CHALLENGE_RESPONSE = "challenge_response"
    CHALLENGE_ONLY = "challenge_only"
    TITLE = "title"
    NOTE = "note"
    WARNING = "warning"
    CAUTION = "caution"


class GroupCategory(str, Enum):
    NORMAL = "normal"
    EMERGENCY = "emergency"
    ABNORMAL = "abnormal"


class SourceFormat(str, Enum):
    """Tag recording which external format a file was read from."""

    ACE = "ace"
    GPLT = "gplt"
    AFS_DYNON = "afs_dynon"
    FOREFLIGHT = "foreflight"
    GRT = "grt"
    JSON = "json"
    PDF = "pdf"


# Kinds whose text is affected by the uppercase commands.
TEXT_KINDS = frozenset({ItemKind.CHALLENGE_RESPONSE, ItemKind.CHALLENGE_ONLY})


def is_valid_depth(depth: object) -> bool:
    return (
        isinstance(depth, int)
        and not isinstance(depth, bool)
        and MIN_DEPTH <= depth <= MAX_DEPTH
    )


@dataclass(frozen=True, slots=True)
class Item:
    """A single checklist row.

    Items never reference their parent or children. Hierarchy is derived from
    sequence position, ``depth`` and ``kind`` by :mod:`.hierarchy`.
    """

    id: str
    kind: ItemKind = ItemKind.CHALLENGE_RESPONSE
    challenge_text: str = ""
    response_text: str = ""
    depth: int = 0
    centered: bool = False
    collapsible: bool = False

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("item id cannot be empty")
        if not is_valid_depth(self.depth):
            raise ValueError(
                f"depth must be an int in [{MIN_DEPTH}, {MAX_DEPTH}], got {self.depth!r}"
            )
        object.__setattr__(self, "kind", ItemKind(self.kind))

    @property
    def is_title(self) -> bool:
        return self.kind is ItemKind.TITLE

    def clone(self, *, item_id: Optional[str] = None) -> "Item":
        """Copy every field under a fresh identity."""

        return replace(self, id=item_id or new_id())


@dataclass(frozen=True, slots=True)
class Checklist:
    id: str
    name: str = ""
    items: Tuple[Item, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def index_of(self, item_id: str) -> int:
        """Return the position of ``item_id`` or ``-1``."""

        for index, item in enumerate(self.items):
            if item.id == item_id:
                return index
        return -1

    def get_item(self, item_id: str) -> Optional[Item]:
        index = self.index_of(item_id)
        return self.items[index] if index >= 0 else None

    def item_ids(self) -> Tuple[str, ...]:
        return tuple(item.id for item in self.items)

    def with_items(self, items: Iterable[Item]) -> "Checklist":
        return replace(self, items=tuple(items))


@dataclass(frozen=True, slots=True)
class Group:
    id: str
    name: str = ""
    category: GroupCategory = GroupCategory.NORMAL
    checklists: Tuple[Checklist, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", GroupCategory(self.category))
        object.__setattr__(self, "checklists", tuple(self.checklists))

    def index_of(self, checklist_id: str) -> int:
        for index, checklist in enumerate(self.checklists):
            if checklist.id == checklist_id:
                return index
        return -1

    def get_checklist(self, checklist_id: str) -> Optional[Checklist]:
        index = self.index_of(checklist_id)
        return self.checklists[index] if index >= 0 else None

    def with_checklists(self, checklists: Iterable[Checklist]) -> "Group":
        return replace(self, checklists=tuple(checklists))


@dataclass(frozen=True, slots=True)
class FileMetadata:
    aircraft_registration: str = ""
    make_model: str = ""
    copyright: str = ""


@dataclass(frozen=True, slots=True)
class ChecklistFile:
    """Top-level document as handed over by (and back to) the format layer."""

    id: str
    name: str = ""
    format: SourceFormat = SourceFormat.JSON
    groups: Tuple[Group, ...] = ()
    metadata: FileMetadata = field(default_factory=FileMetadata)
    file_path: Optional[str] = None
    dirty: bool = False
    last_modified: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "format", SourceFormat(self.format))
        object.__setattr__(self, "groups", tuple(self.groups))

    def index_of(self, group_id: str) -> int:
        for index, group in enumerate(self.groups):
            if group.id == group_id:
                return index
        return -1

    def get_group(self, group_id: str) -> Optional[Group]:
        index = self.index_of(group_id)
        return self.groups[index] if index >= 0 else None

    def with_groups(self, groups: Iterable[Group]) -> "ChecklistFile":
        return replace(self, groups=tuple(groups))

    def iter_checklists(self) -> Iterable[Tuple[Group, Checklist]]:
        for group in self.groups:
            for checklist in group.checklists:
                yield group, checklist


@dataclass(frozen=True, slots=True)
class Workspace:
    """The tracked data partition: every open file, in open order."""

    files: Tuple[ChecklistFile, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "files", tuple(self.files))

    def index_of(self, file_id: str) -> int:
        for index, checklist_file in enumerate(self.files):
            if checklist_file.id == file_id:
                return index
        return -1

    def get_file(self, file_id: str) -> Optional[ChecklistFile]:
        index = self.index_of(file_id)
        return self.files[index] if index >= 0 else None

    def with_file(self, updated: ChecklistFile) -> "Workspace":
        """Replace the file sharing ``updated.id``; append it if absent."""

        index = self.index_of(updated.id)
        if index < 0:
            return Workspace(files=self.files + (updated,))
        files = list(self.files)
        files[index] = updated
        return Workspace(files=tuple(files))

    def without_file(self, file_id: str) -> "Workspace":
        return Workspace(files=tuple(f for f in self.files if f.id != file_id))


__all__ = [
    "MIN_DEPTH",
    "MAX_DEPTH",
    "TEXT_KINDS",
    "ItemKind",
    "GroupCategory",
    "SourceFormat",
    "Item",
    "Checklist",
    "Group",
    "FileMetadata",
    "ChecklistFile",
    "Workspace",
    "is_valid_depth",
    "new_id",
]

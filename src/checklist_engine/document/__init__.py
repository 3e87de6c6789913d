"""Document values, hierarchy queries and structural edits."""

from .codec import dumps, file_from_dict, file_to_dict, loads
from .edits import EditResult
from .hierarchy import (
    ContainmentPolicy,
    child_count,
    descendant_span,
    parent_index,
    policy_for,
    visible_ids,
    visible_indices,
)
from .model import (
    MAX_DEPTH,
    MIN_DEPTH,
    Checklist,
    ChecklistFile,
    FileMetadata,
    Group,
    GroupCategory,
    Item,
    ItemKind,
    SourceFormat,
    Workspace,
    new_id,
)
from .validation import DocumentValidationError, ensure_disjoint, ensure_valid, find_problems

__all__ = [
    "MIN_DEPTH",
    "MAX_DEPTH",
    "Item",
    "ItemKind",
    "Checklist",
    "Group",
    "GroupCategory",
    "ChecklistFile",
    "FileMetadata",
    "SourceFormat",
    "Workspace",
    "new_id",
    "EditResult",
    "ContainmentPolicy",
    "policy_for",
    "child_count",
    "descendant_span",
    "parent_index",
    "visible_indices",
    "visible_ids",
    "DocumentValidationError",
    "ensure_disjoint",
    "ensure_valid",
    "find_problems",
    "file_to_dict",
    "file_from_dict",
    "dumps",
    "loads",
]

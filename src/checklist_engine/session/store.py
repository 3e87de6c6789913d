"""Document store: the only stateful component of the engine.

The store holds the tracked :class:`Workspace` plus transient view state
(active file and checklist, editing marker, collapse set, selection). Every
mutation follows the same path:

1. locate the target value (file, group or checklist);
2. hand it to a pure edit from :mod:`checklist_engine.document`;
3. on success, stamp the owning file dirty, swap the workspace, record the
   transition in the history timeline, revalidate view state and notify the
   bus.

Refused edits leave everything untouched and are logged as ``edit.noop``.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import (
    Any,
    Callable,
    FrozenSet,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Set,
    Tuple,
)

from checklist_engine.document import containers, edits, hierarchy
from checklist_engine.document.edits import EditResult, refused
from checklist_engine.document.model import (
    Checklist,
    ChecklistFile,
    Group,
    GroupCategory,
    ItemKind,
    Workspace,
    new_id,
)
from checklist_engine.document.validation import ensure_disjoint, ensure_valid
from checklist_engine.runtime import telemetry

from .bus import (
    COLLAPSE_CHANGED,
    DOCUMENT_CHANGED,
    EDITING_CHANGED,
    HISTORY_REDO,
    HISTORY_UNDO,
    SELECTION_CHANGED,
    StoreBus,
)
from .history import HistoryTimeline
from .selection import SelectionManager


@dataclass(frozen=True, slots=True)
class ChecklistPath:
    """Address of one checklist inside the workspace."""

    file_id: str
    group_id: str
    checklist_id: str


_Located = Tuple[ChecklistFile, Group, Checklist]


class DocumentStore:
    def __init__(
        self,
        *,
        history_limit: Optional[int] = None,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = new_id,
        bus: Optional[StoreBus] = None,
        logger_name: str | None = "checklist_engine.store",
    ) -> None:
        self.bus = bus or StoreBus()
        self.history = HistoryTimeline(limit=history_limit)
        self.selection = SelectionManager()
        self._clock = clock
        self._id_factory = id_factory
        self._logger_name = logger_name
        self._workspace = Workspace()
        self._active_file_id: Optional[str] = None
        self._active_path: Optional[ChecklistPath] = None
        self._editing_id: Optional[str] = None
        self._collapsed: Set[str] = set()
        self._tx_depth = 0

    # -- read access ----------------------------------------------------------

    @property
    def workspace(self) -> Workspace:
        return self._workspace

    @property
    def files(self) -> Tuple[ChecklistFile, ...]:
        return self._workspace.files

    @property
    def active_file_id(self) -> Optional[str]:
        return self._active_file_id

    @property
    def active_file(self) -> Optional[ChecklistFile]:
        if self._active_file_id is None:
            return None
        return self._workspace.get_file(self._active_file_id)

    @property
    def active_path(self) -> Optional[ChecklistPath]:
        return self._active_path

    @property
    def active_item_id(self) -> Optional[str]:
        return self.selection.active_id

    @property
    def selected_ids(self) -> Tuple[str, ...]:
        return self.selection.selected

    @property
    def editing_item_id(self) -> Optional[str]:
        return self._editing_id

    @property
    def collapsed_ids(self) -> FrozenSet[str]:
        return frozenset(self._collapsed)

    def get_file(self, file_id: str) -> Optional[ChecklistFile]:
        return self._workspace.get_file(file_id)

    def is_dirty(self, file_id: str) -> bool:
        checklist_file = self._workspace.get_file(file_id)
        return bool(checklist_file and checklist_file.dirty)

    def get_checklist(self, path: Optional[ChecklistPath] = None) -> Optional[Checklist]:
        located = self._locate(path)
        return located[2] if located else None

    def locate_checklist(
        self, checklist_id: str, *, file_id: Optional[str] = None
    ) -> Optional[ChecklistPath]:
        """Find the path of ``checklist_id`` (optionally within one file)."""

        for checklist_file in self._workspace.files:
            if file_id is not None and checklist_file.id != file_id:
                continue
            for group, checklist in checklist_file.iter_checklists():
                if checklist.id == checklist_id:
                    return ChecklistPath(checklist_file.id, group.id, checklist.id)
        return None

    # -- files ----------------------------------------------------------------

    def open_file(self, checklist_file: ChecklistFile) -> bool:
        """Add (or reload) a file and make it active.

        Raises :class:`DocumentValidationError` when the value breaks the
        document invariants.
        """

        ensure_valid(checklist_file)
        ensure_disjoint(checklist_file, self._workspace.files)
        with self._operation("open_file", file_id=checklist_file.id):
            changed = self._commit(
                self._workspace.with_file(checklist_file), "open_file"
            )
        self.set_active_file(checklist_file.id)
        return changed

    def close_file(self, file_id: str) -> bool:
        with self._operation("close_file", file_id=file_id) as handle:
            if self._workspace.get_file(file_id) is None:
                self._refuse(handle, "close_file", refused(None, "unknown_file"))
                return False
            return self._commit(self._workspace.without_file(file_id), "close_file")

    def set_active_file(self, file_id: Optional[str]) -> bool:
        if file_id is not None and self._workspace.get_file(file_id) is None:
            return False
        if self._active_file_id == file_id:
            return False
        self._active_file_id = file_id
        if self._active_path is not None and self._active_path.file_id != file_id:
            self._active_path = None
        self._reset_view()
        return True

    def rename_file(self, file_id: str, name: str) -> bool:
        return self._edit_file(
            file_id, "rename_file", lambda f: containers.rename_file(f, name)
        ).applied

    def update_file_metadata(self, file_id: str, **changes: str) -> bool:
        return self._edit_file(
            file_id,
            "update_file_metadata",
            lambda f: containers.update_metadata(f, **changes),
        ).applied

    def mark_file_dirty(self, file_id: str) -> bool:
        return self._edit_file(
            file_id, "mark_file_dirty", lambda f: EditResult(f, True)
        ).applied

    def mark_file_clean(self, file_id: str, *, file_path: Optional[str] = None) -> bool:
        """Clear the dirty flag after a save; not recorded in history."""

        checklist_file = self._workspace.get_file(file_id)
        if checklist_file is None:
            return False
        cleaned = replace(
            checklist_file,
            dirty=False,
            file_path=file_path if file_path is not None else checklist_file.file_path,
        )
        if cleaned == checklist_file:
            return False
        self._workspace = self._workspace.with_file(cleaned)
        self.bus.emit(DOCUMENT_CHANGED, {"label": "mark_file_clean", "file_id": file_id})
        return True

    def uppercase_file(self, file_id: str) -> bool:
        return self._edit_file(file_id, "uppercase_file", containers.uppercase_file).applied

    # -- groups ---------------------------------------------------------------

    def add_group(
        self,
        file_id: str,
        name: str,
        category: GroupCategory | str = GroupCategory.NORMAL,
    ) -> Optional[str]:
        group_id = self._id_factory()
        result = self._edit_file(
            file_id,
            "add_group",
            lambda f: containers.add_group(f, name, category, group_id=group_id),
        )
        return group_id if result.applied else None

    def remove_group(self, file_id: str, group_id: str) -> bool:
        return self._edit_file(
            file_id, "remove_group", lambda f: containers.remove_group(f, group_id)
        ).applied

    def rename_group(self, file_id: str, group_id: str, name: str) -> bool:
        return self._edit_file(
            file_id,
            "rename_group",
            lambda f: containers.rename_group(f, group_id, name),
        ).applied

    def set_group_category(
        self, file_id: str, group_id: str, category: GroupCategory | str
    ) -> bool:
        return self._edit_file(
            file_id,
            "set_group_category",
            lambda f: containers.set_group_category(f, group_id, category),
        ).applied

    def reorder_groups(self, file_id: str, from_index: int, to_index: int) -> bool:
        return self._edit_file(
            file_id,
            "reorder_groups",
            lambda f: containers.reorder_groups(f, from_index, to_index),
        ).applied

    # -- checklists -----------------------------------------------------------

    def add_checklist(
        self, file_id: str, group_id: str, name: str = "New Checklist"
    ) -> Optional[str]:
        checklist_id = self._id_factory()
        result = self._edit_group(
            file_id,
            group_id,
            "add_checklist",
            lambda g: containers.add_checklist(g, name, checklist_id=checklist_id),
        )
        return checklist_id if result.applied else None

    def remove_checklist(self, path: ChecklistPath) -> bool:
        return self._edit_group(
            path.file_id,
            path.group_id,
            "remove_checklist",
            lambda g: containers.remove_checklist(g, path.checklist_id),
        ).applied

    def rename_checklist(self, path: ChecklistPath, name: str) -> bool:
        return self._edit_group(
            path.file_id,
            path.group_id,
            "rename_checklist",
            lambda g: containers.rename_checklist(g, path.checklist_id, name),
        ).applied

    def duplicate_checklist(self, path: ChecklistPath) -> Optional[str]:
        result = self._edit_group(
            path.file_id,
            path.group_id,
            "duplicate_checklist",
            lambda g: containers.duplicate_checklist(g, path.checklist_id),
        )
        return result.item_ids[0] if result.applied else None

    def reorder_checklists(
        self, file_id: str, group_id: str, from_index: int, to_index: int
    ) -> bool:
        return self._edit_group(
            file_id,
            group_id,
            "reorder_checklists",
            lambda g: containers.reorder_checklists(g, from_index, to_index),
        ).applied

    def add_checklists_to_group(
        self, file_id: str, group_id: str, checklists: Iterable[Checklist]
    ) -> Tuple[str, ...]:
        """Import clones of ``checklists``; returns the new checklist ids."""

        pending = tuple(checklists)
        result = self._edit_group(
            file_id,
            group_id,
            "add_checklists_to_group",
            lambda g: containers.add_checklists(g, pending),
        )
        return result.item_ids if result.applied else ()

    def move_checklist(
        self,
        path: ChecklistPath,
        target_group_id: str,
        target_index: Optional[int] = None,
        *,
        target_file_id: Optional[str] = None,
    ) -> bool:
        """Relocate a checklist, items intact, to another group (or file)."""

        label = "move_checklist"
        target_file_id = target_file_id or path.file_id
        with self._operation(
            label,
            checklist_id=path.checklist_id,
            target_file_id=target_file_id,
            target_group_id=target_group_id,
        ) as handle:
            source_file = self._workspace.get_file(path.file_id)
            target_file = self._workspace.get_file(target_file_id)
            source_group = source_file.get_group(path.group_id) if source_file else None
            target_group = target_file.get_group(target_group_id) if target_file else None
            if source_group is None or target_group is None:
                self._refuse(handle, label, refused(None, "unknown_group"))
                return False
            assert source_file is not None and target_file is not None

            if source_file.id == target_file.id:
                moved = containers.move_checklist(
                    source_group, target_group, path.checklist_id, target_index
                )
                if not moved.applied:
                    self._refuse(handle, label, moved)
                    return False
                new_source, new_target = moved.value
                updated = containers.replace_group(source_file, new_source).value
                updated = containers.replace_group(updated, new_target).value
                workspace = self._workspace.with_file(self._stamp(updated))
            else:
                checklist = source_group.get_checklist(path.checklist_id)
                if checklist is None:
                    self._refuse(handle, label, refused(None, "unknown_checklist"))
                    return False
                placed = containers.insert_checklist(target_group, checklist, target_index)
                if not placed.applied:
                    self._refuse(handle, label, placed)
                    return False
                removed = containers.remove_checklist(source_group, path.checklist_id)
                workspace = self._workspace.with_file(
                    self._stamp(containers.replace_group(source_file, removed.value).value)
                ).with_file(
                    self._stamp(containers.replace_group(target_file, placed.value).value)
                )

            if self._active_path == path:
                self._active_path = ChecklistPath(
                    target_file_id, target_group_id, path.checklist_id
                )
                self._active_file_id = target_file_id
            return self._commit(workspace, label)

    def copy_checklist(
        self,
        path: ChecklistPath,
        target_file_id: str,
        target_group_id: str,
        target_index: Optional[int] = None,
    ) -> Optional[str]:
        """Clone a checklist into any open file; returns the clone's id."""

        label = "copy_checklist"
        with self._operation(
            label,
            checklist_id=path.checklist_id,
            target_file_id=target_file_id,
            target_group_id=target_group_id,
        ) as handle:
            located = self._locate(path)
            target_file = self._workspace.get_file(target_file_id)
            target_group = target_file.get_group(target_group_id) if target_file else None
            if located is None:
                self._refuse(handle, label, refused(None, "unknown_checklist"))
                return None
            if target_group is None:
                self._refuse(handle, label, refused(None, "unknown_group"))
                return None
            assert target_file is not None
            result = containers.copy_checklist(
                located[1], target_group, path.checklist_id, target_index
            )
            if not result.applied:
                self._refuse(handle, label, result)
                return None
            updated = containers.replace_group(target_file, result.value).value
            self._commit(self._workspace.with_file(self._stamp(updated)), label)
            return result.item_ids[0]

    def set_active_checklist(self, path: Optional[ChecklistPath]) -> bool:
        if path is not None and self._locate(path) is None:
            return False
        if path == self._active_path:
            return False
        self._active_path = path
        if path is not None:
            self._active_file_id = path.file_id
        self._reset_view()
        return True

    # -- items ----------------------------------------------------------------

    def add_item(
        self,
        kind: ItemKind | str = ItemKind.CHALLENGE_RESPONSE,
        after_id: Optional[str] = None,
        *,
        at_start: bool = False,
        path: Optional[ChecklistPath] = None,
    ) -> Optional[str]:
        """Insert a blank item after ``after_id`` (end by default).

        The new item becomes active, selected and the editing target.
        """

        item_id = self._id_factory()

        def edit(checklist: Checklist) -> EditResult[Checklist]:
            if at_start:
                return edits.insert_item(checklist, kind, -1, item_id=item_id)
            if after_id is None:
                return edits.insert_item(checklist, kind, None, item_id=item_id)
            index = checklist.index_of(after_id)
            if index < 0:
                return refused(checklist, "unknown_item")
            return edits.insert_item(checklist, kind, index, item_id=item_id)

        if not self._edit_checklist(path, "add_item", edit).applied:
            return None
        self._select(lambda: self.selection.select_single(item_id))
        self.set_editing_item(item_id)
        return item_id

    def remove_item(self, item_id: str, *, path: Optional[ChecklistPath] = None) -> bool:
        return self._edit_checklist(
            path, "remove_item", lambda c: edits.remove_item(c, item_id)
        ).applied

    def update_item(
        self, item_id: str, *, path: Optional[ChecklistPath] = None, **changes: Any
    ) -> bool:
        return self._edit_checklist(
            path, "update_item", lambda c: edits.update_item(c, item_id, **changes)
        ).applied

    def reorder_item(
        self, from_index: int, to_index: int, *, path: Optional[ChecklistPath] = None
    ) -> bool:
        return self._edit_checklist(
            path,
            "reorder_item",
            lambda c: edits.reorder_item(c, from_index, to_index),
        ).applied

    def indent_item(self, item_id: str, *, path: Optional[ChecklistPath] = None) -> bool:
        return self._edit_checklist(
            path, "indent_item", lambda c: edits.set_depth(c, item_id, 1)
        ).applied

    def outdent_item(self, item_id: str, *, path: Optional[ChecklistPath] = None) -> bool:
        return self._edit_checklist(
            path, "outdent_item", lambda c: edits.set_depth(c, item_id, -1)
        ).applied

    def duplicate_item(
        self, item_id: str, *, path: Optional[ChecklistPath] = None
    ) -> Optional[str]:
        result = self._edit_checklist(
            path, "duplicate_item", lambda c: edits.duplicate_item(c, item_id)
        )
        if not result.applied:
            return None
        clone_id = result.item_ids[0]
        self._select(lambda: self.selection.select_single(clone_id))
        return clone_id

    def uppercase_item(self, item_id: str, *, path: Optional[ChecklistPath] = None) -> bool:
        def edit(checklist: Checklist) -> EditResult[Checklist]:
            if checklist.index_of(item_id) < 0:
                return refused(checklist, "unknown_item")
            return edits.uppercase_items(checklist, (item_id,))

        return self._edit_checklist(path, "uppercase_item", edit).applied

    def uppercase_checklist(self, path: Optional[ChecklistPath] = None) -> bool:
        return self._edit_checklist(
            path, "uppercase_checklist", edits.uppercase_items
        ).applied

    # -- batch (scope-resolved) -----------------------------------------------

    def resolve_scope(self, target_id: Optional[str] = None) -> Tuple[str, ...]:
        target = target_id or self.selection.active_id
        if target is None:
            return ()
        return self.selection.resolve_scope(target)

    def duplicate_scope(
        self, target_id: Optional[str] = None, *, path: Optional[ChecklistPath] = None
    ) -> Tuple[str, ...]:
        scope = self.resolve_scope(target_id)
        result = self._edit_checklist(
            path, "duplicate_scope", lambda c: edits.duplicate_items(c, scope)
        )
        if not result.applied:
            return ()
        clones = result.item_ids
        self._select(lambda: self.selection.assign(clones, clones[0]))
        return clones

    def remove_scope(
        self, target_id: Optional[str] = None, *, path: Optional[ChecklistPath] = None
    ) -> bool:
        scope = self.resolve_scope(target_id)
        result = self._edit_checklist(
            path, "remove_scope", lambda c: edits.remove_items(c, scope)
        )
        if result.applied:
            self._select(self.selection.clear)
        return result.applied

    def reorder_scope(
        self,
        target_index: int,
        target_id: Optional[str] = None,
        *,
        path: Optional[ChecklistPath] = None,
    ) -> bool:
        scope = self.resolve_scope(target_id)
        return self._edit_checklist(
            path,
            "reorder_scope",
            lambda c: edits.reorder_items(c, scope, target_index),
        ).applied

    def shift_scope(
        self,
        delta: int,
        target_id: Optional[str] = None,
        *,
        path: Optional[ChecklistPath] = None,
    ) -> bool:
        scope = self.resolve_scope(target_id)
        return self._edit_checklist(
            path, "shift_scope", lambda c: edits.shift_depths(c, scope, delta)
        ).applied

    # -- selection and view ---------------------------------------------------

    def select_item(self, item_id: Optional[str]) -> bool:
        """Make ``item_id`` the single active selection (``None`` clears)."""

        if item_id is not None and item_id not in self._active_item_ids():
            return False
        self.set_editing_item(None)
        return self._select(lambda: self.selection.select_single(item_id))

    def select_range(self, target_id: str) -> bool:
        visible = self.visible_ids()
        return self._select(lambda: self.selection.select_range(target_id, visible))

    def clear_selection(self) -> bool:
        return self._select(self.selection.clear)

    def navigate(self, direction: int) -> Optional[str]:
        """Move the active item one visible row up (``-1``) or down (``+1``)."""

        visible = self.visible_ids()
        if not visible or direction == 0:
            return None
        active = self.selection.active_id
        if active is None or active not in visible:
            target = visible[0] if direction > 0 else visible[-1]
        else:
            position = visible.index(active) + (1 if direction > 0 else -1)
            if not 0 <= position < len(visible):
                return None
            target = visible[position]
        self.select_item(target)
        return target

    def extend_selection(self, direction: int) -> bool:
        """Shift+arrow: grow the visible range one row from the active item."""

        visible = self.visible_ids()
        active = self.selection.active_id
        if not visible or active not in visible:
            return False
        position = visible.index(active) + (1 if direction > 0 else -1)
        if not 0 <= position < len(visible):
            return False
        anchor = self._range_anchor(active)
        if anchor not in visible:
            anchor = active
        target = visible[position]
        return self._select(
            lambda: self.selection.assign(
                self._span(visible, anchor, target), target
            )
        )

    def toggle_collapsed(self, item_id: str) -> bool:
        if item_id not in self._all_item_ids():
            return False
        if item_id in self._collapsed:
            self._collapsed.discard(item_id)
        else:
            self._collapsed.add(item_id)
        self.bus.emit(COLLAPSE_CHANGED, self.collapsed_ids)
        return True

    def expand_all(self) -> bool:
        if not self._collapsed:
            return False
        self._collapsed.clear()
        self.bus.emit(COLLAPSE_CHANGED, self.collapsed_ids)
        return True

    def set_editing_item(self, item_id: Optional[str]) -> bool:
        if item_id is not None and item_id not in self._all_item_ids():
            return False
        if item_id == self._editing_id:
            return False
        self._editing_id = item_id
        self.bus.emit(EDITING_CHANGED, item_id)
        return True

    def visible_indices(self, path: Optional[ChecklistPath] = None) -> List[int]:
        checklist = self.get_checklist(path)
        if checklist is None:
            return []
        return hierarchy.visible_indices(checklist.items, self._collapsed)

    def visible_ids(self, path: Optional[ChecklistPath] = None) -> List[str]:
        checklist = self.get_checklist(path)
        if checklist is None:
            return []
        return hierarchy.visible_ids(checklist.items, self._collapsed)

    def child_count(self, index: int, *, path: Optional[ChecklistPath] = None) -> int:
        checklist = self.get_checklist(path)
        if checklist is None:
            return 0
        return hierarchy.child_count(checklist.items, index)

    # -- history --------------------------------------------------------------

    def can_undo(self) -> bool:
        return self._tx_depth == 0 and self.history.can_undo()

    def can_redo(self) -> bool:
        return self._tx_depth == 0 and self.history.can_redo()

    def undo(self) -> bool:
        return self._travel("undo")

    def redo(self) -> bool:
        return self._travel("redo")

    @contextmanager
    def transaction(self, label: str) -> Iterator["DocumentStore"]:
        """Fold every edit made inside the block into one history entry.

        Nested transactions join the outermost one. If the block raises, the
        workspace is restored to its state on entry and nothing is recorded.
        """

        outermost = self._tx_depth == 0
        before = self._workspace
        self._tx_depth += 1
        try:
            with telemetry.span(
                f"store::transaction::{label}",
                logger_name=self._logger_name,
                component="store",
                metadata={"label": label, "nested": not outermost},
            ):
                yield self
        except Exception:
            if outermost and self._workspace is not before:
                self._workspace = before
                self._after_change(f"{label}:rollback")
            raise
        finally:
            self._tx_depth -= 1
        if outermost:
            self._record(before, self._workspace, label)

    # -- internals ------------------------------------------------------------

    def _operation(self, label: str, **metadata: Any) -> Any:
        return telemetry.span(
            f"store::{label}",
            logger_name=self._logger_name,
            component="store",
            metadata={key: value for key, value in metadata.items() if value is not None},
        )

    def _refuse(
        self, handle: telemetry.SpanHandle, label: str, result: EditResult[Any]
    ) -> EditResult[Any]:
        handle.skip(result.reason)
        telemetry.record_event(
            "edit.noop",
            level="debug",
            data={"label": label, "reason": result.reason},
            logger_name=self._logger_name,
        )
        return result

    def _resolve(self, path: Optional[ChecklistPath]) -> Optional[ChecklistPath]:
        return path if path is not None else self._active_path

    def _locate(self, path: Optional[ChecklistPath]) -> Optional[_Located]:
        target = self._resolve(path)
        if target is None:
            return None
        checklist_file = self._workspace.get_file(target.file_id)
        if checklist_file is None:
            return None
        group = checklist_file.get_group(target.group_id)
        if group is None:
            return None
        checklist = group.get_checklist(target.checklist_id)
        if checklist is None:
            return None
        return checklist_file, group, checklist

    def _stamp(self, checklist_file: ChecklistFile) -> ChecklistFile:
        return replace(checklist_file, dirty=True, last_modified=self._clock())

    def _edit_file(
        self,
        file_id: str,
        label: str,
        edit: Callable[[ChecklistFile], EditResult[ChecklistFile]],
    ) -> EditResult[Any]:
        with self._operation(label, file_id=file_id) as handle:
            current = self._workspace.get_file(file_id)
            if current is None:
                return self._refuse(handle, label, refused(None, "unknown_file"))
            result = edit(current)
            if not result.applied:
                return self._refuse(handle, label, result)
            self._commit(self._workspace.with_file(self._stamp(result.value)), label)
            return result

    def _edit_group(
        self,
        file_id: str,
        group_id: str,
        label: str,
        edit: Callable[[Group], EditResult[Group]],
    ) -> EditResult[Any]:
        def apply(checklist_file: ChecklistFile) -> EditResult[ChecklistFile]:
            group = checklist_file.get_group(group_id)
            if group is None:
                return refused(checklist_file, "unknown_group")
            result = edit(group)
            if not result.applied:
                return refused(checklist_file, result.reason)
            replaced = containers.replace_group(checklist_file, result.value)
            return EditResult(replaced.value, True, item_ids=result.item_ids)

        return self._edit_file(file_id, label, apply)

    def _edit_checklist(
        self,
        path: Optional[ChecklistPath],
        label: str,
        edit: Callable[[Checklist], EditResult[Checklist]],
    ) -> EditResult[Any]:
        target = self._resolve(path)
        with self._operation(
            label, checklist_id=target.checklist_id if target else None
        ) as handle:
            located = self._locate(target)
            if located is None:
                return self._refuse(handle, label, refused(None, "unknown_checklist"))
            checklist_file, group, checklist = located
            result = edit(checklist)
            if not result.applied:
                return self._refuse(handle, label, result)
            group = containers.replace_checklist(group, result.value).value
            checklist_file = containers.replace_group(checklist_file, group).value
            self._commit(self._workspace.with_file(self._stamp(checklist_file)), label)
            handle.add_metadata("items", len(result.item_ids))
            return result

    def _commit(self, workspace: Workspace, label: str) -> bool:
        before = self._workspace
        if workspace == before:
            return False
        self._workspace = workspace
        if self._tx_depth == 0:
            self._record(before, workspace, label)
        self._after_change(label)
        return True

    def _record(self, before: Workspace, after: Workspace, label: str) -> None:
        if self.history.commit(before, after, label):
            telemetry.record_event(
                "history.commit",
                level="debug",
                data={"label": label, "position": self.history.position},
                logger_name=self._logger_name,
            )

    def _travel(self, direction: str) -> bool:
        if self._tx_depth:
            raise RuntimeError(f"Cannot {direction} inside a transaction")
        with self._operation(direction) as handle:
            restored = self.history.undo() if direction == "undo" else self.history.redo()
            if restored is None:
                self._refuse(handle, direction, refused(None, f"nothing_to_{direction}"))
                return False
            self._workspace = restored
            self._after_change(direction)
            self.bus.emit(HISTORY_UNDO if direction == "undo" else HISTORY_REDO, None)
            return True

    def _after_change(self, label: str) -> None:
        self._prune()
        self.bus.emit(DOCUMENT_CHANGED, {"label": label})

    def _prune(self) -> None:
        """Drop view state that points at ids no longer in the workspace."""

        existing = self._all_item_ids()
        if self._active_file_id and self._workspace.get_file(self._active_file_id) is None:
            files = self._workspace.files
            self._active_file_id = files[0].id if files else None
            self._active_path = None
        if self._active_path is not None and self._locate(self._active_path) is None:
            self._active_path = None
        if self.selection.revalidate(existing):
            self._emit_selection()
        collapsed = {item_id for item_id in self._collapsed if item_id in existing}
        if collapsed != self._collapsed:
            self._collapsed = collapsed
            self.bus.emit(COLLAPSE_CHANGED, self.collapsed_ids)
        if self._editing_id is not None and self._editing_id not in existing:
            self._editing_id = None
            self.bus.emit(EDITING_CHANGED, None)

    def _reset_view(self) -> None:
        if self._editing_id is not None:
            self._editing_id = None
            self.bus.emit(EDITING_CHANGED, None)
        self._select(self.selection.clear)

    def _select(self, change: Callable[[], bool]) -> bool:
        changed = change()
        if changed:
            self._emit_selection()
        return changed

    def _emit_selection(self) -> None:
        self.bus.emit(
            SELECTION_CHANGED,
            {"active": self.selection.active_id, "selected": self.selection.selected},
        )

    def _range_anchor(self, active: str) -> str:
        # The anchor is the end of the current range opposite the active item.
        selected = self.selection.selected
        if len(selected) > 1 and active in selected:
            return selected[0] if selected[-1] == active else selected[-1]
        return active

    @staticmethod
    def _span(visible: Sequence[str], anchor: str, target: str) -> Tuple[str, ...]:
        low, high = sorted((visible.index(anchor), visible.index(target)))
        return tuple(visible[low : high + 1])

    def _active_item_ids(self) -> Set[str]:
        checklist = self.get_checklist()
        return set(checklist.item_ids()) if checklist else set()

    def _all_item_ids(self) -> Set[str]:
        return {
            item.id
            for checklist_file in self._workspace.files
            for _, checklist in checklist_file.iter_checklists()
            for item in checklist.items
        }


__all__ = ["ChecklistPath", "DocumentStore"]

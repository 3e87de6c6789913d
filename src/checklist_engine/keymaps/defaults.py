"""Built-in editor shortcuts.

Everything lives in a single ``editor`` mode. Two flags gate bindings:
``editing`` (an item's text is being edited) and ``has_selection``.
Structural and navigation keys only fire while no item is being edited;
the ``ctrl`` chords work in both states.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Mapping, Sequence

from checklist_engine.actions import history as history_actions
from checklist_engine.actions import items as item_actions
from checklist_engine.actions import selection as selection_actions

from .models import ActionRef, Binding, KeySequence
from .registry import KeymapRegistry

EDITOR_MODE = "editor"
NOT_EDITING = ("!editing",)

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(id="history.undo", handler=history_actions.undo, description="Undo"),
    ActionRef(id="history.redo", handler=history_actions.redo, description="Redo"),
    ActionRef(
        id="items.duplicate",
        handler=item_actions.duplicate,
        description="Duplicate item(s)",
    ),
    ActionRef(
        id="items.add_item",
        handler=item_actions.add_item,
        description="New item after the active one",
    ),
    ActionRef(
        id="items.add_checklist",
        handler=item_actions.add_checklist,
        description="New checklist",
    ),
    ActionRef(id="items.indent", handler=item_actions.indent, description="Indent"),
    ActionRef(id="items.outdent", handler=item_actions.outdent, description="Outdent"),
    ActionRef(id="items.remove", handler=item_actions.remove, description="Delete item(s)"),
    ActionRef(
        id="selection.navigate_up",
        handler=selection_actions.navigate_up,
        description="Previous item",
    ),
    ActionRef(
        id="selection.navigate_down",
        handler=selection_actions.navigate_down,
        description="Next item",
    ),
    ActionRef(
        id="selection.extend_up",
        handler=selection_actions.extend_up,
        description="Extend selection up",
    ),
    ActionRef(
        id="selection.extend_down",
        handler=selection_actions.extend_down,
        description="Extend selection down",
    ),
    ActionRef(
        id="selection.start_editing",
        handler=selection_actions.start_editing,
        description="Edit the active item",
    ),
    ActionRef(
        id="selection.stop_editing",
        handler=selection_actions.stop_editing,
        description="Stop editing",
    ),
    ActionRef(
        id="selection.clear",
        handler=selection_actions.clear_selection,
        description="Clear selection",
    ),
    ActionRef(
        id="selection.toggle_collapsed",
        handler=selection_actions.toggle_collapsed,
        description="Collapse or expand the active item",
    ),
)


def _binding(
    binding_id: str,
    key: str,
    action_id: str,
    *,
    when: tuple[str, ...] = (),
) -> Binding:
    return Binding(
        id=binding_id,
        mode=EDITOR_MODE,
        sequence=KeySequence.from_strings(key),
        action_id=action_id,
        when=when,  # type: ignore[arg-type]
        source="defaults",
    )


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    _binding("editor.undo", "ctrl+z", "history.undo"),
    _binding("editor.redo", "ctrl+shift+z", "history.redo"),
    _binding("editor.duplicate", "ctrl+d", "items.duplicate"),
    _binding("editor.add_item", "ctrl+n", "items.add_item"),
    _binding("editor.add_checklist", "ctrl+shift+n", "items.add_checklist"),
    _binding("editor.indent", "tab", "items.indent", when=NOT_EDITING),
    _binding("editor.outdent", "shift+tab", "items.outdent", when=NOT_EDITING),
    _binding("editor.remove", "delete", "items.remove", when=NOT_EDITING),
    _binding("editor.navigate_up", "up", "selection.navigate_up", when=NOT_EDITING),
    _binding("editor.navigate_down", "down", "selection.navigate_down", when=NOT_EDITING),
    _binding("editor.extend_up", "shift+up", "selection.extend_up", when=NOT_EDITING),
    _binding(
        "editor.extend_down", "shift+down", "selection.extend_down", when=NOT_EDITING
    ),
    _binding("editor.start_editing", "enter", "selection.start_editing", when=NOT_EDITING),
    _binding("editor.stop_editing", "escape", "selection.stop_editing", when=("editing",)),
    _binding("editor.clear_selection", "escape", "selection.clear", when=NOT_EDITING),
    _binding(
        "editor.toggle_collapsed",
        "space",
        "selection.toggle_collapsed",
        when=NOT_EDITING,
    ),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    default_sequence_timeout_ms: int | None = None,
    include_actions: Sequence[str] | None = None,
    exclude_actions: Sequence[str] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
    per_mode_overrides: Mapping[str, Iterable[Binding]] | None = None,
) -> None:
    """Register the built-in actions and editor bindings.

    Bindings whose action was filtered out are skipped rather than raising.
    ``per_mode_overrides`` replaces conflicting bindings in the named mode.
    """

    allowed_actions = _build_filters(include_actions, exclude_actions)
    allowed_bindings = _build_filters(include_bindings, exclude_bindings)

    for action in DEFAULT_ACTIONS:
        if _selected(action.id, allowed_actions):
            registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if not _selected(binding.id, allowed_bindings):
            continue
        if not registry.has_action(binding.action_id):
            continue
        registry.register_binding(
            _binding_with_timeout(binding, default_sequence_timeout_ms),
            replace=replace,
        )

    for binding in extra_bindings or ():
        registry.register_binding(binding, replace=replace)

    for mode, bindings in (per_mode_overrides or {}).items():
        for binding in bindings:
            if binding.mode != mode:
                raise ValueError(
                    f"Override binding '{binding.id}' must target mode '{mode}'"
                )
            registry.register_binding(binding, replace=True)


def _binding_with_timeout(binding: Binding, timeout_ms: int | None) -> Binding:
    if timeout_ms is None:
        return binding
    return replace(
        binding, sequence=KeySequence(binding.sequence.strokes, timeout_ms=timeout_ms)
    )


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    return (set(include) if include else None), set(exclude or ())


def _selected(item_id: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and item_id not in include:
        return False
    return item_id not in exclude


__all__ = [
    "EDITOR_MODE",
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "load_default_keymaps",
]

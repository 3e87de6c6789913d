import pytest

from checklist_engine.keymaps import (
    EDITOR_MODE,
    ActionRef,
    Binding,
    KeySequence,
    KeyStroke,
    KeymapConflictError,
    KeymapRegistry,
    WhenClause,
    load_default_keymaps,
)


def make_action(action_id: str = "core.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_sequence(*keys: str) -> KeySequence:
    return KeySequence.from_strings(*keys)


def make_binding(
    *,
    binding_id: str,
    mode: str = EDITOR_MODE,
    sequence: KeySequence | None = None,
    action_id: str = "core.test",
    when: tuple[WhenClause, ...] = (),
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=sequence or make_sequence("ctrl+k"),
        action_id=action_id,
        when=when,
    )


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    action = make_action()
    registry.register_action(action)
    binding = make_binding(binding_id="editor.ctrl_k")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings(mode=EDITOR_MODE)) == [binding]


def test_register_binding_requires_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="orphan"))


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    binding = make_binding(binding_id="editor.ctrl_k")
    registry.register_binding(binding)

    with pytest.raises(KeymapConflictError):
        registry.register_binding(make_binding(binding_id="editor.ctrl_k.duplicate"))


def test_exclusive_guards_do_not_conflict() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(
        make_binding(binding_id="panel", when=(WhenClause("panel_open"),))
    )
    registry.register_binding(
        make_binding(binding_id="no_panel", when=(WhenClause.parse("!panel_open"),))
    )

    assert registry.stats().binding_count == 2


def test_unguarded_binding_conflicts_with_guarded_one() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(
        make_binding(binding_id="panel", when=(WhenClause("panel_open"),))
    )

    with pytest.raises(KeymapConflictError) as excinfo:
        registry.register_binding(make_binding(binding_id="default"))

    assert [b.id for b in excinfo.value.conflicts] == ["panel"]


def test_register_binding_with_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    first = make_binding(binding_id="binding")
    second = make_binding(binding_id="binding", sequence=make_sequence("ctrl+j"))

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]


def test_binding_id_cannot_be_reused_without_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="binding"))

    with pytest.raises(ValueError):
        registry.register_binding(
            make_binding(binding_id="binding", sequence=make_sequence("ctrl+j"))
        )


def test_unregister_binding() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="binding")
    registry.register_binding(binding)

    removed = registry.unregister_binding("binding")

    assert removed == binding
    assert registry.stats().binding_count == 0
    assert registry.unregister_binding("binding") is None


def test_keystroke_tokens_are_normalized() -> None:
    assert KeyStroke.parse("Shift+Ctrl+Z").token == "ctrl+shift+Z"
    assert KeyStroke.parse("TAB").token == "tab"
    assert KeyStroke("z", ("control",)).token == "ctrl+z"
    assert KeyStroke.parse("ctrl++").token == "ctrl++"
    assert KeyStroke.parse("+").token == "+"
    assert str(WhenClause.parse("!editing")) == "!editing"


def test_load_default_keymaps_registers_editor_shortcuts() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)

    stats = registry.stats()
    assert stats.modes == (EDITOR_MODE,)
    assert stats.action_count == 16
    assert stats.binding_count == 16
    assert registry.get_binding("editor.redo").sequence.tokens == ("ctrl+shift+z",)
    assert registry.get_binding("editor.indent").when_map == {"editing": False}


def test_load_default_keymaps_timeout_override() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry, default_sequence_timeout_ms=1500)

    binding = registry.get_binding("editor.undo")
    assert binding.sequence.timeout_ms == 1500


def test_load_default_keymaps_include_filters() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(
        registry,
        include_actions=("history.undo",),
        include_bindings=("editor.undo", "editor.redo"),
    )

    assert registry.stats().binding_count == 1
    assert registry.get_binding("editor.undo").action_id == "history.undo"


def test_load_default_keymaps_per_mode_override() -> None:
    registry = KeymapRegistry()
    custom_binding = Binding(
        id="editor.redo",
        mode=EDITOR_MODE,
        sequence=KeySequence.from_strings("ctrl+y"),
        action_id="history.redo",
    )

    load_default_keymaps(
        registry,
        per_mode_overrides={EDITOR_MODE: (custom_binding,)},
    )

    binding = registry.get_binding("editor.redo")
    assert binding.sequence.tokens == ("ctrl+y",)


def test_shortcut_hints_respect_context() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)

    editing = registry.shortcut_hints(EDITOR_MODE, {"editing": True})
    everything = registry.shortcut_hints(EDITOR_MODE)

    editing_ids = {hint.binding_id for hint in editing}
    assert "editor.stop_editing" in editing_ids
    assert "editor.indent" not in editing_ids
    assert len(everything) == 16
    undo = next(hint for hint in everything if hint.binding_id == "editor.undo")
    assert (undo.keys, undo.description) == ("ctrl+z", "Undo")

from __future__ import annotations

from checklist_engine.keymaps import (
    EDITOR_MODE,
    ActionRef,
    Binding,
    KeySequence,
    KeymapRegistry,
    KeymapResolver,
    WhenClause,
    load_default_keymaps,
)


def make_action(action_id: str) -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    binding_id: str,
    *,
    mode: str = EDITOR_MODE,
    keys: tuple[str, ...] = ("ctrl+k", "ctrl+c"),
    action_id: str = "core.test",
    when: tuple[WhenClause, ...] = (),
    priority: int = 0,
    timeout_ms: int = 1000,
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=KeySequence.from_strings(*keys, timeout_ms=timeout_ms),
        action_id=action_id,
        when=when,
        priority=priority,
    )


def build_registry(bindings: list[Binding]) -> KeymapRegistry:
    registry = KeymapRegistry()
    action_ids = {binding.action_id for binding in bindings}
    for action_id in action_ids:
        registry.register_action(make_action(action_id))
    for binding in bindings:
        registry.register_binding(binding)
    return registry


def test_resolver_matches_exact_sequence() -> None:
    binding = make_binding("editor.comment")
    registry = build_registry([binding])
    resolver = KeymapResolver(registry)

    result = resolver.resolve(EDITOR_MODE, ("ctrl+k", "ctrl+c"))

    assert result.status == "match"
    assert result.match is not None
    assert result.match.binding.id == binding.id


def test_resolver_reports_pending_for_prefix() -> None:
    binding = make_binding("editor.comment")
    registry = build_registry([binding])
    resolver = KeymapResolver(registry)

    result = resolver.resolve(EDITOR_MODE, ("ctrl+k",))

    assert result.status == "pending"
    assert result.next_expected == ("ctrl+c",)


def test_resolver_honors_when_clauses() -> None:
    gating = make_binding(
        "editor.rename",
        keys=("f2",),
        when=(WhenClause("has_selection"),),
        action_id="core.rename",
    )
    registry = build_registry([gating])
    resolver = KeymapResolver(registry)

    miss = resolver.resolve(EDITOR_MODE, ("f2",), context={})
    assert miss.status == "miss"

    hit = resolver.resolve(EDITOR_MODE, ("f2",), context={"has_selection": True})
    assert hit.status == "match"
    assert hit.match is not None
    assert hit.match.binding.id == gating.id


def test_prefix_of_gated_out_sequence_is_a_miss() -> None:
    binding = make_binding("editor.comment", when=(WhenClause.parse("!editing"),))
    registry = build_registry([binding])
    resolver = KeymapResolver(registry)

    result = resolver.resolve(EDITOR_MODE, ("ctrl+k",), context={"editing": True})

    assert result.status == "miss"


def test_resolver_pending_returns_timeout_hint() -> None:
    binding = make_binding("editor.comment", timeout_ms=1500)
    registry = build_registry([binding])
    resolver = KeymapResolver(registry)

    result = resolver.resolve(EDITOR_MODE, ("ctrl+k",))

    assert result.status == "pending"
    assert result.timeout_ms == 1500


def test_resolver_cache_refreshes_on_revision() -> None:
    registry = build_registry([])
    resolver = KeymapResolver(registry)

    miss = resolver.resolve(EDITOR_MODE, ("f9",))
    assert miss.status == "miss"

    new_binding = make_binding("editor.f9", keys=("f9",), action_id="core.f9")
    registry.register_action(make_action("core.f9"))
    registry.register_binding(new_binding)

    match = resolver.resolve(EDITOR_MODE, ("f9",))
    assert match.status == "match"
    assert match.match is not None
    assert match.match.binding.id == new_binding.id


def test_default_escape_depends_on_editing_flag() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    resolver = KeymapResolver(registry)

    editing = resolver.resolve(EDITOR_MODE, ("escape",), context={"editing": True})
    idle = resolver.resolve(EDITOR_MODE, ("escape",), context={"editing": False})

    assert editing.match is not None and editing.match.action.id == "selection.stop_editing"
    assert idle.match is not None and idle.match.action.id == "selection.clear"

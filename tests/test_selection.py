from __future__ import annotations

from checklist_engine.session.selection import SelectionManager

VISIBLE = ["a", "b", "c", "d"]


def make_manager(active: str | None = None) -> SelectionManager:
    manager = SelectionManager()
    manager.select_single(active)
    return manager


def test_select_single_and_clear() -> None:
    manager = make_manager("a")

    assert manager.selected == ("a",)
    assert manager.select_single("a") is False
    assert manager.clear() is True
    assert (manager.active_id, manager.selected) == (None, ())


def test_range_is_symmetric_but_active_differs() -> None:
    forward = make_manager("a")
    backward = make_manager("c")

    forward.select_range("c", VISIBLE)
    backward.select_range("a", VISIBLE)

    assert set(forward.selected) == set(backward.selected) == {"a", "b", "c"}
    assert forward.active_id == "c"
    assert backward.active_id == "a"


def test_range_without_anchor_selects_target() -> None:
    manager = make_manager()

    assert manager.select_range("b", VISIBLE)
    assert manager.selected == ("b",)
    assert manager.active_id == "b"


def test_range_to_hidden_target_is_noop() -> None:
    manager = make_manager("a")

    assert manager.select_range("hidden", VISIBLE) is False
    assert manager.selected == ("a",)
    assert manager.active_id == "a"


def test_range_from_hidden_anchor_collapses_to_target() -> None:
    manager = make_manager("hidden")

    assert manager.select_range("c", VISIBLE)
    assert manager.selected == ("c",)
    assert manager.active_id == "c"


def test_resolve_scope() -> None:
    manager = make_manager("a")
    manager.select_range("c", VISIBLE)

    assert manager.resolve_scope("b") == ("a", "b", "c")
    assert manager.resolve_scope("d") == ("d",)
    assert make_manager("a").resolve_scope("a") == ("a",)


def test_revalidate_and_forget_drop_missing_ids() -> None:
    manager = make_manager("a")
    manager.select_range("c", VISIBLE)

    assert manager.revalidate({"a", "b"})
    assert manager.selected == ("a", "b")
    assert manager.active_id is None
    assert manager.forget(["b"])
    assert manager.selected == ("a",)
    assert manager.revalidate({"a"}) is False


def test_assign_deduplicates() -> None:
    manager = make_manager()

    assert manager.assign(["x", "y", "x"], "x")
    assert manager.selected == ("x", "y")

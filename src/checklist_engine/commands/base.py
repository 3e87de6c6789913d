"""Shared value types for shortcut dispatch."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from checklist_engine.session import DocumentStore, StoreBus


@dataclass(slots=True)
class KeyInput:
    """Normalized key event handed over by a host."""

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None


@dataclass(slots=True)
class CommandResult:
    """Returned from every dispatched key and every action handler."""

    consumed: bool
    status: str = "ok"
    message: Optional[str] = None
    timeout_ms: Optional[int] = None
    action_id: Optional[str] = None


@dataclass(slots=True)
class CommandContext:
    """Services an action handler may touch."""

    store: DocumentStore
    extras: Dict[str, object] = field(default_factory=dict)

    @property
    def bus(self) -> StoreBus:
        return self.store.bus

    def flags(self) -> Dict[str, bool]:
        """Keymap guard flags derived from current store state."""

        store = self.store
        flags = {
            "editing": store.editing_item_id is not None,
            "has_selection": bool(store.selected_ids),
            "has_checklist": store.active_path is not None,
        }
        overrides = self.extras.get("keymap_flags")
        if isinstance(overrides, dict):
            flags.update({str(k): bool(v) for k, v in overrides.items()})
        return flags


__all__ = ["KeyInput", "CommandResult", "CommandContext"]

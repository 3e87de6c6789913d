"""Shortcut dispatcher: key input -> binding -> action -> result."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from checklist_engine.keymaps import (
    EDITOR_MODE,
    KeymapRegistry,
    KeymapResolver,
    ResolutionMatch,
    load_default_keymaps,
)
from checklist_engine.runtime import telemetry
from checklist_engine.session import DocumentStore

from .base import CommandContext, CommandResult, KeyInput
from .keymap_helpers import key_to_token


@dataclass
class PendingTimeout:
    deadline: float
    timeout_ms: int
    generation: int


class ShortcutDispatcher:
    """Owns the keymap stack for one store and routes key events to actions.

    Multi-stroke bindings leave the dispatcher in a pending state; the host
    calls :meth:`process_timeouts` periodically so an incomplete sequence
    either fires the binding it already matches or is dropped.
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
        mode: str = EDITOR_MODE,
        default_pending_timeout_ms: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.context = CommandContext(store=store)
        self.mode = mode
        self.logger = telemetry.get_logger("checklist_engine.commands")
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="checklist_engine.keymaps"
        )
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            self.keymap_registry, logger_name="checklist_engine.keymaps"
        )
        self._default_timeout_ms = default_pending_timeout_ms
        self._clock = clock
        self._pending: List[str] = []
        self._timeout: Optional[PendingTimeout] = None
        self._generation = 0

    @property
    def store(self) -> DocumentStore:
        return self.context.store

    @property
    def pending_tokens(self) -> tuple[str, ...]:
        return tuple(self._pending)

    def handle_key(self, key: KeyInput) -> CommandResult:
        token = key_to_token(key)
        self._pending.append(token)
        with telemetry.span(
            name=f"dispatch::{self.mode}",
            component=True,
            metadata={"key": token, "mode": self.mode},
        ):
            result = self.keymap_resolver.resolve(
                self.mode, tuple(self._pending), context=self.context.flags()
            )

            if result.status == "match" and result.match:
                self._clear_pending()
                return self._execute(result.match)

            if result.status == "pending":
                timeout_ms = result.timeout_ms or self._default_timeout_ms
                self._arm_timeout(timeout_ms)
                return CommandResult(
                    consumed=True,
                    status="pending",
                    message="awaiting_sequence",
                    timeout_ms=timeout_ms,
                )

            self._clear_pending()
            return CommandResult(consumed=False, status="miss", message=token)

    def process_timeouts(self) -> Optional[CommandResult]:
        timer = self._timeout
        if timer is None or timer.deadline > self._clock():
            return None
        return self._trigger_timeout(timer.generation)

    def force_timeout(self) -> Optional[CommandResult]:
        if self._timeout is None:
            return None
        return self._trigger_timeout(self._timeout.generation)

    def shortcut_hints(self) -> list[tuple[str, str]]:
        """``(keys, description)`` rows usable in the current state."""

        return [
            (hint.keys, hint.description)
            for hint in self.keymap_registry.shortcut_hints(
                self.mode, self.context.flags()
            )
        ]

    def _trigger_timeout(self, generation: int) -> CommandResult:
        timer = self._timeout
        if timer is None or timer.generation != generation:
            return CommandResult(consumed=False, status="timeout")
        tokens = tuple(self._pending)
        self._clear_pending()
        with telemetry.span(
            name=f"dispatch_timeout::{self.mode}",
            component=True,
            metadata={"mode": self.mode, "keys": " ".join(tokens)},
        ):
            # A pending prefix fires only if it is itself a complete binding.
            result = self.keymap_resolver.resolve(
                self.mode, tokens, context=self.context.flags()
            )
            if result.status == "match" and result.match:
                return self._execute(result.match)
        return CommandResult(consumed=False, status="timeout", message="pending_timeout")

    def _execute(self, match: ResolutionMatch) -> CommandResult:
        with telemetry.span(
            "keymaps::execute",
            component="keymaps",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ):
            outcome = match.action(self.context, match)

        if isinstance(outcome, CommandResult):
            result = outcome
        else:
            result = CommandResult(consumed=True)
        result.action_id = match.action.id
        telemetry.record_event(
            "shortcut.dispatch",
            level="debug",
            data={
                "binding": match.binding.id,
                "status": result.status,
                "message": result.message or "",
            },
            logger_name="checklist_engine.commands",
        )
        return result

    def _arm_timeout(self, timeout_ms: int) -> None:
        self._generation += 1
        self._timeout = PendingTimeout(
            deadline=self._clock() + timeout_ms / 1000.0,
            timeout_ms=timeout_ms,
            generation=self._generation,
        )

    def _clear_pending(self) -> None:
        self._pending.clear()
        self._timeout = None


__all__ = ["ShortcutDispatcher", "PendingTimeout"]

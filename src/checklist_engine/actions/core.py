"""Helpers shared by every shortcut handler."""

from __future__ import annotations

from typing import Optional

from checklist_engine.commands.base import CommandResult


def applied(status: str, message: Optional[str] = None) -> CommandResult:
    return CommandResult(consumed=True, status=status, message=message)


def noop(reason: str) -> CommandResult:
    """Shortcut was recognised but had nothing to act on."""

    return CommandResult(consumed=True, status="noop", message=reason)


def outcome(ok: bool, status: str, reason: str) -> CommandResult:
    return applied(status) if ok else noop(reason)


__all__ = ["applied", "noop", "outcome"]

"""Trie-based shortcut resolution with telemetry instrumentation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Mapping, Optional, Sequence

from checklist_engine.runtime.telemetry import span

from .models import ActionRef, Binding
from .registry import KeymapRegistry


@dataclass(slots=True)
class TrieNode:
    bindings: list[str] = field(default_factory=list)
    children: Dict[str, "TrieNode"] = field(default_factory=dict)

    def child(self, token: str) -> "TrieNode":
        return self.children.setdefault(token, TrieNode())

    def next_tokens(self) -> tuple[str, ...]:
        return tuple(sorted(self.children))

    def iter_descendants(self) -> list["TrieNode"]:
        stack = list(self.children.values())
        found: list[TrieNode] = []
        while stack:
            node = stack.pop()
            found.append(node)
            stack.extend(node.children.values())
        return found


@dataclass(slots=True)
class KeymapTrie:
    """Trie of key tokens built for one mode at one registry revision."""

    mode: str
    revision: int
    root: TrieNode = field(default_factory=TrieNode)

    def add_binding(self, binding: Binding) -> None:
        node = self.root
        for token in binding.sequence.tokens:
            node = node.child(token)
        node.bindings.append(binding.id)

    def walk(self, tokens: Sequence[str]) -> tuple[Optional[TrieNode], int]:
        node = self.root
        consumed = 0
        for token in tokens:
            child = node.children.get(token)
            if child is None:
                return None, consumed
            node = child
            consumed += 1
        return node, consumed


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome of resolving a token sequence.

    ``pending`` means the tokens are a strict prefix of at least one binding
    that the current flags allow; ``timeout_ms`` is the shortest timeout
    among those candidates.
    """

    status: Literal["match", "pending", "miss"]
    match: Optional[ResolutionMatch] = None
    consumed: int = 0
    next_expected: tuple[str, ...] = ()
    timeout_ms: Optional[int] = None


class KeymapResolver:
    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self._cache: Dict[str, KeymapTrie] = {}

    def resolve(
        self,
        mode: str,
        tokens: Sequence[str],
        *,
        context: Optional[Mapping[str, bool]] = None,
    ) -> ResolutionResult:
        flags = context or {}
        normalized = tuple(tokens)
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"mode": mode, "keys": " ".join(normalized)},
        ) as handle:
            node, consumed = self._trie(mode).walk(normalized)
            if node is None:
                handle.add_metadata("status", "miss")
                return ResolutionResult(status="miss", consumed=consumed)

            match = self._select_match(node, flags)
            if match:
                handle.add_metadata("status", "match")
                handle.add_metadata("binding_id", match.binding.id)
                return ResolutionResult(status="match", match=match, consumed=consumed)

            timeout_ms = self._pending_timeout(node, flags)
            if timeout_ms is not None:
                handle.add_metadata("status", "pending")
                return ResolutionResult(
                    status="pending",
                    consumed=consumed,
                    next_expected=node.next_tokens(),
                    timeout_ms=timeout_ms,
                )

            handle.add_metadata("status", "miss")
            return ResolutionResult(status="miss", consumed=consumed)

    def reset(self, mode: Optional[str] = None) -> None:
        if mode is None:
            self._cache.clear()
        else:
            self._cache.pop(mode, None)

    def _trie(self, mode: str) -> KeymapTrie:
        revision = self._registry.revision()
        cached = self._cache.get(mode)
        if cached is not None and cached.revision == revision:
            return cached

        trie = KeymapTrie(mode=mode, revision=revision)
        for binding in self._registry.iter_bindings(mode):
            trie.add_binding(binding)
        self._cache[mode] = trie
        return trie

    def _select_match(
        self, node: TrieNode, flags: Mapping[str, bool]
    ) -> Optional[ResolutionMatch]:
        candidates = [
            self._registry.get_binding(binding_id) for binding_id in node.bindings
        ]
        allowed = [binding for binding in candidates if binding.allows(flags)]
        if not allowed:
            return None
        best = min(allowed, key=lambda b: (-b.priority, b.id))
        return ResolutionMatch(
            binding=best, action=self._registry.get_action(best.action_id)
        )

    def _pending_timeout(
        self, node: TrieNode, flags: Mapping[str, bool]
    ) -> Optional[int]:
        timeouts = [
            binding.sequence.timeout_ms
            for descendant in node.iter_descendants()
            for binding in map(self._registry.get_binding, descendant.bindings)
            if binding.allows(flags)
        ]
        return min(timeouts) if timeouts else None


__all__ = [
    "KeymapResolver",
    "KeymapTrie",
    "ResolutionResult",
    "ResolutionMatch",
]

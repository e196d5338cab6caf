"""Shortcut resolution against a :class:`KeymapRegistry`."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Mapping, Optional, Sequence

from mdpane.runtime.telemetry import span

from .models import ActionRef, Binding
from .registry import KeymapRegistry


@dataclass(slots=True)
class ShortcutTable:
    """Per-mode lookup built from the registry at a given revision."""

    mode: str
    revision: int
    complete: Dict[tuple[str, ...], list[str]] = field(default_factory=dict)
    # every proper prefix of a multi-chord binding -> shortest timeout
    prefixes: Dict[tuple[str, ...], int] = field(default_factory=dict)

    def add(self, binding: Binding) -> None:
        tokens = binding.sequence.tokens
        self.complete.setdefault(tokens, []).append(binding.id)
        for size in range(1, len(tokens)):
            prefix = tokens[:size]
            timeout = binding.sequence.timeout_ms
            self.prefixes[prefix] = min(timeout, self.prefixes.get(prefix, timeout))


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    status: Literal["match", "pending", "miss"]
    match: Optional[ResolutionMatch] = None
    consumed: int = 0
    timeout_ms: Optional[int] = None


class KeymapResolver:
    """Turns a chord sequence into a command for the active mode."""

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self._tables: Dict[str, ShortcutTable] = {}

    def resolve(
        self,
        mode: str,
        tokens: Sequence[str],
        *,
        context: Optional[Mapping[str, bool]] = None,
    ) -> ResolutionResult:
        keys = tuple(tokens)
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"mode": mode, "keys": " ".join(keys)},
        ) as handle:
            table = self._table(mode)
            match = self._best_match(table.complete.get(keys, ()), context or {})
            if match is not None:
                handle.add_metadata("status", "match")
                handle.add_metadata("binding_id", match.binding.id)
                return ResolutionResult(status="match", match=match, consumed=len(keys))
            if keys in table.prefixes:
                handle.add_metadata("status", "pending")
                return ResolutionResult(
                    status="pending",
                    consumed=len(keys),
                    timeout_ms=table.prefixes[keys],
                )
            handle.add_metadata("status", "miss")
            return ResolutionResult(status="miss")

    def reset(self, mode: Optional[str] = None) -> None:
        if mode is None:
            self._tables.clear()
        else:
            self._tables.pop(mode, None)

    def _table(self, mode: str) -> ShortcutTable:
        revision = self._registry.revision()
        cached = self._tables.get(mode)
        if cached is not None and cached.revision == revision:
            return cached
        table = ShortcutTable(mode=mode, revision=revision)
        for binding in self._registry.iter_bindings(mode):
            table.add(binding)
        self._tables[mode] = table
        return table

    def _best_match(
        self, binding_ids: Sequence[str], context: Mapping[str, bool]
    ) -> Optional[ResolutionMatch]:
        candidates = [
            self._registry.get_binding(binding_id) for binding_id in binding_ids
        ]
        allowed = [binding for binding in candidates if binding.allows(context)]
        if not allowed:
            return None
        allowed.sort(key=lambda b: (-b.priority, -len(b.when), b.id))
        best = allowed[0]
        return ResolutionMatch(binding=best, action=self._registry.get_action(best.action_id))


__all__ = ["KeymapResolver", "ResolutionResult", "ResolutionMatch", "ShortcutTable"]

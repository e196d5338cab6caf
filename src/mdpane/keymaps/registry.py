"""Registry holding editor commands and the shortcuts bound to them."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, Optional

from mdpane.runtime.telemetry import span

from .models import ActionRef, Binding


@dataclass(slots=True)
class RegistryStats:
    action_count: int
    binding_count: int
    modes: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """Raised when a shortcut is already taken in the same mode and context."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        conflicts_tuple = tuple(conflicts)
        super().__init__(
            f"Shortcut '{binding.key_signature}' for '{binding.id}' is already bound "
            f"by {[b.id for b in conflicts_tuple]}"
        )
        self.binding = binding
        self.conflicts = conflicts_tuple


class KeymapRegistry:
    """Owns the command table and the shortcut index.

    Every change to the bindings bumps :meth:`revision` so resolvers can
    rebuild their lookup tables lazily.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        # mode -> key signature -> binding ids
        self._by_signature: Dict[str, Dict[str, set[str]]] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def has_action(self, action_id: str) -> bool:
        return action_id in self._actions

    def get_action(self, action_id: str) -> ActionRef:
        try:
            return self._actions[action_id]
        except KeyError as exc:
            raise KeyError(f"Action '{action_id}' is not registered") from exc

    def get_binding(self, binding_id: str) -> Binding:
        try:
            return self._bindings[binding_id]
        except KeyError as exc:
            raise KeyError(f"Binding '{binding_id}' is not registered") from exc

    def actions(self) -> tuple[ActionRef, ...]:
        return tuple(self._actions.values())

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        if not replace and action.id in self._actions:
            raise ValueError(f"Action '{action.id}' already registered")
        self._actions[action.id] = action
        return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "keys": binding.key_signature},
        ) as handle:
            if binding.action_id not in self._actions:
                handle.fail("missing_action")
                raise KeyError(
                    f"Binding '{binding.id}' references unknown action '{binding.action_id}'"
                )
            if binding.id in self._bindings and not replace:
                raise ValueError(f"Binding id '{binding.id}' already registered")

            conflicts = self.detect_conflicts(binding, ignore=(binding.id,))
            if conflicts and not replace:
                handle.add_metadata("conflicts", ",".join(c.id for c in conflicts))
                raise KeymapConflictError(binding, conflicts)

            for stale in conflicts:
                self._drop(stale)
            existing = self._bindings.get(binding.id)
            if existing is not None:
                self._drop(existing)

            self._bindings[binding.id] = binding
            self._index(binding)
            self._revision += 1
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.get(binding_id)
        if binding is None:
            return None
        self._drop(binding)
        self._revision += 1
        return binding

    def update_binding(self, binding_id: str, **changes: object) -> Binding:
        """Rebind an existing shortcut, e.g. ``update_binding(id, sequence=...)``."""

        current = self.get_binding(binding_id)
        updated = replace(current, **changes)
        if updated.action_id not in self._actions:
            raise KeyError(
                f"Binding '{binding_id}' references unknown action '{updated.action_id}'"
            )
        conflicts = self.detect_conflicts(updated, ignore=(binding_id,))
        if conflicts:
            raise KeymapConflictError(updated, conflicts)
        self._drop(current)
        self._bindings[binding_id] = updated
        self._index(updated)
        self._revision += 1
        return updated

    def iter_bindings(self, mode: Optional[str] = None) -> Iterator[Binding]:
        for binding in self._bindings.values():
            if mode is None or binding.mode == mode:
                yield binding

    def bindings_for_action(self, action_id: str, mode: Optional[str] = None) -> tuple[Binding, ...]:
        """Shortcuts that trigger ``action_id``, highest priority first."""

        found = [
            binding
            for binding in self.iter_bindings(mode)
            if binding.action_id == action_id
        ]
        found.sort(key=lambda b: (-b.priority, b.id))
        return tuple(found)

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            modes=tuple(sorted(self._by_signature)),
        )

    def detect_conflicts(
        self, binding: Binding, *, ignore: Iterable[str] = ()
    ) -> list[Binding]:
        ignored = set(ignore)
        bucket = self._by_signature.get(binding.mode, {}).get(binding.key_signature, ())
        return [
            self._bindings[other_id]
            for other_id in sorted(bucket)
            if other_id not in ignored
            and _contexts_overlap(binding, self._bindings[other_id])
        ]

    def _index(self, binding: Binding) -> None:
        signatures = self._by_signature.setdefault(binding.mode, {})
        signatures.setdefault(binding.key_signature, set()).add(binding.id)

    def _drop(self, binding: Binding) -> None:
        self._bindings.pop(binding.id, None)
        signatures = self._by_signature.get(binding.mode)
        if not signatures:
            return
        bucket = signatures.get(binding.key_signature)
        if bucket is None:
            return
        bucket.discard(binding.id)
        if not bucket:
            del signatures[binding.key_signature]
        if not signatures:
            del self._by_signature[binding.mode]


def _contexts_overlap(left: Binding, right: Binding) -> bool:
    """Two bindings overlap unless some flag is required with opposite values."""

    if not left.when and not right.when:
        return True
    if not left.when or not right.when:
        # a gated binding refines an ungated one; priority decides at runtime
        return False
    right_map = right.when_map
    for flag, expected in left.when_map.items():
        if flag in right_map and right_map[flag] != expected:
            return False
    return left.when_map == right_map


__all__ = ["KeymapRegistry", "KeymapConflictError", "RegistryStats"]

"""Dataclasses describing key chords, bindings, and action metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

MODIFIER_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "control": "ctrl",
        "ctl": "ctrl",
        "cmd": "meta",
        "command": "meta",
        "option": "alt",
    }
)


def normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    cleaned = []
    for modifier in modifiers:
        name = modifier.strip().lower()
        if name:
            cleaned.append(MODIFIER_ALIASES.get(name, name))
    return tuple(sorted(dict.fromkeys(cleaned)))


def normalize_key(key: str, modifiers: tuple[str, ...]) -> str:
    # "Z" with ctrl+shift and "z" with ctrl+shift are the same chord
    if modifiers and len(key) == 1:
        return key.lower()
    return key


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single normalized key press, e.g. ``ctrl+shift+z``."""

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        modifiers = normalize_modifiers(self.modifiers)
        object.__setattr__(self, "modifiers", modifiers)
        object.__setattr__(self, "key", normalize_key(self.key, modifiers))

    @classmethod
    def parse(cls, chord: str) -> "KeyStroke":
        """Parse ``"ctrl+shift+s"`` style text; the last part is the key."""

        parts = [part for part in chord.split("+")]
        if chord.endswith("+"):
            # the key itself is "+", e.g. "ctrl++"
            parts = [part for part in chord[:-1].split("+") if part] + ["+"]
        key = parts[-1].strip()
        return cls(key=key, modifiers=tuple(parts[:-1]))

    @property
    def token(self) -> str:
        if self.modifiers:
            return "+".join(self.modifiers) + f"+{self.key}"
        return self.key

    def label(self) -> str:
        """Human-readable form for menus, e.g. ``Ctrl+Shift+S``."""

        parts = [modifier.capitalize() for modifier in self.modifiers]
        parts.append(self.key.upper() if len(self.key) == 1 else self.key.capitalize())
        return "+".join(parts)


@dataclass(frozen=True, slots=True)
class KeySequence:
    """Immutable collection of keystrokes; shortcuts are usually one chord."""

    strokes: tuple[KeyStroke, ...]
    timeout_ms: int = 1000

    def __post_init__(self) -> None:
        if not self.strokes:
            raise ValueError("KeySequence requires at least one stroke")

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(stroke.token for stroke in self.strokes)

    @classmethod
    def from_chords(cls, *chords: str, timeout_ms: int = 1000) -> "KeySequence":
        strokes = tuple(KeyStroke.parse(chord) for chord in chords if chord)
        return cls(strokes=strokes, timeout_ms=timeout_ms)

    def label(self) -> str:
        return " ".join(stroke.label() for stroke in self.strokes)


@dataclass(frozen=True, slots=True)
class WhenClause:
    """Boolean flag condition gating a binding (``"!flag"`` negates)."""

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        expr = expression.strip()
        if not expr:
            raise ValueError("expression cannot be empty")
        if expr.startswith("!"):
            return cls(expr[1:], False)
        return cls(expr, True)

    def evaluate(self, context: Mapping[str, bool]) -> bool:
        return bool(context.get(self.flag, False)) is self.expected


@dataclass(frozen=True, slots=True)
class ActionRef:
    """A named editor command: ``handler(context, match) -> CommandResult``."""

    id: str
    handler: Callable[..., object]
    description: str = ""
    telemetry_name: str | None = None
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        if self.telemetry_name is None:
            object.__setattr__(self, "telemetry_name", self.id)

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a key sequence with an action in a mode."""

    id: str
    mode: str
    sequence: KeySequence
    action_id: str
    description: str = ""
    when: tuple[WhenClause, ...] = ()
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.mode:
            raise ValueError("binding mode cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")
        normalized_when = tuple(
            clause if isinstance(clause, WhenClause) else WhenClause.parse(str(clause))
            for clause in self.when
        )
        object.__setattr__(self, "when", normalized_when)

    @property
    def when_map(self) -> Mapping[str, bool]:
        return MappingProxyType({clause.flag: clause.expected for clause in self.when})

    def allows(self, context: Mapping[str, bool]) -> bool:
        return all(clause.evaluate(context) for clause in self.when)

    @property
    def key_signature(self) -> str:
        return " ".join(self.sequence.tokens)


__all__ = [
    "KeyStroke",
    "KeySequence",
    "WhenClause",
    "ActionRef",
    "Binding",
    "normalize_modifiers",
    "normalize_key",
]

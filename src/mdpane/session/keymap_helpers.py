"""Key event normalization shared by the session and host adapters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from mdpane.keymaps import KeyStroke


@dataclass(slots=True)
class KeyInput:
    """Normalized key event passed to the session."""

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None

    @classmethod
    def from_chord(cls, chord: str) -> "KeyInput":
        stroke = KeyStroke.parse(chord)
        return cls(key=stroke.key, modifiers=stroke.modifiers)


def key_to_token(key: KeyInput) -> str:
    return KeyStroke(key=key.key, modifiers=key.modifiers).token


__all__ = ["KeyInput", "key_to_token"]

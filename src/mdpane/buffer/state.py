"""Selection and per-buffer view state."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Selection:
    """Half-open ``[start, end)`` character range; ``start == end`` is a caret."""

    start: int = 0
    end: int = 0

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(
                f"Selection start {self.start} is after end {self.end}"
            )

    @classmethod
    def caret(cls, offset: int) -> "Selection":
        return cls(offset, offset)

    @classmethod
    def between(cls, anchor: int, cursor: int) -> "Selection":
        """Build a selection from an unordered anchor/cursor pair."""

        if anchor <= cursor:
            return cls(anchor, cursor)
        return cls(cursor, anchor)

    @property
    def is_caret(self) -> bool:
        return self.start == self.end

    def as_tuple(self) -> tuple[int, int]:
        return (self.start, self.end)


@dataclass(slots=True)
class BufferState:
    """Mutable selection plus bookkeeping tied to the current document."""

    selection: Selection = field(default_factory=Selection)
    dirty: bool = False
    last_change_tick: int = 0

    def set_selection(self, selection: Selection) -> None:
        self.selection = selection

    def set_caret(self, offset: int) -> None:
        self.selection = Selection.caret(offset)

"""Mapping between character offsets and newline-delimited lines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from mdpane.buffer.validation import ensure_offset


@dataclass(frozen=True, slots=True)
class LineLocation:
    index: int
    start: int
    text: str

    @property
    def end(self) -> int:
        return self.start + len(self.text)


def split_lines(text: str) -> List[str]:
    return text.split("\n")


def locate_line(text: str, offset: int) -> LineLocation:
    """Return the line holding ``offset``.

    An offset sitting on a newline belongs to the line the newline ends, so a
    caret at the end of a line resolves to that line.
    """

    ensure_offset(text, offset)
    lines = split_lines(text)
    running = 0
    for index, line in enumerate(lines[:-1]):
        if running + len(line) >= offset:
            return LineLocation(index=index, start=running, text=line)
        running += len(line) + 1
    return LineLocation(index=len(lines) - 1, start=running, text=lines[-1])


def line_start_offset(text: str, line_index: int) -> int:
    lines = split_lines(text)
    if line_index < 0 or line_index >= len(lines):
        raise IndexError(f"Line {line_index} outside document of {len(lines)} lines")
    return sum(len(line) + 1 for line in lines[:line_index])


def replace_line(text: str, line_index: int, new_line: str) -> str:
    lines = split_lines(text)
    lines[line_index] = new_line
    return "\n".join(lines)


__all__ = ["LineLocation", "split_lines", "locate_line", "line_start_offset", "replace_line"]

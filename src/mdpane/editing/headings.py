"""ATX heading mutation on the line holding the caret."""

from __future__ import annotations

import re
from typing import Optional

from mdpane.buffer.state import Selection

from .offsets import LineLocation, locate_line, replace_line
from .result import EditResult

HEADING_LINE = re.compile(r"^(#{1,6})\s+(.*)$")
MIN_LEVEL = 1
MAX_LEVEL = 6


def heading_level(line: str) -> Optional[int]:
    match = HEADING_LINE.match(line)
    if match is None:
        return None
    return len(match.group(1))


def _rewrite(text: str, location: LineLocation, new_line: str) -> EditResult:
    updated = replace_line(text, location.index, new_line)
    return EditResult(updated, Selection.caret(location.start + len(new_line)))


def set_heading_level(text: str, caret: int, level: int) -> EditResult:
    """Make the caret line a heading of ``level``, or plain text if it already is."""

    if not MIN_LEVEL <= level <= MAX_LEVEL:
        raise ValueError(f"Heading level must be between 1 and 6, got {level}")
    location = locate_line(text, caret)
    prefix = "#" * level + " "
    match = HEADING_LINE.match(location.text)
    if match is None:
        return _rewrite(text, location, prefix + location.text)
    content = match.group(2)
    if len(match.group(1)) == level:
        return _rewrite(text, location, content)
    return _rewrite(text, location, prefix + content)


def shift_heading_level(text: str, caret: int, delta: int) -> Optional[EditResult]:
    """Move the caret line's heading level by ``delta``, clamped to 1..6.

    A negative delta makes the heading more prominent (H2 -> H1). Returns
    ``None`` when the line is not a heading or the level would not change.
    """

    location = locate_line(text, caret)
    match = HEADING_LINE.match(location.text)
    if match is None:
        return None
    current = len(match.group(1))
    target = max(MIN_LEVEL, min(MAX_LEVEL, current + delta))
    if target == current:
        return None
    return _rewrite(text, location, "#" * target + " " + match.group(2))


__all__ = [
    "HEADING_LINE",
    "heading_level",
    "set_heading_level",
    "shift_heading_level",
]

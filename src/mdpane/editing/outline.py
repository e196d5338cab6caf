"""Document outline extraction and heading navigation targets."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .offsets import line_start_offset, split_lines

OUTLINE_HEADING = re.compile(r"^(#{1,6})\s+(.+)$")


@dataclass(frozen=True, slots=True)
class Heading:
    level: int
    text: str
    line_index: int


@dataclass(frozen=True, slots=True)
class NavigationTarget:
    offset: int
    scroll_top: float


def extract_outline(text: str) -> Tuple[Heading, ...]:
    headings = []
    for index, line in enumerate(split_lines(text)):
        match = OUTLINE_HEADING.match(line)
        if match:
            headings.append(
                Heading(level=len(match.group(1)), text=match.group(2), line_index=index)
            )
    return tuple(headings)


class OutlineIndex:
    """Caches the outline of the last text it was asked about."""

    def __init__(self) -> None:
        self._text: Optional[str] = None
        self._headings: Tuple[Heading, ...] = ()
        self.recomputations = 0

    def headings(self, text: str) -> Tuple[Heading, ...]:
        if self._text is not None and (text is self._text or text == self._text):
            return self._headings
        self._text = text
        self._headings = extract_outline(text)
        self.recomputations += 1
        return self._headings

    def invalidate(self) -> None:
        self._text = None
        self._headings = ()


def navigation_target(
    text: str,
    heading: Heading,
    *,
    line_height: float,
    viewport_height: float,
) -> NavigationTarget:
    """Caret offset of the heading line and a scroll position a third down."""

    offset = line_start_offset(text, heading.line_index)
    scroll_top = heading.line_index * line_height - viewport_height / 3
    return NavigationTarget(offset=offset, scroll_top=max(0.0, scroll_top))


__all__ = [
    "Heading",
    "NavigationTarget",
    "OutlineIndex",
    "extract_outline",
    "navigation_target",
]

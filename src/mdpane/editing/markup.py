"""Inline markup toggling and template insertion around a selection.

Presence of markup is decided only by looking at the characters immediately
outside the whitespace-trimmed selection. Nothing inside the selection is
scanned, so a selection strictly inside an existing pair counts as unmarked.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from mdpane.buffer.state import Selection
from mdpane.buffer.validation import ensure_selection

from .result import EditResult


class MarkupKind(str, Enum):
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKETHROUGH = "strikethrough"
    CODE = "code"
    COMMENT = "comment"


@dataclass(frozen=True, slots=True)
class MarkerPair:
    opening: str
    closing: str
    # a neighbour that disqualifies presence detection (italic vs bold)
    excluded_neighbour: Optional[str] = None

    @property
    def empty(self) -> str:
        return self.opening + self.closing


MARKERS: Mapping[MarkupKind, MarkerPair] = MappingProxyType(
    {
        MarkupKind.BOLD: MarkerPair("**", "**"),
        MarkupKind.ITALIC: MarkerPair("*", "*", excluded_neighbour="**"),
        MarkupKind.UNDERLINE: MarkerPair("<u>", "</u>"),
        MarkupKind.STRIKETHROUGH: MarkerPair("~~", "~~"),
        MarkupKind.CODE: MarkerPair("`", "`"),
        MarkupKind.COMMENT: MarkerPair("<!-- ", " -->"),
    }
)

LINK_TEXT_PLACEHOLDER = "text"
IMAGE_TEXT_PLACEHOLDER = "description"
URL_PLACEHOLDER = "url"
CAPTION_PLACEHOLDER = "caption"


@dataclass(frozen=True, slots=True)
class TrimmedSpan:
    """Selection bounds shrunk inward past surrounding whitespace."""

    start: int
    end: int
    content: str


def trim_selection(text: str, selection: Selection) -> TrimmedSpan:
    selected = text[selection.start : selection.end]
    content = selected.strip()
    if not content:
        return TrimmedSpan(selection.start, selection.start, "")
    leading = len(selected) - len(selected.lstrip())
    trailing = len(selected) - len(selected.rstrip())
    return TrimmedSpan(selection.start + leading, selection.end - trailing, content)


def _before(text: str, offset: int, width: int) -> str:
    return text[max(0, offset - width) : offset]


def _after(text: str, offset: int, width: int) -> str:
    return text[offset : offset + width]


def _is_wrapped(text: str, span: TrimmedSpan, markers: MarkerPair) -> bool:
    if _before(text, span.start, len(markers.opening)) != markers.opening:
        return False
    if _after(text, span.end, len(markers.closing)) != markers.closing:
        return False
    excluded = markers.excluded_neighbour
    if excluded is not None:
        if _before(text, span.start, len(excluded)) == excluded:
            return False
        if _after(text, span.end, len(excluded)) == excluded:
            return False
    return True


def is_markup_applied(text: str, selection: Selection, kind: MarkupKind) -> bool:
    ensure_selection(text, selection)
    return _is_wrapped(text, trim_selection(text, selection), MARKERS[kind])


def toggle_markup(text: str, selection: Selection, kind: MarkupKind) -> EditResult:
    """Add ``kind`` around the selection, or remove it when already present."""

    ensure_selection(text, selection)
    markers = MARKERS[kind]
    span = trim_selection(text, selection)
    shift = len(markers.opening)

    if _is_wrapped(text, span, markers):
        updated = (
            text[: span.start - shift]
            + text[span.start : span.end]
            + text[span.end + len(markers.closing) :]
        )
        return EditResult(updated, Selection(span.start - shift, span.end - shift))

    if span.content:
        updated = (
            text[: span.start]
            + markers.opening
            + span.content
            + markers.closing
            + text[span.end :]
        )
        return EditResult(updated, Selection(span.start + shift, span.end + shift))

    updated = text[: selection.start] + markers.empty + text[selection.end :]
    return EditResult(updated, Selection.caret(selection.start + shift))


def insert_link(text: str, selection: Selection) -> EditResult:
    """Wrap the selection as ``[text](url)`` and select the url placeholder."""

    ensure_selection(text, selection)
    span = trim_selection(text, selection)
    if span.content:
        snippet = f"[{span.content}]({URL_PLACEHOLDER})"
        updated = text[: span.start] + snippet + text[span.end :]
        url_start = span.start + len(span.content) + 3
    else:
        snippet = f"[{LINK_TEXT_PLACEHOLDER}]({URL_PLACEHOLDER})"
        updated = text[: selection.start] + snippet + text[selection.end :]
        url_start = selection.start + len(LINK_TEXT_PLACEHOLDER) + 3
    return EditResult(updated, Selection(url_start, url_start + len(URL_PLACEHOLDER)))


def insert_image(text: str, selection: Selection) -> EditResult:
    """Insert ``![text](url "caption")``.

    With a selection the url placeholder is selected; on a bare caret the
    description placeholder is selected instead.
    """

    ensure_selection(text, selection)
    span = trim_selection(text, selection)
    if span.content:
        snippet = f'![{span.content}]({URL_PLACEHOLDER} "{CAPTION_PLACEHOLDER}")'
        updated = text[: span.start] + snippet + text[span.end :]
        url_start = span.start + len(span.content) + 4
        return EditResult(
            updated, Selection(url_start, url_start + len(URL_PLACEHOLDER))
        )

    snippet = f'![{IMAGE_TEXT_PLACEHOLDER}]({URL_PLACEHOLDER} "{CAPTION_PLACEHOLDER}")'
    updated = text[: selection.start] + snippet + text[selection.end :]
    description_start = selection.start + 2
    return EditResult(
        updated,
        Selection(description_start, description_start + len(IMAGE_TEXT_PLACEHOLDER)),
    )


__all__ = [
    "MarkupKind",
    "MarkerPair",
    "MARKERS",
    "TrimmedSpan",
    "trim_selection",
    "is_markup_applied",
    "toggle_markup",
    "insert_link",
    "insert_image",
]

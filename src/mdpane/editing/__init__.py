"""Pure text engines: offsets, inline markup, headings, and outline."""

from .headings import heading_level, set_heading_level, shift_heading_level
from .markup import (
    MarkupKind,
    insert_image,
    insert_link,
    is_markup_applied,
    toggle_markup,
)
from .offsets import LineLocation, line_start_offset, locate_line, split_lines
from .outline import Heading, NavigationTarget, OutlineIndex, extract_outline, navigation_target
from .result import EditResult

__all__ = [
    "EditResult",
    "LineLocation",
    "locate_line",
    "line_start_offset",
    "split_lines",
    "MarkupKind",
    "toggle_markup",
    "is_markup_applied",
    "insert_link",
    "insert_image",
    "heading_level",
    "set_heading_level",
    "shift_heading_level",
    "Heading",
    "NavigationTarget",
    "OutlineIndex",
    "extract_outline",
    "navigation_target",
]

"""Validation helpers shared across buffer services."""

from __future__ import annotations

from .state import Selection
from .sync import SelectionValidationError


def ensure_selection(text: str, selection: Selection) -> Selection:
    if selection.start < 0:
        raise SelectionValidationError("Selection starts before offset 0", selection=selection)
    if selection.end > len(text):
        raise SelectionValidationError(
            f"Selection ends past document length {len(text)}", selection=selection
        )
    return selection


def ensure_offset(text: str, offset: int) -> int:
    if offset < 0 or offset > len(text):
        raise SelectionValidationError(
            f"Offset {offset} outside document of length {len(text)}",
            selection=Selection.caret(max(offset, 0)),
        )
    return offset

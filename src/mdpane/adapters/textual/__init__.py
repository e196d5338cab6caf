"""Textual host adapter for the editing session."""

from .controller import (
    TextualEditorAdapter,
    TextualUIHooks,
    location_to_offset,
    offset_to_location,
    selection_from_locations,
)

__all__ = [
    "TextualEditorAdapter",
    "TextualUIHooks",
    "offset_to_location",
    "location_to_offset",
    "selection_from_locations",
]

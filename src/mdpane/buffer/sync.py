"""Adapter boundary types for syncing buffers with host widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .state import Selection


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current buffer state."""

    text: str
    selection: Selection
    version: int
    dirty: bool = False
    attributes: dict[str, str] = field(default_factory=dict)


class SelectionValidationError(RuntimeError):
    """Raised when a selection does not fit inside the document."""

    def __init__(self, message: str, *, selection: Optional[Selection] = None) -> None:
        super().__init__(message)
        self.selection = selection

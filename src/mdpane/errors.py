"""Errors raised by external collaborators (files, converters)."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class CollaboratorError(RuntimeError):
    """Base class for failures surfaced verbatim to the user."""

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class DocumentIOError(CollaboratorError):
    """Raised when a document cannot be read or written."""


class ConversionError(CollaboratorError):
    """Raised when the format converter fails."""

    def __init__(
        self,
        message: str,
        *,
        path: Optional[Path] = None,
        format_tag: Optional[str] = None,
    ) -> None:
        super().__init__(message, path=path)
        self.format_tag = format_tag


__all__ = ["CollaboratorError", "DocumentIOError", "ConversionError"]

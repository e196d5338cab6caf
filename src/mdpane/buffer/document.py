"""Versioned, immutable document text."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Document:
    """Full-text snapshot; edits produce a new instance with a bumped version."""

    text: str = ""
    version: int = 0

    def replace(self, text: str) -> "Document":
        return Document(text=text, version=self.version + 1)

    def slice(self, start: int, end: int) -> str:
        return self.text[start:end]

"""Clipboard storage with an overridable system clipboard hook."""

from __future__ import annotations

from typing import Callable, Optional

ClipboardReader = Callable[[], Optional[str]]
ClipboardWriter = Callable[[str], None]


class ClipboardBank:
    """Keeps the last cut/copied text and mirrors it to the host clipboard.

    Hosts install ``reader``/``writer`` to reach the system clipboard. Without
    them the bank behaves as a process-local clipboard.
    """

    def __init__(
        self,
        *,
        reader: Optional[ClipboardReader] = None,
        writer: Optional[ClipboardWriter] = None,
    ) -> None:
        self._text = ""
        self._reader = reader
        self._writer = writer

    def attach(
        self,
        *,
        reader: Optional[ClipboardReader] = None,
        writer: Optional[ClipboardWriter] = None,
    ) -> None:
        if reader is not None:
            self._reader = reader
        if writer is not None:
            self._writer = writer

    def get(self) -> str:
        if self._reader is not None:
            value = self._reader()
            if value is not None:
                self._text = value
        return self._text

    def set(self, text: str) -> None:
        self._text = text
        if self._writer is not None:
            self._writer(text)

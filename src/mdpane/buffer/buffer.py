"""High-level buffer façade combining document, selection, clipboard, and history."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import TYPE_CHECKING, ContextManager, Optional

from mdpane.runtime import telemetry

from .document import Document
from .history import HistoryManager
from .registers import ClipboardBank
from .state import BufferState, Selection
from .sync import BufferMirror
from .validation import ensure_selection

if TYPE_CHECKING:
    from mdpane.editing.result import EditResult


@dataclass(slots=True)
class BufferDelta:
    version: int
    text: str
    selection: Selection
    label: str


class Buffer:
    def __init__(
        self,
        *,
        name: str = "untitled",
        document: Optional[Document] = None,
        state: Optional[BufferState] = None,
        clipboard: Optional[ClipboardBank] = None,
        history: Optional[HistoryManager] = None,
    ) -> None:
        self.name = name
        self.document = document or Document()
        self.state = state or BufferState()
        self.clipboard = clipboard or ClipboardBank()
        self.history = history or HistoryManager(self.document.text)

    @classmethod
    def from_text(
        cls, text: str, *, name: str = "untitled", history: Optional[HistoryManager] = None
    ) -> "Buffer":
        if history is not None:
            history.reset(text)
        return cls(name=name, document=Document(text=text), history=history)

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def selection(self) -> Selection:
        return self.state.selection

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            text=self.document.text,
            selection=self.state.selection,
            version=self.document.version,
            dirty=self.state.dirty,
            attributes=dict(attributes or {}),
        )

    def selected_text(self) -> str:
        selection = ensure_selection(self.document.text, self.state.selection)
        return self.document.slice(selection.start, selection.end)

    def apply(self, result: "EditResult", *, label: str) -> BufferDelta:
        """Install a command's result as a discrete history step.

        The selection is validated against the new text but not installed:
        callers restore it after the host has redrawn.
        """

        ensure_selection(result.text, result.selection)
        with Transaction(self, label):
            self.history.commit(result.text)
            self._install(result.text)
        return BufferDelta(
            version=self.document.version,
            text=result.text,
            selection=result.selection,
            label=label,
        )

    def record_typing(self, text: str, selection: Selection) -> BufferDelta:
        """Install text typed directly into the host surface (coalesced)."""

        ensure_selection(text, selection)
        self.history.record_edit(text)
        self._install(text)
        self.state.set_selection(selection)
        return BufferDelta(
            version=self.document.version,
            text=text,
            selection=selection,
            label="typing",
        )

    def undo(self) -> Optional[BufferDelta]:
        with Transaction(self, "undo") as tx:
            restored = self.history.undo(self.document.text)
            if restored is None:
                tx.mark_noop()
                return None
            self._install(restored)
        return self._delta("undo")

    def redo(self) -> Optional[BufferDelta]:
        with Transaction(self, "redo") as tx:
            restored = self.history.redo()
            if restored is None:
                tx.mark_noop()
                return None
            self._install(restored)
        return self._delta("redo")

    def load(self, text: str, *, name: Optional[str] = None) -> BufferDelta:
        """Replace the whole document and start a fresh history."""

        with Transaction(self, "load"):
            self.history.reset(text)
            self.document = self.document.replace(text)
            self.state.set_caret(0)
            self.state.dirty = False
            self.state.last_change_tick = self.document.version
            if name is not None:
                self.name = name
        return self._delta("load")

    def mark_saved(self) -> None:
        self.state.dirty = False

    def _install(self, text: str) -> None:
        self.document = self.document.replace(text)
        self.state.dirty = True
        self.state.last_change_tick = self.document.version
        # keep the live selection inside the new text until it is restored
        length = len(text)
        current = self.state.selection
        if current.end > length:
            self.state.set_selection(
                Selection(min(current.start, length), length)
            )

    def _delta(self, label: str) -> BufferDelta:
        return BufferDelta(
            version=self.document.version,
            text=self.document.text,
            selection=self.state.selection,
            label=label,
        )


class Transaction(AbstractContextManager["Transaction"]):
    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[telemetry.SpanHandle]] = None
        self._handle: Optional[telemetry.SpanHandle] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name, "version": self.buffer.document.version},
        )
        self._handle = self._span_cm.__enter__()
        return self

    def mark_noop(self) -> None:
        if self._handle is not None:
            self._handle.add_metadata("status", "noop")

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["Buffer", "BufferDelta", "Transaction"]

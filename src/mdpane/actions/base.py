"""Shared state and result types every editor command works against."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional

from mdpane.buffer import Buffer, BufferDelta, Selection
from mdpane.editing import EditResult, OutlineIndex
from mdpane.runtime import EditorSettings, telemetry
from mdpane.services import Collaborators
from mdpane.view import RedrawQueue, ScrollSynchronizer

BUFFER_CHANGED = "buffer.changed"
SELECTION_RESTORE = "selection.restore"
VIEW_CHANGED = "view.changed"
FILE_CHANGED = "file.changed"
SCROLL_APPLY = "scroll.apply"
NOTIFY_INFO = "notify.info"
NOTIFY_ERROR = "notify.error"

VIEW_MODES = ("editor", "split", "preview")
UNTITLED = "untitled"


@dataclass(slots=True)
class CommandResult:
    """Result returned from every command handler."""

    consumed: bool
    status: str = "ok"
    message: Optional[str] = None
    timeout_ms: Optional[int] = None

    @property
    def changed(self) -> bool:
        return self.status == "ok"


def noop(message: str) -> CommandResult:
    return CommandResult(consumed=True, status="noop", message=message)


class EventBus:
    """Minimal event bus carrying buffer, view, and notification signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Callable[[object], None]) -> None:
        callbacks = self._subscribers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)


@dataclass(slots=True)
class ViewState:
    mode: str = "split"
    sidebar_open: bool = True
    current_file: Optional[Path] = None

    @property
    def display_name(self) -> str:
        if self.current_file is None:
            return UNTITLED
        return self.current_file.name


@dataclass(slots=True)
class SessionContext:
    """Everything a command may read or mutate, owned by one session."""

    buffer: Buffer
    bus: EventBus
    collaborators: Collaborators
    settings: EditorSettings
    redraw: RedrawQueue
    scroll: ScrollSynchronizer
    outline: OutlineIndex = field(default_factory=OutlineIndex)
    view: ViewState = field(default_factory=ViewState)
    extras: Dict[str, object] = field(default_factory=dict)

    def apply_edit(self, result: EditResult, *, label: str) -> CommandResult:
        """Commit ``result`` as one history step and restore its selection later."""

        delta = self.buffer.apply(result, label=label)
        self.publish(delta, selection=result.selection)
        return CommandResult(consumed=True, message=label)

    def publish(self, delta: BufferDelta, *, selection: Selection) -> None:
        self.bus.emit(BUFFER_CHANGED, delta)
        self.defer_selection(selection)

    def defer_selection(self, selection: Selection) -> None:
        version = self.buffer.document.version

        def restore() -> None:
            # a newer edit owns the selection now
            if self.buffer.document.version != version:
                return
            self.buffer.state.set_selection(selection)
            self.bus.emit(SELECTION_RESTORE, selection)

        self.redraw.defer(restore)

    def load_document(self, text: str, *, current_file: Optional[Path]) -> BufferDelta:
        """Replace the document wholesale; history starts over."""

        name = current_file.name if current_file is not None else UNTITLED
        delta = self.buffer.load(text, name=name)
        self.outline.invalidate()
        self.view.current_file = current_file
        self.bus.emit(BUFFER_CHANGED, delta)
        self.bus.emit(FILE_CHANGED, self.view)
        self.defer_selection(Selection.caret(0))
        return delta

    def notify(self, message: str) -> None:
        telemetry.record_event("notify.info", data={"message": message})
        self.bus.emit(NOTIFY_INFO, message)

    def notify_error(self, message: str) -> None:
        telemetry.record_event("notify.error", level="error", data={"message": message})
        self.bus.emit(NOTIFY_ERROR, message)


__all__ = [
    "CommandResult",
    "EventBus",
    "SessionContext",
    "ViewState",
    "noop",
    "VIEW_MODES",
    "UNTITLED",
    "BUFFER_CHANGED",
    "SELECTION_RESTORE",
    "VIEW_CHANGED",
    "FILE_CHANGED",
    "SCROLL_APPLY",
    "NOTIFY_INFO",
    "NOTIFY_ERROR",
]

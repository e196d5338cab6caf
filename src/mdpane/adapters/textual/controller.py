"""Textual adapter that wires EditorSession events into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from mdpane.actions.base import (
    BUFFER_CHANGED,
    FILE_CHANGED,
    NOTIFY_ERROR,
    NOTIFY_INFO,
    SCROLL_APPLY,
    SELECTION_RESTORE,
    VIEW_CHANGED,
    CommandResult,
    ViewState,
)
from mdpane.buffer import BufferDelta, BufferMirror, Selection
from mdpane.editing import Heading, line_start_offset, locate_line
from mdpane.session import EditorSession, KeyInput
from mdpane.view import ScrollSurface

Location = Tuple[int, int]


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


def offset_to_location(text: str, offset: int) -> Location:
    """Convert a character offset to the ``(row, column)`` pair TextArea uses."""

    line = locate_line(text, offset)
    return (line.index, offset - line.start)


def location_to_offset(text: str, location: Location) -> int:
    row, column = location
    start = line_start_offset(text, row)
    line_length = len(text.split("\n")[row])
    return start + max(0, min(column, line_length))


def selection_from_locations(text: str, anchor: Location, cursor: Location) -> Selection:
    return Selection.between(
        location_to_offset(text, anchor), location_to_offset(text, cursor)
    )


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_preview: Callable[[str], None] = _noop
    update_outline: Callable[[Tuple[Heading, ...]], None] = _noop
    set_selection: Callable[[Location, Location], None] = _noop
    set_scroll: Callable[[str, float], None] = _noop
    update_view: Callable[[ViewState], None] = _noop
    update_status: Callable[[str], None] = _noop
    # severity ("information" or "error"), message
    notify: Callable[[str, str], None] = _noop
    log: Callable[[str], None] = _noop


class TextualEditorAdapter:
    """Bridges EditorSession + bus events to a Textual-friendly surface."""

    def __init__(self, session: EditorSession, hooks: TextualUIHooks) -> None:
        self.session = session
        self.hooks = hooks
        self._subscribe_events()
        self.refresh_all()

    def refresh_all(self) -> None:
        self._refresh_buffer()
        self._refresh_derived()
        self.hooks.update_view(self.session.context.view)

    def handle_textual_key(self, key: str, *, text: Optional[str] = None) -> CommandResult:
        """Translate a Textual key name (``"ctrl+b"``) and dispatch it."""

        key_input = KeyInput.from_chord(key)
        key_input.text = text
        self._log_state("key ->", key=key)
        result = self.session.handle_key(key_input)
        self._after_command(result)
        return result

    def run_command(self, action_id: str) -> CommandResult:
        self._log_state("command ->", action=action_id)
        result = self.session.run_command(action_id)
        self._after_command(result)
        return result

    def host_edited(self, text: str, anchor: Location, cursor: Location) -> None:
        """The TextArea changed; typing is recorded, echoes of our own writes are not."""

        selection = selection_from_locations(text, anchor, cursor)
        if text == self.session.buffer.text:
            self.session.update_selection(selection)
        else:
            self.session.push_host_edit(text, selection)
        self._refresh_status()

    def host_selection_changed(self, anchor: Location, cursor: Location) -> None:
        text = self.session.buffer.text
        self.session.update_selection(selection_from_locations(text, anchor, cursor))
        self._refresh_status()

    def report_scroll(
        self,
        name: str,
        scroll_top: float,
        *,
        scroll_height: Optional[float] = None,
        viewport_height: Optional[float] = None,
    ) -> bool:
        scroll = self.session.scroll
        scroll.update_metrics(name, scroll_height=scroll_height, viewport_height=viewport_height)
        return scroll.report_scroll(name, scroll_top)

    def select_heading(self, heading: Heading) -> None:
        self.session.navigate_to_heading(heading)

    def process_timeouts(self) -> bool:
        committed = self.session.process_timeouts()
        if committed:
            self._log_state("timeout ->", committed=True)
        return committed

    def after_refresh(self) -> int:
        """Run callbacks that were waiting for the widgets to redraw."""

        return self.session.flush_redraw()

    def _after_command(self, result: CommandResult) -> None:
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            message=result.message,
        )
        self._refresh_status(result.message if result.status != "error" else None)

    def _subscribe_events(self) -> None:
        bus = self.session.bus
        bus.subscribe(BUFFER_CHANGED, self._on_buffer_changed)
        bus.subscribe(SELECTION_RESTORE, self._on_selection_restore)
        bus.subscribe(SCROLL_APPLY, self._on_scroll_apply)
        bus.subscribe(VIEW_CHANGED, self._on_view_changed)
        bus.subscribe(FILE_CHANGED, lambda _payload: self._refresh_status())
        bus.subscribe(NOTIFY_INFO, lambda payload: self.hooks.notify("information", str(payload)))
        bus.subscribe(NOTIFY_ERROR, lambda payload: self.hooks.notify("error", str(payload)))

    def _on_buffer_changed(self, payload: object | None) -> None:
        if not isinstance(payload, BufferDelta):
            return
        self._log_state("event ->", event=BUFFER_CHANGED, label=payload.label)
        # typed text is already on screen
        if payload.label != "typing":
            self._refresh_buffer()
        self._refresh_derived()

    def _on_selection_restore(self, payload: object | None) -> None:
        if not isinstance(payload, Selection):
            return
        text = self.session.buffer.text
        self.hooks.set_selection(
            offset_to_location(text, payload.start), offset_to_location(text, payload.end)
        )
        self._refresh_status()

    def _on_scroll_apply(self, payload: object | None) -> None:
        if isinstance(payload, ScrollSurface):
            self.hooks.set_scroll(payload.name, payload.scroll_top)

    def _on_view_changed(self, payload: object | None) -> None:
        if isinstance(payload, ViewState):
            self.hooks.update_view(payload)

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.session.pull_buffer())

    def _refresh_derived(self) -> None:
        self.hooks.update_preview(self.session.buffer.text)
        self.hooks.update_outline(self.session.outline())
        self._refresh_status()

    def _refresh_status(self, message: Optional[str] = None) -> None:
        buffer = self.session.buffer
        row, column = offset_to_location(buffer.text, buffer.selection.end)
        parts = [self.session.title, f"Ln {row + 1}, Col {column + 1}"]
        if message:
            parts.append(message)
        self.hooks.update_status(" | ".join(parts))

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        buffer = self.session.buffer
        history = buffer.history
        return {
            "selection": buffer.selection.as_tuple(),
            "version": buffer.document.version,
            "undo": history.undo_depth,
            "redo": history.redo_depth,
            "typing": history.pending is not None,
        }


__all__ = [
    "TextualEditorAdapter",
    "TextualUIHooks",
    "offset_to_location",
    "location_to_offset",
    "selection_from_locations",
]

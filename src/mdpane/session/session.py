"""Editor session: owns the document, history, view state, and command dispatch."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple, cast

from mdpane.actions.base import (
    BUFFER_CHANGED,
    SCROLL_APPLY,
    SELECTION_RESTORE,
    CommandResult,
    EventBus,
    SessionContext,
)
from mdpane.buffer import (
    Buffer,
    BufferDelta,
    BufferMirror,
    HistoryManager,
    Selection,
    ensure_selection,
)
from mdpane.buffer.history import Clock
from mdpane.editing import Heading, NavigationTarget, navigation_target
from mdpane.errors import CollaboratorError
from mdpane.keymaps import (
    EDITOR_MODE,
    ActionRef,
    KeymapRegistry,
    KeymapResolver,
    ResolutionMatch,
    load_default_keymaps,
)
from mdpane.runtime import EditorSettings, telemetry
from mdpane.services import Collaborators, PandocConverter
from mdpane.view import EDITOR, RedrawQueue, ScrollSurface, ScrollSynchronizer

from .keymap_helpers import KeyInput, key_to_token


@dataclass
class PendingChord:
    tokens: Tuple[str, ...]
    deadline: float
    generation: int


class EditorSession:
    """Single-document editing session driven by a host UI.

    The host forwards key chords (``handle_key``), direct typing
    (``push_host_edit``) and scroll events (``scroll``), calls
    ``process_timeouts`` periodically, and calls ``flush_redraw`` once it has
    rendered the latest text. Everything the host must reflect is announced on
    ``bus``.
    """

    def __init__(
        self,
        *,
        settings: EditorSettings | None = None,
        collaborators: Collaborators | None = None,
        text: str | None = None,
        current_file: Path | None = None,
        clock: Clock = time.monotonic,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
        bus: EventBus | None = None,
    ) -> None:
        self.settings = settings or EditorSettings.from_env()
        self._clock = clock
        initial = text if text is not None else self.settings.initial_text()
        history = HistoryManager(
            initial,
            max_depth=self.settings.history_depth,
            debounce_ms=self.settings.debounce_ms,
            clock=clock,
        )
        name = current_file.name if current_file is not None else "untitled"
        buffer = Buffer.from_text(initial, name=name, history=history)
        redraw = RedrawQueue()
        self.context = SessionContext(
            buffer=buffer,
            bus=bus or EventBus(),
            collaborators=collaborators
            or Collaborators(converter=PandocConverter(self.settings.pandoc_binary)),
            settings=self.settings,
            redraw=redraw,
            scroll=ScrollSynchronizer(redraw, apply_scroll=self._apply_scroll),
        )
        self.context.view.current_file = current_file
        self.logger = telemetry.get_logger("mdpane.session")
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="mdpane.keymaps"
        )
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            self.keymap_registry, logger_name="mdpane.keymaps"
        )
        self.context.extras.setdefault("keymap_registry", self.keymap_registry)
        self.context.extras.setdefault("keymap_flags", {})
        self._pending_chord: Optional[PendingChord] = None
        self._generation = 0

    @property
    def buffer(self) -> Buffer:
        return self.context.buffer

    @property
    def bus(self) -> EventBus:
        return self.context.bus

    @property
    def scroll(self) -> ScrollSynchronizer:
        return self.context.scroll

    @property
    def title(self) -> str:
        marker = "*" if self.buffer.state.dirty else ""
        return f"{marker}{self.context.view.display_name}"

    # -- commands ---------------------------------------------------------

    def handle_key(self, key: KeyInput) -> CommandResult:
        """Resolve a chord against the shortcut table and run its command.

        Unbound keys come back unconsumed so the host can insert them.
        """

        token = key_to_token(key)
        prefix = self._pending_chord.tokens if self._pending_chord else ()
        self._pending_chord = None
        flags = self._keymap_flags()
        resolution = self.keymap_resolver.resolve(EDITOR_MODE, (*prefix, token), context=flags)
        if resolution.status == "miss" and prefix:
            resolution = self.keymap_resolver.resolve(EDITOR_MODE, (token,), context=flags)

        if resolution.status == "match" and resolution.match is not None:
            return self._execute(resolution.match.action, resolution.match)
        if resolution.status == "pending":
            self._arm_chord((*prefix, token), resolution.timeout_ms or 1000)
            return CommandResult(
                consumed=True, status="pending", timeout_ms=resolution.timeout_ms
            )
        return CommandResult(consumed=False, status="unbound")

    def run_command(self, action_id: str) -> CommandResult:
        """Run a registered command by id, as menus and toolbars do."""

        return self._execute(self.keymap_registry.get_action(action_id), None)

    def shortcut_label(self, action_id: str) -> Optional[str]:
        bindings = self.keymap_registry.bindings_for_action(action_id, EDITOR_MODE)
        if not bindings:
            return None
        return bindings[0].sequence.label()

    def _execute(
        self, action: ActionRef, match: Optional[ResolutionMatch]
    ) -> CommandResult:
        with telemetry.span(
            name=f"command::{action.telemetry_name}",
            component="commands",
            metadata={"action_id": action.id},
        ) as handle:
            try:
                result = action(self.context, match)
            except CollaboratorError as exc:
                handle.add_metadata("status", "error")
                self.context.notify_error(str(exc))
                return CommandResult(consumed=True, status="error", message=str(exc))
            handle.add_metadata("status", result.status)
        return result

    def _keymap_flags(self) -> Dict[str, bool]:
        flags = cast(
            Dict[str, bool], self.context.extras.setdefault("keymap_flags", {})
        )
        flags["has_selection"] = not self.buffer.selection.is_caret
        flags["dirty"] = self.buffer.state.dirty
        flags["has_file"] = self.context.view.current_file is not None
        return flags

    def _arm_chord(self, tokens: Tuple[str, ...], timeout_ms: int) -> None:
        self._generation += 1
        self._pending_chord = PendingChord(
            tokens=tokens,
            deadline=self._clock() + timeout_ms / 1000.0,
            generation=self._generation,
        )

    # -- host surface -----------------------------------------------------

    def pull_buffer(self) -> BufferMirror:
        return self.buffer.mirror(attributes={"title": self.title})

    def push_host_edit(self, text: str, selection: Selection) -> BufferDelta:
        """Record text the user typed straight into the host surface."""

        delta = self.buffer.record_typing(text, selection)
        self.bus.emit(BUFFER_CHANGED, delta)
        return delta

    def update_selection(self, selection: Selection) -> None:
        ensure_selection(self.buffer.text, selection)
        self.buffer.state.set_selection(selection)

    def process_timeouts(self) -> bool:
        """Commit an expired typing burst and drop a stale chord prefix."""

        pending = self._pending_chord
        if pending is not None and pending.deadline <= self._clock():
            self._pending_chord = None
        return self.buffer.history.process_timeouts()

    def flush_redraw(self) -> int:
        return self.context.redraw.flush()

    def load_document(self, text: str, *, current_file: Path | None = None) -> BufferDelta:
        return self.context.load_document(text, current_file=current_file)

    def render_html(self) -> str:
        return self.context.collaborators.renderer.render(self.buffer.text)

    # -- outline & scrolling ----------------------------------------------

    def outline(self) -> Tuple[Heading, ...]:
        return self.context.outline.headings(self.buffer.text)

    def navigate_to_heading(self, heading: Heading) -> NavigationTarget:
        """Put the caret on ``heading`` and scroll it a third down the editor."""

        editor = self.scroll.surface(EDITOR)
        target = navigation_target(
            self.buffer.text,
            heading,
            line_height=self.settings.line_height,
            viewport_height=editor.viewport_height,
        )
        selection = Selection.caret(target.offset)
        self.buffer.state.set_selection(selection)
        self.bus.emit(SELECTION_RESTORE, selection)
        editor.scroll_top = target.scroll_top
        self._apply_scroll(editor)
        self.scroll.on_scroll(EDITOR)
        return target

    def _apply_scroll(self, surface: ScrollSurface) -> None:
        self.bus.emit(SCROLL_APPLY, surface)


__all__ = ["EditorSession", "PendingChord"]

"""Executable Textual app hosting the Markdown editing session."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Optional, Sequence, Tuple

try:  # pragma: no cover - imported only when the app is run
    from textual.app import App, ComposeResult
    from textual.binding import Binding as TextualBinding
    from textual.command import Hit, Hits, Provider
    from textual.containers import Horizontal, Vertical, VerticalScroll
    from textual.screen import ModalScreen
    from textual.widgets import Button, Footer, Header, Input, Markdown, Static, TextArea, Tree
    from textual.widgets.text_area import Selection as AreaSelection
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use mdpane.adapters.textual.app"
    ) from exc

from mdpane.actions.base import ViewState
from mdpane.buffer import BufferMirror
from mdpane.editing import Heading
from mdpane.errors import CollaboratorError
from mdpane.keymaps import DEFAULT_BINDINGS
from mdpane.runtime import EditorSettings, telemetry
from mdpane.services import Collaborators, FileFilter, PandocConverter, pdf_engine_available
from mdpane.session import EditorSession
from mdpane.view import EDITOR, PREVIEW

from .controller import Location, TextualEditorAdapter, TextualUIHooks

TERMINAL_LINE_HEIGHT = 1.0


class QueuedDialogs:
    """Answers the next path question with a value collected beforehand.

    Textual prompts are asynchronous, so the app asks first and then runs the
    command with the answer queued here.
    """

    def __init__(self) -> None:
        self._answer: Optional[Path] = None

    def prime(self, answer: Optional[str]) -> None:
        self._answer = Path(answer).expanduser() if answer else None

    def clear(self) -> None:
        self._answer = None

    def ask_open_path(self, filters: Sequence[FileFilter]) -> Optional[Path]:
        del filters
        return self._take()

    def ask_save_path(
        self, filters: Sequence[FileFilter], default_name: str
    ) -> Optional[Path]:
        del filters, default_name
        return self._take()

    def _take(self) -> Optional[Path]:
        answer, self._answer = self._answer, None
        return answer


class PathPrompt(ModalScreen[Optional[str]]):
    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(self, title: str, default: str = "") -> None:
        super().__init__()
        self._title = title
        self._default = default

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Static(self._title, id="dialog-title")
            yield Input(value=self._default, placeholder="path/to/file", id="dialog-input")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value.strip() or None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class ErrorDialog(ModalScreen[None]):
    """Blocking message box showing a collaborator error verbatim."""

    BINDINGS = [("escape", "close", "Close"), ("enter", "close", "Close")]

    def __init__(self, message: str) -> None:
        super().__init__()
        self._message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Static("Error", id="dialog-title")
            yield Static(self._message, id="dialog-message")
            yield Button("OK", variant="error", id="dialog-ok")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        del event
        self.dismiss(None)

    def action_close(self) -> None:
        self.dismiss(None)


class EditorCommands(Provider):
    """Command palette entries for every registered editor command."""

    async def search(self, query: str) -> Hits:
        app = self.app
        if not isinstance(app, MdpaneApp) or app.session is None:
            return
        matcher = self.matcher(query)
        for action in app.session.keymap_registry.actions():
            label = action.description or action.id
            score = matcher.match(label)
            if score <= 0:
                continue
            shortcut = app.session.shortcut_label(action.id)
            yield Hit(
                score,
                matcher.highlight(label),
                partial(app.run_editor_command, action.id),
                help=f"{action.id} ({shortcut})" if shortcut else action.id,
            )


@dataclass
class UIState:
    status_text: str = ""
    preview_text: str = ""


def _shortcut_bindings() -> list[TextualBinding]:
    return [
        TextualBinding(
            binding.key_signature,
            f"run_editor_command('{binding.action_id}')",
            binding.description,
            show=binding.action_id in {"file.open", "file.save"},
            priority=True,
        )
        for binding in DEFAULT_BINDINGS
    ]


# TextArea binds these too; the priority bindings below take precedence
CLIPBOARD_BINDINGS = (
    ("ctrl+x", "edit.cut", "Cut"),
    ("ctrl+c", "edit.copy", "Copy"),
    ("ctrl+v", "edit.paste", "Paste"),
)


def _clipboard_bindings() -> list[TextualBinding]:
    return [
        TextualBinding(
            key, f"run_editor_command('{action_id}')", label, show=False, priority=True
        )
        for key, action_id, label in CLIPBOARD_BINDINGS
    ]


class MdpaneApp(App[None]):
    """Dual-pane Markdown editor: raw text, rendered preview, and outline."""

    TITLE = "mdpane"

    CSS = """
    #main {
        height: 1fr;
    }

    #outline {
        width: 28;
        border: round $accent;
    }

    #editor {
        width: 1fr;
    }

    #preview-pane {
        width: 1fr;
        border: round $accent;
        padding: 0 1;
    }

    #status-line {
        height: 1;
        background: $surface-darken-1;
        padding: 0 1;
    }

    PathPrompt, ErrorDialog {
        align: center middle;
    }

    #dialog {
        width: 70;
        height: auto;
        border: thick $accent;
        background: $surface;
        padding: 1 2;
    }
    """

    COMMANDS = App.COMMANDS | {EditorCommands}

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
        ("f2", "run_editor_command('view.toggle_sidebar')", "Outline"),
        ("f3", "run_editor_command('view.editor')", "Editor"),
        ("f4", "run_editor_command('view.split')", "Split"),
        ("f5", "run_editor_command('view.preview')", "Preview"),
        *_shortcut_bindings(),
        *_clipboard_bindings(),
    ]

    def __init__(
        self,
        *,
        settings: Optional[EditorSettings] = None,
        path: Optional[Path] = None,
    ) -> None:
        super().__init__()
        self._settings = settings or EditorSettings.from_env().with_overrides(
            line_height=TERMINAL_LINE_HEIGHT
        )
        self._initial_path = path
        self._state = UIState()
        self.dialogs = QueuedDialogs()
        self.session: EditorSession | None = None
        self.adapter: TextualEditorAdapter | None = None
        self._editor: TextArea | None = None
        self._preview: Markdown | None = None
        self._preview_pane: VerticalScroll | None = None
        self._outline: Tree[Heading] | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main"):
            self._outline = Tree("Outline", id="outline")
            yield self._outline
            self._editor = TextArea(id="editor", soft_wrap=True)
            yield self._editor
            self._preview = Markdown(id="preview")
            with VerticalScroll(id="preview-pane") as pane:
                self._preview_pane = pane
                yield self._preview
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        collaborators = Collaborators(
            converter=PandocConverter(self._settings.pandoc_binary),
            dialogs=self.dialogs,
        )
        self.session = EditorSession(settings=self._settings, collaborators=collaborators)
        self.session.buffer.clipboard.attach(
            reader=lambda: self.clipboard, writer=self.copy_to_clipboard
        )
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_preview=self._update_preview,
            update_outline=self._update_outline,
            set_selection=self._set_selection,
            set_scroll=self._set_scroll,
            update_view=self._update_view,
            update_status=self._update_status,
            notify=self._notify,
            log=self._log_line,
        )
        self.adapter = TextualEditorAdapter(self.session, hooks)
        if self._initial_path is not None:
            self._open_initial(self._initial_path)
        if self._editor is not None:
            self.watch(self._editor, "scroll_y", self._editor_scrolled, init=False)
            self._editor.focus()
        if self._preview_pane is not None:
            self.watch(self._preview_pane, "scroll_y", self._preview_scrolled, init=False)
        self.set_interval(0.1, self._process_timeouts)

    def _open_initial(self, path: Path) -> None:
        assert self.session is not None
        try:
            text = self.session.context.collaborators.files.read(path)
        except CollaboratorError as exc:
            self._notify("error", str(exc))
            return
        self.session.load_document(text, current_file=path)

    # -- commands ---------------------------------------------------------

    def action_run_editor_command(self, action_id: str) -> None:
        self.run_editor_command(action_id)

    def run_editor_command(self, action_id: str) -> None:
        if self.adapter is None:
            return
        prompt = self._path_prompt(action_id)
        if prompt is None:
            self.adapter.run_command(action_id)
            return

        def answered(answer: Optional[str]) -> None:
            if self.adapter is None:
                return
            self.dialogs.prime(answer)
            self.adapter.run_command(action_id)
            self.dialogs.clear()

        title, default = prompt
        self.push_screen(PathPrompt(title, default), answered)

    def _path_prompt(self, action_id: str) -> Optional[Tuple[str, str]]:
        assert self.session is not None
        view = self.session.context.view
        if action_id == "file.open" or action_id.startswith("file.import."):
            return ("Open file", "")
        if action_id == "file.save_as" or (
            action_id == "file.save" and view.current_file is None
        ):
            default = str(view.current_file) if view.current_file else "untitled.md"
            return ("Save as", default)
        if action_id == "file.export_pdf" and not pdf_engine_available():
            return None
        if action_id.startswith("file.export"):
            return ("Export to", "")
        return None

    # -- hooks ------------------------------------------------------------

    def _update_buffer(self, mirror: BufferMirror) -> None:
        if self._editor is not None and self._editor.text != mirror.text:
            self._editor.load_text(mirror.text)
        self.call_after_refresh(self._after_refresh)

    def _update_preview(self, text: str) -> None:
        if text == self._state.preview_text:
            return
        self._state.preview_text = text
        self.call_later(self._render_preview, text)

    async def _render_preview(self, text: str) -> None:
        if self._preview is not None:
            await self._preview.update(text)

    def _update_outline(self, headings: Tuple[Heading, ...]) -> None:
        if self._outline is None:
            return
        self._outline.clear()
        for heading in headings:
            indent = "  " * (heading.level - 1)
            self._outline.root.add_leaf(f"{indent}{heading.text}", data=heading)
        self._outline.root.expand()

    def _set_selection(self, start: Location, end: Location) -> None:
        if self._editor is not None:
            self._editor.selection = AreaSelection(start, end)

    def _set_scroll(self, name: str, scroll_top: float) -> None:
        widget = self._editor if name == EDITOR else self._preview_pane
        if widget is not None:
            widget.scroll_to(y=scroll_top, animate=False)

    def _update_view(self, view: ViewState) -> None:
        if self._outline is not None:
            self._outline.display = view.sidebar_open
        if self._editor is not None:
            self._editor.display = view.mode in ("editor", "split")
        if self._preview_pane is not None:
            self._preview_pane.display = view.mode in ("split", "preview")

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget is not None:
            self._status_widget.update(status)
        if self.session is not None:
            self.sub_title = self.session.title

    def _notify(self, severity: str, message: str) -> None:
        if severity == "error":
            self.push_screen(ErrorDialog(message))
        else:
            self.notify(message, severity="information")

    def _log_line(self, line: str) -> None:
        self.log(line)

    # -- events -----------------------------------------------------------

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self.adapter is None:
            return
        area = event.text_area
        self.adapter.host_edited(area.text, area.selection.start, area.selection.end)

    def on_text_area_selection_changed(self, event: TextArea.SelectionChanged) -> None:
        if self.adapter is None:
            return
        area = event.text_area
        if area.text != self.adapter.session.buffer.text:
            return
        self.adapter.host_selection_changed(event.selection.start, event.selection.end)

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        heading = event.node.data
        if self.adapter is not None and isinstance(heading, Heading):
            self.adapter.select_heading(heading)
            self.call_after_refresh(self._after_refresh)

    def _editor_scrolled(self, value: float) -> None:
        if self.adapter is None or self._editor is None:
            return
        self.adapter.report_scroll(
            EDITOR,
            value,
            scroll_height=self._editor.virtual_size.height,
            viewport_height=self._editor.size.height,
        )
        self.call_after_refresh(self._after_refresh)

    def _preview_scrolled(self, value: float) -> None:
        if self.adapter is None or self._preview_pane is None:
            return
        self.adapter.report_scroll(
            PREVIEW,
            value,
            scroll_height=self._preview_pane.virtual_size.height,
            viewport_height=self._preview_pane.size.height,
        )
        self.call_after_refresh(self._after_refresh)

    def _after_refresh(self) -> None:
        if self.adapter is not None:
            self.adapter.after_refresh()

    def _process_timeouts(self) -> None:
        if self.adapter is not None:
            self.adapter.process_timeouts()


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Edit Markdown with a live preview.")
    parser.add_argument("path", nargs="?", type=Path, help="Markdown file to open")
    parser.add_argument(
        "--history-depth", type=int, default=None, help="Undo steps kept (default: 200)"
    )
    parser.add_argument(
        "--debounce-ms",
        type=int,
        default=None,
        help="Pause that ends a typing burst, in milliseconds (default: 400)",
    )
    parser.add_argument(
        "--pandoc", default=None, help="Pandoc executable used for import/export"
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "production", "quiet"),
        default=None,
        help="Telemetry preset (default: from MDPANE_* variables)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    settings = EditorSettings.from_env().with_overrides(
        history_depth=args.history_depth,
        debounce_ms=args.debounce_ms,
        pandoc_binary=args.pandoc,
        line_height=TERMINAL_LINE_HEIGHT,
    )
    app = MdpaneApp(settings=settings, path=args.path)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()

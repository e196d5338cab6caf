from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from mdpane.adapters.textual import (
    TextualEditorAdapter,
    TextualUIHooks,
    location_to_offset,
    offset_to_location,
)
from mdpane.runtime import EditorSettings
from mdpane.services import Collaborators, FileFilter
from mdpane.session import EditorSession


class MissingFileDialogs:
    def __init__(self, path: Path) -> None:
        self.path = path

    def ask_open_path(self, filters: Sequence[FileFilter]) -> Optional[Path]:
        return self.path

    def ask_save_path(
        self, filters: Sequence[FileFilter], default_name: str
    ) -> Optional[Path]:
        return None


class RecordingHooks:
    def __init__(self) -> None:
        self.buffers: List[str] = []
        self.previews: List[str] = []
        self.selections: List[Tuple[Tuple[int, int], Tuple[int, int]]] = []
        self.scrolls: List[Tuple[str, float]] = []
        self.statuses: List[str] = []
        self.notices: List[Tuple[str, str]] = []
        self.views: List[str] = []

    def build(self) -> TextualUIHooks:
        return TextualUIHooks(
            update_buffer=lambda mirror: self.buffers.append(mirror.text),
            update_preview=self.previews.append,
            set_selection=lambda start, end: self.selections.append((start, end)),
            set_scroll=lambda name, top: self.scrolls.append((name, top)),
            update_view=lambda view: self.views.append(view.mode),
            update_status=self.statuses.append,
            notify=lambda severity, message: self.notices.append((severity, message)),
        )


def make_adapter(
    text: str = "hello world", *, collaborators: Optional[Collaborators] = None
) -> tuple[TextualEditorAdapter, RecordingHooks]:
    session = EditorSession(
        settings=EditorSettings(), collaborators=collaborators, text=text
    )
    recorder = RecordingHooks()
    return TextualEditorAdapter(session, recorder.build()), recorder


def test_location_helpers_follow_lines() -> None:
    text = "ab\ncd"

    assert offset_to_location(text, 4) == (1, 1)
    assert offset_to_location(text, 2) == (0, 2)
    assert location_to_offset(text, (1, 1)) == 4
    assert location_to_offset(text, (1, 9)) == 5


def test_initial_refresh_pushes_everything() -> None:
    _adapter, recorder = make_adapter()

    assert recorder.buffers == ["hello world"]
    assert recorder.previews == ["hello world"]
    assert recorder.views == ["split"]
    assert recorder.statuses[-1] == "untitled | Ln 1, Col 1"


def test_command_selection_waits_for_refresh() -> None:
    adapter, recorder = make_adapter()
    adapter.host_selection_changed((0, 0), (0, 5))

    adapter.run_command("format.bold")

    assert recorder.buffers[-1] == "**hello** world"
    assert recorder.selections == []

    adapter.after_refresh()

    assert recorder.selections == [((0, 2), (0, 7))]
    assert recorder.statuses[-1].startswith("*untitled")


def test_typing_does_not_rewrite_the_widget() -> None:
    adapter, recorder = make_adapter()

    adapter.host_edited("hello world!", (0, 12), (0, 12))

    assert recorder.buffers == ["hello world"]
    assert recorder.previews[-1] == "hello world!"
    assert adapter.session.buffer.selection.end == 12


def test_shortcut_key_dispatches_command() -> None:
    adapter, recorder = make_adapter()
    adapter.host_selection_changed((0, 6), (0, 11))

    result = adapter.handle_textual_key("ctrl+e")

    assert result.consumed
    assert recorder.buffers[-1] == "hello `world`"


def test_view_commands_reach_hooks() -> None:
    adapter, recorder = make_adapter()

    adapter.run_command("view.preview")

    assert recorder.views[-1] == "preview"


def test_collaborator_errors_become_notifications(tmp_path: Path) -> None:
    collaborators = Collaborators(dialogs=MissingFileDialogs(tmp_path / "gone.md"))
    adapter, recorder = make_adapter(collaborators=collaborators)

    result = adapter.run_command("file.open")

    assert result.status == "error"
    assert recorder.notices and recorder.notices[-1][0] == "error"
    assert "gone.md" in recorder.notices[-1][1]
    assert adapter.session.buffer.text == "hello world"


def test_scroll_is_mirrored_once_per_tick() -> None:
    adapter, recorder = make_adapter()
    adapter.session.scroll.update_metrics("editor", scroll_height=200, viewport_height=100)

    synced = adapter.report_scroll(
        "preview", 50, scroll_height=300, viewport_height=100
    )
    echoed = adapter.report_scroll("editor", 25)

    assert synced is True
    assert echoed is False
    assert recorder.scrolls == [("editor", 25.0)]

    adapter.after_refresh()

    assert adapter.report_scroll("editor", 50) is True
    assert recorder.scrolls[-1] == ("preview", 100.0)

from __future__ import annotations

import asyncio
from pathlib import Path

from textual.widgets import TextArea
from textual.widgets.text_area import Selection as AreaSelection

from mdpane.adapters.textual.app import MdpaneApp
from mdpane.buffer import Selection
from mdpane.runtime import EditorSettings


def make_app(tmp_path: Path, text: str) -> MdpaneApp:
    document = tmp_path / "notes.md"
    document.write_text(text, encoding="utf-8")
    return MdpaneApp(settings=EditorSettings(line_height=1.0), path=document)


def test_clipboard_keys_commit_history_steps(tmp_path: Path) -> None:
    app = make_app(tmp_path, "hello world")

    async def scenario() -> None:
        async with app.run_test() as pilot:
            await pilot.pause()
            editor = app.query_one("#editor", TextArea)
            assert app.session is not None

            editor.selection = AreaSelection((0, 0), (0, 5))
            await pilot.pause()
            await pilot.press("ctrl+x")
            await pilot.pause()

            history = app.session.buffer.history
            assert app.session.buffer.text == " world"
            assert history.undo_depth == 1
            assert history.pending is None
            assert app.clipboard == "hello"

            editor.selection = AreaSelection((0, 6), (0, 6))
            await pilot.pause()
            await pilot.press("ctrl+v")
            await pilot.pause()

            assert app.session.buffer.text == " worldhello"
            assert history.undo_depth == 2

    asyncio.run(scenario())


def test_paste_reads_the_app_clipboard(tmp_path: Path) -> None:
    app = make_app(tmp_path, "abc")

    async def scenario() -> None:
        async with app.run_test() as pilot:
            await pilot.pause()
            assert app.session is not None
            app.copy_to_clipboard("XY")
            app.session.update_selection(Selection.caret(3))

            app.run_editor_command("edit.paste")
            await pilot.pause()

            assert app.session.buffer.text == "abcXY"

    asyncio.run(scenario())

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from mdpane.actions.base import NOTIFY_ERROR
from mdpane.errors import ConversionError
from mdpane.runtime import EditorSettings
from mdpane.services import Collaborators, DocumentStore, FileFilter, HtmlPrinter
from mdpane.session import EditorSession


class ScriptedDialogs:
    def __init__(self, *answers: Optional[Path]) -> None:
        self.answers = list(answers)
        self.asked: List[tuple[str, object]] = []

    def ask_open_path(self, filters: Sequence[FileFilter]) -> Optional[Path]:
        self.asked.append(("open", tuple(filters)))
        return self.answers.pop(0) if self.answers else None

    def ask_save_path(
        self, filters: Sequence[FileFilter], default_name: str
    ) -> Optional[Path]:
        self.asked.append(("save", default_name))
        return self.answers.pop(0) if self.answers else None


class FakeConverter:
    def __init__(self, markdown: str = "", error: Optional[str] = None) -> None:
        self.markdown = markdown
        self.error = error
        self.exports: List[tuple[str, Path, str]] = []

    def to_markdown(self, path: Path, format_tag: str) -> str:
        if self.error:
            raise ConversionError(self.error, path=path, format_tag=format_tag)
        return self.markdown

    def from_markdown(self, text: str, path: Path, format_tag: str) -> None:
        if self.error:
            raise ConversionError(self.error, path=path, format_tag=format_tag)
        self.exports.append((text, Path(path), format_tag))


def make_session(
    tmp_path: Path,
    dialogs: ScriptedDialogs,
    *,
    converter: Optional[FakeConverter] = None,
    opened: Optional[List[str]] = None,
    text: str = "# Draft",
) -> EditorSession:
    collaborators = Collaborators(
        files=DocumentStore(),
        converter=converter or FakeConverter(),  # type: ignore[arg-type]
        printer=HtmlPrinter(directory=tmp_path, opener=(opened if opened is not None else []).append),
        dialogs=dialogs,
    )
    return EditorSession(settings=EditorSettings(), collaborators=collaborators, text=text)


def test_open_replaces_document_and_resets_history(tmp_path: Path) -> None:
    source = tmp_path / "notes.md"
    source.write_text("# Notes\n", encoding="utf-8")
    session = make_session(tmp_path, ScriptedDialogs(source))
    session.run_command("format.bold")
    assert session.buffer.history.undo_depth == 1

    result = session.run_command("file.open")

    assert result.message == "opened"
    assert session.buffer.text == "# Notes\n"
    assert session.buffer.history.undo_depth == 0
    assert session.context.view.current_file == source
    assert session.title == "notes.md"


def test_open_cancelled_is_noop(tmp_path: Path) -> None:
    session = make_session(tmp_path, ScriptedDialogs())

    result = session.run_command("file.open")

    assert result.status == "noop"
    assert session.buffer.text == "# Draft"


def test_open_failure_is_reported_and_leaves_document(tmp_path: Path) -> None:
    session = make_session(tmp_path, ScriptedDialogs(tmp_path / "missing.md"))
    errors: List[object] = []
    session.bus.subscribe(NOTIFY_ERROR, errors.append)

    result = session.run_command("file.open")

    assert result.status == "error"
    assert errors and "missing.md" in str(errors[0])
    assert session.buffer.text == "# Draft"


def test_save_without_file_falls_back_to_save_as(tmp_path: Path) -> None:
    target = tmp_path / "out.md"
    dialogs = ScriptedDialogs(target)
    session = make_session(tmp_path, dialogs)
    session.run_command("format.italic")
    assert session.title.startswith("*")

    session.run_command("file.save")

    assert target.read_text(encoding="utf-8") == session.buffer.text
    assert dialogs.asked == [("save", "untitled.md")]
    assert session.context.view.current_file == target
    assert session.title == "out.md"


def test_save_with_current_file_does_not_ask(tmp_path: Path) -> None:
    target = tmp_path / "doc.md"
    dialogs = ScriptedDialogs(target)
    session = make_session(tmp_path, dialogs)
    session.run_command("file.save_as")
    session.run_command("format.code")

    session.run_command("file.save")

    assert len(dialogs.asked) == 1
    assert target.read_text(encoding="utf-8") == session.buffer.text


def test_import_loads_unsaved_document(tmp_path: Path) -> None:
    source = tmp_path / "report.docx"
    converter = FakeConverter(markdown="# Imported\n")
    session = make_session(tmp_path, ScriptedDialogs(source), converter=converter)

    result = session.run_command("file.import.docx")

    assert result.message == "imported_docx"
    assert session.buffer.text == "# Imported\n"
    assert session.context.view.current_file is None


def test_import_failure_keeps_document_and_history(tmp_path: Path) -> None:
    converter = FakeConverter(error="Pandoc failed: boom")
    session = make_session(tmp_path, ScriptedDialogs(tmp_path / "x.rst"), converter=converter)
    session.run_command("format.bold")
    errors: List[object] = []
    session.bus.subscribe(NOTIFY_ERROR, errors.append)

    result = session.run_command("file.import.rst")

    assert result.status == "error"
    assert errors == ["Pandoc failed: boom"]
    assert session.buffer.text == "****# Draft"
    assert session.buffer.history.undo_depth == 1


def test_export_passes_text_and_format(tmp_path: Path) -> None:
    converter = FakeConverter()
    dialogs = ScriptedDialogs(tmp_path / "out.docx")
    session = make_session(tmp_path, dialogs, converter=converter)

    session.run_command("file.export.docx")

    assert dialogs.asked == [("save", "untitled.docx")]
    assert converter.exports == [("# Draft", tmp_path / "out.docx", "docx")]


def test_print_writes_rendered_html_and_opens_browser(tmp_path: Path) -> None:
    opened: List[str] = []
    session = make_session(tmp_path, ScriptedDialogs(), opened=opened)

    result = session.run_command("file.print")

    exported = tmp_path / "mdpane_export.html"
    assert result.status == "ok"
    assert "<h1>Draft</h1>" in exported.read_text(encoding="utf-8")
    assert opened == [exported.as_uri()]


def test_export_pdf_without_engine_prints(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr("mdpane.actions.files.pdf_engine_available", lambda: False)
    opened: List[str] = []
    converter = FakeConverter()
    session = make_session(tmp_path, ScriptedDialogs(), converter=converter, opened=opened)

    session.run_command("file.export_pdf")

    assert opened
    assert converter.exports == []


def test_export_pdf_with_engine_uses_converter(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr("mdpane.actions.files.pdf_engine_available", lambda: True)
    converter = FakeConverter()
    session = make_session(
        tmp_path, ScriptedDialogs(tmp_path / "out.pdf"), converter=converter
    )

    result = session.run_command("file.export_pdf")

    assert result.message == "exported_pdf"
    assert converter.exports[0][2] == "pdf"

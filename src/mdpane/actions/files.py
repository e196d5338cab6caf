"""Document commands backed by the file, conversion, and print collaborators.

Collaborator failures are not handled here. They propagate to the session,
which reports them and leaves the document untouched.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

from mdpane.runtime import telemetry
from mdpane.services import (
    EXPORT_FORMATS,
    IMPORT_FORMATS,
    MARKDOWN_OPEN_FILTERS,
    MARKDOWN_SAVE_FILTERS,
    FileFilter,
    pdf_engine_available,
)
from mdpane.services.converter import find_format

from .base import FILE_CHANGED, UNTITLED, CommandResult, SessionContext, noop

if TYPE_CHECKING:
    from mdpane.keymaps import ResolutionMatch

PDF_FILTERS: tuple[FileFilter, ...] = (FileFilter("PDF", ("pdf",)),)


def _stem(context: SessionContext) -> str:
    current = context.view.current_file
    return current.stem if current is not None else UNTITLED


def _write(context: SessionContext, path: Path) -> CommandResult:
    with telemetry.span("file::save", component="files", metadata={"path": str(path)}):
        context.collaborators.files.write(path, context.buffer.text)
    context.buffer.mark_saved()
    context.view.current_file = path
    context.bus.emit(FILE_CHANGED, context.view)
    context.notify(f"Saved {path.name}")
    return CommandResult(consumed=True, message="saved")


def open_document(context: SessionContext, match: Optional["ResolutionMatch"]) -> CommandResult:
    del match
    path = context.collaborators.dialogs.ask_open_path(MARKDOWN_OPEN_FILTERS)
    if path is None:
        return noop("cancelled")
    text = context.collaborators.files.read(path)
    context.load_document(text, current_file=Path(path))
    return CommandResult(consumed=True, message="opened")


def save_document(context: SessionContext, match: Optional["ResolutionMatch"]) -> CommandResult:
    current = context.view.current_file
    if current is None:
        return save_document_as(context, match)
    return _write(context, current)


def save_document_as(
    context: SessionContext, match: Optional["ResolutionMatch"]
) -> CommandResult:
    del match
    path = context.collaborators.dialogs.ask_save_path(
        MARKDOWN_SAVE_FILTERS, f"{_stem(context)}.md"
    )
    if path is None:
        return noop("cancelled")
    return _write(context, Path(path))


def import_document(
    context: SessionContext,
    match: Optional["ResolutionMatch"],
    *,
    format_tag: str,
) -> CommandResult:
    """Convert a foreign document to Markdown and load it as an unsaved buffer."""

    del match
    fmt = find_format(format_tag, IMPORT_FORMATS)
    path = context.collaborators.dialogs.ask_open_path(
        (FileFilter(fmt.label, fmt.extensions),)
    )
    if path is None:
        return noop("cancelled")
    text = context.collaborators.converter.to_markdown(path, fmt.tag)
    context.load_document(text, current_file=None)
    context.notify(f"Imported {Path(path).name}")
    return CommandResult(consumed=True, message=f"imported_{fmt.tag}")


def export_document(
    context: SessionContext,
    match: Optional["ResolutionMatch"],
    *,
    format_tag: str,
) -> CommandResult:
    del match
    fmt = find_format(format_tag, EXPORT_FORMATS)
    path = context.collaborators.dialogs.ask_save_path(
        (FileFilter(fmt.label, fmt.extensions),),
        f"{_stem(context)}.{fmt.default_extension}",
    )
    if path is None:
        return noop("cancelled")
    context.collaborators.converter.from_markdown(context.buffer.text, path, fmt.tag)
    context.notify(f"Exported {Path(path).name}")
    return CommandResult(consumed=True, message=f"exported_{fmt.tag}")


def print_document(context: SessionContext, match: Optional["ResolutionMatch"]) -> CommandResult:
    """Open the rendered document in the browser, whose print dialog saves PDF."""

    del match
    html = context.collaborators.renderer.render(context.buffer.text)
    path = context.collaborators.printer.print_html(html, title=context.view.display_name)
    return CommandResult(consumed=True, message=f"printed:{path.name}")


def export_pdf(context: SessionContext, match: Optional["ResolutionMatch"]) -> CommandResult:
    if not pdf_engine_available():
        return print_document(context, match)
    path = context.collaborators.dialogs.ask_save_path(PDF_FILTERS, f"{_stem(context)}.pdf")
    if path is None:
        return noop("cancelled")
    context.collaborators.converter.from_markdown(context.buffer.text, path, "pdf")
    context.notify(f"Exported {Path(path).name}")
    return CommandResult(consumed=True, message="exported_pdf")


__all__ = [
    "open_document",
    "save_document",
    "save_document_as",
    "import_document",
    "export_document",
    "print_document",
    "export_pdf",
]

"""Bundle of external collaborators the command layer depends on."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol, Sequence

from .converter import PandocConverter
from .files import DocumentStore
from .printer import HtmlPrinter
from .renderer import MarkdownRenderer


@dataclass(frozen=True, slots=True)
class FileFilter:
    name: str
    extensions: tuple[str, ...]


MARKDOWN_OPEN_FILTERS: tuple[FileFilter, ...] = (
    FileFilter("Markdown", ("md", "markdown", "txt")),
    FileFilter("All files", ("*",)),
)

MARKDOWN_SAVE_FILTERS: tuple[FileFilter, ...] = (
    FileFilter("Markdown", ("md",)),
    FileFilter("Text", ("txt",)),
    FileFilter("All files", ("*",)),
)


class FileDialogs(Protocol):
    """Host-provided path pickers. ``None`` means the user cancelled."""

    def ask_open_path(self, filters: Sequence[FileFilter]) -> Optional[Path]:
        ...

    def ask_save_path(
        self, filters: Sequence[FileFilter], default_name: str
    ) -> Optional[Path]:
        ...


class NoDialogs:
    """Dialog stand-in for headless sessions: every prompt is cancelled."""

    def ask_open_path(self, filters: Sequence[FileFilter]) -> Optional[Path]:
        del filters
        return None

    def ask_save_path(
        self, filters: Sequence[FileFilter], default_name: str
    ) -> Optional[Path]:
        del filters, default_name
        return None


@dataclass(slots=True)
class Collaborators:
    files: DocumentStore = field(default_factory=DocumentStore)
    converter: PandocConverter = field(default_factory=PandocConverter)
    renderer: MarkdownRenderer = field(default_factory=MarkdownRenderer)
    printer: HtmlPrinter = field(default_factory=HtmlPrinter)
    dialogs: FileDialogs = field(default_factory=NoDialogs)


__all__ = [
    "Collaborators",
    "FileDialogs",
    "FileFilter",
    "NoDialogs",
    "MARKDOWN_OPEN_FILTERS",
    "MARKDOWN_SAVE_FILTERS",
]

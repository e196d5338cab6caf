"""External collaborators: files, conversion, rendering, printing, dialogs."""

from .collaborators import (
    MARKDOWN_OPEN_FILTERS,
    MARKDOWN_SAVE_FILTERS,
    Collaborators,
    FileDialogs,
    FileFilter,
    NoDialogs,
)
from .converter import EXPORT_FORMATS, IMPORT_FORMATS, ExternalFormat, PandocConverter
from .files import DocumentStore
from .printer import HtmlPrinter, pdf_engine_available
from .renderer import MarkdownRenderer

__all__ = [
    "Collaborators",
    "FileDialogs",
    "FileFilter",
    "NoDialogs",
    "MARKDOWN_OPEN_FILTERS",
    "MARKDOWN_SAVE_FILTERS",
    "DocumentStore",
    "PandocConverter",
    "ExternalFormat",
    "IMPORT_FORMATS",
    "EXPORT_FORMATS",
    "MarkdownRenderer",
    "HtmlPrinter",
    "pdf_engine_available",
]

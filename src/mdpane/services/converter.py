"""Format conversion through the pandoc command-line tool."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from mdpane.errors import ConversionError
from mdpane.runtime import telemetry

from .files import PathLike

IMPORT_TARGET = "markdown-raw_html-native_spans-native_divs"

# pandoc leaves these behind for super/subscript; map them to Markdown syntax
_TAG_REPLACEMENTS = (
    ("<sup>", "^"),
    ("</sup>", "^"),
    ("<sub>", "~"),
    ("</sub>", "~"),
)


@dataclass(frozen=True, slots=True)
class ExternalFormat:
    tag: str
    label: str
    extensions: tuple[str, ...]

    @property
    def default_extension(self) -> str:
        return self.extensions[0]


IMPORT_FORMATS: tuple[ExternalFormat, ...] = (
    ExternalFormat("docx", "Word", ("docx", "doc")),
    ExternalFormat("html", "HTML", ("html", "htm")),
    ExternalFormat("latex", "LaTeX", ("tex", "latex")),
    ExternalFormat("epub", "EPUB", ("epub",)),
    ExternalFormat("rst", "reStructuredText", ("rst",)),
    ExternalFormat("org", "Org Mode", ("org",)),
    ExternalFormat("odt", "LibreOffice", ("odt",)),
    ExternalFormat("csv", "CSV", ("csv",)),
    ExternalFormat("textile", "Textile", ("textile",)),
    ExternalFormat("mediawiki", "MediaWiki", ("wiki",)),
)

EXPORT_FORMATS: tuple[ExternalFormat, ...] = (
    ExternalFormat("docx", "Word", ("docx",)),
    ExternalFormat("html", "HTML", ("html",)),
    ExternalFormat("latex", "LaTeX", ("tex",)),
    ExternalFormat("epub", "EPUB", ("epub",)),
    ExternalFormat("rst", "reStructuredText", ("rst",)),
    ExternalFormat("org", "Org Mode", ("org",)),
    ExternalFormat("odt", "LibreOffice", ("odt",)),
    ExternalFormat("textile", "Textile", ("textile",)),
    ExternalFormat("mediawiki", "MediaWiki", ("wiki",)),
)


def find_format(tag: str, formats: Sequence[ExternalFormat]) -> ExternalFormat:
    for fmt in formats:
        if fmt.tag == tag:
            return fmt
    raise KeyError(f"Unsupported format '{tag}'")


def clean_imported_markdown(text: str) -> str:
    for tag, replacement in _TAG_REPLACEMENTS:
        text = text.replace(tag, replacement)
    return text


class PandocConverter:
    """Black-box converter; every failure becomes one ``ConversionError``."""

    def __init__(self, binary: str = "pandoc") -> None:
        self.binary = binary

    def _run(self, args: list[str], *, stdin: str | None, format_tag: str, path: Path) -> str:
        cmd = [self.binary, *args]
        with telemetry.span(
            "convert::pandoc",
            component="converter",
            metadata={"format": format_tag, "path": str(path)},
        ) as handle:
            try:
                completed = subprocess.run(
                    cmd,
                    input=stdin.encode("utf-8") if stdin is not None else None,
                    capture_output=True,
                    check=False,
                )
            except OSError as exc:
                handle.add_metadata("status", "missing_binary")
                raise ConversionError(
                    f"Could not run {self.binary}: {exc}. Make sure pandoc is installed.",
                    path=path,
                    format_tag=format_tag,
                ) from exc

            if completed.returncode != 0:
                stderr = completed.stderr.decode("utf-8", errors="replace").strip()
                handle.add_metadata("status", "failed")
                raise ConversionError(
                    f"Pandoc failed: {stderr}", path=path, format_tag=format_tag
                )

            try:
                return completed.stdout.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise ConversionError(
                    f"Pandoc produced invalid UTF-8: {exc}", path=path, format_tag=format_tag
                ) from exc

    def to_markdown(self, path: PathLike, format_tag: str) -> str:
        source = Path(path)
        args = [
            "-f", format_tag,
            "-t", IMPORT_TARGET,
            "--wrap=none",
            "--extract-media=.",
            str(source),
        ]
        output = self._run(args, stdin=None, format_tag=format_tag, path=source)
        return clean_imported_markdown(output)

    def from_markdown(self, text: str, path: PathLike, format_tag: str) -> None:
        target = Path(path)
        args = ["-f", "markdown", "-t", format_tag, "--wrap=none", "-o", str(target)]
        if format_tag == "pdf":
            args.append("--pdf-engine=wkhtmltopdf")
        self._run(args, stdin=text, format_tag=format_tag, path=target)


__all__ = [
    "ExternalFormat",
    "IMPORT_FORMATS",
    "EXPORT_FORMATS",
    "find_format",
    "clean_imported_markdown",
    "PandocConverter",
]

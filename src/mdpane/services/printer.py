"""Print/PDF export by handing rendered HTML to the system browser."""

from __future__ import annotations

import shutil
import tempfile
import webbrowser
from pathlib import Path
from typing import Callable, Optional

from mdpane.errors import DocumentIOError
from mdpane.runtime import telemetry

EXPORT_FILE_NAME = "mdpane_export.html"

PRINT_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>body {{ max-width: 48rem; margin: 2rem auto; font-family: sans-serif; }}</style>
</head>
<body onload="window.print()">
{body}
</body>
</html>
"""


def pdf_engine_available(engine: str = "wkhtmltopdf") -> bool:
    return shutil.which(engine) is not None


class HtmlPrinter:
    def __init__(
        self,
        *,
        directory: Optional[Path] = None,
        opener: Optional[Callable[[str], object]] = None,
    ) -> None:
        self.directory = directory or Path(tempfile.gettempdir())
        self._opener = opener or webbrowser.open

    def export_to_temp(self, body: str, *, title: str = "mdpane") -> Path:
        path = self.directory / EXPORT_FILE_NAME
        try:
            path.write_text(PRINT_TEMPLATE.format(title=title, body=body), encoding="utf-8")
        except OSError as exc:
            raise DocumentIOError(f"Cannot write temporary file: {exc}", path=path) from exc
        return path

    def print_html(self, body: str, *, title: str = "mdpane") -> Path:
        path = self.export_to_temp(body, title=title)
        telemetry.record_event("printer.open", data={"path": str(path)})
        self._opener(path.as_uri())
        return path


__all__ = ["HtmlPrinter", "pdf_engine_available", "EXPORT_FILE_NAME"]

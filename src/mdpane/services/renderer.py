"""Markdown to HTML rendering for the preview pane."""

from __future__ import annotations

import html

from markdown_it import MarkdownIt

from mdpane.runtime import telemetry


class MarkdownRenderer:
    """CommonMark renderer with tables, strikethrough and inline HTML.

    ``render`` never raises: if the parser fails the source is shown escaped
    in a ``<pre>`` block.
    """

    def __init__(self) -> None:
        self._md = (
            MarkdownIt("commonmark", {"html": True, "typographer": True})
            .enable("table")
            .enable("strikethrough")
        )
        self._last_text: str | None = None
        self._last_html = ""

    def render(self, text: str) -> str:
        if text == self._last_text:
            return self._last_html
        try:
            rendered = self._md.render(text)
        except Exception as exc:  # renderer must stay total
            telemetry.record_event(
                "renderer.failed", level="warning", data={"error": str(exc)}
            )
            rendered = f"<pre>{html.escape(text)}</pre>"
        self._last_text = text
        self._last_html = rendered
        return rendered


__all__ = ["MarkdownRenderer"]

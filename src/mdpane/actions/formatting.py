"""Inline markup commands: toggles plus link and image templates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from mdpane.editing import MarkupKind, insert_image, insert_link, toggle_markup

from .base import CommandResult, SessionContext

if TYPE_CHECKING:
    from mdpane.keymaps import ResolutionMatch


def toggle_inline(
    context: SessionContext,
    match: Optional["ResolutionMatch"],
    *,
    kind: MarkupKind,
) -> CommandResult:
    del match
    buffer = context.buffer
    result = toggle_markup(buffer.text, buffer.selection, kind)
    return context.apply_edit(result, label=f"toggle_{kind.value}")


def link(context: SessionContext, match: Optional["ResolutionMatch"]) -> CommandResult:
    del match
    buffer = context.buffer
    return context.apply_edit(insert_link(buffer.text, buffer.selection), label="insert_link")


def image(context: SessionContext, match: Optional["ResolutionMatch"]) -> CommandResult:
    del match
    buffer = context.buffer
    return context.apply_edit(insert_image(buffer.text, buffer.selection), label="insert_image")


__all__ = ["toggle_inline", "link", "image"]

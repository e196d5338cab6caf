"""Heading commands acting on the line that holds the caret."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from mdpane.editing import set_heading_level, shift_heading_level

from .base import CommandResult, SessionContext, noop

if TYPE_CHECKING:
    from mdpane.keymaps import ResolutionMatch


def set_heading(
    context: SessionContext,
    match: Optional["ResolutionMatch"],
    *,
    level: int,
) -> CommandResult:
    del match
    buffer = context.buffer
    result = set_heading_level(buffer.text, buffer.selection.start, level)
    return context.apply_edit(result, label=f"heading_{level}")


def shift_heading(
    context: SessionContext,
    match: Optional["ResolutionMatch"],
    *,
    delta: int,
) -> CommandResult:
    del match
    buffer = context.buffer
    result = shift_heading_level(buffer.text, buffer.selection.start, delta)
    if result is None:
        return noop("heading_unchanged")
    label = "raise_heading" if delta < 0 else "lower_heading"
    return context.apply_edit(result, label=label)


__all__ = ["set_heading", "shift_heading"]

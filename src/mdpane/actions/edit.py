"""History and clipboard commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from mdpane.buffer import Selection
from mdpane.editing import EditResult

from .base import CommandResult, SessionContext, noop

if TYPE_CHECKING:
    from mdpane.keymaps import ResolutionMatch


def undo(context: SessionContext, match: Optional["ResolutionMatch"]) -> CommandResult:
    del match
    delta = context.buffer.undo()
    if delta is None:
        return noop("nothing_to_undo")
    context.publish(delta, selection=delta.selection)
    return CommandResult(consumed=True, message="undo")


def redo(context: SessionContext, match: Optional["ResolutionMatch"]) -> CommandResult:
    del match
    delta = context.buffer.redo()
    if delta is None:
        return noop("nothing_to_redo")
    context.publish(delta, selection=delta.selection)
    return CommandResult(consumed=True, message="redo")


def cut(context: SessionContext, match: Optional["ResolutionMatch"]) -> CommandResult:
    del match
    buffer = context.buffer
    selection = buffer.selection
    if selection.is_caret:
        return noop("empty_selection")
    buffer.clipboard.set(buffer.selected_text())
    text = buffer.text
    result = EditResult(
        text[: selection.start] + text[selection.end :],
        Selection.caret(selection.start),
    )
    return context.apply_edit(result, label="cut")


def copy(context: SessionContext, match: Optional["ResolutionMatch"]) -> CommandResult:
    del match
    buffer = context.buffer
    if buffer.selection.is_caret:
        return noop("empty_selection")
    buffer.clipboard.set(buffer.selected_text())
    return CommandResult(consumed=True, message="copy")


def paste(context: SessionContext, match: Optional["ResolutionMatch"]) -> CommandResult:
    del match
    buffer = context.buffer
    clip = buffer.clipboard.get()
    if not clip:
        return noop("clipboard_empty")
    selection = buffer.selection
    text = buffer.text
    result = EditResult(
        text[: selection.start] + clip + text[selection.end :],
        Selection.caret(selection.start + len(clip)),
    )
    return context.apply_edit(result, label="paste")


__all__ = ["undo", "redo", "cut", "copy", "paste"]

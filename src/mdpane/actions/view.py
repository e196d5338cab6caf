"""Pane layout commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .base import VIEW_CHANGED, VIEW_MODES, CommandResult, SessionContext, noop

if TYPE_CHECKING:
    from mdpane.keymaps import ResolutionMatch


def set_view_mode(
    context: SessionContext,
    match: Optional["ResolutionMatch"],
    *,
    mode: str,
) -> CommandResult:
    del match
    if mode not in VIEW_MODES:
        raise ValueError(f"Unknown view mode '{mode}'")
    if context.view.mode == mode:
        return noop("view_unchanged")
    context.view.mode = mode
    context.bus.emit(VIEW_CHANGED, context.view)
    return CommandResult(consumed=True, message=f"view_{mode}")


def toggle_sidebar(context: SessionContext, match: Optional["ResolutionMatch"]) -> CommandResult:
    del match
    context.view.sidebar_open = not context.view.sidebar_open
    context.bus.emit(VIEW_CHANGED, context.view)
    state = "open" if context.view.sidebar_open else "closed"
    return CommandResult(consumed=True, message=f"sidebar_{state}")


__all__ = ["set_view_mode", "toggle_sidebar"]

"""Core command implementations with no document effect."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .base import CommandResult, SessionContext

if TYPE_CHECKING:
    from mdpane.keymaps import ResolutionMatch


def noop_action(context: SessionContext, match: Optional["ResolutionMatch"]) -> CommandResult:
    del context, match
    return CommandResult(consumed=True, status="noop")


__all__ = ["noop_action"]

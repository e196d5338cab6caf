"""Editor commands invoked through keymaps, menus, or by id."""

from . import core, edit, files, formatting, paragraph, view
from .base import CommandResult, EventBus, SessionContext, ViewState

__all__ = [
    "core",
    "edit",
    "files",
    "formatting",
    "paragraph",
    "view",
    "CommandResult",
    "EventBus",
    "SessionContext",
    "ViewState",
]

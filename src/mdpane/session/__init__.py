"""Editor session wiring the engines, keymaps, and collaborators together."""

from mdpane.actions.base import CommandResult, EventBus, SessionContext, ViewState

from .keymap_helpers import KeyInput, key_to_token
from .session import EditorSession

__all__ = [
    "EditorSession",
    "SessionContext",
    "CommandResult",
    "EventBus",
    "ViewState",
    "KeyInput",
    "key_to_token",
]

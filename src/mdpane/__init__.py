"""Markdown text-manipulation and history engine with dual-pane viewing."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "editing",
    "keymaps",
    "runtime",
    "services",
    "session",
    "view",
]

__version__ = "0.1.0"

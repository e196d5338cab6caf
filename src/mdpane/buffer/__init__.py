"""Document, selection, clipboard, and undo/redo data structures."""

from .buffer import Buffer, BufferDelta, Transaction
from .document import Document
from .history import HistoryManager, PendingEdit
from .registers import ClipboardBank
from .state import BufferState, Selection
from .sync import BufferMirror, SelectionValidationError
from .validation import ensure_offset, ensure_selection

__all__ = [
    "Buffer",
    "BufferDelta",
    "Transaction",
    "Document",
    "HistoryManager",
    "PendingEdit",
    "ClipboardBank",
    "BufferState",
    "Selection",
    "BufferMirror",
    "SelectionValidationError",
    "ensure_offset",
    "ensure_selection",
]

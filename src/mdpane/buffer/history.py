"""Coalesced undo/redo history over full-text snapshots.

Direct commands commit immediately. Continuous typing is coalesced into a
single entry: the first keystroke of a burst remembers the pre-burst snapshot
and arms a debounce deadline; further keystrokes push the deadline out. When
the deadline passes (``process_timeouts``), the pre-burst snapshot is pushed
onto the undo stack.

The manager never owns the document. Operations that change what the user
sees return the text to display, and the caller installs it.
"""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Optional

from mdpane.runtime import telemetry
from mdpane.runtime.settings import DEFAULT_DEBOUNCE_MS, DEFAULT_HISTORY_DEPTH

Clock = Callable[[], float]


@dataclass(slots=True)
class PendingEdit:
    """The single outstanding typing burst."""

    baseline: str
    latest: str
    deadline: float
    generation: int


class HistoryManager:
    """Bounded undo/redo stacks with debounced commits for typing bursts."""

    def __init__(
        self,
        initial_text: str = "",
        *,
        max_depth: int = DEFAULT_HISTORY_DEPTH,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        clock: Clock = time.monotonic,
    ) -> None:
        if max_depth <= 0:
            raise ValueError("max_depth must be positive")
        if debounce_ms < 0:
            raise ValueError("debounce_ms cannot be negative")
        self.max_depth = max_depth
        self.debounce_ms = debounce_ms
        self._clock = clock
        self._undo: Deque[str] = deque(maxlen=max_depth)
        self._redo: Deque[str] = deque(maxlen=max_depth)
        self._last_committed = initial_text
        self._pending: Optional[PendingEdit] = None
        self._generation = 0

    @property
    def last_committed(self) -> str:
        return self._last_committed

    @property
    def pending(self) -> Optional[PendingEdit]:
        return self._pending

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def undo_entries(self) -> tuple[str, ...]:
        return tuple(self._undo)

    def redo_entries(self) -> tuple[str, ...]:
        return tuple(self._redo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def commit(self, text: str) -> None:
        """Record a discrete command whose result is ``text``."""

        if self._pending is not None:
            self._commit_pending(self._pending)
        self._push(self._undo, self._last_committed)
        self._redo.clear()
        self._last_committed = text
        telemetry.record_event(
            "history.commit",
            level="debug",
            data={"undo_depth": len(self._undo)},
        )

    def record_edit(self, text: str) -> None:
        """Register a keystroke that produced ``text``."""

        deadline = self._clock() + self.debounce_ms / 1000.0
        if self._pending is None:
            self._generation += 1
            self._pending = PendingEdit(
                baseline=self._last_committed,
                latest=text,
                deadline=deadline,
                generation=self._generation,
            )
            self._redo.clear()
            return
        self._pending.latest = text
        self._pending.deadline = deadline

    def process_timeouts(self) -> bool:
        """Commit the pending burst if its deadline has passed."""

        pending = self._pending
        if pending is None or pending.deadline > self._clock():
            return False
        self._commit_pending(pending)
        return True

    def flush(self) -> bool:
        """Commit the pending burst immediately, regardless of its deadline."""

        if self._pending is None:
            return False
        self._commit_pending(self._pending)
        return True

    def undo(self, current_text: str) -> Optional[str]:
        """Step back; returns the text to display or ``None`` when a no-op."""

        if self._pending is not None:
            baseline = self._pending.baseline
            self._pending = None
            self._push(self._redo, current_text)
            telemetry.record_event(
                "history.undo_pending", level="debug", data={"redo_depth": len(self._redo)}
            )
            return baseline

        if not self._undo:
            return None
        previous = self._undo.pop()
        self._push(self._redo, self._last_committed)
        self._last_committed = previous
        telemetry.record_event(
            "history.undo",
            level="debug",
            data={"undo_depth": len(self._undo), "redo_depth": len(self._redo)},
        )
        return previous

    def redo(self) -> Optional[str]:
        if not self._redo:
            return None
        following = self._redo.pop()
        self._push(self._undo, self._last_committed)
        self._last_committed = following
        telemetry.record_event(
            "history.redo",
            level="debug",
            data={"undo_depth": len(self._undo), "redo_depth": len(self._redo)},
        )
        return following

    def reset(self, text: str) -> None:
        """Forget everything; used when a brand-new document is loaded."""

        self._pending = None
        self._undo.clear()
        self._redo.clear()
        self._last_committed = text

    def _commit_pending(self, pending: PendingEdit) -> None:
        if self._pending is None or self._pending.generation != pending.generation:
            return
        self._pending = None
        self._push(self._undo, pending.baseline)
        self._redo.clear()
        self._last_committed = pending.latest
        telemetry.record_event(
            "history.burst_commit",
            level="debug",
            data={"undo_depth": len(self._undo)},
        )

    @staticmethod
    def _push(stack: Deque[str], snapshot: str) -> None:
        if stack and stack[-1] == snapshot:
            return
        stack.append(snapshot)


__all__ = ["HistoryManager", "PendingEdit", "Clock"]

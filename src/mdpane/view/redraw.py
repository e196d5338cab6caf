"""Callbacks that must run only after the host has redrawn."""

from __future__ import annotations

from collections import deque
from typing import Callable, Deque

from mdpane.runtime import telemetry

RedrawCallback = Callable[[], None]


class RedrawQueue:
    """FIFO of callbacks released one redraw tick at a time.

    Hosts call ``flush`` once the surface has absorbed the latest text. Only
    callbacks queued before the flush began run; anything they queue waits
    for the following tick.
    """

    def __init__(self) -> None:
        self._queue: Deque[RedrawCallback] = deque()
        self.ticks = 0

    def defer(self, callback: RedrawCallback) -> None:
        self._queue.append(callback)

    def __len__(self) -> int:
        return len(self._queue)

    def flush(self) -> int:
        self.ticks += 1
        batch = len(self._queue)
        for _ in range(batch):
            callback = self._queue.popleft()
            callback()
        if batch:
            telemetry.record_event(
                "redraw.flush", level="debug", data={"callbacks": batch, "tick": self.ticks}
            )
        return batch


__all__ = ["RedrawQueue", "RedrawCallback"]

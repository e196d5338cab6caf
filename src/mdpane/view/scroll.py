"""Proportional scroll synchronization between the editor and the preview."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from mdpane.runtime import telemetry

from .redraw import RedrawQueue

EDITOR = "editor"
PREVIEW = "preview"


@dataclass(slots=True)
class ScrollSurface:
    """Scroll metrics of one pane, in host units (pixels, rows, ...)."""

    name: str
    scroll_top: float = 0.0
    scroll_height: float = 0.0
    viewport_height: float = 0.0

    @property
    def max_scroll(self) -> float:
        return max(0.0, self.scroll_height - self.viewport_height)

    def ratio(self) -> float:
        if self.max_scroll <= 0:
            return 0.0
        return self.scroll_top / self.max_scroll

    def scroll_to_ratio(self, ratio: float) -> float:
        self.scroll_top = ratio * self.max_scroll
        return self.scroll_top


ScrollApplier = Callable[[ScrollSurface], None]


class ScrollSynchronizer:
    """Mirrors scroll ratios across two surfaces without feedback loops.

    The surface that starts a sync owns the guard until the next redraw tick.
    Scroll events from the other surface during that window are the echo of
    our own write and are dropped.
    """

    def __init__(
        self,
        redraw: RedrawQueue,
        *,
        editor: Optional[ScrollSurface] = None,
        preview: Optional[ScrollSurface] = None,
        apply_scroll: Optional[ScrollApplier] = None,
    ) -> None:
        self._redraw = redraw
        self._surfaces: Dict[str, ScrollSurface] = {
            EDITOR: editor or ScrollSurface(EDITOR),
            PREVIEW: preview or ScrollSurface(PREVIEW),
        }
        self._apply_scroll = apply_scroll
        self._active: Optional[str] = None
        self._release_scheduled = False
        self.sync_count = 0

    @property
    def active(self) -> Optional[str]:
        return self._active

    def surface(self, name: str) -> ScrollSurface:
        try:
            return self._surfaces[name]
        except KeyError as exc:
            raise KeyError(f"Unknown scroll surface '{name}'") from exc

    def update_metrics(
        self,
        name: str,
        *,
        scroll_height: Optional[float] = None,
        viewport_height: Optional[float] = None,
    ) -> None:
        surface = self.surface(name)
        if scroll_height is not None:
            surface.scroll_height = scroll_height
        if viewport_height is not None:
            surface.viewport_height = viewport_height

    def report_scroll(self, name: str, scroll_top: float) -> bool:
        """Record a scroll event from ``name`` and mirror it if allowed."""

        self.surface(name).scroll_top = scroll_top
        return self.on_scroll(name)

    def on_scroll(self, source: str) -> bool:
        if self._active is not None and self._active != source:
            return False
        origin = self.surface(source)
        target = self.surface(PREVIEW if source == EDITOR else EDITOR)
        self._active = source
        target.scroll_to_ratio(origin.ratio())
        self.sync_count += 1
        telemetry.record_event(
            "scroll.sync",
            level="debug",
            data={"source": source, "ratio": round(origin.ratio(), 4)},
        )
        if not self._release_scheduled:
            self._release_scheduled = True
            self._redraw.defer(self._release)
        if self._apply_scroll is not None:
            self._apply_scroll(target)
        return True

    def _release(self) -> None:
        self._active = None
        self._release_scheduled = False


__all__ = ["ScrollSurface", "ScrollSynchronizer", "ScrollApplier", "EDITOR", "PREVIEW"]

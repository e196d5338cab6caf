"""View-side coordination: redraw ordering and scroll sync."""

from .redraw import RedrawQueue
from .scroll import EDITOR, PREVIEW, ScrollSurface, ScrollSynchronizer

__all__ = ["RedrawQueue", "ScrollSurface", "ScrollSynchronizer", "EDITOR", "PREVIEW"]

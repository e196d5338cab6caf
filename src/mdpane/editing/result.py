"""Value returned by every text-transforming engine operation."""

from __future__ import annotations

from dataclasses import dataclass

from mdpane.buffer.state import Selection


@dataclass(frozen=True, slots=True)
class EditResult:
    """Replacement document text plus the selection to restore after redraw."""

    text: str
    selection: Selection

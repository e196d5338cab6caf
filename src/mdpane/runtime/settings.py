"""Editor settings resolved from ``MDPANE_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

from .telemetry import ENV_PREFIX, record_event

DEFAULT_HISTORY_DEPTH = 200
DEFAULT_DEBOUNCE_MS = 400
DEFAULT_LINE_HEIGHT = 22.4

WELCOME_DOCUMENT = """# Welcome to mdpane

This is a **Markdown editor** with a split view.

## Features

- Live editing
- Instant preview
- Full Markdown syntax

### Code

```python
def hello():
    print("Hello, Markdown!")
```

### Task list

- [x] Build the editor
- [x] Add the split view
- [x] Add the view buttons
- [x] File > Open

> Start typing to see the magic happen!

---

Made with **Python**
"""


def _read_int(env: Mapping[str, str], name: str, fallback: int) -> int:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None:
        return fallback
    try:
        value = int(raw)
    except ValueError:
        record_event(
            "settings.invalid",
            level="warning",
            data={"name": name, "value": raw},
        )
        return fallback
    return value if value > 0 else fallback


def _read_float(env: Mapping[str, str], name: str, fallback: float) -> float:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None:
        return fallback
    try:
        value = float(raw)
    except ValueError:
        record_event(
            "settings.invalid",
            level="warning",
            data={"name": name, "value": raw},
        )
        return fallback
    return value if value > 0 else fallback


@dataclass(frozen=True, slots=True)
class EditorSettings:
    """Tunables shared by the session, history, and collaborators."""

    history_depth: int = DEFAULT_HISTORY_DEPTH
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    line_height: float = DEFAULT_LINE_HEIGHT
    pandoc_binary: str = "pandoc"
    default_document: Optional[Path] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "EditorSettings":
        source = os.environ if env is None else env
        default_document = source.get(f"{ENV_PREFIX}DEFAULT_DOCUMENT")
        return cls(
            history_depth=_read_int(source, "HISTORY_DEPTH", DEFAULT_HISTORY_DEPTH),
            debounce_ms=_read_int(source, "DEBOUNCE_MS", DEFAULT_DEBOUNCE_MS),
            line_height=_read_float(source, "LINE_HEIGHT", DEFAULT_LINE_HEIGHT),
            pandoc_binary=source.get(f"{ENV_PREFIX}PANDOC") or "pandoc",
            default_document=Path(default_document) if default_document else None,
        )

    def with_overrides(self, **changes: object) -> "EditorSettings":
        cleaned = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **cleaned)

    def initial_text(self) -> str:
        """Text a fresh session starts with."""

        if self.default_document is None:
            return WELCOME_DOCUMENT
        try:
            return self.default_document.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            record_event(
                "settings.default_document_unreadable",
                level="warning",
                data={"path": str(self.default_document), "error": str(exc)},
            )
            return WELCOME_DOCUMENT


__all__ = [
    "EditorSettings",
    "WELCOME_DOCUMENT",
    "DEFAULT_HISTORY_DEPTH",
    "DEFAULT_DEBOUNCE_MS",
    "DEFAULT_LINE_HEIGHT",
]

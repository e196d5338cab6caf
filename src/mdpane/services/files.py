"""UTF-8 document persistence."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from mdpane.errors import DocumentIOError
from mdpane.runtime import telemetry

PathLike = Union[str, Path]


class DocumentStore:
    def __init__(self, *, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def read(self, path: PathLike) -> str:
        target = Path(path)
        with telemetry.span("files::read", component="files", metadata={"path": str(target)}):
            try:
                return target.read_text(encoding=self.encoding)
            except FileNotFoundError as exc:
                raise DocumentIOError(f"File not found: {target}", path=target) from exc
            except PermissionError as exc:
                raise DocumentIOError(f"Permission denied: {target}", path=target) from exc
            except UnicodeDecodeError as exc:
                raise DocumentIOError(
                    f"Cannot decode {target} as {self.encoding}", path=target
                ) from exc
            except OSError as exc:
                raise DocumentIOError(f"Cannot read {target}: {exc}", path=target) from exc

    def write(self, path: PathLike, text: str) -> None:
        target = Path(path)
        with telemetry.span("files::write", component="files", metadata={"path": str(target)}):
            try:
                target.write_text(text, encoding=self.encoding)
            except PermissionError as exc:
                raise DocumentIOError(f"Permission denied: {target}", path=target) from exc
            except UnicodeEncodeError as exc:
                raise DocumentIOError(
                    f"Cannot encode document as {self.encoding}", path=target
                ) from exc
            except OSError as exc:
                raise DocumentIOError(f"Cannot write {target}: {exc}", path=target) from exc


__all__ = ["DocumentStore", "PathLike"]

"""Plain-text exporter writing one link per line."""

from __future__ import annotations

from pathlib import Path

from .base import BaseExporter


class TextFileExporter(BaseExporter):
    """Write links to ``path``, replacing any previous content."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.path.open("w", encoding="utf-8", newline="\n")
        self.written = 0

    def export(self, record: str) -> None:
        self._file.write(record)
        self._file.write("\n")
        self.written += 1

    def flush(self) -> None:
        self._file.flush()

    def close(self) -> None:
        if not self._file.closed:
            self._file.flush()
            self._file.close()


__all__ = ["TextFileExporter"]

"""Exporter Service Provider Interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable


class BaseExporter(ABC):
    """Uniform contract for persisting resolved archive links."""

    @abstractmethod
    def export(self, record: str) -> None:
        """Persist a single link."""

    def export_many(self, records: Iterable[str]) -> None:
        for record in records:
            self.export(record)

    @abstractmethod
    def flush(self) -> None:
        """Flush buffered data to destination."""

    @abstractmethod
    def close(self) -> None:
        """Release underlying resources."""

    def __enter__(self) -> "BaseExporter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["BaseExporter"]

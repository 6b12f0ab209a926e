"""Value types exchanged between the fetcher, worker pool and aggregator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

ARCHIVE_LINK_TEMPLATE = "http://web.archive.org/web/{timestamp}/{original}"
NOT_ENOUGH_FIELDS = "could not determine (not enough fields in snapshot data)"
UNPARSABLE_FIELDS = "could not determine (error parsing snapshot data)"


class OutcomeStatus(str, Enum):
    """Exhaustive classification of a single lookup."""

    FOUND = "found"
    NOT_FOUND = "not found"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class SnapshotEntry:
    """One CDX capture row; fields other than timestamp/original are opaque."""

    FIELD_NAMES: ClassVar[tuple[str, ...]] = (
        "urlkey",
        "timestamp",
        "original",
        "mimetype",
        "statuscode",
        "digest",
        "length",
    )

    fields: tuple[Any, ...]

    @property
    def timestamp(self) -> Any:
        return self.fields[1] if len(self.fields) > 1 else None

    @property
    def original(self) -> Any:
        return self.fields[2] if len(self.fields) > 2 else None

    @property
    def is_well_formed(self) -> bool:
        return isinstance(self.timestamp, str) and isinstance(self.original, str)

    def archive_link(self) -> str:
        """Return the Wayback link, or a readable sentinel when the row is malformed."""

        if len(self.fields) <= 2:
            return NOT_ENOUGH_FIELDS
        if not self.is_well_formed:
            return UNPARSABLE_FIELDS
        return ARCHIVE_LINK_TEMPLATE.format(timestamp=self.timestamp, original=self.original)

    def as_dict(self) -> dict[str, Any]:
        return dict(zip(self.FIELD_NAMES, self.fields))


@dataclass(frozen=True, slots=True)
class Outcome:
    """Result of looking up one URL. Exactly one is produced per job."""

    url: str
    status: OutcomeStatus
    snapshot_count: int = 0
    resolved_url: str = ""
    failure_detail: str | None = None

    def __post_init__(self) -> None:
        if self.status is OutcomeStatus.FOUND:
            if self.snapshot_count <= 0:
                raise ValueError("found outcome requires a positive snapshot_count")
            if not self.resolved_url:
                raise ValueError("found outcome requires resolved_url")
        else:
            if self.snapshot_count != 0:
                raise ValueError(f"{self.status.value} outcome must have snapshot_count == 0")
            if self.resolved_url:
                raise ValueError(f"{self.status.value} outcome must not carry resolved_url")
        if (self.status is OutcomeStatus.ERROR) != (self.failure_detail is not None):
            raise ValueError("failure_detail must be set if and only if status is error")

    @classmethod
    def found(cls, url: str, snapshot_count: int, resolved_url: str) -> "Outcome":
        return cls(url, OutcomeStatus.FOUND, snapshot_count, resolved_url)

    @classmethod
    def not_found(cls, url: str) -> "Outcome":
        return cls(url, OutcomeStatus.NOT_FOUND)

    @classmethod
    def error(cls, url: str, detail: str) -> "Outcome":
        return cls(url, OutcomeStatus.ERROR, failure_detail=detail)


__all__ = [
    "ARCHIVE_LINK_TEMPLATE",
    "NOT_ENOUGH_FIELDS",
    "Outcome",
    "OutcomeStatus",
    "SnapshotEntry",
    "UNPARSABLE_FIELDS",
]

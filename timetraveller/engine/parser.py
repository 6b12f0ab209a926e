"""CDX payload decoding and snapshot selection."""

from __future__ import annotations

import json
from typing import Sequence

from ..config import SelectionMode
from .models import SnapshotEntry


class PayloadDecodeError(ValueError):
    """The index answered 200 with a body that is not a CDX row array."""


class SnapshotParser:
    """Turn CDX ``output=json`` bodies into snapshot entries."""

    def parse_rows(self, body: str) -> list[SnapshotEntry]:
        """Return the data rows of ``body``; the header row is dropped.

        An empty body, ``null``, ``[]`` or a header-only array all mean the
        archive holds no matching capture and yield an empty list.
        """

        if not body.strip():
            return []
        try:
            rows = json.loads(body)
        except json.JSONDecodeError as exc:
            raise PayloadDecodeError(f"error decoding JSON response: {exc}") from exc
        if rows is None:
            return []
        # A null row decodes to an entry with no fields.
        if not isinstance(rows, list) or any(
            row is not None and not isinstance(row, list) for row in rows
        ):
            raise PayloadDecodeError(
                "error decoding JSON response: expected an array of arrays, "
                f"got {type(rows).__name__}"
            )
        if len(rows) <= 1:
            return []
        return [SnapshotEntry(tuple(row or ())) for row in rows[1:]]

    @staticmethod
    def select(entries: Sequence[SnapshotEntry], mode: SelectionMode) -> SnapshotEntry | None:
        if not entries:
            return None
        if mode is SelectionMode.LATEST:
            return entries[-1]
        return entries[0]

    @staticmethod
    def is_chronological(entries: Sequence[SnapshotEntry]) -> bool:
        """Whether string timestamps never decrease; malformed rows are ignored."""

        stamps = [entry.timestamp for entry in entries if isinstance(entry.timestamp, str)]
        return all(earlier <= later for earlier, later in zip(stamps, stamps[1:]))


__all__ = ["PayloadDecodeError", "SnapshotParser"]

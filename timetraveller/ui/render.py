"""Console rendering of lookup outcomes."""

from __future__ import annotations

from threading import Lock

from rich.console import Console
from rich.text import Text

from ..config import SelectionMode
from ..engine.models import Outcome, OutcomeStatus

_STYLES = {
    OutcomeStatus.FOUND: "green",
    OutcomeStatus.NOT_FOUND: "yellow",
    OutcomeStatus.ERROR: "red",
}


def format_outcome(outcome: Outcome, mode: SelectionMode = SelectionMode.OLDEST) -> str:
    if outcome.status is OutcomeStatus.FOUND:
        return (
            f"[+] {outcome.url} - Snapshots: {outcome.snapshot_count} - "
            f"{mode.label}: {outcome.resolved_url}"
        )
    if outcome.status is OutcomeStatus.NOT_FOUND:
        return f"[-] {outcome.url}"
    return f"[!] {outcome.url} - {outcome.failure_detail}"


class OutcomeRenderer:
    """Print one coloured line per outcome."""

    def __init__(
        self,
        mode: SelectionMode = SelectionMode.OLDEST,
        console: Console | None = None,
    ) -> None:
        self.mode = mode
        self.console = console or Console(highlight=False, soft_wrap=True)
        self._lock = Lock()

    def __call__(self, outcome: Outcome) -> None:
        line = Text(format_outcome(outcome, self.mode), style=_STYLES[outcome.status])
        with self._lock:
            self.console.print(line)


__all__ = ["OutcomeRenderer", "format_outcome"]

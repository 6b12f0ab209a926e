"""Fan-in of worker outcomes: filtering, rendering and link collection."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Iterable

from .models import Outcome, OutcomeStatus

Renderer = Callable[[Outcome], None]


@dataclass(slots=True)
class AggregationResult:
    found_urls: list[str] = field(default_factory=list)
    counts: Counter = field(default_factory=Counter)
    rendered: int = 0

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def summary(self) -> dict[str, int]:
        return {
            "found": self.counts[OutcomeStatus.FOUND],
            "not_found": self.counts[OutcomeStatus.NOT_FOUND],
            "error": self.counts[OutcomeStatus.ERROR],
            "total": self.total,
        }


class Aggregator:
    """Consume outcomes in arrival order and hand them to the renderer."""

    def __init__(self, renderer: Renderer | None = None, hide_failures: bool = False) -> None:
        self.renderer = renderer
        self.hide_failures = hide_failures

    def consume(self, outcomes: Iterable[Outcome]) -> AggregationResult:
        result = AggregationResult()
        for outcome in outcomes:
            self.handle(outcome, result)
        return result

    def handle(self, outcome: Outcome, result: AggregationResult) -> None:
        result.counts[outcome.status] += 1
        # Links are collected even when rendering is filtered.
        if outcome.status is OutcomeStatus.FOUND:
            result.found_urls.append(outcome.resolved_url)
        if self.hide_failures and outcome.status is not OutcomeStatus.FOUND:
            return
        if self.renderer is not None:
            self.renderer(outcome)
        result.rendered += 1


__all__ = ["AggregationResult", "Aggregator", "Renderer"]

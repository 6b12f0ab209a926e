"""Lookup orchestrator wiring fetcher, worker pool, aggregator and exporter."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Iterable

import httpx
import structlog

from .config import LookupSettings
from .engine import AggregationResult, Aggregator, SnapshotFetcher, WorkerPool
from .engine.aggregator import Renderer
from .engine.exporter import BaseExporter, TextFileExporter
from .engine.fetcher import Sleeper


class LookupOrchestrator:
    """Run one batch of lookups from URL list to rendered lines and saved links."""

    def __init__(
        self,
        settings: LookupSettings,
        renderer: Renderer | None = None,
        client: httpx.Client | None = None,
        sleeper: Sleeper = time.sleep,
    ) -> None:
        self.settings = settings
        self.renderer = renderer
        self.client = client
        self.sleeper = sleeper
        self.logger = structlog.get_logger("timetraveller").bind(component="orchestrator")

    def run(self, urls: Iterable[str], output: Path | None = None) -> AggregationResult:
        jobs = list(urls)
        started = time.monotonic()
        fetcher = SnapshotFetcher(self.settings, client=self.client, sleeper=self.sleeper)
        try:
            pool = WorkerPool(
                fetcher,
                workers=self.settings.workers,
                delay=self.settings.delay,
                sleeper=self.sleeper,
            )
            aggregator = Aggregator(self.renderer, hide_failures=self.settings.hide_failures)
            result = aggregator.consume(pool.run(jobs))
        finally:
            fetcher.close()

        if output is not None:
            with self._create_exporter(output) as exporter:
                exporter.export_many(result.found_urls)
                exporter.flush()

        self.logger.info(
            "lookup_finished",
            submitted=len(jobs),
            elapsed=round(time.monotonic() - started, 3),
            output=str(output) if output else None,
            **result.summary(),
        )
        return result

    def _create_exporter(self, output: Path) -> BaseExporter:
        return TextFileExporter(output)


__all__ = ["LookupOrchestrator"]

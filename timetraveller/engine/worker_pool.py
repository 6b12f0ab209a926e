"""Fixed-size thread pool draining a shared job queue."""

from __future__ import annotations

import queue
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Iterator, Protocol

import structlog

from .models import Outcome

_WORKER_DONE = object()


class OutcomeSource(Protocol):
    def fetch(self, url: str) -> Outcome:
        """Look up one URL."""


class WorkerPool:
    """Run ``workers`` threads that each fetch URLs until the queue is empty.

    ``delay`` is a per-worker pause after every job, not a global rate limit.
    """

    def __init__(
        self,
        fetcher: OutcomeSource,
        workers: int,
        delay: float = 0.0,
        sleeper=time.sleep,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be >= 1")
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self.fetcher = fetcher
        self.workers = workers
        self.delay = delay
        self._sleep = sleeper
        self.logger = logger or structlog.get_logger("timetraveller.worker_pool")

    def run(self, urls: Iterable[str]) -> Iterator[Outcome]:
        """Yield one outcome per URL in completion order."""

        jobs: queue.Queue[str] = queue.Queue()
        for url in urls:
            jobs.put(url)
        worker_count = min(self.workers, jobs.qsize())
        if worker_count == 0:
            return
        results: queue.Queue[object] = queue.Queue()
        with ThreadPoolExecutor(max_workers=worker_count, thread_name_prefix="lookup") as executor:
            for worker_id in range(1, worker_count + 1):
                executor.submit(self._work, worker_id, jobs, results)
            finished = 0
            while finished < worker_count:
                item = results.get()
                if item is _WORKER_DONE:
                    finished += 1
                    continue
                yield item  # type: ignore[misc]

    def _work(self, worker_id: int, jobs: queue.Queue[str], results: queue.Queue[object]) -> None:
        log = self.logger.bind(worker=worker_id)
        try:
            while True:
                try:
                    url = jobs.get_nowait()
                except queue.Empty:
                    break
                try:
                    outcome = self.fetcher.fetch(url)
                except Exception as exc:  # noqa: BLE001
                    log.error("worker_unexpected_error", url=url, error=str(exc), exc_info=True)
                    outcome = Outcome.error(url, f"unexpected error: {exc}")
                results.put(outcome)
                if self.delay > 0:
                    self._sleep(self.delay)
        finally:
            results.put(_WORKER_DONE)


__all__ = ["OutcomeSource", "WorkerPool"]

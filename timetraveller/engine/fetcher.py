"""CDX index lookups with retry and exponential backoff."""

from __future__ import annotations

import time
from typing import Callable

import httpx
import structlog

from ..config import LookupSettings
from .models import Outcome
from .parser import PayloadDecodeError, SnapshotParser
from .retry import BackoffPolicy, Classification, classify_response

Sleeper = Callable[[float], None]


class SnapshotFetcher:
    """Look up one URL against the archive index and classify the result."""

    def __init__(
        self,
        settings: LookupSettings,
        client: httpx.Client | None = None,
        sleeper: Sleeper = time.sleep,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.settings = settings
        self.policy = BackoffPolicy(settings.retry_attempts, settings.retry_delay)
        self.parser = SnapshotParser()
        self.logger = logger or structlog.get_logger("timetraveller.fetcher")
        self._sleep = sleeper
        self._owns_client = client is None
        # httpx.Client is safe to share between worker threads.
        self._client = client or httpx.Client(
            follow_redirects=True,
            timeout=settings.request_timeout,
            headers={"User-Agent": settings.user_agent},
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "SnapshotFetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def fetch(self, url: str) -> Outcome:
        params = {"url": url, "output": "json", "filter": "statuscode:200"}
        last_cause = "unknown error; no response received"
        for attempt in range(self.policy.total_attempts):
            if attempt:
                self._sleep(self.policy.next_delay(attempt))
            try:
                response = self._client.get(
                    self.settings.endpoint,
                    params=params,
                    timeout=self.settings.request_timeout,
                    follow_redirects=True,
                )
            except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
                return self._fail(url, attempt, f"error creating request: {exc}")
            except (httpx.TransportError, httpx.TooManyRedirects) as exc:
                classification = Classification.TRANSPORT
                last_cause = f"error fetching data: {exc!r}"
            else:
                classification = classify_response(response.status_code, response.text)
                if classification is Classification.SUCCESS:
                    return self._interpret(url, response.text, attempt)
                status_line = f"{response.status_code} {response.reason_phrase}".strip()
                if classification is Classification.HTTP_ERROR:
                    return self._fail(
                        url,
                        attempt,
                        f"API request failed. Status: {status_line}, Body: {response.text}",
                    )
                if classification is Classification.RATE_LIMITED:
                    last_cause = f"API request failed due to rate limiting. Status: {status_line}"
                else:
                    last_cause = f"API request failed with server error. Status: {status_line}"

            if not self.policy.is_retryable(classification):
                return self._fail(url, attempt, last_cause)
            if not self.policy.has_attempts_left(attempt):
                break
            self.logger.warning(
                "fetch_retry",
                url=url,
                attempt=attempt + 1,
                classification=classification.value,
                error=last_cause,
                next_delay=self.policy.next_delay(attempt + 1),
            )

        return self._fail(
            url,
            self.policy.max_attempts,
            f"{last_cause} after {self.policy.max_attempts} retries",
        )

    # ------------------------------------------------------------------
    def _interpret(self, url: str, body: str, attempt: int) -> Outcome:
        try:
            entries = self.parser.parse_rows(body)
        except PayloadDecodeError as exc:
            return self._fail(url, attempt, str(exc))
        chosen = self.parser.select(entries, self.settings.mode)
        if chosen is None:
            return Outcome.not_found(url)
        if len(entries) > 1 and not self.parser.is_chronological(entries):
            self.logger.warning("snapshot_rows_unordered", url=url, count=len(entries))
        if not chosen.is_well_formed:
            self.logger.warning(
                "snapshot_entry_malformed", url=url, fields=list(chosen.fields)
            )
        return Outcome.found(url, len(entries), chosen.archive_link())

    def _fail(self, url: str, attempt: int, detail: str) -> Outcome:
        self.logger.warning("fetch_failed", url=url, attempt=attempt, error=detail)
        return Outcome.error(url, detail)


__all__ = ["SnapshotFetcher", "Sleeper"]

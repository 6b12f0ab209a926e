"""Retry classification and exponential backoff policy."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

RATE_LIMIT_MARKER = "You have sent too many requests in a given amount of time."


class Classification(str, Enum):
    """How a single attempt ended."""

    SUCCESS = "success"
    TRANSPORT = "transport"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    HTTP_ERROR = "http_error"


RETRYABLE = frozenset(
    {Classification.TRANSPORT, Classification.RATE_LIMITED, Classification.SERVER_ERROR}
)


def classify_response(status_code: int, body: str) -> Classification:
    """Map an HTTP status and body onto a :class:`Classification`."""

    if status_code == 429:
        return Classification.RATE_LIMITED
    if 500 <= status_code < 600:
        return Classification.SERVER_ERROR
    if status_code != 200:
        return Classification.HTTP_ERROR
    if RATE_LIMIT_MARKER in body:
        return Classification.RATE_LIMITED
    return Classification.SUCCESS


@dataclass(frozen=True, slots=True)
class BackoffPolicy:
    """Up to ``max_attempts`` retries after the first try, doubling the delay each time."""

    max_attempts: int
    base_delay: float

    def __post_init__(self) -> None:
        if self.max_attempts < 0:
            raise ValueError("max_attempts must be >= 0")
        if self.base_delay < 0:
            raise ValueError("base_delay must be >= 0")

    def next_delay(self, attempt: int) -> float:
        """Seconds to wait before ``attempt`` (0 is the first try)."""

        if attempt <= 0:
            return 0.0
        return self.base_delay * 2 ** (attempt - 1)

    def is_retryable(self, classification: Classification) -> bool:
        return classification in RETRYABLE

    def has_attempts_left(self, attempt: int) -> bool:
        return attempt < self.max_attempts

    @property
    def total_attempts(self) -> int:
        return self.max_attempts + 1


__all__ = [
    "BackoffPolicy",
    "Classification",
    "RATE_LIMIT_MARKER",
    "RETRYABLE",
    "classify_response",
]

"""Engine components: fetch → retry → fan-in."""

from .aggregator import AggregationResult, Aggregator
from .fetcher import SnapshotFetcher
from .models import Outcome, OutcomeStatus, SnapshotEntry
from .parser import PayloadDecodeError, SnapshotParser
from .retry import BackoffPolicy, Classification, classify_response
from .worker_pool import WorkerPool

__all__ = [
    "AggregationResult",
    "Aggregator",
    "BackoffPolicy",
    "Classification",
    "Outcome",
    "OutcomeStatus",
    "PayloadDecodeError",
    "SnapshotEntry",
    "SnapshotFetcher",
    "SnapshotParser",
    "WorkerPool",
    "classify_response",
]

"""Instrumentation of the analysis endpoints.

Counters (name plus tags):
* analysis_requests_total{endpoint,status}  (completed | failed)
* analysis_errors_total{endpoint,code}
* analysis_parse_total{outcome}  (parsed | empty | failed)
* analysis_medication_alerts_total

Latency is kept per endpoint (analysis | meal_stitch | summarize |
food_comparison | history) as a window of the most recent requests.
"""

from __future__ import annotations

import time
from collections import Counter, deque
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from threading import Lock
from typing import Any, Deque, Dict, Iterator, Tuple

REQUESTS_TOTAL = "analysis_requests_total"
ERRORS_TOTAL = "analysis_errors_total"
PARSE_TOTAL = "analysis_parse_total"
MEDICATION_ALERTS_TOTAL = "analysis_medication_alerts_total"

LATENCY_WINDOW = 500

SeriesKey = Tuple[str, Tuple[Tuple[str, str], ...]]


@dataclass(frozen=True)
class LatencySummary:
    count: int
    avg_ms: float
    max_ms: float
    last_ms: float


class AnalysisMetrics:
    """
    Counters and latency windows of one process.

    Example:
        >>> m = AnalysisMetrics()
        >>> m.increment(PARSE_TOTAL, outcome="parsed")
        >>> m.count(PARSE_TOTAL, outcome="parsed")
        1
    """

    def __init__(self, latency_window: int = LATENCY_WINDOW) -> None:
        self.latency_window = latency_window
        self._counts: Counter = Counter()
        self._latency: Dict[str, Deque[float]] = {}
        self._lock = Lock()

    def increment(self, name: str, amount: int = 1, **tags: str) -> None:
        with self._lock:
            self._counts[(name, tuple(sorted(tags.items())))] += amount

    def count(self, name: str, **tags: str) -> int:
        """Current value, 0 for a series never incremented."""
        with self._lock:
            return self._counts[(name, tuple(sorted(tags.items())))]

    def observe_latency(self, endpoint: str, ms: float) -> None:
        with self._lock:
            window = self._latency.setdefault(endpoint, deque(maxlen=self.latency_window))
            window.append(ms)

    def latency(self, endpoint: str) -> LatencySummary:
        with self._lock:
            samples = list(self._latency.get(endpoint, ()))
        if not samples:
            return LatencySummary(count=0, avg_ms=0.0, max_ms=0.0, last_ms=0.0)
        return LatencySummary(
            count=len(samples),
            avg_ms=sum(samples) / len(samples),
            max_ms=max(samples),
            last_ms=samples[-1],
        )

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            counts = list(self._counts.items())
            endpoints = sorted(self._latency)
        return {
            "counters": [
                {"name": name, "tags": dict(tags), "value": value}
                for (name, tags), value in counts
            ],
            "latency": {endpoint: asdict(self.latency(endpoint)) for endpoint in endpoints},
        }

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()
            self._latency.clear()


analysis_metrics = AnalysisMetrics()


def record_request(endpoint: str, status: str) -> None:
    analysis_metrics.increment(REQUESTS_TOTAL, endpoint=endpoint, status=status)


def record_error(endpoint: str, code: str) -> None:
    """`code` is the exception class name."""
    analysis_metrics.increment(ERRORS_TOTAL, endpoint=endpoint, code=code)


def record_parse_outcome(outcome: str) -> None:
    analysis_metrics.increment(PARSE_TOTAL, outcome=outcome)


def record_medication_alerts(count: int) -> None:
    if count > 0:
        analysis_metrics.increment(MEDICATION_ALERTS_TOTAL, count)


@contextmanager
def time_request(endpoint: str) -> Iterator[None]:
    """Count the request as completed or failed and record its latency."""
    start = time.perf_counter()
    try:
        yield
    except Exception as exc:
        record_request(endpoint, "failed")
        record_error(endpoint, type(exc).__name__)
        raise
    else:
        record_request(endpoint, "completed")
    finally:
        analysis_metrics.observe_latency(endpoint, (time.perf_counter() - start) * 1000.0)


def snapshot() -> Dict[str, Any]:
    return analysis_metrics.snapshot()


def reset_all() -> None:
    """Drop every metric (test utility)."""
    analysis_metrics.reset()

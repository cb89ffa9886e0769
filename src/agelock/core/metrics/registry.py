"""Resolution metrics: names, the registry protocol and an in-memory registry.

The resolver counts cache hits, misses, decryptions and failures, and
times each ``age`` invocation.  Anything with ``counter`` and ``timer``
methods can receive those; :class:`InMemoryRegistry` is the one the
tests inspect, and :mod:`agelock.core.metrics.exporters` forwards to
Prometheus.
"""

from __future__ import annotations

import threading
from collections import Counter
from typing import Any, Protocol, runtime_checkable

CACHE_HITS = "agelock_cache_hits_total"
CACHE_MISSES = "agelock_cache_misses_total"
DECRYPTIONS = "agelock_decryptions_total"
RESOLUTION_FAILURES = "agelock_resolution_failures_total"
DECRYPT_DURATION = "agelock_decrypt_duration_ms"

Tags = dict[str, str]
_Series = tuple[str, tuple[tuple[str, str], ...]]


@runtime_checkable
class MeterRegistry(Protocol):
    """Receiver for resolution metrics.  Implementations must be thread-safe."""

    def counter(self, name: str, value: float = 1.0, tags: Tags | None = None) -> None:
        """Add *value* to the counter series identified by *name* and *tags*."""
        ...

    def timer(self, name: str, duration_ms: float, tags: Tags | None = None) -> None:
        """Record one duration, in milliseconds."""
        ...

    def get_metrics(self) -> dict[str, Any]:
        """Describe what has been recorded so far."""
        ...


def _series(name: str, tags: Tags | None) -> _Series:
    return name, tuple(sorted((tags or {}).items()))


def _render(series: _Series) -> str:
    name, labels = series
    if not labels:
        return name
    return name + "{" + ",".join(f"{k}={v}" for k, v in labels) + "}"


class InMemoryRegistry:
    """Keeps counter totals and timer sums in process memory.

    Snapshots render a series as ``name{key=value,...}``, the way
    Prometheus prints it, so ``agelock_resolution_failures_total`` for a
    hash mismatch reads ``agelock_resolution_failures_total{error=HashMismatch}``.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: Counter[_Series] = Counter()
        self._timings: dict[_Series, list[float]] = {}

    def counter(self, name: str, value: float = 1.0, tags: Tags | None = None) -> None:
        series = _series(name, tags)
        with self._lock:
            self._counts[series] += value

    def timer(self, name: str, duration_ms: float, tags: Tags | None = None) -> None:
        series = _series(name, tags)
        with self._lock:
            stats = self._timings.setdefault(series, [0.0, 0.0])
            stats[0] += 1
            stats[1] += duration_ms

    def get_metrics(self) -> dict[str, Any]:
        """Snapshot as ``{"counters": {series: total}, "timers": {series: {"count", "sum_ms"}}}``."""
        with self._lock:
            return {
                "counters": {_render(s): total for s, total in self._counts.items()},
                "timers": {
                    _render(s): {"count": int(count), "sum_ms": total}
                    for s, (count, total) in self._timings.items()
                },
            }

    def get_counter(self, name: str, tags: Tags | None = None) -> float:
        with self._lock:
            return float(self._counts.get(_series(name, tags), 0.0))

    def get_timer_count(self, name: str, tags: Tags | None = None) -> int:
        with self._lock:
            stats = self._timings.get(_series(name, tags))
        return int(stats[0]) if stats else 0

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()
            self._timings.clear()

"""Prometheus export for resolution metrics.

Needs the ``metrics`` extra (``pip install agelock[metrics]``).
"""

from __future__ import annotations

import threading
from typing import Any

_HELP = {
    "agelock_cache_hits_total": "Secrets served from the store without decrypting",
    "agelock_cache_misses_total": "Hash-locked secrets that had to be decrypted",
    "agelock_decryptions_total": "Successful age invocations",
    "agelock_resolution_failures_total": "Failed resolutions by error type",
    "agelock_decrypt_duration_ms": "Wall time of one age invocation in milliseconds",
}


class PrometheusRegistry:
    """:class:`~agelock.core.metrics.registry.MeterRegistry` backed by ``prometheus_client``.

    A counter becomes a ``Counter`` and a timer a ``Summary``.  Each metric
    is registered the first time it is recorded, with the tag keys of that
    call as its label names; later calls must use the same keys.

    Args:
        registry: ``CollectorRegistry`` to register into (default: the
            process-wide ``prometheus_client.REGISTRY``).

    Raises:
        ImportError: If ``prometheus_client`` is not installed.
    """

    def __init__(self, registry: Any = None) -> None:
        try:
            import prometheus_client
        except ImportError:
            raise ImportError(
                "PrometheusRegistry needs prometheus_client; install agelock[metrics]"
            ) from None

        self._client = prometheus_client
        self._registry = prometheus_client.REGISTRY if registry is None else registry
        self._lock = threading.Lock()
        self._metrics: dict[str, tuple[str, Any]] = {}

    def counter(self, name: str, value: float = 1.0, tags: dict[str, str] | None = None) -> None:
        self._child("Counter", name, tags).inc(value)

    def timer(self, name: str, duration_ms: float, tags: dict[str, str] | None = None) -> None:
        self._child("Summary", name, tags).observe(duration_ms)

    def get_metrics(self) -> dict[str, Any]:
        """Names of the registered metrics, split into counters and timers."""
        with self._lock:
            kinds = dict(self._metrics.items())
        return {
            "counters": [name for name, (kind, _) in kinds.items() if kind == "Counter"],
            "timers": [name for name, (kind, _) in kinds.items() if kind == "Summary"],
        }

    def _child(self, kind: str, name: str, tags: dict[str, str] | None) -> Any:
        with self._lock:
            if name not in self._metrics:
                metric_cls = getattr(self._client, kind)
                metric = metric_cls(
                    name.removesuffix("_total"),
                    _HELP.get(name, name),
                    sorted(tags or ()),
                    registry=self._registry,
                )
                self._metrics[name] = (kind, metric)
            metric = self._metrics[name][1]
        return metric.labels(**tags) if tags else metric

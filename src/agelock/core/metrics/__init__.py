"""Metrics collection for secret resolution."""

from agelock.core.metrics.exporters import PrometheusRegistry
from agelock.core.metrics.registry import (
    CACHE_HITS,
    CACHE_MISSES,
    DECRYPT_DURATION,
    DECRYPTIONS,
    RESOLUTION_FAILURES,
    InMemoryRegistry,
    MeterRegistry,
)

__all__ = [
    "CACHE_HITS",
    "CACHE_MISSES",
    "DECRYPTIONS",
    "DECRYPT_DURATION",
    "RESOLUTION_FAILURES",
    "InMemoryRegistry",
    "MeterRegistry",
    "PrometheusRegistry",
]

"""
Prometheus metrics for the dice pipeline.

This module defines counters and histograms for:
  • rolls                  — completed/failed rolls per randomness source
  • verifications          — verdicts per authenticity path and result
  • beacon_request_seconds — latency of beacon calls per endpoint

Label cardinality is intentionally low: every label has a small, finite
vocabulary and there are no per-round labels.

Usage
-----
    from fairdice.metrics import METRICS

    METRICS.record_roll("beacon")
    METRICS.record_verification("remote", "valid")
    with METRICS.beacon_timer("latest"):
        await client.fetch_latest()

Tests and embedders that need isolation construct their own `Metrics` with a
fresh `CollectorRegistry`.
"""

from __future__ import annotations

from contextlib import contextmanager
from time import perf_counter
from typing import Iterable, Iterator

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

# --------- Vocabularies (kept small for bounded cardinality) ---------

_ROLL_SOURCES = (
    "beacon",   # round fetched from the beacon
    "demo",     # local fallback round
    "failed",   # conversion/format error surfaced to the caller
)

_VERIFY_PATHS = (
    "remote",   # beacon verify endpoint answered
    "local",    # local fallback heuristic answered
    "none",     # stopped before any authenticity check
)

_VERIFY_RESULTS = (
    "valid",
    "invalid",
    "error",    # internal exception downgraded to invalid
)

_ENDPOINTS = ("latest", "verify")

# Beacon latency buckets (seconds)
_REQUEST_BUCKETS = (
    0.01, 0.025, 0.05,
    0.1, 0.25, 0.5,
    1.0, 2.5, 5.0, 10.0,
)


class Metrics:
    """
    Container for all fairdice Prometheus instruments.

    Args:
        namespace: Prometheus metric namespace (prefix).
        subsystem: Prometheus metric subsystem.
        registry:  Prometheus registry to register the metrics with.
    """

    def __init__(
        self,
        *,
        namespace: str = "fairdice",
        subsystem: str = "core",
        registry: CollectorRegistry = REGISTRY,
        request_buckets: Iterable[float] = _REQUEST_BUCKETS,
    ) -> None:
        self.registry = registry
        self.rolls_total = Counter(
            "rolls_total",
            "Number of rolls processed, labeled by randomness source.",
            labelnames=("source",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.verifications_total = Counter(
            "verifications_total",
            "Number of verification verdicts, labeled by path and result.",
            labelnames=("path", "result"),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.beacon_request_seconds = Histogram(
            "beacon_request_seconds",
            "Latency of beacon HTTP calls (seconds).",
            labelnames=("endpoint",),
            buckets=tuple(request_buckets),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )

    # ----- Recording helpers -------------------------------------------------

    def record_roll(self, source: str) -> None:
        if source not in _ROLL_SOURCES:
            source = "failed"
        self.rolls_total.labels(source=source).inc()

    def record_verification(self, path: str, result: str) -> None:
        if path not in _VERIFY_PATHS:
            path = "none"
        if result not in _VERIFY_RESULTS:
            result = "error"
        self.verifications_total.labels(path=path, result=result).inc()

    def observe_request(self, endpoint: str, seconds: float) -> None:
        if endpoint not in _ENDPOINTS:
            raise ValueError(f"unknown beacon endpoint label: {endpoint!r}")
        self.beacon_request_seconds.labels(endpoint=endpoint).observe(float(seconds))

    # ----- Context managers --------------------------------------------------

    @contextmanager
    def beacon_timer(self, endpoint: str) -> Iterator[None]:
        """
        Time a beacon call, successful or not.

            with METRICS.beacon_timer("verify"):
                ...
        """
        start = perf_counter()
        try:
            yield
        finally:
            self.observe_request(endpoint, perf_counter() - start)


# Singleton used by default
METRICS = Metrics()

__all__ = [
    "Metrics",
    "METRICS",
    "_ROLL_SOURCES",
    "_VERIFY_PATHS",
    "_VERIFY_RESULTS",
]

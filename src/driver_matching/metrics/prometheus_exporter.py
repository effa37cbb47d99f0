"""Prometheus metrics for the driver index and matching queries."""

import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest

# Use a separate registry to avoid default Python metrics
REGISTRY = CollectorRegistry()

drivers_registered = Gauge(
    "driver_matching_drivers_registered",
    "Number of drivers currently in the registry",
    registry=REGISTRY,
)

registry_mutations = Counter(
    "driver_matching_registry_mutations_total",
    "Registry mutations by operation",
    ["operation"],
    registry=REGISTRY,
)

search_precision = Counter(
    "driver_matching_search_precision_total",
    "Geohash precision at which the nearest-driver search settled",
    ["precision"],
    registry=REGISTRY,
)

query_latency = Histogram(
    "driver_matching_query_latency_seconds",
    "Matching query latency",
    ["operation"],
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
    registry=REGISTRY,
)


@contextmanager
def observe_latency(operation: str) -> Iterator[None]:
    """Record wall time of the enclosed block under the given operation label."""
    start = time.perf_counter()
    try:
        yield
    finally:
        query_latency.labels(operation=operation).observe(time.perf_counter() - start)


def record_mutation(operation: str, driver_count: int) -> None:
    registry_mutations.labels(operation=operation).inc()
    drivers_registered.set(driver_count)


def record_search_precision(precision: int) -> None:
    search_precision.labels(precision=str(precision)).inc()


def generate_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest(REGISTRY)

"""Prometheus metrics for the cache and the pagination engine."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram

# Custom registry so tests and multiple app instances do not collide
REGISTRY = CollectorRegistry()

# Covers operation times from 1ms to 10s
DEFAULT_LATENCY_BUCKETS = (
    0.001,
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
)

# Cache metrics
cache_hits_total = Counter(
    "cache_hits_total",
    "Total number of cache hits",
    ["cache_name"],
    registry=REGISTRY,
)

cache_misses_total = Counter(
    "cache_misses_total",
    "Total number of cache misses",
    ["cache_name"],
    registry=REGISTRY,
)

cache_errors_total = Counter(
    "cache_errors_total",
    "Total number of cache operations that failed and were degraded",
    ["cache_name", "operation"],
    registry=REGISTRY,
)

cache_operation_duration_seconds = Histogram(
    "cache_operation_duration_seconds",
    "Cache operation duration in seconds",
    ["operation", "cache_name"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

# Pagination metrics
pagination_pages_total = Counter(
    "pagination_pages_total",
    "Total number of pages served by pagination strategy",
    ["strategy"],
    registry=REGISTRY,
)

pagination_probe_queries_total = Counter(
    "pagination_probe_queries_total",
    "Total number of extra probe/count queries issued for page flags",
    ["strategy", "probe"],
    registry=REGISTRY,
)

# Error metrics
app_errors_total = Counter(
    "app_errors_total",
    "Total number of error responses by problem type",
    ["error_type", "status_code"],
    registry=REGISTRY,
)

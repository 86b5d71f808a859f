"""Prometheus metrics endpoint for observability.

Endpoints:
    GET /metrics - Prometheus scrape endpoint

Metrics Exposed:
    - cache_hits_total / cache_misses_total - Read-through and Redis hit ratio
    - cache_errors_total - Cache failures that were degraded to store reads
    - cache_operation_duration_seconds - Redis operation latency
    - pagination_pages_total - Pages served per pagination mode
    - pagination_probe_queries_total - Extra count/probe reads per mode
    - app_errors_total - Problem Details responses by type
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from catalog_service.infra.metrics.prometheus import REGISTRY

router = APIRouter(tags=["observability"])


@router.get(
    "/metrics",
    summary="Prometheus metrics",
    response_class=Response,
    include_in_schema=False,
)
async def metrics() -> Response:
    """Return all registered metrics in the Prometheus text format."""
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)

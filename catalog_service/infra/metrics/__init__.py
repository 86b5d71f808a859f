"""Prometheus metrics."""

from catalog_service.infra.metrics.prometheus import REGISTRY

__all__ = ["REGISTRY"]

"""Catalog items feature: paginated, cached storefront listings."""

from catalog_service.features.catalog.router import router

__all__ = ["router"]

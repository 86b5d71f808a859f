"""Core database package: declarative base and mixins."""

from catalog_service.core.database.base import NAMING_CONVENTION, Base, TimestampMixin

__all__ = ["NAMING_CONVENTION", "Base", "TimestampMixin"]

"""Shared API schemas."""

from catalog_service.core.schemas.problem_details import ProblemDetails

__all__ = ["ProblemDetails"]

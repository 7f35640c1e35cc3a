"""Weekly Planner API - Utilities Package."""

from app.utils.errors import (
    PlannerException,
    ProfileUnavailableError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "PlannerException",
    "ProfileUnavailableError",
    "NotFoundError",
    "ValidationError",
]

"""Weekly Planner API - Routes Package."""

from app.routes import weekly_plan

__all__ = [
    "weekly_plan",
]

"""
Weekly Planner API - MongoDB Models Package.

Export Beanie ODM models for MongoDB operations.
"""

from app.models.mongodb import WeeklyPlanDocument

__all__ = [
    "WeeklyPlanDocument",
]

"""
Weekly Planner MongoDB Document Models.

Beanie ODM models for MongoDB.
"""

from beanie import Document
from pydantic import Field
from datetime import datetime, time
from typing import Dict, Any
from uuid import UUID

import pymongo

from app.schemas.weekly_plan import WeekPlan


class WeeklyPlanDocument(Document):
    """
    Weekly workout plan model for MongoDB.

    Query keys are kept at top level; the full plan (seven day slots,
    totals, snapshot, counters) is stored under ``plan_data``.
    """

    plan_id: UUID
    user_id: str
    week_start_date: datetime  # Monday, midnight
    week_end_date: datetime  # Sunday, midnight
    is_active: bool = True
    generation_method: str
    plan_data: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    class Settings:
        name = "weekly_workout_plans"
        indexes = [
            "plan_id",
            [("user_id", pymongo.ASCENDING), ("is_active", pymongo.ASCENDING)],
            pymongo.IndexModel(
                [("user_id", pymongo.ASCENDING), ("week_start_date", pymongo.ASCENDING)],
                name="unique_user_week_plan",
                unique=True,
            ),
        ]

    @classmethod
    def from_plan(cls, plan: WeekPlan) -> "WeeklyPlanDocument":
        return cls(
            plan_id=plan.plan_id,
            user_id=plan.user_id,
            week_start_date=datetime.combine(plan.week_start_date, time.min),
            week_end_date=datetime.combine(plan.week_end_date, time.min),
            is_active=plan.is_active,
            generation_method=plan.generation_method.value,
            plan_data=plan.model_dump(mode="json"),
            created_at=plan.created_at,
            updated_at=plan.updated_at,
        )

    def to_plan(self) -> WeekPlan:
        return WeekPlan.model_validate(self.plan_data)

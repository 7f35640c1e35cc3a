"""
Weekly Planner API - Plan Repository.

Storage seam for weekly plans. The orchestrator and the adaptation
engine depend on the ``WeeklyPlanRepository`` interface only.
"""

import logging
from datetime import date, datetime, time
from typing import Optional
from uuid import UUID

from app.models.mongodb import WeeklyPlanDocument
from app.schemas.weekly_plan import WeekPlan

logger = logging.getLogger(__name__)


class WeeklyPlanRepository:
    """Interface for weekly plan storage."""

    async def find_active(self, user_id: str, week_start: date) -> Optional[WeekPlan]:
        """Active plan for (user, week), if any."""
        raise NotImplementedError

    async def get(self, plan_id: UUID) -> Optional[WeekPlan]:
        raise NotImplementedError

    async def replace_week(self, plan: WeekPlan) -> WeekPlan:
        """Retire whatever is stored for the plan's (user, week) and store ``plan``."""
        raise NotImplementedError

    async def save(self, plan: WeekPlan) -> WeekPlan:
        """Overwrite an existing plan in place (same plan_id)."""
        raise NotImplementedError


class MongoWeeklyPlanRepository(WeeklyPlanRepository):
    """Beanie-backed repository. One document per (user, week)."""

    async def find_active(self, user_id: str, week_start: date) -> Optional[WeekPlan]:
        document = await WeeklyPlanDocument.find_one(
            WeeklyPlanDocument.user_id == user_id,
            WeeklyPlanDocument.week_start_date == datetime.combine(week_start, time.min),
            WeeklyPlanDocument.is_active == True,  # noqa: E712
        )
        return document.to_plan() if document else None

    async def get(self, plan_id: UUID) -> Optional[WeekPlan]:
        document = await WeeklyPlanDocument.find_one(WeeklyPlanDocument.plan_id == plan_id)
        return document.to_plan() if document else None

    async def replace_week(self, plan: WeekPlan) -> WeekPlan:
        previous = await WeeklyPlanDocument.find_one(
            WeeklyPlanDocument.user_id == plan.user_id,
            WeeklyPlanDocument.week_start_date == datetime.combine(plan.week_start_date, time.min),
        )
        document = WeeklyPlanDocument.from_plan(plan)
        if previous:
            # Single-document replace: the old plan is retired in the same write
            document.id = previous.id
            await document.replace()
            logger.info(f"Replaced weekly plan {previous.plan_id} with {plan.plan_id}")
        else:
            await document.insert()
            logger.info(f"Stored weekly plan {plan.plan_id} for user {plan.user_id}")
        return plan

    async def save(self, plan: WeekPlan) -> WeekPlan:
        existing = await WeeklyPlanDocument.find_one(WeeklyPlanDocument.plan_id == plan.plan_id)
        document = WeeklyPlanDocument.from_plan(plan)
        if existing:
            document.id = existing.id
            await document.replace()
        else:
            await document.insert()
        return plan

# app/routes/weekly_plan.py
"""
Weekly Planner API - Weekly Plan Routes.

Generation, retrieval, completion tracking and preferred-day changes
for weekly workout plans.
"""

import logging
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.dependencies import (
    get_adaptation_engine,
    get_plan_orchestrator,
    get_plan_repository,
)
from app.schemas.weekly_plan import (
    CompleteDayRequest,
    GeneratePlanRequest,
    SkipDayRequest,
    UpdatePreferredDaysRequest,
)
from app.services.adaptation_engine import AdaptationEngine
from app.services.plan_orchestrator import PlanOrchestrator
from app.services.plan_repository import WeeklyPlanRepository
from app.utils.dates import day_name
from app.utils.errors import NotFoundError, PlannerException

logger = logging.getLogger(__name__)
router = APIRouter()


def _http_error(exc: PlannerException) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.detail)


@router.post("/generate", status_code=status.HTTP_201_CREATED)
async def generate_weekly_plan(
    request: GeneratePlanRequest,
    response: Response,
    orchestrator: PlanOrchestrator = Depends(get_plan_orchestrator)
):
    """
    Generate (or reuse) the weekly plan for a user.

    Returns 201 when a plan was built, 200 when the stored plan was reused.
    """
    logger.info(
        f"Weekly plan requested for user {request.user_id} "
        f"(week {request.week_start_date}, regenerate={request.regenerate})"
    )
    try:
        result = await orchestrator.get_or_create(
            request.user_id,
            request.week_start_date,
            force=request.regenerate
        )
    except PlannerException as e:
        raise _http_error(e)
    except Exception as e:
        logger.error(f"Weekly plan generation failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate weekly plan")

    if not result.regenerated:
        response.status_code = status.HTTP_200_OK

    return {
        "success": True,
        "message": (
            "Weekly plan generated successfully" if result.regenerated
            else "Weekly plan already exists"
        ),
        "data": result.plan,
        "regenerated": result.regenerated
    }


@router.get("/current")
async def get_current_week_plan(
    user_id: str = Query(..., description="User ID"),
    orchestrator: PlanOrchestrator = Depends(get_plan_orchestrator)
):
    """Current week's plan (generated on first request) with today's slot."""
    try:
        result = await orchestrator.get_or_create(user_id)
    except PlannerException as e:
        raise _http_error(e)
    except Exception as e:
        logger.error(f"Failed to fetch current plan: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch current plan")

    today = orchestrator.clock()
    return {
        "success": True,
        "data": {
            "plan": result.plan,
            "today": result.plan.today_plan(today),
            "today_day_name": day_name(today)
        }
    }


@router.get("/week/{week_date}")
async def get_week_plan(
    week_date: date,
    user_id: str = Query(..., description="User ID"),
    orchestrator: PlanOrchestrator = Depends(get_plan_orchestrator)
):
    """Stored plan for the week containing ``week_date``."""
    try:
        plan = await orchestrator.get_week(user_id, week_date)
    except PlannerException as e:
        raise _http_error(e)
    return {"success": True, "data": plan}


@router.post("/{plan_id}/complete-day")
async def complete_day_workout(
    plan_id: UUID,
    request: CompleteDayRequest,
    orchestrator: PlanOrchestrator = Depends(get_plan_orchestrator)
):
    """Mark a day's workout as completed."""
    try:
        plan = await orchestrator.complete_day(plan_id, request.day)
    except PlannerException as e:
        raise _http_error(e)
    return {"success": True, "message": "Workout marked as completed", "data": plan}


@router.post("/{plan_id}/skip-day")
async def skip_day_workout(
    plan_id: UUID,
    request: SkipDayRequest,
    orchestrator: PlanOrchestrator = Depends(get_plan_orchestrator)
):
    """Mark a day's workout as skipped."""
    try:
        plan = await orchestrator.skip_day(plan_id, request.day, request.reason)
    except PlannerException as e:
        raise _http_error(e)
    return {"success": True, "message": "Workout marked as skipped", "data": plan}


@router.put("/{plan_id}/preferred-days")
async def update_preferred_days(
    plan_id: UUID,
    request: UpdatePreferredDaysRequest,
    repository: WeeklyPlanRepository = Depends(get_plan_repository),
    engine: AdaptationEngine = Depends(get_adaptation_engine)
):
    """
    Adapt an existing plan to a new set of preferred days.

    Exercises on removed future days move to the added days; the rest is
    topped up from the exercise catalog.
    """
    try:
        plan = await repository.get(plan_id)
        if plan is None:
            raise NotFoundError(message="Plan not found")
        result = await engine.adapt(
            plan,
            old_days=plan.user_preferences_snapshot.preferred_workout_days,
            new_days=request.preferred_workout_days,
            preserve_completed=request.preserve_completed
        )
    except PlannerException as e:
        raise _http_error(e)
    except Exception as e:
        logger.error(f"Preferred day update failed for plan {plan_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update preferred days")

    summary = result.summary
    return {
        "success": True,
        "message": "Weekly plan adapted to new preferred days",
        "data": result.plan,
        "changes": {
            "removed": summary.removed,
            "added": summary.added,
            "unchanged": summary.unchanged,
            "reallocated_exercises": summary.reallocated,
            "new_exercises": summary.topped_up
        }
    }

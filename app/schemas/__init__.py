"""Weekly Planner API - Pydantic Schemas Package."""

from app.schemas.weekly_plan import (
    GenerationMethod,
    ExerciseCandidate,
    RestDay,
    WorkoutDay,
    DayPlan,
    PreferencesSnapshot,
    UserProfile,
    PlanDraft,
    WeekPlan,
    GeneratePlanRequest,
    CompleteDayRequest,
    SkipDayRequest,
    UpdatePreferredDaysRequest,
)

__all__ = [
    # Plan model
    "GenerationMethod",
    "ExerciseCandidate",
    "RestDay",
    "WorkoutDay",
    "DayPlan",
    "PreferencesSnapshot",
    "UserProfile",
    "PlanDraft",
    "WeekPlan",
    # Requests
    "GeneratePlanRequest",
    "CompleteDayRequest",
    "SkipDayRequest",
    "UpdatePreferredDaysRequest",
]

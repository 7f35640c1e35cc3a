"""
Weekly Planner API - Weekly Plan Schemas.

Pydantic models for the weekly plan aggregate, its day slots, the
exercises scheduled into them, and the request bodies of the plan routes.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, Iterable, List, Literal, Optional, Union
from uuid import UUID, uuid4

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from app.utils.dates import DAYS_OF_WEEK, week_end_for


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GenerationMethod(str, Enum):
    """Provenance of a weekly plan."""
    ML_AUTO = "ml_auto"
    FALLBACK = "fallback"


class ExerciseCandidate(BaseModel):
    """
    A single schedulable exercise.

    Accepts both the catalog field names and the shorter names used by
    the recommendation service (``exercise_id``, ``exercise_name``...).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(..., validation_alias=AliasChoices("id", "exercise_id"))
    name: str = Field(..., validation_alias=AliasChoices("name", "exercise_name"))
    target_muscle_group: str = Field(
        default="full_body",
        validation_alias=AliasChoices("target_muscle_group", "muscle_group")
    )
    difficulty_level: str = Field(
        default="beginner",
        validation_alias=AliasChoices("difficulty_level", "difficulty")
    )
    duration_seconds: int = Field(default=240, description="Tabata protocol: 4 minutes")
    estimated_calories: int = Field(
        default=28,
        validation_alias=AliasChoices("estimated_calories", "calories")
    )
    equipment_needed: str = Field(
        default="none",
        validation_alias=AliasChoices("equipment_needed", "equipment")
    )
    category: str = "tabata"


class RestDay(BaseModel):
    """A day with no workout planned."""

    day_type: Literal["rest"] = "rest"
    planned: Literal[False] = False
    rest_day: Literal[True] = True


class WorkoutDay(BaseModel):
    """A day with an ordered list of exercises."""

    day_type: Literal["workout"] = "workout"
    planned: Literal[True] = True
    rest_day: Literal[False] = False
    workout_type: str = "tabata"
    exercises: List[ExerciseCandidate]
    estimated_duration: int = 0  # minutes
    estimated_calories: int = 0
    focus_areas: List[str] = Field(default_factory=list)
    completed: bool = False
    completed_at: Optional[datetime] = None
    skipped: bool = False
    skip_reason: Optional[str] = None
    skipped_at: Optional[datetime] = None
    adapted_from_reallocation: bool = False


DayPlan = Annotated[Union[RestDay, WorkoutDay], Field(discriminator="day_type")]


def summarize_days(days: Dict[str, Any]) -> Dict[str, int]:
    """Aggregate per-day figures into document-level totals."""
    workout_days = [d for d in days.values() if isinstance(d, WorkoutDay)]
    return {
        "total_workout_days": len(workout_days),
        "total_rest_days": len(DAYS_OF_WEEK) - len(workout_days),
        "total_exercises": sum(len(d.exercises) for d in workout_days),
        "estimated_weekly_duration": sum(d.estimated_duration for d in workout_days),
        "estimated_weekly_calories": sum(d.estimated_calories for d in workout_days),
    }


def _split_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class PreferencesSnapshot(BaseModel):
    """User preferences frozen at generation time."""

    fitness_level: str = "beginner"
    preferred_workout_days: List[str] = Field(default_factory=list)
    target_muscle_groups: List[str] = Field(default_factory=list)
    time_budget_minutes: int = 30


class UserProfile(BaseModel):
    """User profile as served by the identity service."""

    user_id: str
    fitness_level: str = "beginner"
    preferred_workout_days: List[str] = Field(default_factory=list)
    target_muscle_groups: List[str] = Field(default_factory=list)
    goals: List[str] = Field(default_factory=list)
    time_budget_minutes: int = 30
    activity_level: str = "moderate"
    workout_experience_years: float = 1

    @field_validator("preferred_workout_days", "target_muscle_groups", "goals", mode="before")
    @classmethod
    def split_comma_lists(cls, value: Any) -> Any:
        return _split_list(value)

    @field_validator("preferred_workout_days")
    @classmethod
    def keep_known_days(cls, value: List[str]) -> List[str]:
        # Unknown names are dropped, result is in week order
        wanted = {str(day).strip().lower() for day in value}
        return [day for day in DAYS_OF_WEEK if day in wanted]

    @field_validator("fitness_level", mode="before")
    @classmethod
    def lower_fitness_level(cls, value: Any) -> Any:
        if value is None:
            return "beginner"
        return str(value).strip().lower()

    def snapshot(self) -> PreferencesSnapshot:
        return PreferencesSnapshot(
            fitness_level=self.fitness_level,
            preferred_workout_days=list(self.preferred_workout_days),
            target_muscle_groups=list(self.target_muscle_groups),
            time_budget_minutes=self.time_budget_minutes,
        )


class PlanDraft(BaseModel):
    """A fully computed week of DayPlans, before it is bound to a user and week."""

    days: Dict[str, DayPlan]
    total_workout_days: int = 0
    total_rest_days: int = 7
    total_exercises: int = 0
    estimated_weekly_duration: int = 0
    estimated_weekly_calories: int = 0
    ml_generated: bool = False
    ml_confidence_score: Optional[float] = None
    generation_method: GenerationMethod = GenerationMethod.FALLBACK

    @classmethod
    def from_days(
        cls,
        days: Dict[str, Any],
        generation_method: GenerationMethod,
        ml_confidence_score: Optional[float] = None
    ) -> "PlanDraft":
        return cls(
            days=days,
            ml_generated=generation_method == GenerationMethod.ML_AUTO,
            ml_confidence_score=ml_confidence_score,
            generation_method=generation_method,
            **summarize_days(days),
        )


class WeekPlan(BaseModel):
    """
    Weekly plan aggregate.

    One active plan per user per week. ``days`` always holds the seven
    canonical day names, Monday first.
    """

    plan_id: UUID = Field(default_factory=uuid4)
    user_id: str
    week_start_date: date
    week_end_date: date
    days: Dict[str, DayPlan]

    total_workout_days: int = 0
    total_rest_days: int = 7
    total_exercises: int = 0
    estimated_weekly_duration: int = 0
    estimated_weekly_calories: int = 0

    ml_generated: bool = False
    ml_confidence_score: Optional[float] = None
    generation_method: GenerationMethod = GenerationMethod.FALLBACK
    user_preferences_snapshot: PreferencesSnapshot = Field(default_factory=PreferencesSnapshot)

    is_active: bool = True
    is_current_week: bool = False

    workouts_completed: int = 0
    workouts_skipped: int = 0
    completion_rate: float = 0.0
    completed_at: Optional[datetime] = None

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def check_week_shape(self) -> "WeekPlan":
        if set(self.days) != set(DAYS_OF_WEEK):
            raise ValueError("days must contain exactly the seven day names")
        if self.week_start_date.weekday() != 0:
            raise ValueError("week_start_date must be a Monday")
        if self.week_end_date != week_end_for(self.week_start_date):
            raise ValueError("week_end_date must be week_start_date + 6 days")
        # Keep Monday..Sunday ordering regardless of input order
        self.days = {day: self.days[day] for day in DAYS_OF_WEEK}
        return self

    @classmethod
    def from_draft(
        cls,
        draft: PlanDraft,
        user_id: str,
        week_start_date: date,
        snapshot: PreferencesSnapshot,
        today: date
    ) -> "WeekPlan":
        plan = cls(
            user_id=user_id,
            week_start_date=week_start_date,
            week_end_date=week_end_for(week_start_date),
            days=draft.days,
            total_workout_days=draft.total_workout_days,
            total_rest_days=draft.total_rest_days,
            total_exercises=draft.total_exercises,
            estimated_weekly_duration=draft.estimated_weekly_duration,
            estimated_weekly_calories=draft.estimated_weekly_calories,
            ml_generated=draft.ml_generated,
            ml_confidence_score=draft.ml_confidence_score,
            generation_method=draft.generation_method,
            user_preferences_snapshot=snapshot,
        )
        plan.refresh_current_week(today)
        return plan

    # =========================================================================
    # Day access
    # =========================================================================

    def day_plan(self, day: str) -> Union[RestDay, WorkoutDay]:
        return self.days[day.lower()]

    def today_plan(self, today: date) -> Optional[Union[RestDay, WorkoutDay]]:
        """Plan for ``today`` if it falls inside this week."""
        if not self.week_start_date <= today <= self.week_end_date:
            return None
        return self.days[DAYS_OF_WEEK[today.weekday()]]

    def workout_days(self) -> List[str]:
        return [day for day, plan in self.days.items() if isinstance(plan, WorkoutDay)]

    def rest_days(self) -> List[str]:
        return [day for day, plan in self.days.items() if isinstance(plan, RestDay)]

    def refresh_current_week(self, today: date) -> bool:
        self.is_current_week = self.week_start_date <= today <= self.week_end_date
        return self.is_current_week

    def recompute_totals(self, workout_day_count: Optional[int] = None) -> None:
        """
        Recompute document-level totals from the seven DayPlans.

        ``workout_day_count`` overrides the counted workout days when the
        go-forward preference differs from what remains scheduled.
        Completion counters follow the days as well, so a dropped
        completed day stops counting.
        """
        totals = summarize_days(self.days)
        if workout_day_count is not None:
            totals["total_workout_days"] = workout_day_count
            totals["total_rest_days"] = len(DAYS_OF_WEEK) - workout_day_count
        for field_name, value in totals.items():
            setattr(self, field_name, value)

        workouts = [d for d in self.days.values() if isinstance(d, WorkoutDay)]
        self.workouts_completed = sum(1 for d in workouts if d.completed)
        self.workouts_skipped = sum(1 for d in workouts if d.skipped)
        if not workouts or not all(d.completed for d in workouts):
            self.completed_at = None
        self._update_completion_rate()
        self.updated_at = _utcnow()

    # =========================================================================
    # Completion tracking
    # =========================================================================

    def mark_day_completed(self, day: str, now: Optional[datetime] = None) -> bool:
        """
        Mark a day's workout as completed.

        Returns:
            bool: False if no workout is planned for the day.
        """
        plan = self.days.get(day.lower())
        if not isinstance(plan, WorkoutDay):
            return False
        if plan.completed:
            return True

        now = now or _utcnow()
        plan.completed = True
        plan.completed_at = now
        self.workouts_completed += 1
        self._update_completion_rate()
        if all(
            isinstance(d, RestDay) or d.completed for d in self.days.values()
        ):
            self.completed_at = now
        self.updated_at = now
        return True

    def mark_day_skipped(
        self,
        day: str,
        reason: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> bool:
        """
        Mark a day's workout as skipped.

        Returns:
            bool: False if no workout is planned for the day.
        """
        plan = self.days.get(day.lower())
        if not isinstance(plan, WorkoutDay):
            return False
        if plan.skipped:
            return True

        now = now or _utcnow()
        plan.skipped = True
        plan.skip_reason = reason
        plan.skipped_at = now
        self.workouts_skipped += 1
        self._update_completion_rate()
        self.updated_at = now
        return True

    def _update_completion_rate(self) -> None:
        if self.total_workout_days > 0:
            self.completion_rate = round(
                self.workouts_completed / self.total_workout_days * 100, 2
            )
        else:
            self.completion_rate = 0.0


def exercise_ids(days: Iterable[Union[RestDay, WorkoutDay]]) -> List[int]:
    """Flatten the exercise ids of the given days, in order."""
    ids: List[int] = []
    for plan in days:
        if isinstance(plan, WorkoutDay):
            ids.extend(exercise.id for exercise in plan.exercises)
    return ids


# =============================================================================
# Request bodies
# =============================================================================


class GeneratePlanRequest(BaseModel):
    """
    Schema for weekly plan generation request.

    Attributes:
        user_id: Owner of the plan.
        regenerate: Force a rebuild even if a usable plan exists.
        week_start_date: Any date inside the target week (defaults to this week).
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "42",
                "regenerate": False,
                "week_start_date": "2026-10-12"
            }
        }
    )

    user_id: str = Field(..., description="User ID")
    regenerate: bool = Field(default=False, description="Force regeneration")
    week_start_date: Optional[date] = Field(
        default=None,
        description="Date inside the target week (normalized to Monday)"
    )


class CompleteDayRequest(BaseModel):
    """Schema for marking a day's workout as completed."""

    day: str = Field(..., description="Day of week (monday..sunday)")


class SkipDayRequest(BaseModel):
    """Schema for marking a day's workout as skipped."""

    day: str = Field(..., description="Day of week (monday..sunday)")
    reason: Optional[str] = Field(default=None, max_length=500, description="Why it was skipped")


class UpdatePreferredDaysRequest(BaseModel):
    """
    Schema for changing the preferred workout days of an existing plan.

    Attributes:
        preferred_workout_days: New set of workout days.
        preserve_completed: Leave already completed days untouched.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "preferred_workout_days": ["tuesday", "thursday", "friday"],
                "preserve_completed": True
            }
        }
    )

    preferred_workout_days: List[str] = Field(..., description="New workout days")
    preserve_completed: bool = Field(default=True, description="Keep completed days as-is")

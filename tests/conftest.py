"""Shared fixtures and in-memory collaborators for the planner tests."""

import os

os.environ.setdefault("DATABASE_URL", "mongodb://localhost:27017")

import random
from datetime import date
from typing import Dict, List, Optional

import pytest

from app.schemas.weekly_plan import (
    ExerciseCandidate,
    GenerationMethod,
    PlanDraft,
    PreferencesSnapshot,
    RestDay,
    UserProfile,
    WeekPlan,
    WorkoutDay,
)
from app.services.fallback_allocator import exercises_per_day
from app.services.plan_repository import WeeklyPlanRepository
from app.services.recommendation_client import AttemptState, RecommendationOutcome
from app.utils.dates import DAYS_OF_WEEK
from app.utils.errors import ProfileUnavailableError

# Wednesday; its week starts on Monday 2026-10-12
TODAY = date(2026, 10, 14)
WEEK_START = date(2026, 10, 12)


def make_exercise(exercise_id: int, muscle_group: str = "core", calories: int = 28) -> ExerciseCandidate:
    return ExerciseCandidate(
        id=exercise_id,
        name=f"Exercise {exercise_id}",
        target_muscle_group=muscle_group,
        estimated_calories=calories,
    )


def make_plan(
    workout_days: List[str],
    fitness_level: str = "beginner",
    generation_method: GenerationMethod = GenerationMethod.ML_AUTO,
    per_day: Optional[int] = None,
    user_id: str = "42",
    week_start: date = WEEK_START,
    today: date = TODAY
) -> WeekPlan:
    """Plan whose workout days hold consecutive exercise ids starting at 1."""
    per_day = per_day or exercises_per_day(fitness_level)
    next_id = 1
    days = {}
    for day in DAYS_OF_WEEK:
        if day not in workout_days:
            days[day] = RestDay()
            continue
        exercises = [make_exercise(next_id + i) for i in range(per_day)]
        next_id += per_day
        days[day] = WorkoutDay(
            exercises=exercises,
            estimated_duration=per_day * 4,
            estimated_calories=per_day * 28,
            focus_areas=["core"],
        )
    draft = PlanDraft.from_days(days, generation_method)
    return WeekPlan.from_draft(
        draft,
        user_id=user_id,
        week_start_date=week_start,
        snapshot=PreferencesSnapshot(
            fitness_level=fitness_level,
            preferred_workout_days=[d for d in DAYS_OF_WEEK if d in workout_days],
            target_muscle_groups=["core"],
        ),
        today=today,
    )


class InMemoryPlanRepository(WeeklyPlanRepository):
    """Dict-backed repository; stores copies so callers can't mutate state."""

    def __init__(self):
        self.plans: Dict = {}
        self.writes = 0

    async def find_active(self, user_id, week_start):
        for plan in self.plans.values():
            if plan.user_id == user_id and plan.week_start_date == week_start and plan.is_active:
                return plan.model_copy(deep=True)
        return None

    async def get(self, plan_id):
        plan = self.plans.get(plan_id)
        return plan.model_copy(deep=True) if plan else None

    async def replace_week(self, plan):
        self.plans = {
            plan_id: stored for plan_id, stored in self.plans.items()
            if not (stored.user_id == plan.user_id and stored.week_start_date == plan.week_start_date)
        }
        self.plans[plan.plan_id] = plan.model_copy(deep=True)
        self.writes += 1
        return plan

    async def save(self, plan):
        self.plans[plan.plan_id] = plan.model_copy(deep=True)
        self.writes += 1
        return plan


class FakeCatalog:
    """Exercise catalog returning a fixed list, recording each fetch."""

    def __init__(self, exercises: Optional[List[ExerciseCandidate]] = None, error: Optional[Exception] = None):
        self.exercises = list(exercises or [])
        self.error = error
        self.calls = []

    async def fetch(self, difficulty, muscle_groups, count):
        self.calls.append((difficulty, list(muscle_groups), count))
        if self.error:
            raise self.error
        return list(self.exercises[:count])


class FakeProfileClient:
    def __init__(self, profile: Optional[UserProfile] = None):
        self.profile = profile
        self.calls = []

    async def get_profile(self, user_id):
        self.calls.append(user_id)
        if self.profile is None:
            raise ProfileUnavailableError(detail="Identity service returned status 404")
        return self.profile


class FakeRecommendationClient:
    def __init__(self, plan: Optional[PlanDraft] = None):
        self.plan = plan
        self.calls = []

    async def generate(self, **kwargs):
        self.calls.append(kwargs)
        if self.plan is None:
            return RecommendationOutcome(plan=None, state=AttemptState.FALLBACK, attempts=2)
        return RecommendationOutcome(plan=self.plan, state=AttemptState.DONE, attempts=1, status_code=200)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def clock():
    return lambda: TODAY


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def repository():
    return InMemoryPlanRepository()


@pytest.fixture
def profile():
    return UserProfile(
        user_id="42",
        fitness_level="Intermediate",
        preferred_workout_days="monday,wednesday,friday",
        target_muscle_groups=["core", "upper_body"],
        goals=["weight_loss"],
        time_budget_minutes=30,
    )


@pytest.fixture
def catalog_exercises():
    return [make_exercise(i, "core" if i % 2 else "upper_body") for i in range(1, 11)]

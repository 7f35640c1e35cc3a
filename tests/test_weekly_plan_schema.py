"""Tests for the weekly plan models."""

from datetime import date

import pytest
from pydantic import ValidationError as PydanticValidationError

from app.schemas.weekly_plan import ExerciseCandidate, RestDay, WeekPlan, WorkoutDay
from app.utils.dates import DAYS_OF_WEEK
from conftest import make_plan


class TestExerciseCandidate:

    def test_accepts_recommendation_field_names(self):
        exercise = ExerciseCandidate.model_validate({
            "exercise_id": 3,
            "exercise_name": "Burpees",
            "muscle_group": "full_body",
            "calories": 40,
        })

        assert exercise.id == 3
        assert exercise.name == "Burpees"
        assert exercise.estimated_calories == 40
        assert exercise.duration_seconds == 240

    def test_requires_id(self):
        with pytest.raises(PydanticValidationError):
            ExerciseCandidate.model_validate({"name": "Plank"})


class TestWeekPlan:
    """Test the plan aggregate's invariants."""

    def test_days_must_be_complete(self):
        with pytest.raises(PydanticValidationError):
            WeekPlan(
                user_id="1",
                week_start_date=date(2026, 10, 12),
                week_end_date=date(2026, 10, 18),
                days={"monday": RestDay()},
            )

    def test_week_must_start_on_monday(self):
        with pytest.raises(PydanticValidationError):
            WeekPlan(
                user_id="1",
                week_start_date=date(2026, 10, 13),
                week_end_date=date(2026, 10, 19),
                days={day: RestDay() for day in DAYS_OF_WEEK},
            )

    def test_days_are_ordered_from_monday(self):
        plan = WeekPlan(
            user_id="1",
            week_start_date=date(2026, 10, 12),
            week_end_date=date(2026, 10, 18),
            days={day: RestDay() for day in reversed(DAYS_OF_WEEK)},
        )

        assert list(plan.days) == DAYS_OF_WEEK

    def test_round_trips_through_json(self):
        plan = make_plan(["monday", "thursday"])

        restored = WeekPlan.model_validate(plan.model_dump(mode="json"))

        assert isinstance(restored.days["monday"], WorkoutDay)
        assert isinstance(restored.days["tuesday"], RestDay)
        assert restored == plan

    def test_today_plan(self):
        plan = make_plan(["wednesday"])

        assert isinstance(plan.today_plan(date(2026, 10, 14)), WorkoutDay)
        assert plan.today_plan(date(2026, 10, 20)) is None

    def test_totals(self):
        plan = make_plan(["monday", "thursday"], fitness_level="advanced")

        assert plan.total_workout_days == 2
        assert plan.total_rest_days == 5
        assert plan.total_exercises == 12
        assert plan.workout_days() == ["monday", "thursday"]

    def test_rest_day_cannot_be_marked(self):
        plan = make_plan(["monday"])

        assert plan.mark_day_completed("tuesday") is False
        assert plan.mark_day_skipped("tuesday") is False
        assert plan.workouts_completed == 0

"""Tests for the fallback exercise allocator."""

import random

import pytest

from app.schemas.weekly_plan import GenerationMethod, RestDay, WorkoutDay, exercise_ids
from app.services.exercise_catalog import DEFAULT_EXERCISES
from app.services.fallback_allocator import (
    FallbackAllocator,
    PoolCursor,
    dedupe_by_id,
    exercises_per_day,
)
from app.utils.dates import DAYS_OF_WEEK
from conftest import FakeCatalog, make_exercise


class TestExercisesPerDay:
    """Test the fitness level table."""

    def test_known_levels(self):
        assert exercises_per_day("beginner") == 4
        assert exercises_per_day("intermediate") == 5
        assert exercises_per_day("advanced") == 6

    def test_unknown_level_defaults_to_four(self):
        assert exercises_per_day("elite") == 4
        assert exercises_per_day(None) == 4

    def test_level_is_case_insensitive(self):
        assert exercises_per_day("Advanced") == 6


class TestPoolCursor:
    """Test the wrapping cursor."""

    def test_wraps_to_start(self):
        pool = [make_exercise(i) for i in range(1, 4)]
        cursor = PoolCursor(pool)

        assert [e.id for e in cursor.draw(2)] == [1, 2]
        assert [e.id for e in cursor.draw(3)] == [3, 1, 2]

    def test_empty_pool_raises(self):
        with pytest.raises(ValueError):
            PoolCursor([]).draw(1)


def test_dedupe_keeps_first_occurrence():
    pool = dedupe_by_id([make_exercise(1, "core"), make_exercise(2), make_exercise(1, "legs")])

    assert [e.id for e in pool] == [1, 2]
    assert pool[0].target_muscle_group == "core"


class TestFallbackAllocator:
    """Test fallback plan construction."""

    async def test_intermediate_three_days_with_short_catalog(self, catalog_exercises, rng):
        """Ten unique candidates fill slots 1-10, slots 11-15 wrap to the pool start."""
        catalog = FakeCatalog(catalog_exercises)
        allocator = FallbackAllocator(catalog, rng=rng)

        draft = await allocator.allocate(
            ["monday", "wednesday", "friday"], "intermediate", ["core"], 30
        )

        assert draft.total_workout_days == 3
        assert draft.total_rest_days == 4
        assert draft.total_exercises == 15
        for day in ("monday", "wednesday", "friday"):
            assert len(draft.days[day].exercises) == 5

        first_ten = exercise_ids([draft.days["monday"], draft.days["wednesday"]])
        assert len(set(first_ten)) == 10
        assert exercise_ids([draft.days["friday"]]) == exercise_ids([draft.days["monday"]])

    async def test_overfetches_three_times_the_need(self, catalog_exercises, rng):
        catalog = FakeCatalog(catalog_exercises)
        allocator = FallbackAllocator(catalog, rng=rng)

        await allocator.allocate(["monday", "wednesday", "friday"], "intermediate", ["core"], 30)

        assert catalog.calls == [("intermediate", ["core"], 45)]

    async def test_every_workout_day_has_exact_count(self, rng):
        catalog = FakeCatalog([make_exercise(i) for i in range(1, 4)])
        allocator = FallbackAllocator(catalog, rng=rng)

        draft = await allocator.allocate(DAYS_OF_WEEK, "advanced", [], 60)

        for plan in draft.days.values():
            assert isinstance(plan, WorkoutDay)
            assert len(plan.exercises) == 6
        assert draft.total_exercises == 42

    async def test_rest_days_are_non_preferred_days(self, catalog_exercises, rng):
        allocator = FallbackAllocator(FakeCatalog(catalog_exercises), rng=rng)

        draft = await allocator.allocate(["tuesday", "saturday"], "beginner", [], 30)

        assert [d for d, p in draft.days.items() if isinstance(p, WorkoutDay)] == ["tuesday", "saturday"]
        assert isinstance(draft.days["sunday"], RestDay)
        assert list(draft.days) == DAYS_OF_WEEK

    async def test_duplicate_catalog_ids_are_dropped(self, rng):
        catalog = FakeCatalog([make_exercise(1), make_exercise(1), make_exercise(2), make_exercise(3)])
        allocator = FallbackAllocator(catalog, rng=rng)

        draft = await allocator.allocate(["monday"], "beginner", [], 30)

        ids = exercise_ids(draft.days.values())
        assert len(ids) == 4
        assert set(ids) == {1, 2, 3}

    async def test_empty_catalog_uses_default_exercises(self, rng):
        allocator = FallbackAllocator(FakeCatalog([]), rng=rng)

        draft = await allocator.allocate(["monday", "thursday"], "beginner", [], 30)

        default_ids = {e.id for e in DEFAULT_EXERCISES}
        ids = exercise_ids(draft.days.values())
        assert len(ids) == 8
        assert set(ids) <= default_ids

    async def test_no_preferred_days_skips_catalog(self, rng):
        catalog = FakeCatalog([make_exercise(1)])
        allocator = FallbackAllocator(catalog, rng=rng)

        draft = await allocator.allocate([], "beginner", [], 30)

        assert catalog.calls == []
        assert draft.total_workout_days == 0
        assert draft.total_exercises == 0
        assert all(isinstance(p, RestDay) for p in draft.days.values())

    async def test_duration_and_calories(self, catalog_exercises, rng):
        allocator = FallbackAllocator(FakeCatalog(catalog_exercises), rng=rng)

        draft = await allocator.allocate(["monday"], "intermediate", ["core", "upper_body"], 30)
        monday = draft.days["monday"]

        assert monday.estimated_duration == 20
        assert monday.estimated_calories == 140
        assert monday.focus_areas == ["core", "upper_body"]

    async def test_time_budget_caps_duration(self, catalog_exercises, rng):
        allocator = FallbackAllocator(FakeCatalog(catalog_exercises), rng=rng)

        draft = await allocator.allocate(["monday"], "advanced", [], 15)

        assert draft.days["monday"].estimated_duration == 15
        assert draft.days["monday"].estimated_calories == 105
        assert draft.days["monday"].focus_areas == ["full_body"]

    async def test_marks_plan_as_fallback(self, catalog_exercises, rng):
        allocator = FallbackAllocator(FakeCatalog(catalog_exercises), rng=rng)

        draft = await allocator.allocate(["monday"], "beginner", [], 30)

        assert draft.generation_method == GenerationMethod.FALLBACK
        assert draft.ml_generated is False
        assert draft.ml_confidence_score is None

    async def test_seeded_shuffle_is_reproducible(self, catalog_exercises):
        first = await FallbackAllocator(FakeCatalog(catalog_exercises), rng=random.Random(7)).allocate(
            ["monday", "friday"], "beginner", [], 30
        )
        second = await FallbackAllocator(FakeCatalog(catalog_exercises), rng=random.Random(7)).allocate(
            ["monday", "friday"], "beginner", [], 30
        )

        assert exercise_ids(first.days.values()) == exercise_ids(second.days.values())

    async def test_defaults_never_mix_with_catalog_pool(self, rng):
        catalog = FakeCatalog([make_exercise(1), make_exercise(2)])
        allocator = FallbackAllocator(catalog, rng=rng)

        draft = await allocator.allocate(["monday", "tuesday"], "advanced", [], 30)

        assert set(exercise_ids(draft.days.values())) == {1, 2}
        assert draft.total_exercises == 12

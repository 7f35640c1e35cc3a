"""
Weekly Planner API - Fallback Allocator.

Builds a week of DayPlans locally when the recommendation service has
nothing usable. Always succeeds.

Algorithm:
1. exercises_per_day from the fitness level (fixed table)
2. over-fetch 3x the needed candidates from the catalog
3. dedupe by id (first occurrence wins), then shuffle; the built-in
   default set replaces the pool only when the catalog returned nothing
   (it is never appended to a non-empty pool)
4. walk Monday..Sunday, drawing exactly exercises_per_day per preferred
   day from a cursor that wraps to the start of the pool
"""

import logging
import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Union

from app.schemas.weekly_plan import (
    ExerciseCandidate,
    GenerationMethod,
    PlanDraft,
    RestDay,
    WorkoutDay,
)
from app.services.exercise_catalog import DEFAULT_EXERCISES, ExerciseCatalogClient
from app.utils.dates import DAYS_OF_WEEK

logger = logging.getLogger(__name__)

# Tabata protocol: 4 minutes per exercise, ~7 calories per minute
MINUTES_PER_EXERCISE = 4
CALORIES_PER_MINUTE = 7
OVERFETCH_FACTOR = 3

EXERCISES_PER_DAY: Dict[str, int] = {
    "beginner": 4,
    "intermediate": 5,
    "advanced": 6,
}
DEFAULT_EXERCISES_PER_DAY = 4


def exercises_per_day(fitness_level: Optional[str]) -> int:
    """Number of exercises on every workout day for a fitness level."""
    return EXERCISES_PER_DAY.get((fitness_level or "").lower(), DEFAULT_EXERCISES_PER_DAY)


def dedupe_by_id(candidates: Iterable[ExerciseCandidate]) -> List[ExerciseCandidate]:
    """Drop repeated ids, keeping the first occurrence and its position."""
    seen = set()
    unique = []
    for candidate in candidates:
        if candidate.id in seen:
            continue
        seen.add(candidate.id)
        unique.append(candidate)
    return unique


@dataclass
class PoolCursor:
    """Sequential reader over a pool that wraps to index 0 when exhausted."""

    pool: Sequence[ExerciseCandidate]
    position: int = 0

    def draw(self, count: int) -> List[ExerciseCandidate]:
        if not self.pool:
            raise ValueError("cannot draw from an empty pool")
        drawn = []
        for _ in range(count):
            if self.position >= len(self.pool):
                self.position = 0
            drawn.append(self.pool[self.position])
            self.position += 1
        return drawn


class FallbackAllocator:
    """
    Deterministic-count exercise distribution across preferred days.

    The random source is injected so callers (and tests) control the
    shuffle; pass ``random.Random(seed)`` for reproducible plans.
    """

    def __init__(
        self,
        catalog: ExerciseCatalogClient,
        rng: Optional[random.Random] = None,
        default_pool: Optional[Sequence[ExerciseCandidate]] = None
    ):
        self.catalog = catalog
        self.rng = rng or random.Random()
        self.default_pool = list(default_pool or DEFAULT_EXERCISES)

    async def allocate(
        self,
        preferred_days: Iterable[str],
        fitness_level: str,
        target_muscle_groups: List[str],
        time_budget_minutes: int
    ) -> PlanDraft:
        """
        Build a fallback week.

        Args:
            preferred_days: Days that get a workout; others are rest days.
            fitness_level: beginner/intermediate/advanced.
            target_muscle_groups: Muscle groups to query the catalog with.
            time_budget_minutes: Upper bound for a single day's duration.

        Returns:
            PlanDraft: generation_method=fallback, ml_generated=False.
        """
        wanted = {str(day).lower() for day in preferred_days}
        workout_days = [day for day in DAYS_OF_WEEK if day in wanted]
        per_day = exercises_per_day(fitness_level)
        needed = len(workout_days) * per_day

        pool = await self.build_master_pool(fitness_level, target_muscle_groups, needed)
        cursor = PoolCursor(pool)

        duration = min(time_budget_minutes, per_day * MINUTES_PER_EXERCISE)
        focus_areas = list(target_muscle_groups) or ["full_body"]

        days: Dict[str, Union[RestDay, WorkoutDay]] = {}
        for day in DAYS_OF_WEEK:
            if day not in wanted:
                days[day] = RestDay()
                continue
            days[day] = WorkoutDay(
                exercises=cursor.draw(per_day),
                estimated_duration=duration,
                estimated_calories=duration * CALORIES_PER_MINUTE,
                focus_areas=focus_areas,
            )

        draft = PlanDraft.from_days(days, GenerationMethod.FALLBACK)
        logger.info(
            f"Fallback plan allocated: {draft.total_workout_days} workout days, "
            f"{draft.total_exercises} exercises from a pool of {len(pool)}"
        )
        return draft

    async def build_master_pool(
        self,
        fitness_level: str,
        target_muscle_groups: List[str],
        needed: int
    ) -> List[ExerciseCandidate]:
        """Deduplicated, shuffled catalog supply; the default set if the catalog gave nothing."""
        if needed <= 0:
            return list(self.default_pool)

        raw = await self.catalog.fetch(
            fitness_level,
            target_muscle_groups,
            needed * OVERFETCH_FACTOR
        )
        pool = dedupe_by_id(raw)
        if not pool:
            logger.warning("Exercise catalog returned nothing, using built-in exercises")
            return list(self.default_pool)

        self.rng.shuffle(pool)
        if len(pool) < needed:
            logger.info(
                f"Only {len(pool)} unique exercises for {needed} slots, cycling the pool"
            )
        return pool

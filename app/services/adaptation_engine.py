"""
Weekly Planner API - Adaptation Engine.

Adapts an existing weekly plan in place when the user's preferred days
change mid-week. Exercises from removed future days are salvaged into an
orphan pool and handed to the newly added days before anything is
fetched from the catalog.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional, Sequence

from app.schemas.weekly_plan import ExerciseCandidate, RestDay, WeekPlan, WorkoutDay
from app.services.exercise_catalog import DEFAULT_EXERCISES, ExerciseCatalogClient
from app.services.fallback_allocator import MINUTES_PER_EXERCISE, PoolCursor, exercises_per_day
from app.services.plan_repository import WeeklyPlanRepository
from app.utils.dates import Clock, is_future_day, normalize_days
from app.utils.errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass
class AdaptationSummary:
    """Counts describing one adaptation."""
    removed: List[str] = field(default_factory=list)
    added: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    orphaned: int = 0
    reallocated: int = 0
    topped_up: int = 0


@dataclass
class AdaptationResult:
    """Adapted plan and what changed."""
    plan: WeekPlan
    summary: AdaptationSummary


class AdaptationEngine:
    """
    Reallocates exercises from removed days to added days.

    "Future" is decided by weekday name position relative to the clock's
    today, not by calendar distance.
    """

    def __init__(
        self,
        repository: WeeklyPlanRepository,
        catalog: ExerciseCatalogClient,
        clock: Clock = date.today,
        default_pool: Optional[Sequence[ExerciseCandidate]] = None
    ):
        self.repository = repository
        self.catalog = catalog
        self.clock = clock
        self.default_pool = list(default_pool or DEFAULT_EXERCISES)

    async def adapt(
        self,
        plan: WeekPlan,
        old_days: Iterable[str],
        new_days: Iterable[str],
        preserve_completed: bool = True
    ) -> AdaptationResult:
        """
        Apply a preferred-day change to ``plan`` and persist it.

        The plan is rebuilt on a copy and written once at the end, so a
        failure part-way leaves the stored plan untouched.

        Raises:
            ValidationError: Unknown day names, or ``old_days`` not matching
                the plan's preference snapshot.
        """
        old = normalize_days(old_days)
        new = normalize_days(new_days)
        snapshot = plan.user_preferences_snapshot
        if set(old) != set(snapshot.preferred_workout_days):
            raise ValidationError(
                message="Preferred days do not match the plan",
                detail=(
                    f"Plan was built for {', '.join(snapshot.preferred_workout_days) or 'no days'}, "
                    f"got {', '.join(old) or 'no days'}"
                )
            )

        summary = AdaptationSummary(
            removed=[day for day in old if day not in new],
            added=[day for day in new if day not in old],
            unchanged=[day for day in old if day in new],
        )
        today = self.clock()
        working = plan.model_copy(deep=True)
        per_day = exercises_per_day(snapshot.fitness_level)

        orphans = self._release_removed_days(working, summary, today, preserve_completed)
        summary.orphaned = len(orphans)

        orphan_cursor = 0
        default_cursor = PoolCursor(self.default_pool)
        for day in summary.added:
            if isinstance(working.days[day], WorkoutDay):
                logger.info(f"Added day {day} already holds a workout, leaving it as-is")
                continue

            exercises = orphans[orphan_cursor:orphan_cursor + per_day]
            orphan_cursor += len(exercises)
            summary.reallocated += len(exercises)

            missing = per_day - len(exercises)
            if missing:
                fresh = await self._top_up(
                    snapshot.fitness_level,
                    snapshot.target_muscle_groups,
                    missing,
                    default_cursor
                )
                summary.topped_up += len(fresh)
                exercises = exercises + fresh

            working.days[day] = WorkoutDay(
                exercises=exercises,
                estimated_duration=len(exercises) * MINUTES_PER_EXERCISE,
                estimated_calories=sum(e.estimated_calories for e in exercises),
                focus_areas=sorted({e.target_muscle_group for e in exercises}),
                adapted_from_reallocation=True,
            )

        working.user_preferences_snapshot.preferred_workout_days = new
        working.recompute_totals(workout_day_count=len(new))
        await self.repository.save(working)

        logger.info(
            f"Adapted plan {working.plan_id}: removed={summary.removed} added={summary.added} "
            f"orphaned={summary.orphaned} reallocated={summary.reallocated} "
            f"topped_up={summary.topped_up}"
        )
        return AdaptationResult(plan=working, summary=summary)

    def _release_removed_days(
        self,
        plan: WeekPlan,
        summary: AdaptationSummary,
        today: date,
        preserve_completed: bool
    ) -> List[ExerciseCandidate]:
        """Turn removed future days into rest days, collecting their exercises."""
        orphans: List[ExerciseCandidate] = []
        for day in summary.removed:
            current = plan.days[day]
            if not isinstance(current, WorkoutDay):
                continue
            if current.completed:
                if not preserve_completed:
                    plan.days[day] = RestDay()
                continue
            if is_future_day(day, today):
                orphans.extend(current.exercises)
                plan.days[day] = RestDay()
            # Past days keep their assignments
        return orphans

    async def _top_up(
        self,
        fitness_level: str,
        muscle_groups: List[str],
        count: int,
        default_cursor: PoolCursor
    ) -> List[ExerciseCandidate]:
        """Exactly ``count`` fresh exercises: catalog first, built-in set for the rest."""
        fresh = (await self.catalog.fetch(fitness_level, muscle_groups, count))[:count]
        if len(fresh) < count:
            fresh.extend(default_cursor.draw(count - len(fresh)))
        return fresh

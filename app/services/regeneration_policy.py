"""Weekly Planner API - Regeneration Policy."""

from typing import Optional

from app.schemas.weekly_plan import GenerationMethod, WeekPlan, WorkoutDay
from app.services.fallback_allocator import exercises_per_day


class RegenerationPolicy:
    """
    Decides whether a stored weekly plan must be rebuilt.

    Pure predicate: never mutates the plan.
    """

    def reason(self, existing: Optional[WeekPlan], force: bool = False) -> Optional[str]:
        """Why the plan must be regenerated, or None if it can be reused."""
        if existing is None:
            return "no_existing_plan"
        if force:
            return "forced"
        if existing.generation_method == GenerationMethod.FALLBACK:
            # Fallback output is provisional, retry the recommendation path
            return "fallback_plan"

        expected = exercises_per_day(existing.user_preferences_snapshot.fitness_level)
        for plan in existing.days.values():
            if isinstance(plan, WorkoutDay) and plan.exercises and len(plan.exercises) != expected:
                return "inconsistent_exercise_count"
        return None

    def should_regenerate(self, existing: Optional[WeekPlan], force: bool = False) -> bool:
        return self.reason(existing, force) is not None

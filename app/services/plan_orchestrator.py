"""
Weekly Planner API - Plan Orchestrator.

Fetch-or-build-or-reuse for a user's weekly plan:

    load existing -> RegenerationPolicy -> (reuse | profile ->
    recommendation service -> fallback allocator -> replace stored plan)

Failure semantics:
- missing user profile aborts the call (ProfileUnavailableError)
- recommendation and catalog failures degrade to the fallback path
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional
from uuid import UUID

from app.schemas.weekly_plan import PlanDraft, UserProfile, WeekPlan
from app.services.fallback_allocator import FallbackAllocator
from app.services.plan_repository import WeeklyPlanRepository
from app.services.recommendation_client import RecommendationClient
from app.services.regeneration_policy import RegenerationPolicy
from app.services.user_profile import UserProfileClient
from app.utils.dates import Clock, normalize_day, week_start_for
from app.utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Plan returned by get_or_create and whether it was (re)built."""
    plan: WeekPlan
    regenerated: bool
    reason: Optional[str] = None


class PlanOrchestrator:
    """
    Top-level control for weekly plan generation.

    Usage:
        orchestrator = PlanOrchestrator(repo, profiles, recommendations, allocator)
        result = await orchestrator.get_or_create("42")
    """

    def __init__(
        self,
        repository: WeeklyPlanRepository,
        profile_client: UserProfileClient,
        recommendation_client: RecommendationClient,
        fallback_allocator: FallbackAllocator,
        policy: Optional[RegenerationPolicy] = None,
        clock: Clock = date.today
    ):
        self.repository = repository
        self.profile_client = profile_client
        self.recommendation_client = recommendation_client
        self.fallback_allocator = fallback_allocator
        self.policy = policy or RegenerationPolicy()
        self.clock = clock

    async def get_or_create(
        self,
        user_id: str,
        week_start_date: Optional[date] = None,
        force: bool = False
    ) -> GenerationResult:
        """
        Return the user's plan for a week, building it when needed.

        Args:
            user_id: Plan owner.
            week_start_date: Any date in the target week; defaults to today.
            force: Rebuild even if the stored plan is reusable.

        Raises:
            ProfileUnavailableError: If a rebuild is needed and the profile
                cannot be fetched.
        """
        today = self.clock()
        week_start = week_start_for(week_start_date or today)

        existing = await self.repository.find_active(user_id, week_start)
        reason = self.policy.reason(existing, force)
        if reason is None:
            existing.refresh_current_week(today)
            logger.info(f"Reusing weekly plan {existing.plan_id} for user {user_id}")
            return GenerationResult(plan=existing, regenerated=False)

        logger.info(
            f"Generating weekly plan for user {user_id}, week {week_start.isoformat()} ({reason})"
        )
        profile = await self.profile_client.get_profile(user_id)
        draft = await self._build_draft(profile)

        plan = WeekPlan.from_draft(
            draft,
            user_id=user_id,
            week_start_date=week_start,
            snapshot=profile.snapshot(),
            today=today
        )
        await self.repository.replace_week(plan)
        logger.info(
            f"Weekly plan {plan.plan_id} created ({plan.generation_method.value}, "
            f"{plan.total_workout_days} workout days)"
        )
        return GenerationResult(plan=plan, regenerated=True, reason=reason)

    async def get_week(self, user_id: str, any_day: date) -> WeekPlan:
        """Stored plan for the week containing ``any_day``; never generates."""
        week_start = week_start_for(any_day)
        plan = await self.repository.find_active(user_id, week_start)
        if plan is None:
            raise NotFoundError(message="No plan found for this week")
        plan.refresh_current_week(self.clock())
        return plan

    async def complete_day(self, plan_id: UUID, day: str) -> WeekPlan:
        """Mark a day's workout as completed and persist."""
        plan = await self._load(plan_id)
        if not plan.mark_day_completed(normalize_day(day), now=datetime.now(timezone.utc)):
            raise ValidationError(message="No workout planned for this day")
        return await self.repository.save(plan)

    async def skip_day(self, plan_id: UUID, day: str, reason: Optional[str] = None) -> WeekPlan:
        """Mark a day's workout as skipped and persist."""
        plan = await self._load(plan_id)
        if not plan.mark_day_skipped(normalize_day(day), reason, now=datetime.now(timezone.utc)):
            raise ValidationError(message="No workout planned for this day")
        return await self.repository.save(plan)

    async def _load(self, plan_id: UUID) -> WeekPlan:
        plan = await self.repository.get(plan_id)
        if plan is None:
            raise NotFoundError(message="Plan not found", detail=f"No plan with id {plan_id}")
        return plan

    async def _build_draft(self, profile: UserProfile) -> PlanDraft:
        outcome = await self.recommendation_client.generate(
            user_id=profile.user_id,
            preferred_days=profile.preferred_workout_days,
            fitness_level=profile.fitness_level,
            target_muscle_groups=profile.target_muscle_groups,
            goals=profile.goals,
            time_budget_minutes=profile.time_budget_minutes
        )
        if outcome.available:
            return outcome.plan

        logger.warning(
            f"Recommendation service unavailable after {outcome.attempts} attempt(s), using fallback"
        )
        return await self.fallback_allocator.allocate(
            preferred_days=profile.preferred_workout_days,
            fitness_level=profile.fitness_level,
            target_muscle_groups=profile.target_muscle_groups,
            time_budget_minutes=profile.time_budget_minutes
        )

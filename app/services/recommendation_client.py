# app/services/recommendation_client.py
"""
Weekly Planner API - Recommendation Service Client.

Calls the external recommendation service to build a weekly plan with:
- Bounded retry (2 attempts, 1 second apart) on transport failures only
- No retry on non-2xx answers, which are definitive
- A timing/outcome record per call for observability
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx
import sentry_sdk
from pydantic import ValidationError as PydanticValidationError

from app.schemas.weekly_plan import (
    GenerationMethod,
    PlanDraft,
    RestDay,
    WorkoutDay,
)
from app.services.fallback_allocator import exercises_per_day
from app.utils.dates import DAYS_OF_WEEK

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 2
RETRY_DELAY_SECONDS = 1.0


class AttemptState(Enum):
    """Recommendation call state."""
    ATTEMPTING = "attempting"
    RETRYING = "retrying"
    FALLBACK = "fallback"
    DONE = "done"


@dataclass
class RecommendationOutcome:
    """Result of a recommendation call. ``plan`` is None when unavailable."""
    plan: Optional[PlanDraft]
    state: AttemptState
    attempts: int = 0
    status_code: Optional[int] = None
    error: Optional[str] = None
    duration_ms: float = 0

    @property
    def available(self) -> bool:
        return self.plan is not None


class RecommendationClient:
    """
    Client for the weekly plan endpoint of the recommendation service.

    Usage:
        client = RecommendationClient(http_client, settings.ML_SERVICE_URL)
        outcome = await client.generate(user_id, days, "beginner", [], [], 30)
        if outcome.available:
            ...
    """

    ENDPOINT = "/generate-weekly-plan"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        timeout: float = 30.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        token: Optional[str] = None
    ):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.sleep = sleep
        self.token = token

    async def generate(
        self,
        user_id: str,
        preferred_days: List[str],
        fitness_level: str,
        target_muscle_groups: List[str],
        goals: List[str],
        time_budget_minutes: int
    ) -> RecommendationOutcome:
        """
        Request a weekly plan.

        Returns:
            RecommendationOutcome: ``plan`` set on success, None otherwise.
            Never raises for transport or HTTP failures.
        """
        payload = {
            "user_id": user_id,
            "workout_days": list(preferred_days),
            "fitness_level": fitness_level,
            "target_muscle_groups": list(target_muscle_groups),
            "goals": list(goals),
            "time_constraints": time_budget_minutes,
        }
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        start_time = time.monotonic()
        state = AttemptState.ATTEMPTING
        attempts = 0
        outcome: Optional[RecommendationOutcome] = None

        while outcome is None:
            attempts += 1
            logger.info(
                f"Recommendation request for user {user_id} "
                f"(attempt {attempts}/{MAX_ATTEMPTS}, {state.value})"
            )
            try:
                response = await self.http_client.post(
                    f"{self.base_url}{self.ENDPOINT}",
                    json=payload,
                    headers=headers,
                    timeout=self.timeout
                )
            except httpx.TransportError as e:
                logger.warning(f"Recommendation service transport failure (attempt {attempts}): {e!r}")
                if attempts < MAX_ATTEMPTS:
                    state = AttemptState.RETRYING
                    await self.sleep(RETRY_DELAY_SECONDS)
                    continue
                outcome = RecommendationOutcome(
                    plan=None, state=AttemptState.FALLBACK, attempts=attempts, error=repr(e)
                )
                break
            except httpx.HTTPError as e:
                logger.error(f"Recommendation request failed: {e!r}")
                outcome = RecommendationOutcome(
                    plan=None, state=AttemptState.FALLBACK, attempts=attempts, error=repr(e)
                )
                break

            if not response.is_success:
                logger.warning(
                    f"Recommendation service returned non-successful status {response.status_code}"
                )
                outcome = RecommendationOutcome(
                    plan=None,
                    state=AttemptState.FALLBACK,
                    attempts=attempts,
                    status_code=response.status_code
                )
                break

            try:
                plan = self._package(response, fitness_level)
            except Exception as e:
                logger.warning(f"Unusable recommendation response: {e!r}")
                plan = None
            outcome = RecommendationOutcome(
                plan=plan,
                state=AttemptState.DONE if plan else AttemptState.FALLBACK,
                attempts=attempts,
                status_code=response.status_code,
                error=None if plan else "unusable response"
            )

        outcome.duration_ms = (time.monotonic() - start_time) * 1000
        self._emit_record(user_id, outcome)
        return outcome

    def _package(self, response: httpx.Response, fitness_level: str) -> Optional[PlanDraft]:
        """Turn a 2xx body into a PlanDraft, or None if it cannot be used."""
        try:
            body = response.json()
        except ValueError:
            logger.warning("Recommendation service returned a non-JSON body")
            return None

        weekly_plan = body.get("weekly_plan") if isinstance(body, dict) else None
        if not isinstance(weekly_plan, dict):
            logger.warning("Recommendation response has no weekly_plan")
            return None
        metadata = body.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}

        try:
            days = {day: self._parse_day(weekly_plan.get(day)) for day in DAYS_OF_WEEK}
        except (PydanticValidationError, TypeError) as e:
            logger.warning(f"Recommendation response has malformed days: {e}")
            return None

        expected = exercises_per_day(fitness_level)
        for day, plan in days.items():
            if isinstance(plan, WorkoutDay) and len(plan.exercises) != expected:
                logger.warning(
                    f"Recommendation plan has {len(plan.exercises)} exercises on {day}, "
                    f"expected {expected}"
                )
                return None

        draft = PlanDraft.from_days(
            days,
            GenerationMethod.ML_AUTO,
            ml_confidence_score=self._confidence(metadata.get("confidence_score"))
        )
        reported = metadata.get("total_exercises")
        if reported is not None and reported != draft.total_exercises:
            logger.warning(
                f"Recommendation metadata reports {reported} exercises, plan holds {draft.total_exercises}"
            )
        return draft

    @staticmethod
    def _parse_day(raw: Optional[Dict[str, Any]]):
        if not isinstance(raw, dict) or not raw.get("planned"):
            return RestDay()
        data = {k: v for k, v in raw.items() if k not in ("day_type", "planned", "rest_day")}
        return WorkoutDay.model_validate(data)

    @staticmethod
    def _confidence(value: Any) -> Optional[float]:
        try:
            score = float(value)
        except (TypeError, ValueError):
            return None
        return score if 0.0 <= score <= 1.0 else None

    @staticmethod
    def _emit_record(user_id: str, outcome: RecommendationOutcome) -> None:
        """Fire-and-forget timing/outcome record."""
        try:
            record = {
                "user_id": user_id,
                "state": outcome.state.value,
                "attempts": outcome.attempts,
                "status_code": outcome.status_code,
                "duration_ms": round(outcome.duration_ms, 1),
                "available": outcome.available,
            }
            logger.info(
                f"Recommendation call finished in {record['duration_ms']}ms "
                f"after {outcome.attempts} attempt(s): {outcome.state.value}",
                extra={"recommendation": record}
            )
            sentry_sdk.add_breadcrumb(
                category="recommendation",
                message="weekly plan recommendation",
                level="info" if outcome.available else "warning",
                data=record,
            )
        except Exception as e:
            logger.debug(f"Failed to emit recommendation record: {e}")

"""
Weekly Planner API - User Profile Client.

Fetches fitness level and preferences from the identity service. Unlike
exercise data there is no fallback: failure aborts plan generation.
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from app.schemas.weekly_plan import UserProfile
from app.utils.errors import ProfileUnavailableError

logger = logging.getLogger(__name__)


class UserProfileClient:
    """Client for ``GET /api/users/{user_id}`` on the identity service."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        timeout: float = 10.0,
        token: Optional[str] = None
    ):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token = token

    async def get_profile(self, user_id: str) -> UserProfile:
        """
        Fetch a user's planning preferences.

        Raises:
            ProfileUnavailableError: On transport failure, non-2xx status
                or an unreadable body.
        """
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = await self.http_client.get(
                f"{self.base_url}/api/users/{user_id}",
                headers=headers,
                timeout=self.timeout
            )
        except httpx.HTTPError as e:
            logger.error(f"Exception fetching user data for {user_id}: {e!r}")
            raise ProfileUnavailableError(detail=f"Identity service unreachable: {e!r}")

        if not response.is_success:
            logger.error(f"Failed to fetch user {user_id} from auth service (status {response.status_code})")
            raise ProfileUnavailableError(
                detail=f"Identity service returned status {response.status_code}"
            )

        try:
            user = response.json()
            if isinstance(user, dict) and isinstance(user.get("data"), dict):
                user = user["data"]
            return UserProfile(
                user_id=str(user_id),
                fitness_level=user.get("fitness_level"),
                preferred_workout_days=user.get("preferred_workout_days"),
                target_muscle_groups=user.get("target_muscle_groups"),
                goals=user.get("fitness_goals") or user.get("goals"),
                time_budget_minutes=user.get("time_constraints_minutes") or 30,
                activity_level=user.get("activity_level") or "moderate",
                workout_experience_years=user.get("workout_experience_years") or 1,
            )
        except (ValueError, AttributeError, PydanticValidationError) as e:
            logger.error(f"Unreadable user profile for {user_id}: {e}")
            raise ProfileUnavailableError(detail="Identity service returned an unreadable profile")

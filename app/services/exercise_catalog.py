"""
Weekly Planner API - Exercise Catalog Client.

Fetches exercise candidates from the content service. Every failure
(transport, non-2xx, malformed body) degrades to an empty list; callers
substitute the built-in default set.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from app.schemas.weekly_plan import ExerciseCandidate
from app.services.cache import KEY_PREFIX, CacheService

logger = logging.getLogger(__name__)


def _default(id_: int, name: str, muscle_group: str, equipment: str = "none") -> ExerciseCandidate:
    return ExerciseCandidate(
        id=id_,
        name=name,
        target_muscle_group=muscle_group,
        difficulty_level="beginner",
        duration_seconds=240,
        estimated_calories=28,
        equipment_needed=equipment,
        category="tabata",
    )


# Built-in bodyweight set used when the catalog is unreachable or empty
DEFAULT_EXERCISES: List[ExerciseCandidate] = [
    _default(9001, "Jumping Jacks", "full_body"),
    _default(9002, "Bodyweight Squats", "lower_body"),
    _default(9003, "Push-ups", "upper_body"),
    _default(9004, "Mountain Climbers", "core"),
    _default(9005, "Burpees", "full_body"),
    _default(9006, "Alternating Lunges", "lower_body"),
    _default(9007, "High Knees", "full_body"),
    _default(9008, "Plank Shoulder Taps", "core"),
    _default(9009, "Glute Bridges", "lower_body"),
    _default(9010, "Tricep Dips", "upper_body", equipment="chair"),
    _default(9011, "Bicycle Crunches", "core"),
    _default(9012, "Squat Jumps", "lower_body"),
]


class ExerciseCatalogClient:
    """
    Client for the exercise catalog endpoint of the content service.

    Usage:
        catalog = ExerciseCatalogClient(http_client, base_url)
        exercises = await catalog.fetch("intermediate", ["core", "upper_body"], 30)
    """

    ENDPOINT = "/api/content/exercises"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        timeout: float = 10.0,
        cache: Optional[CacheService] = None,
        cache_ttl: int = 3600,
        token: Optional[str] = None
    ):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.token = token

    async def fetch(
        self,
        difficulty: str,
        muscle_groups: List[str],
        count: int
    ) -> List[ExerciseCandidate]:
        """
        Fetch up to ``count`` exercises matching difficulty and muscle groups.

        Args:
            difficulty: Difficulty level (the owner's fitness level).
            muscle_groups: Target muscle groups, sent comma-joined.
            count: Requested item count.

        Returns:
            List[ExerciseCandidate]: Possibly empty, never raises.
        """
        if count <= 0:
            return []

        params = {
            "difficulty": difficulty,
            "muscle_groups": ",".join(muscle_groups),
            "limit": count,
        }

        cache_key = None
        if self.cache is not None:
            cache_key = CacheService.generate_key(KEY_PREFIX, params)
            cached = await self.cache.get(cache_key)
            if cached:
                return self._parse_records(cached)

        records = await self._request(params)
        if records and self.cache is not None:
            await self.cache.set(cache_key, records, ttl_seconds=self.cache_ttl)
        return self._parse_records(records)

    async def _request(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = await self.http_client.get(
                f"{self.base_url}{self.ENDPOINT}",
                params=params,
                headers=headers,
                timeout=self.timeout
            )
        except httpx.HTTPError as e:
            logger.warning(f"Exercise catalog unreachable: {e}")
            return []

        if not response.is_success:
            logger.warning(f"Exercise catalog returned status {response.status_code}")
            return []

        try:
            body = response.json()
        except ValueError:
            logger.warning("Exercise catalog returned a non-JSON body")
            return []

        if isinstance(body, dict):
            body = body.get("data", body.get("exercises", []))
        if not isinstance(body, list):
            return []
        return [record for record in body if isinstance(record, dict)]

    @staticmethod
    def _parse_records(records: List[Dict[str, Any]]) -> List[ExerciseCandidate]:
        exercises = []
        for record in records:
            try:
                exercises.append(ExerciseCandidate.model_validate(record))
            except PydanticValidationError:
                logger.debug(f"Skipping malformed catalog record: {record!r}")
        return exercises

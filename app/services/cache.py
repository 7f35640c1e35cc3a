"""
Weekly Planner API - Catalog Response Cache.

Redis cache for raw exercise catalog responses, so repeated plan builds
with the same (difficulty, muscle groups, count) skip the content service.
A cache problem never fails a request: reads miss, writes are dropped.
"""

import json
import hashlib
import logging
import time
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

KEY_PREFIX = "catalog"


class CacheService:
    """
    Redis-backed store for catalog record lists.

    The Redis client is created on first use. After ``failure_threshold``
    consecutive errors the cache is bypassed for ``cooldown_seconds``.

    Attributes:
        hits: Catalog lookups answered from Redis.
        misses: Catalog lookups that went to the content service.
    """

    def __init__(
        self,
        redis_url: str,
        failure_threshold: int = 5,
        cooldown_seconds: float = 60.0
    ):
        self._redis_url = redis_url
        self._client = None
        self.failure_threshold = failure_threshold
        self.cooldown_seconds = cooldown_seconds
        self._consecutive_failures = 0
        self._bypass_until: Optional[float] = None
        self.hits = 0
        self.misses = 0

    @staticmethod
    def generate_key(prefix: str, params: Dict[str, Any]) -> str:
        """Deterministic key for a catalog query, independent of param order."""
        digest = hashlib.md5(json.dumps(params, sort_keys=True).encode()).hexdigest()[:12]
        return f"{prefix}:{digest}"

    @property
    def bypassed(self) -> bool:
        """True while the cache is skipped after repeated failures."""
        if self._bypass_until is None:
            return False
        if time.monotonic() < self._bypass_until:
            return True
        self._bypass_until = None
        self._consecutive_failures = 0
        return False

    def _failed(self, operation: str, error: Exception) -> None:
        self._consecutive_failures += 1
        logger.debug(f"Catalog cache {operation} failed: {error}")
        if self._consecutive_failures >= self.failure_threshold:
            self._bypass_until = time.monotonic() + self.cooldown_seconds
            logger.warning(
                f"Catalog cache bypassed for {self.cooldown_seconds:.0f}s "
                f"after {self._consecutive_failures} failures"
            )

    def _succeeded(self) -> None:
        self._consecutive_failures = 0

    def _redis(self):
        if self._client is None:
            import redis.asyncio as redis
            self._client = redis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
        return self._client

    async def get(self, key: str) -> Optional[List[Dict[str, Any]]]:
        """Cached catalog records for ``key``, or None on miss or error."""
        if self.bypassed:
            self.misses += 1
            return None
        try:
            raw = await self._redis().get(key)
        except Exception as e:
            self._failed("read", e)
            self.misses += 1
            return None

        self._succeeded()
        if not raw:
            self.misses += 1
            return None
        self.hits += 1
        return json.loads(raw)

    async def set(self, key: str, records: List[Dict[str, Any]], ttl_seconds: int = 3600) -> bool:
        """Store catalog records under ``key`` for ``ttl_seconds``."""
        if self.bypassed:
            return False
        try:
            await self._redis().setex(key, ttl_seconds, json.dumps(records))
        except Exception as e:
            self._failed("write", e)
            return False
        self._succeeded()
        return True

    async def healthcheck(self) -> bool:
        """Ping Redis."""
        try:
            await self._redis().ping()
        except Exception as e:
            self._failed("ping", e)
            return False
        self._succeeded()
        return True

    def get_stats(self) -> Dict[str, Any]:
        """Catalog hit/miss counters for the health endpoint."""
        lookups = self.hits + self.misses
        return {
            "catalog_hits": self.hits,
            "catalog_misses": self.misses,
            "catalog_hit_rate": round(self.hits / lookups * 100, 2) if lookups else 0.0,
            "bypassed": self.bypassed,
            "consecutive_failures": self._consecutive_failures,
        }


def _build_cache_service() -> CacheService:
    from settings import settings
    return CacheService(settings.REDIS_URL)


# Shared instance; the Redis connection itself is opened lazily
cache_service = _build_cache_service()

"""
Weekly Planner API - FastAPI Dependencies.

Dependency injection helpers wiring the planning services for routes.
"""

from datetime import date
from typing import Optional

import httpx
from fastapi import Depends

from settings import settings
from app.middleware.auth import forwarded_bearer
from app.services.adaptation_engine import AdaptationEngine
from app.services.cache import cache_service
from app.services.exercise_catalog import ExerciseCatalogClient
from app.services.fallback_allocator import FallbackAllocator
from app.services.plan_orchestrator import PlanOrchestrator
from app.services.plan_repository import MongoWeeklyPlanRepository, WeeklyPlanRepository
from app.services.recommendation_client import RecommendationClient
from app.services.user_profile import UserProfileClient
from app.utils.dates import Clock

# Shared outbound HTTP client - lazy initialized
_http_client: Optional[httpx.AsyncClient] = None


def get_http_client() -> httpx.AsyncClient:
    """Get or create the shared outbound HTTP client."""
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=50)
        )
    return _http_client


async def close_http_client() -> None:
    """Close the shared HTTP client on shutdown."""
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


def get_clock() -> Clock:
    """Source of "today" for plan decisions."""
    return date.today


def get_plan_repository() -> WeeklyPlanRepository:
    return MongoWeeklyPlanRepository()


def get_exercise_catalog(
    http_client: httpx.AsyncClient = Depends(get_http_client),
    token: Optional[str] = Depends(forwarded_bearer)
) -> ExerciseCatalogClient:
    return ExerciseCatalogClient(
        http_client,
        settings.CONTENT_SERVICE_URL,
        timeout=settings.CATALOG_TIMEOUT_SECONDS,
        cache=cache_service,
        cache_ttl=settings.CACHE_TTL_CATALOG,
        token=token
    )


def get_plan_orchestrator(
    repository: WeeklyPlanRepository = Depends(get_plan_repository),
    catalog: ExerciseCatalogClient = Depends(get_exercise_catalog),
    http_client: httpx.AsyncClient = Depends(get_http_client),
    token: Optional[str] = Depends(forwarded_bearer),
    clock: Clock = Depends(get_clock)
) -> PlanOrchestrator:
    """
    Build the orchestrator for one request.

    Returns:
        PlanOrchestrator: Wired with the Mongo repository, the identity,
        recommendation and catalog clients, and the fallback allocator.
    """
    return PlanOrchestrator(
        repository=repository,
        profile_client=UserProfileClient(
            http_client,
            settings.AUTH_SERVICE_URL,
            timeout=settings.PROFILE_TIMEOUT_SECONDS,
            token=token
        ),
        recommendation_client=RecommendationClient(
            http_client,
            settings.ML_SERVICE_URL,
            timeout=settings.RECOMMENDATION_TIMEOUT_SECONDS,
            token=token
        ),
        fallback_allocator=FallbackAllocator(catalog),
        clock=clock
    )


def get_adaptation_engine(
    repository: WeeklyPlanRepository = Depends(get_plan_repository),
    catalog: ExerciseCatalogClient = Depends(get_exercise_catalog),
    clock: Clock = Depends(get_clock)
) -> AdaptationEngine:
    return AdaptationEngine(repository=repository, catalog=catalog, clock=clock)

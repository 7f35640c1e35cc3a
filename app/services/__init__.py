"""Weekly Planner API - Services Package."""

from .cache import cache_service, CacheService
from .exercise_catalog import ExerciseCatalogClient, DEFAULT_EXERCISES
from .fallback_allocator import FallbackAllocator
from .recommendation_client import RecommendationClient, RecommendationOutcome
from .user_profile import UserProfileClient
from .regeneration_policy import RegenerationPolicy
from .plan_repository import WeeklyPlanRepository, MongoWeeklyPlanRepository
from .plan_orchestrator import PlanOrchestrator, GenerationResult
from .adaptation_engine import AdaptationEngine, AdaptationResult, AdaptationSummary

__all__ = [
    "cache_service",
    "CacheService",
    "ExerciseCatalogClient",
    "DEFAULT_EXERCISES",
    "FallbackAllocator",
    "RecommendationClient",
    "RecommendationOutcome",
    "UserProfileClient",
    "RegenerationPolicy",
    "WeeklyPlanRepository",
    "MongoWeeklyPlanRepository",
    "PlanOrchestrator",
    "GenerationResult",
    "AdaptationEngine",
    "AdaptationResult",
    "AdaptationSummary",
]

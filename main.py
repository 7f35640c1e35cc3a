# main.py
"""
Weekly Planner API - Main Application.

FastAPI app generating and adapting weekly workout plans on MongoDB.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from database import Database
from settings import settings
from app.middleware.db_middleware import LazyDatabaseMiddleware

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize Sentry for error tracking
if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.SENTRY_ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        integrations=[
            FastApiIntegration(),
            LoggingIntegration(
                level=logging.INFO,
                event_level=logging.ERROR
            ),
        ],
    )
    logger.info(f"Sentry initialized ({settings.SENTRY_ENVIRONMENT})")
else:
    logger.warning("Sentry DSN not configured - error tracking disabled")

# Import routers
from app.routes import weekly_plan
from app.dependencies import close_http_client

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting Weekly Planner API...")
    # Connect at startup; the lazy middleware retries if this fails
    try:
        await Database.connect_db(settings.DATABASE_URL, settings.DATABASE_NAME)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.warning(f"Failed to initialize database at startup: {e}")
        logger.warning("Database will be initialized lazily on first request")

    yield

    await close_http_client()
    await Database.close_db()
    logger.info("Weekly Planner API shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Weekly Planner API",
    version=API_VERSION,
    description="Weekly workout plan generation with ML recommendations and rule-based fallback",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Lazy database connection middleware
app.add_middleware(LazyDatabaseMiddleware)


# Health check
@app.get("/health")
async def health_check():
    """Health check endpoint - fast response without database dependency."""
    return {
        "status": "ok",
        "environment": settings.ENV,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": API_VERSION
    }


@app.get("/health/detailed")
async def health_check_detailed():
    """Detailed health check with MongoDB connectivity test."""
    try:
        mongo_ok = await Database.ping()
        return {
            "status": "ok" if mongo_ok else "degraded",
            "database": "mongodb",
            "database_connected": mongo_ok,
            "environment": settings.ENV,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": API_VERSION
        }
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        return {
            "status": "error",
            "database": "mongodb",
            "database_connected": False,
            "environment": settings.ENV,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "error": str(e)
        }


@app.get("/health/redis")
async def redis_health_check():
    """Redis connectivity and catalog cache statistics."""
    from app.services.cache import cache_service

    try:
        is_healthy = await cache_service.healthcheck()
        return {
            "status": "healthy" if is_healthy else "unhealthy",
            "redis_connected": is_healthy,
            **cache_service.get_stats(),
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    except Exception as e:
        logger.error(f"Redis health check failed: {str(e)}")
        return {
            "status": "error",
            "redis_connected": False,
            "error": str(e),
            "timestamp": datetime.now(timezone.utc).isoformat()
        }


# Include routers
app.include_router(weekly_plan.router, prefix="/plans", tags=["Weekly Plans"])


# Root endpoint
@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "message": "Weekly Planner API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/health"
    }

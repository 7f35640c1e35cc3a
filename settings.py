# settings.py
"""
Weekly Planner API Settings.

Pydantic settings management with environment variable support.
"""

from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # MongoDB - REQUIRED from environment
    DATABASE_URL: str = Field(..., description="MongoDB connection string (required)")
    DATABASE_NAME: str = Field(default="weekly_planner")

    # Environment
    ENV: str = Field(default="development")
    DEBUG: bool = Field(default=True)

    # Collaborating services
    AUTH_SERVICE_URL: str = Field(
        default="http://fitnease-auth",
        description="User profile service base URL"
    )
    ML_SERVICE_URL: str = Field(
        default="http://fitnease-ml:5000",
        description="Recommendation service base URL"
    )
    CONTENT_SERVICE_URL: str = Field(
        default="http://fitnease-content",
        description="Exercise catalog service base URL"
    )

    # Outbound timeouts (in seconds)
    PROFILE_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="User profile fetch timeout"
    )
    RECOMMENDATION_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        description="Recommendation call timeout (allows model inference)"
    )
    CATALOG_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Exercise catalog fetch timeout"
    )

    # Redis Configuration
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (redis://[:password@]host:port/db)"
    )

    # Cache TTL Defaults (in seconds)
    CACHE_TTL_CATALOG: int = Field(
        default=3600,
        description="Exercise catalog response cache TTL (1 hour)"
    )

    # Sentry Error Tracking
    SENTRY_DSN: Optional[str] = None
    SENTRY_ENVIRONMENT: str = "production"
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    # CORS
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    def get_cors_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    def validate_required_settings(self) -> None:
        """Validate that required settings are configured."""
        if not self.DATABASE_URL:
            raise ValueError("DATABASE_URL must be set")
        if not self.DATABASE_URL.startswith("mongodb"):
            raise ValueError("DATABASE_URL must be a MongoDB connection string")

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

# Validate in production
if settings.ENV == "production":
    settings.validate_required_settings()

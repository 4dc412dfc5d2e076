# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.GOOGLE_PLACES_API_KEY)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# The Clerk public key and the Places API key are optional at startup: their
# absence is reported as a ConfigError at the point of use, so /health keeps
# answering on a half-configured instance.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance or,
    inside request handlers, through the `get_settings` dependency.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # Storage for users, favorites and visits - required

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    CLERK_JWT_PUBLIC_KEY: str | None = Field(
        default=None,
        description="PEM-encoded RSA public key used to verify Clerk session tokens"
    )

    # -------------------------------------------------------------------------
    # Google Places
    # -------------------------------------------------------------------------

    GOOGLE_PLACES_API_KEY: str | None = Field(
        default=None,
        description="API key sent as X-Goog-Api-Key on every Places request"
    )

    PLACES_BASE_URL: str = Field(
        default="https://places.googleapis.com/v1",
        description="Base URL of the Places API (searchNearby and details)"
    )

    PLACES_MEDIA_BASE_URL: str = Field(
        default="https://places.googleapis.com/v1",
        description="Base URL used to build photo media URLs"
    )

    PLACES_TIMEOUT_S: float = Field(
        default=10.0,
        gt=0,
        le=60,
        description="Timeout for outbound Places requests, in seconds"
    )

    PLACES_FALLBACK_ENABLED: bool | None = Field(
        default=None,
        description="Serve fixed sample data when Places fails (never in production; set false to disable elsewhere)"
    )

    PHOTO_MAX_WIDTH_PX: int = Field(
        default=400,
        ge=0,
        le=4800,
        description="maxWidthPx requested for detail photos (0 = unset)"
    )

    PHOTO_MAX_HEIGHT_PX: int = Field(
        default=0,
        ge=0,
        le=4800,
        description="maxHeightPx requested for detail photos (0 = unset)"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    PORT: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Don't fail if .env doesn't exist (useful for production where
        # env vars are set directly)
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def use_places_fallback(self) -> bool:
        """
        Whether Places failures are answered with sample data.

        Never in production. Elsewhere it is on unless
        PLACES_FALLBACK_ENABLED is false.
        """
        if self.is_production:
            return False
        return self.PLACES_FALLBACK_ENABLED is not False


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()

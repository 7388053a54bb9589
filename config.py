"""
Configuration settings for the Tense Master engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Backend
    # ========================================
    backend: Literal["rest", "sql"] = Field(
        default="sql",
        description="Which store backs profiles and content: hosted REST or local SQL",
    )
    backend_url: str = Field(
        default="http://localhost:54321",
        description="Base URL of the hosted backend (PostgREST-style /rest/v1 endpoints)",
    )
    backend_api_key: str = Field(
        default="",
        description="Anon/service key sent as both apikey and bearer token",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for a single backend request",
    )

    # ========================================
    # Local database
    # ========================================
    database_url: str = Field(
        default="sqlite:///data/tensemaster.db",
        description="SQLAlchemy URL for the local/offline store",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Minimum loguru level written to stderr",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional file sink for logs",
    )

    # ========================================
    # Engine tuning
    # ========================================
    completion_threshold: int = Field(
        default=75,
        description="Lesson quiz score (percent) that marks a tense completed",
    )
    notification_stagger_ms: int = Field(
        default=600,
        description="Delay between consecutive achievement pop-ups",
    )
    streak_timezone: str = Field(
        default="UTC",
        description="IANA zone used to decide calendar-day boundaries for streaks and daily challenges",
    )
    leaderboard_limit: int = Field(
        default=500,
        description="Maximum number of learners shown on the leaderboard",
    )

    def is_rest_backend(self) -> bool:
        """True when profiles and content come from the hosted backend."""
        return self.backend == "rest"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

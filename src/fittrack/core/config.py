"""Application configuration."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Allow extra env vars without error
    )

    # Local API
    api_host: str = Field(default="127.0.0.1", description="API host")
    api_port: int = Field(default=8000, description="API port")
    api_prefix: str = Field(default="/api/v1", description="API prefix")

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./fittrack.db",
        description="SQLAlchemy async database URL (on-device SQLite by default)",
    )

    # Streak rules
    streak_min_distance: float = Field(
        default=0.0,
        ge=0,
        description="Minimum run distance for a day to count (0 = any run qualifies)",
    )
    streak_min_duration: int = Field(
        default=0,
        ge=0,
        description="Minimum run duration in seconds for a day to count",
    )
    monthly_freezes: int = Field(
        default=2,
        ge=0,
        description="Streak freezes allowed per calendar month",
    )
    streak_safety_limit_days: int = Field(
        default=3650,
        gt=0,
        description="Maximum number of days the streak walk inspects",
    )

    # Progression
    progression_history_sessions: int = Field(
        default=5,
        ge=2,
        description="How many recent sessions feed a progression recommendation",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level",
    )


# Global settings instance
settings = Settings()

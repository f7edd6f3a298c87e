"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

_WEEKDAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str = Field(
        default="America/Bogota",
        description="IANA timezone name or UTC offset used for timestamps and schedules",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:4200"],
        description="Origins allowed to call the API from a browser",
    )
    admin_role: str = Field(
        default="admin",
        description="Role that receives administrative notifications",
        min_length=1,
    )
    realtime_enabled: bool = Field(
        default=True,
        description="Push notifications through websockets when clients are connected",
    )
    push_timeout_seconds: float = Field(
        default=2.0,
        description="Upper bound for a single realtime push before it is abandoned",
        gt=0,
    )
    scheduler_enabled: bool = Field(
        default=False,
        description="Start the background statistics scheduler with the application",
    )
    daily_stats_hour: int = Field(default=8, ge=0, le=23)
    weekly_stats_day: str = Field(default="mon")
    weekly_stats_hour: int = Field(default=9, ge=0, le=23)
    monthly_stats_day: int = Field(default=1, ge=1, le=28)
    monthly_stats_hour: int = Field(default=10, ge=0, le=23)
    stats_run_timeout_seconds: float = Field(
        default=60.0,
        description="Maximum time a statistics run may spend collecting counts",
        gt=0,
    )

    @field_validator("weekly_stats_day")
    @classmethod
    def _validate_weekday(cls, value: str) -> str:
        normalized = value.strip().lower()[:3]
        if normalized not in _WEEKDAYS:
            raise ValueError("WEEKLY_STATS_DAY must be a weekday such as 'mon'")
        return normalized


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]

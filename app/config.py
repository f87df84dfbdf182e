# app/config.py
"""
Centralized configuration with validation.

Uses pydantic-settings to load and validate all environment variables at startup.
Fail fast with clear error messages if required config is missing.
"""

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from app.constants import ExpirationDefaults


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = Field(
        ...,
        description="PostgreSQL connection URL",
    )

    # Authentication
    ADMIN_API_KEY: str | None = Field(
        default=None,
        description="API key for admin endpoints",
    )

    # Application
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment: development, staging, production",
    )
    SITE_URL: str = Field(
        default="http://localhost:8000",
        description="Public site URL, quoted in author notification emails",
    )
    SITE_ID: int = Field(
        default=1,
        description="Site identifier, used to namespace the hourly sweep job",
    )

    # Expiration
    EXPIRATION_TIMEZONE: str = Field(
        default=ExpirationDefaults.TIMEZONE,
        description="IANA timezone used for every expiration date computation",
    )
    EXPIRATION_SCHEDULER_ENABLED: bool = Field(
        default=True,
        description="Run the hourly sweep in-process. Disable when an external cron calls the sweep endpoint.",
    )

    # Email Notifications
    RESEND_API_KEY: str | None = Field(
        default=None,
        description="Resend API key for author notifications",
    )
    EMAIL_FROM: str = Field(
        default="Content Expiration <notifications@localhost>",
        description="From address for author notifications",
    )
    EMAIL_ENABLED: bool = Field(
        default=True,
        description="Enable author notification emails",
    )

    # Logging
    LOG_JSON: bool = Field(
        default=True,
        description="Emit single-line JSON logs (False for human-readable local output)",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level",
    )

    @field_validator("EXPIRATION_TIMEZONE")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject unknown timezone names at startup."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone '{v}'") from e
        return v

    @field_validator("DATABASE_URL")
    @classmethod
    def fix_database_url(cls, v: str) -> str:
        """Pin bare postgresql:// URLs to the psycopg2 driver."""
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+psycopg2://", 1)
        return v

    @property
    def timezone(self) -> ZoneInfo:
        return ZoneInfo(self.EXPIRATION_TIMEZONE)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings. Call at startup to validate config."""
    return Settings()

"""
Configuration management for PowerSchool Grade Watch.

Loads and validates all required environment variables with clear error messages.
Uses Pydantic Settings for type safety and validation.
"""

import logging
from functools import lru_cache
from typing import Optional

from dateutil.tz import gettz
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All required variables must be set, or the application will fail fast
    with a clear error message indicating which variables are missing.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # PowerSchool Configuration
    powerschool_url: str = Field(
        ...,
        description="Base URL of the district's PowerSchool server"
    )
    powerschool_username: str = Field(
        ...,
        description="PowerSchool parent portal username"
    )
    powerschool_password: str = Field(
        ...,
        description="PowerSchool parent portal password"
    )

    # Discord Configuration
    discord_webhook_url: str = Field(
        ...,
        description="Discord channel webhook URL for change notifications"
    )

    # Snapshot files
    classes_snapshot_file: str = Field(
        default="backup_classes.json",
        description="Where the last seen class grades are stored"
    )
    assignments_snapshot_file: str = Field(
        default="backup_assignments.json",
        description="Where the last seen assignment grades are stored"
    )

    # Optional Configuration
    poll_interval_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Seconds between the start of two polling cycles"
    )
    term_title_prefix: str = Field(
        default="Q",
        description="Only reporting terms whose title starts with this prefix are tracked"
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for PowerSchool and Discord requests"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    timezone: str = Field(
        default="UTC",
        description="Timezone applied to upstream dates that carry none"
    )

    @field_validator("powerschool_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure base URL doesn't have trailing slash."""
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return upper

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Ensure timezone is a known zone name."""
        if gettz(v) is None:
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @property
    def powerschool_service_url(self) -> str:
        """Full URL of the public portal JSON service."""
        return f"{self.powerschool_url}/pearson-rest/services/PublicPortalServiceJSON"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Validated application settings

    Raises:
        ValidationError: If required environment variables are missing or invalid
    """
    return Settings()


def setup_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """
    Configure application logging.

    Args:
        settings: Optional settings instance, will be loaded if not provided

    Returns:
        logging.Logger: Configured logger instance
    """
    level = settings.log_level if settings is not None else "INFO"

    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)

    return logging.getLogger("ps_watch")

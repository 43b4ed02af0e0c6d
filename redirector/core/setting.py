"""
Configuration Settings

This module defines application configuration using Pydantic Settings.
All configuration is loaded from environment variables or .env file.

Design Decisions:
- Uses pydantic-settings for type-safe configuration
- PORT and the GeoIP credentials have no defaults: the service refuses
  to start without them
- Settings are built once by get_settings() and handed to create_app(),
  nothing else in the package reads the environment
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from redirector.core.exceptions import ConfigurationError

__all__ = ["Settings", "get_settings"]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Server Configuration
    PORT: int = Field(
        ...,
        description="TCP port the HTTP server listens on"
    )
    HOST: str = Field(
        default="0.0.0.0",
        description="Interface the HTTP server binds to"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # Data Files
    DATA_FILE: str = Field(
        default="urls.json",
        description="JSON object mapping slugs to destination URLs"
    )
    VISITS_FILE: str = Field(
        default="visits.jsonl",
        description="Append-only visit log, one JSON object per line"
    )

    # GeoIP Configuration (MaxMind GeoLite web service)
    GEOIP_ACCOUNT_ID: str = Field(
        ...,
        description="GeoIP web service account ID (basic auth user)"
    )
    GEOIP_LICENSE_KEY: str = Field(
        ...,
        description="GeoIP web service license key (basic auth password)"
    )
    GEOIP_BASE_URL: str = Field(
        default="https://geolite.info/geoip/v2.1/city",
        description="Base URL of the per-IP city lookup resource"
    )
    GEOIP_TIMEOUT: float = Field(
        default=5.0,
        description="Hard client-side timeout for one lookup, in seconds"
    )

    # Visit Pipeline
    VISIT_QUEUE_SIZE: int = Field(
        default=100,
        gt=0,
        description="Visits buffered before new ones are dropped"
    )

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = Field(
        default=True,
        description="Apply per-IP rate limits to the redirect endpoint"
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Build the settings once per process.

    Raises:
        ConfigurationError: If a required variable is missing or invalid
    """
    try:
        return Settings()
    except ValidationError as e:
        missing = ", ".join(
            str(error["loc"][0]).upper() for error in e.errors() if error.get("loc")
        )
        raise ConfigurationError(missing or "settings", str(e)) from e

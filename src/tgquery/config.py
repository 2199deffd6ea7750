"""Configuration management for tgquery."""

from __future__ import annotations

from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from tgquery.errors import ConfigurationError
from tgquery.logging_utils import LogProfile, configure_logging


class Settings(BaseSettings):
    """Query layer settings."""

    model_config = SettingsConfigDict(
        env_prefix="TGQUERY_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Dispatch
    request_timeout_seconds: float = Field(default=30.0, gt=0, description="Seconds to wait for one engine reply")

    # Query limits
    max_page_limit: int = Field(default=100, gt=0, description="Upper bound for paginated limits")
    search_chats_limit: int = Field(default=2, gt=0, description="Chats returned when resolving a chat by name")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_profile: LogProfile = Field(default="default", description="Log output profile")


def get_settings(**overrides: Any) -> Settings:
    """Load settings from the environment and configure logging.

    Raises:
        ConfigurationError: when a value fails validation.
    """

    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc

    configure_logging(profile=settings.log_profile, level=settings.log_level)
    return settings

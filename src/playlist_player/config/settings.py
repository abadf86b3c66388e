"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import FadeTimeConstant, PositiveInt, TimeoutSeconds


class PlaybackSettings(BaseModel):
    """Track and track list behaviour."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    fade_time_constant: FadeTimeConstant = Field(
        default=0.1,
        validation_alias=AliasChoices("fade_time_constant", "fade"),
    )
    skip_unloadable: bool = False
    preload: bool = False
    loop_tracks: bool = Field(
        default=False, validation_alias=AliasChoices("loop_tracks", "loop")
    )


class LoaderSettings(BaseModel):
    """Resource fetch configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    timeout_seconds: TimeoutSeconds = Field(
        default=30.0,
        validation_alias=AliasChoices("timeout_seconds", "timeout"),
    )
    follow_redirects: bool = True
    user_agent: str = Field(default="playlist-player/0.1", min_length=1)
    max_bytes: PositiveInt = 200 * 1024 * 1024


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - PLAYBACK__FADE_TIME_CONSTANT, PLAYBACK__SKIP_UNLOADABLE, etc. (nested)
    - LOADER__TIMEOUT_SECONDS, LOADER__USER_AGENT, etc. (nested)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        strict=True,
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)
    loader: LoaderSettings = Field(default_factory=LoaderSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()

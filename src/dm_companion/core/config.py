"""Configuration management for the DM Companion.

This module provides centralized configuration management using pydantic-settings,
supporting environment variables, .env files, and runtime configuration overrides.

Example:
    >>> from dm_companion.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.app_name)
    'DM Companion'

Environment Variables:
    DM_COMPANION_DATABASE_PATH: Path to the SQLite account database
    DM_COMPANION_MONSTER_CACHE_PATH: Path to the monster cache JSON file
    DM_COMPANION_SRD_BASE_URL: Base URL of the D&D 5e SRD API
    DM_COMPANION_SESSION_AUTOSAVE_INTERVAL_SECONDS: Autosave interval
    DM_COMPANION_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dm_companion.core.exceptions import ConfigurationError


class StorageSettings(BaseSettings):
    """Configuration for file storage paths.

    Attributes:
        database_path: Path to the SQLite account database.
        monster_cache_path: Path to the monster catalog JSON file.
    """

    model_config = SettingsConfigDict(
        env_prefix="DM_COMPANION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/accounts.db"),
        description="Path to SQLite account database",
    )
    monster_cache_path: Path = Field(
        default=Path("data/monsters-full.json"),
        description="Path to the monster catalog JSON file",
    )


class SrdApiSettings(BaseSettings):
    """Configuration for the D&D 5e SRD API client.

    Attributes:
        base_url: API root, without trailing slash.
        timeout_seconds: Per-request timeout.
        max_retries: Attempts for connection errors and timeouts.
    """

    model_config = SettingsConfigDict(
        env_prefix="DM_COMPANION_SRD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(
        default="https://www.dnd5eapi.co/api",
        description="SRD API base URL",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="API request timeout",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum API attempts",
    )

    @field_validator("base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Normalize the base URL so paths can be appended with '/'.

        Raises:
            ConfigurationError: If the URL is not http(s).
        """
        if not value.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"SRD base_url must be an http(s) URL, got {value!r}",
                config_key="base_url",
            )
        return value.rstrip("/")


class SessionSettings(BaseSettings):
    """Configuration for user session persistence.

    Attributes:
        autosave_interval_seconds: Minimum seconds between autosaves.
    """

    model_config = SettingsConfigDict(
        env_prefix="DM_COMPANION_SESSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    autosave_interval_seconds: float = Field(
        default=30.0,
        gt=0,
        le=3600,
        description="Seconds between automatic session flushes",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        storage: File storage settings.
        srd: SRD API client settings.
        session: User session settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="DM_COMPANION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="DM Companion",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    storage: StorageSettings = Field(default_factory=StorageSettings)
    srd: SrdApiSettings = Field(default_factory=SrdApiSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode.

        Returns:
            True if not in debug mode.
        """
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If required configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    This is primarily useful for testing or when environment variables
    have changed at runtime.
    """
    get_settings.cache_clear()


__all__ = [
    "StorageSettings",
    "SrdApiSettings",
    "SessionSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]

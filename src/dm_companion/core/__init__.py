"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        DmCompanionError: Base exception for all application errors.
        InvalidRangeError: Out-of-domain level, score or table key.
        StorageError and subclasses: Account and session failures.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from dm_companion.core.config import (
    SessionSettings,
    Settings,
    SrdApiSettings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from dm_companion.core.exceptions import (
    AccountExistsError,
    AccountNotFoundError,
    AuthenticationError,
    CatalogError,
    ConfigurationError,
    DiceRollError,
    DmCompanionError,
    EncounterError,
    InvalidRangeError,
    NoEligibleMonstersError,
    RulesError,
    SessionStateError,
    StorageError,
    ValidationError,
)
from dm_companion.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "DmCompanionError",
    # Rules exceptions
    "RulesError",
    "InvalidRangeError",
    "EncounterError",
    "NoEligibleMonstersError",
    "DiceRollError",
    # Storage exceptions
    "StorageError",
    "AccountNotFoundError",
    "AccountExistsError",
    "AuthenticationError",
    "SessionStateError",
    "CatalogError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Configuration
    "Settings",
    "StorageSettings",
    "SrdApiSettings",
    "SessionSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]

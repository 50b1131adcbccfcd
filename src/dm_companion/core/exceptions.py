"""Custom exception hierarchy for the DM Companion.

This module defines the exception hierarchy used across the rules engine,
encounter generation, dice rolling, and persistence layers. All exceptions
inherit from DmCompanionError, enabling unified error handling at the
application boundary while preserving domain-specific context.

Example:
    >>> from dm_companion.core.exceptions import InvalidRangeError
    >>> raise InvalidRangeError("Level out of range", value=25, minimum=1, maximum=20)
"""

from __future__ import annotations

from typing import Any


class DmCompanionError(Exception):
    """Base exception for all DM Companion errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Rules Domain Exceptions
# =============================================================================


class RulesError(DmCompanionError):
    """Base exception for rules-engine errors (stats, tables, encounters)."""


class InvalidRangeError(RulesError):
    """Raised when a level, score or table key lies outside its documented domain.

    Callers are expected to pass in-domain values; this is raised instead
    of silently clamping.
    """

    def __init__(
        self,
        message: str,
        *,
        value: Any | None = None,
        minimum: Any | None = None,
        maximum: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize range error with bound context.

        Args:
            message: Human-readable error description.
            value: The offending value.
            minimum: Lowest accepted value.
            maximum: Highest accepted value.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if value is not None:
            combined_details["value"] = value
        if minimum is not None:
            combined_details["minimum"] = minimum
        if maximum is not None:
            combined_details["maximum"] = maximum
        super().__init__(message, details=combined_details)


class EncounterError(RulesError):
    """Base exception for encounter-generation errors."""


class NoEligibleMonstersError(EncounterError):
    """Raised by callers that prefer exceptions over the NoEligibleMonsters result.

    The encounter builder itself never raises this; it returns a
    NoEligibleMonsters outcome which can be converted with ``to_error()``.
    """

    def __init__(
        self,
        message: str,
        *,
        min_cr: float | None = None,
        max_cr: float | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the challenge rating window that matched nothing.

        Args:
            message: Human-readable error description.
            min_cr: Lower bound of the challenge rating window.
            max_cr: Upper bound of the challenge rating window.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if min_cr is not None:
            combined_details["min_cr"] = min_cr
        if max_cr is not None:
            combined_details["max_cr"] = max_cr
        super().__init__(message, details=combined_details)


class DiceRollError(RulesError):
    """Raised when dice rolling operations fail.

    This typically occurs when parsing invalid dice notation or an
    unsupported die size.
    """

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


# =============================================================================
# Storage Domain Exceptions
# =============================================================================


class StorageError(DmCompanionError):
    """Base exception for persistence errors."""


class AccountNotFoundError(StorageError):
    """Raised when an account name does not exist in the store."""

    def __init__(
        self,
        message: str,
        *,
        account_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the missing account name.

        Args:
            message: Human-readable error description.
            account_name: Name that was looked up.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if account_name:
            combined_details["account_name"] = account_name
        super().__init__(message, details=combined_details)


class AccountExistsError(StorageError):
    """Raised when creating an account whose name is already taken."""

    def __init__(
        self,
        message: str,
        *,
        account_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the conflicting account name.

        Args:
            message: Human-readable error description.
            account_name: Name that already exists.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if account_name:
            combined_details["account_name"] = account_name
        super().__init__(message, details=combined_details)


class AuthenticationError(StorageError):
    """Raised when a login password does not match the stored one."""


class SessionStateError(StorageError):
    """Raised when a user session is used after logout."""


class CatalogError(DmCompanionError):
    """Raised when monster catalog data cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize catalog error with source context.

        Args:
            message: Human-readable error description.
            source: File path or URL the catalog was read from.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if source:
            combined_details["source"] = source
        super().__init__(message, details=combined_details)


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(DmCompanionError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(DmCompanionError):
    """Raised when data validation fails.

    This includes constraint violations or type mismatches in user input
    or external data (catalog payloads, account names).
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


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
]

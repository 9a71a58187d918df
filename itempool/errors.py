"""
itempool - Core Error Types

Defines the exception hierarchy for the item pool and its storage backends.
All exceptions inherit from ItemPoolError for consistent error handling.

Two families:
- Pool errors (ConfigurationError, InvalidArgumentError) surface to callers.
- Backend errors (BackendValidationError, BackendRuntimeError) are raised by
  storage implementations and translated by the pool.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Standard error codes for structured error output.
    """

    # Caller errors
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    INVALID_KEY = "INVALID_KEY"

    # Setup errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    MISSING_CAPABILITY = "MISSING_CAPABILITY"

    # Backend errors
    BACKEND_VALIDATION = "BACKEND_VALIDATION"
    BACKEND_RUNTIME = "BACKEND_RUNTIME"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ItemPoolError(Exception):
    """Base exception for all itempool errors."""

    default_code = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: ErrorCode | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.code = code or self.default_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured output."""
        return {
            "error": self.__class__.__name__,
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class CacheError(ItemPoolError):
    """Base exception for pool-level errors."""


class ConfigurationError(CacheError):
    """Raised when configuration is invalid or a storage capability is missing."""

    default_code = ErrorCode.CONFIGURATION_ERROR


class InvalidArgumentError(ItemPoolError, ValueError):
    """Raised for malformed keys, foreign items and bad expiration arguments."""

    default_code = ErrorCode.INVALID_ARGUMENT


class BackendError(ItemPoolError):
    """
    Base exception raised by storage backends.

    The set of variants is closed: every backend failure is either a
    validation failure or a runtime failure, tagged by ``kind``.
    """

    kind: str = "runtime"
    default_code = ErrorCode.BACKEND_RUNTIME

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        backend: str | None = None,
    ):
        super().__init__(message, details)
        self.backend = backend
        if backend:
            self.details.setdefault("backend", backend)


class BackendValidationError(BackendError):
    """Raised by a backend when it rejects its input (bad key, bad value)."""

    kind = "validation"
    default_code = ErrorCode.BACKEND_VALIDATION


class BackendRuntimeError(BackendError):
    """Raised by a backend for operational failures (I/O, connection, serialization)."""

    kind = "runtime"
    default_code = ErrorCode.BACKEND_RUNTIME


def extract_error_code(error: Exception) -> ErrorCode:
    """
    Extract appropriate ErrorCode from an exception.

    Args:
        error: Exception to categorize

    Returns:
        Appropriate ErrorCode for the exception
    """
    if isinstance(error, ItemPoolError):
        return error.code

    return ErrorCode.INTERNAL_ERROR

"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional to keep shapes consistent without forcing every
    error to fill them all.
    """

    code: str
    message: str
    hint: str
    max_value: int
    actual_value: int
    http_status: int
    scope: str
    remaining: int
    reset_in_minutes: int
    model: str
    provider: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when request input validation fails."""


class ConfigurationAppError(AppError):
    """Raised when the service is missing required configuration."""


class LLMAppError(AppError):
    """Raised when LLM provider/client operations fail."""


class RateLimitAppError(AppError):
    """Raised when an identifier has exhausted its rate limit window."""

    @property
    def reset_in_minutes(self) -> int:
        return int((self.details or {}).get("reset_in_minutes", 0))

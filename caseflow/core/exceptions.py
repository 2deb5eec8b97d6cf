"""Custom exception hierarchy for the case management API.

Every service-layer error inherits from CaseflowError, giving the API
layer a single base class to catch and translate into structured JSON
responses. Subclasses map one-to-one onto HTTP status codes in
caseflow.api.middleware.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from caseflow.models.domain import DuplicateMatch


class CaseflowError(Exception):
    """Base exception for all case management errors."""

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.details: dict[str, Any] = details or {}
        super().__init__(message)


class InvalidRequestError(CaseflowError):
    """Raised when required fields are missing or malformed."""


class InvalidTransitionError(CaseflowError):
    """Raised when a case lifecycle transition is not allowed."""


class AuthenticationError(CaseflowError):
    """Raised when the caller's bearer token is missing or invalid."""


class AuthorizationError(CaseflowError):
    """Raised when the caller's role or relationship forbids the action."""


class NotFoundError(CaseflowError):
    """Raised when a requested resource does not exist."""


class DuplicateCaseError(CaseflowError):
    """Raised when a filing matches open cases and was not confirmed."""

    def __init__(
        self,
        message: str,
        *,
        duplicates: list[DuplicateMatch],
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.duplicates = duplicates


class SchedulingConflictError(CaseflowError):
    """Raised when a court is already booked for the requested slot."""


class DatabaseError(CaseflowError):
    """Raised when a database operation fails."""

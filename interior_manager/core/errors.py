"""Domain error types raised by the service layer.

Purpose:
- Let services signal "not found", "forbidden" and "conflict" outcomes
  without depending on FastAPI.
- The server registers handlers that translate each type into an HTTP status.

Usage:
- Raise ``NotFoundError("Project not found")`` from a service; the API
  returns ``404 {"detail": "Project not found"}``.
- Catch ``DomainError`` for any of them.
"""

from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base error for domain rule violations.

    Args:
        message: Human-readable error description.
        details: Optional structured context for the client.
    """

    status_code: int = 400

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailedError(DomainError):
    """Request is well-formed but violates a business rule."""

    status_code = 400


class AuthenticationError(DomainError):
    """Missing, unknown or expired session."""

    status_code = 401


class PermissionDeniedError(DomainError):
    """The user lacks the permission or project access required."""

    status_code = 403


class NotFoundError(DomainError):
    """Requested record does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """Operation conflicts with current state (duplicates, frozen records)."""

    status_code = 409


class ImportFileError(DomainError):
    """An uploaded BOQ file could not be parsed.

    ``errors`` carries the individual messages, e.g. the missing columns and
    the columns that were found.
    """

    status_code = 400

    def __init__(self, message: str, *, errors: Optional[list[str]] = None) -> None:
        super().__init__(message, details=errors or [message])
        self.errors = errors or [message]

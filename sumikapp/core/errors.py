"""Error types raised by SumikAPP services.

Purpose:
- Give services typed exceptions for the business rules they enforce.
- Carry an HTTP status code so the exception handlers can map a failure to a
  response without the services knowing about HTTP.

Usage:
- Catch ``SumikappError`` for any domain failure and inspect ``status_code``
  or ``details``.
- Catch a concrete subclass (e.g. ``InvalidStatusTransitionError``) when the
  caller needs to react to one rule in particular.
"""

from __future__ import annotations

from typing import Any, Optional


class SumikappError(Exception):
    """Base error for domain failures.

    Args:
        message: Human-readable error description.
        status_code: HTTP status code the failure maps to.
        details: Optional structured context (ids, offending values).
    """

    status_code: int = 400

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details


class NotFoundError(SumikappError):
    """Raised when a row the caller referenced does not exist."""

    status_code = 404

    def __init__(self, resource: str, identifier: Any) -> None:
        super().__init__(f"{resource} not found: {identifier}", details={"resource": resource, "id": identifier})
        self.resource = resource
        self.identifier = identifier


class AuthenticationError(SumikappError):
    """Raised when the caller cannot be identified."""

    status_code = 401


class PermissionDeniedError(SumikappError):
    """Raised when the caller's role or ownership does not allow the operation."""

    status_code = 403


class ConflictError(SumikappError):
    """Raised when the operation would violate a uniqueness rule."""

    status_code = 409


class InvalidStatusTransitionError(SumikappError):
    """Raised when a document is asked to move to a status its current status does not allow.

    Args:
        resource: Kind of document (e.g. ``"Weekly report"``).
        current: Status the document is in.
        target: Status that was requested.
    """

    status_code = 409

    def __init__(self, resource: str, current: Any, target: Any) -> None:
        current_value = getattr(current, "value", current)
        target_value = getattr(target, "value", target)
        super().__init__(
            f"{resource} cannot move from '{current_value}' to '{target_value}'",
            details={"current": current_value, "target": target_value},
        )
        self.current = current_value
        self.target = target_value


class ValidationFailedError(SumikappError):
    """Raised when input passes schema validation but breaks a business rule."""

    status_code = 422


class PredictionServiceError(SumikappError):
    """Raised when the employability prediction service fails or is unreachable."""

    status_code = 502

"""Domain-specific exception classes for InfluencerFlow.

Every error carries the HTTP status and machine-readable code it maps to, so
the API layer can render any of them with a single exception handler.
"""

from __future__ import annotations

from typing import Any


class InfluencerFlowError(Exception):
    """Base class for all domain errors.

    Attributes:
        message: Human-readable description.
        details: Optional structured context echoed to the client.
    """

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert the error to an API response body."""
        body: dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class NotFoundError(InfluencerFlowError):
    """Raised when a referenced record does not exist."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(
            f"{resource} not found",
            details={"resource": resource, "id": identifier},
        )


class ValidationFailedError(InfluencerFlowError):
    """Raised when a request body fails a business validation rule."""

    status_code = 400
    code = "VALIDATION_FAILED"


class PermissionDeniedError(InfluencerFlowError):
    """Raised when the caller may not perform the operation."""

    status_code = 403
    code = "FORBIDDEN"


class ConflictError(InfluencerFlowError):
    """Raised when a write conflicts with the current record state."""

    status_code = 409
    code = "CONFLICT"


class InvalidTransitionError(ConflictError):
    """Raised when an invalid state transition is attempted.

    Attributes:
        current_state: The state the machine was in when the transition was attempted.
        event: The event that was rejected.
    """

    code = "INVALID_TRANSITION"

    def __init__(self, current_state: str, event: str) -> None:
        self.current_state = current_state
        self.event = event
        super().__init__(
            f"Cannot apply event '{event}' in state '{current_state}'",
            details={"state": str(current_state), "event": str(event)},
        )


class ExternalServiceError(InfluencerFlowError):
    """Raised when a third-party API call fails."""

    status_code = 502
    code = "EXTERNAL_SERVICE_ERROR"

    def __init__(self, service: str, message: str) -> None:
        self.service = service
        super().__init__(f"{service}: {message}", details={"service": service})


class ServiceUnavailableError(InfluencerFlowError):
    """Raised when a feature's backing client is not configured."""

    status_code = 503
    code = "SERVICE_UNAVAILABLE"


def first_validation_message(exc: Any) -> str:
    """Return the first human-readable message from a pydantic ``ValidationError``.

    Value errors raised inside validators are reported without pydantic's
    ``"Value error, "`` prefix.
    """
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    ctx_error = first.get("ctx", {}).get("error")
    if ctx_error is not None:
        return str(ctx_error)
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', 'invalid value')}" if location else first["msg"]

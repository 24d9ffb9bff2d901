"""
Application Exceptions.

Services raise these; exception_handlers.py turns them into the error
envelope. Each class fixes its error code and HTTP status, so raising
sites only choose the message and, where the client needs more, the
``details`` payload.
"""

from typing import Any


class ApplicationError(Exception):
    """Base for every error the API reports with a code."""

    code = "SYS_INTERNAL_ERROR"
    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    code = "RES_NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message)


class ValidationError(ApplicationError):
    """Input failed a rule the request schema cannot express (blank names, body length)."""

    code = "VAL_VALIDATION_ERROR"
    status_code = 400
    default_message = "Validation failed"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details=details)


class AuthenticationError(ApplicationError):
    code = "AUTH_UNAUTHORIZED"
    status_code = 401
    default_message = "Authentication required"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message)


class ConflictError(ApplicationError):
    code = "RES_CONFLICT"
    status_code = 409
    default_message = "Resource conflict"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message)


class QuotaExceededError(ConflictError):
    """The owner already holds the maximum number of notes."""

    code = "NOTE_QUOTA_EXCEEDED"

    def __init__(self, limit: int) -> None:
        self.limit = limit
        ApplicationError.__init__(
            self,
            f"You have reached the maximum of {limit} notes.",
            details={"limit": limit},
        )


class FeatureDisabledError(ApplicationError):
    """A features.yaml switch is off; reported as a missing route."""

    code = "FEATURE_DISABLED"
    status_code = 404

    def __init__(self, feature: str) -> None:
        self.feature = feature
        super().__init__(f"Feature disabled: {feature}")


class DatabaseError(ApplicationError):
    code = "SYS_DATABASE_ERROR"
    status_code = 503
    default_message = "Database error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message)

"""Domain errors raised by the auth gate and the session/booking services.

Each error carries the HTTP status it maps to; the application translates them
into JSON responses in one place (see ``educollab.main``).
"""

from enum import Enum


class AuthenticationFailure(str, Enum):
    MISSING = "missing"
    INVALID = "invalid"
    EXPIRED = "expired"


class ValidationFailure(str, Enum):
    DUPLICATE_EMAIL = "duplicate_email"
    NOT_FOUND = "not_found"
    INVALID_STATE_TRANSITION = "invalid_state_transition"


class ServiceError(Exception):
    """Base class for errors that end a request with a client-facing message."""

    status_code = 500

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_body(self) -> dict:
        return {"message": self.message, **self.extra}


class AuthenticationError(ServiceError):
    status_code = 401

    def __init__(self, reason: AuthenticationFailure):
        super().__init__("Unauthorized access")
        self.reason = reason


class AuthorizationError(ServiceError):
    status_code = 403

    def __init__(self, message: str = "Forbidden access"):
        super().__init__(message)


class ValidationError(ServiceError):
    def __init__(self, reason: ValidationFailure, message: str, **extra):
        super().__init__(message, **extra)
        self.reason = reason
        self.status_code = 404 if reason == ValidationFailure.NOT_FOUND else 400


def not_found(message: str) -> ValidationError:
    return ValidationError(ValidationFailure.NOT_FOUND, message)


def invalid_state(message: str) -> ValidationError:
    return ValidationError(ValidationFailure.INVALID_STATE_TRANSITION, message)

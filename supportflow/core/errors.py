"""Domain errors surfaced through the response envelope."""

from __future__ import annotations


class SupportError(Exception):
    """Base class for errors that map onto an HTTP status and error code."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(SupportError):
    """Raised when a referenced entity (or route) does not exist."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(f"{kind} {identifier} not found")
        self.kind = kind
        self.identifier = identifier


class InvalidCredentialsError(SupportError):
    """Raised on failed login; never reveals which part was wrong."""

    status_code = 401
    code = "INVALID_CREDENTIALS"

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class AuthenticationRequiredError(SupportError):
    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "A valid bearer token is required") -> None:
        super().__init__(message)


class InvalidRequestError(SupportError):
    """Raised when a request body or query fails validation."""

    status_code = 400
    code = "VALIDATION_ERROR"


class ConflictError(SupportError):
    """Raised when the current state of an entity forbids the operation."""

    status_code = 409
    code = "CONFLICT"


__all__ = [
    "AuthenticationRequiredError",
    "ConflictError",
    "InvalidCredentialsError",
    "InvalidRequestError",
    "NotFoundError",
    "SupportError",
]

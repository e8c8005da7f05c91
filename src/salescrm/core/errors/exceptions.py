"""Domain exceptions for the application.

These exceptions represent business-logic errors and are automatically
converted to RFC 7807 Problem Details responses by the exception handlers.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Raised when a requested resource is not visible to the caller.

    Missing rows and rows owned by another tenant raise the same error
    with the same body.

    Example:
        raise NotFoundError("Account not found", resource="accounts")
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        super().__init__(message=message, details=details, **kwargs)


class ConflictError(AppException):
    """Raised when there's a conflict with existing data.

    Example:
        raise ConflictError("Email already registered", details={"email": email})
    """

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class ValidationFailed(AppException):
    """Raised when request data fails validation.

    Example:
        raise ValidationFailed(
            "Invalid input data",
            errors=[{"field": "ownerId", "message": "Referenced user does not exist"}],
        )
    """

    message = "Validation error"
    error_code = "validation_error"
    status_code = 400

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if errors:
            details["errors"] = errors
        super().__init__(message=message, details=details, **kwargs)


class UnauthorizedError(AppException):
    """Raised when authentication is required but not provided or invalid."""

    message = "Authentication required"
    error_code = "unauthorized"
    status_code = 401


class AuthenticationRequired(UnauthorizedError):
    """No bearer token was presented."""

    message = "Missing authentication token"
    error_code = "missing_token"


class InvalidOrExpiredToken(UnauthorizedError):
    """The token failed signature, claim, expiry, or revocation checks.

    Every cause shares this message so callers learn nothing about
    which check failed.
    """

    message = "Invalid or expired token"
    error_code = "invalid_token"


class SessionRejected(UnauthorizedError):
    """The token is valid but its user or tenant can no longer act."""

    message = "User is inactive or does not belong to this tenant"
    error_code = "session_rejected"


class InvalidCredentials(UnauthorizedError):
    """Email and password did not match an active user."""

    message = "Invalid email or password"
    error_code = "invalid_credentials"


class ForbiddenError(AppException):
    """Raised when user lacks permission to access a resource.

    Example:
        raise ForbiddenError(
            "Insufficient permissions",
            details={"required_permission": "accounts:delete"}
        )
    """

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403


class BadRequestError(AppException):
    """Raised for general client errors.

    Example:
        raise BadRequestError("Lead is already converted")
    """

    message = "Bad request"
    error_code = "bad_request"
    status_code = 400

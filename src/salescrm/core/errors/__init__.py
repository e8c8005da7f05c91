"""Error handling module with RFC 7807 Problem Details."""

from salescrm.core.errors.exceptions import (
    AppException,
    AuthenticationRequired,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InvalidCredentials,
    InvalidOrExpiredToken,
    NotFoundError,
    SessionRejected,
    UnauthorizedError,
    ValidationFailed,
)
from salescrm.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    register_exception_handlers,
)


__all__ = [
    "AppException",
    "AuthenticationRequired",
    "BadRequestError",
    "ConflictError",
    "FieldError",
    "ForbiddenError",
    "InvalidCredentials",
    "InvalidOrExpiredToken",
    "NotFoundError",
    "ProblemDetail",
    "SessionRejected",
    "UnauthorizedError",
    "ValidationFailed",
    "register_exception_handlers",
]

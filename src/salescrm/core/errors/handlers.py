"""RFC 7807 Problem Details exception handlers.

Every error leaving the API, whether raised by a service, by request
validation, or by routing, is rendered as ``application/problem+json``
shaped like ``ProblemDetail``.

See: https://tools.ietf.org/html/rfc7807
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, cast

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from salescrm.core.errors.exceptions import AppException


if TYPE_CHECKING:
    from starlette.types import ExceptionHandler


logger = structlog.get_logger()

DEFAULT_DOCS_BASE_URL = "https://api.example.com"
PROBLEM_MEDIA_TYPE = "application/problem+json"


class FieldError(BaseModel):
    """Represents a single field validation error."""

    field: str
    message: str
    type: str | None = None


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details response schema.

    Attributes:
        type: URI reference identifying the problem type
        title: Short human-readable summary
        status: HTTP status code
        detail: Human-readable explanation specific to this occurrence
        instance: Path of the request that failed
        errors: Field-level errors, for validation failures
        trace_id: Request id, for correlating with server logs
    """

    type: str
    title: str
    status: int
    detail: str
    instance: str | None = None
    errors: list[FieldError] | None = None
    trace_id: str | None = None

    model_config = {"extra": "allow"}


def problem_response(
    request: Request,
    status_code: int,
    error_code: str,
    detail: str,
    *,
    errors: Sequence[FieldError] | None = None,
    extra: dict[str, Any] | None = None,
) -> JSONResponse:
    """Render one problem body.

    ``extra`` members are merged at the top level without overriding the
    standard members.
    """
    settings = getattr(request.app.state, "settings", None)
    base_url = settings.api_docs_base_url if settings else DEFAULT_DOCS_BASE_URL

    content: dict[str, Any] = ProblemDetail(
        type=f"{base_url}/errors/{error_code}",
        title=error_code.replace("_", " ").title(),
        status=status_code,
        detail=detail,
        instance=request.url.path,
        errors=list(errors) if errors is not None else None,
        trace_id=getattr(request.state, "trace_id", None),
    ).model_dump(exclude_none=True)
    for key, value in (extra or {}).items():
        content.setdefault(key, value)

    # 401s tell the client which scheme to retry with
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content=content,
        headers=headers,
        media_type=PROBLEM_MEDIA_TYPE,
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render a domain error raised by a service or the auth flow."""
    logger.warning(
        "app_exception",
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        path=request.url.path,
    )
    return problem_response(
        request, exc.status_code, exc.error_code, exc.message, extra=exc.details
    )


def _field_name(loc: Sequence[Any]) -> str:
    # Drop the leading "body"/"query"/"path" segment
    parts = [str(part) for part in loc[1:]]
    if parts:
        return ".".join(parts)
    return str(loc[0]) if loc else "unknown"


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as 400 with per-field errors."""
    errors = [
        FieldError(
            field=_field_name(error.get("loc", ())),
            message=error.get("msg", "Invalid value"),
            type=error.get("type"),
        )
        for error in exc.errors()
    ]
    logger.warning("validation_error", path=request.url.path, error_count=len(errors))
    return problem_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "validation_error",
        "Request validation failed",
        errors=errors,
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render routing errors such as unknown paths and wrong methods."""
    code = {
        status.HTTP_404_NOT_FOUND: "not_found",
        status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    }.get(exc.status_code, "http_error")
    response = problem_response(request, exc.status_code, code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions.

    The actual error is logged but never exposed to clients.
    """
    logger.exception(
        "unhandled_exception",
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    return problem_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(
        AppException, cast("ExceptionHandler", app_exception_handler)
    )
    app.add_exception_handler(
        RequestValidationError, cast("ExceptionHandler", validation_exception_handler)
    )
    app.add_exception_handler(
        StarletteHTTPException, cast("ExceptionHandler", http_exception_handler)
    )
    app.add_exception_handler(Exception, generic_exception_handler)

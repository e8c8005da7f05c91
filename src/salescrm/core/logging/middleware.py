"""Access logging middleware.

One ``request_completed`` line per request, carrying the caller's tenant
and user once the auth dependencies have resolved them. Request bodies
are never logged since login and user payloads carry passwords.
"""

import time
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp


logger = structlog.get_logger()

QUIET_PATHS = ("/health/", "/docs", "/redoc", "/openapi.json")


def _level_for(status_code: int) -> str:
    if status_code >= 500:
        return "error"
    # Rejected sessions and denied permissions are worth a look
    if status_code in (401, 403):
        return "warning"
    return "info"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status, and latency for every API call.

    Attributes:
        quiet_paths: Path prefixes that are served without logging
    """

    def __init__(self, app: ASGIApp, quiet_paths: tuple[str, ...] = QUIET_PATHS) -> None:
        super().__init__(app)
        self.quiet_paths = quiet_paths

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        path = request.url.path
        if path.startswith(self.quiet_paths):
            return await call_next(request)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request_failed",
                method=request.method,
                path=path,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise

        event: dict[str, Any] = {
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            "client_ip": get_client_ip(request),
        }
        for key in ("tenant_id", "user_id"):
            value = getattr(request.state, key, None)
            if value is not None:
                event[key] = str(value)

        getattr(logger, _level_for(response.status_code))("request_completed", **event)
        return response


def get_client_ip(request: Request) -> str | None:
    """Return the client address recorded in logs and audit entries.

    ``X-Forwarded-For`` is honoured only when ``trust_proxy_headers`` is
    enabled, since any client can send it.

    Args:
        request: The incoming request

    Returns:
        The client IP address or None
    """
    settings = getattr(request.app.state, "settings", None)
    if settings is not None and settings.trust_proxy_headers:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            # Left-most entry is the originating client
            return forwarded.split(",")[0].strip()

    return request.client.host if request.client else None

"""FastAPI application factory.

Run with ``uvicorn salescrm.main:create_app --factory``.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from salescrm.api.router import api_router
from salescrm.config import Settings, get_settings
from salescrm.core.audit.recorder import AuditRecorder
from salescrm.core.auth.middleware import RequestIdMiddleware, TenantContextMiddleware
from salescrm.core.auth.tokens import TokenService
from salescrm.core.cache.redis import RedisCache, create_redis_client
from salescrm.core.constants import PERMISSION_CACHE_PREFIX
from salescrm.core.database.session import Database
from salescrm.core.errors import register_exception_handlers
from salescrm.core.logging import RequestLoggingMiddleware, configure_logging
from salescrm.core.permissions.cache import PermissionCache


logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    On shutdown, pending audit writes are drained before the engine
    they write through is disposed.
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info(
        "application_startup",
        app_name=settings.app_name,
        environment=settings.environment,
    )

    yield

    # Shutdown
    logger.info("application_shutdown")

    await app.state.audit_recorder.drain(settings.audit_drain_timeout_seconds)
    logger.info("audit_recorder_drained")

    if app.state.redis_cache is not None:
        await app.state.redis_cache.close()
        logger.info("redis_pool_closed")

    await app.state.database.dispose()
    logger.info("database_disposed")


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Shared services live on ``app.state`` so tests can build an app
    against their own settings and database.

    Args:
        settings: Settings to use; defaults to the environment
        database: Database to use; defaults to one built from settings

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, json_logs=settings.is_production)

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant sales CRM API",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
        # Disable docs in production
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
    )

    database = database or Database.from_settings(settings)
    app.state.settings = settings
    app.state.database = database
    app.state.token_service = TokenService(
        settings.secret_key,
        settings.jwt_algorithm,
        lifetime=timedelta(minutes=settings.access_token_expire_minutes),
    )
    app.state.audit_recorder = AuditRecorder(database.session_factory)

    # Redis is optional; without it role permissions are read per request
    app.state.redis_cache = None
    app.state.permission_cache = None
    if settings.redis_url:
        app.state.redis_cache = RedisCache(
            create_redis_client(settings.redis_url), prefix=PERMISSION_CACHE_PREFIX
        )
        app.state.permission_cache = PermissionCache(
            app.state.redis_cache, ttl_seconds=settings.permission_cache_ttl_seconds
        )

    cors_origins = settings.cors_origins
    if settings.is_development and not cors_origins:
        cors_origins = ["http://localhost:3000", "http://localhost:5173"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )

    # The last middleware added runs first
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(TenantContextMiddleware)
    app.add_middleware(RequestIdMiddleware)

    # Register exception handlers for RFC 7807 error responses
    register_exception_handlers(app)

    app.include_router(api_router)

    return app

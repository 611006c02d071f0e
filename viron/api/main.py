"""FastAPI application factory.

``create_app`` wires logging, tracing, exception handlers, middleware and the
routers together; ``app`` is the instance served by uvicorn. Middleware run
in reverse order of registration, so security headers are added last.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated, Any, cast

from fastapi import Depends, FastAPI
from loguru import logger

from viron.api.middleware.error_handler import register_exception_handlers
from viron.api.middleware.request_context import RequestContextMiddleware
from viron.api.middleware.request_logging import RequestLoggingMiddleware
from viron.api.middleware.security_headers import SecurityHeadersMiddleware
from viron.api.routes import due_dates_router, personal_info_router
from viron.api.utils.responses import ORJSONResponse
from viron.core.config import Settings, get_settings
from viron.core.logging import setup_logging
from viron.core.observability import instrument_app, setup_tracing
from viron.infrastructure.database.session import (
    check_database_connection,
    close_database,
    get_engine,
)


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Verify the database on startup and release the pool on shutdown.

    Raises:
        RuntimeError: If the database cannot be reached during startup.
    """
    is_healthy, error_msg = await check_database_connection()
    if not is_healthy:
        logger.error("Database connection failed during startup: {}", error_msg)
        msg = f"Database connection failed: {error_msg}"
        raise RuntimeError(msg)

    logger.info("Database connection successful")
    logger.info(
        "Application startup complete - {} v{}",
        app_instance.title,
        app_instance.version,
    )

    yield

    logger.info("Application shutdown initiated")
    await close_database()
    logger.info("Application shutdown complete")


async def health() -> dict[str, object]:
    """Report liveness and database connectivity.

    The service stays up when the database is unreachable and reports
    ``degraded`` instead; due dates then come back empty.
    """
    is_healthy, error_msg = await check_database_connection()
    health_status: dict[str, object] = {
        "status": "healthy" if is_healthy else "degraded",
        "database": is_healthy,
    }

    if is_healthy:
        pool = cast("Any", get_engine().pool)
        logger.bind(
            metric_type="db.pool.health",
            checked_out=pool.checkedout(),
            size=pool.size(),
            overflow=pool.overflow(),
        ).info("Database pool health check")
    else:
        logger.warning("Database health check failed: {}", error_msg)

    return health_status


async def info(
    app_settings: Annotated[Settings, Depends(get_settings)],
) -> dict[str, Any]:
    """Name, version and environment of the running service."""
    return {
        "app_name": app_settings.app_name,
        "version": app_settings.app_version,
        "environment": app_settings.environment,
        "debug": app_settings.debug,
        "timezone": app_settings.due_date_config.timezone,
    }


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use; defaults to ``get_settings()``.

    Returns:
        FastAPI: Configured application.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)
    setup_tracing(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    register_exception_handlers(application)

    application.add_middleware(RequestLoggingMiddleware, log_config=settings.log_config)
    application.add_middleware(RequestContextMiddleware)
    application.add_middleware(SecurityHeadersMiddleware)

    application.add_api_route("/health", health, methods=["GET"], tags=["monitoring"])
    application.add_api_route("/info", info, methods=["GET"], tags=["monitoring"])
    application.include_router(due_dates_router)
    application.include_router(personal_info_router)

    instrument_app(application, settings)

    return application


app = create_app()

"""Application factory for the Rentas administration API.

``create_app`` configures logging and tracing, then assembles the app:
exception handlers, the middleware stack, the operational endpoints and one
CRUD router per entity. Starlette runs middleware in reverse order of
registration, so security headers wrap the request context, which wraps
request logging.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from src.api.middleware.error_handler import register_exception_handlers
from src.api.middleware.request_context import RequestContextMiddleware
from src.api.middleware.request_logging import RequestLoggingMiddleware
from src.api.middleware.security_headers import SecurityHeadersMiddleware
from src.api.routes import entity_routers, system
from src.api.utils.responses import ORJSONResponse
from src.core.config import Settings, get_settings
from src.core.logging import setup_logging
from src.core.observability import instrument_app, setup_tracing, shutdown_tracing
from src.infrastructure.database.session import (
    check_database_connection,
    close_database,
)


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Refuse to start without a database; dispose of the engine on exit.

    Raises:
        RuntimeError: If the startup probe fails.
    """
    check = await check_database_connection()
    if not check.healthy:
        logger.error("Database connection failed during startup: {}", check.error)
        msg = f"Database connection failed: {check.error}"
        raise RuntimeError(msg)

    logger.info("{} v{} started", app_instance.title, app_instance.version)
    try:
        yield
    finally:
        await close_database()
        shutdown_tracing()
        logger.info("{} stopped", app_instance.title)


def _add_middleware(application: FastAPI, settings: Settings) -> None:
    application.add_middleware(RequestLoggingMiddleware, log_config=settings.log_config)
    application.add_middleware(RequestContextMiddleware)
    application.add_middleware(
        SecurityHeadersMiddleware,
        hsts_enabled=not settings.is_development,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to build from; ``get_settings()`` when omitted.
    """
    settings = settings or get_settings()

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
    _add_middleware(application, settings)

    application.include_router(system.router)
    for router in entity_routers():
        application.include_router(router)

    instrument_app(application, settings)
    return application


app = create_app()

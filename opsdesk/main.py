"""
FastAPI application entry point for the OpsDesk backend.

This module builds the FastAPI app: schema registry, request pipeline
middleware, exception handlers and routers.

    uvicorn opsdesk.main:app --reload
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from opsdesk.config import Settings, settings
from opsdesk.middleware.edge_auth import EdgeAuthMiddleware
from opsdesk.middleware.error_logging import ErrorLoggingMiddleware
from opsdesk.middleware.request_logger import RequestLoggerMiddleware
from opsdesk.middleware.validation import (
    RequestValidationFailed,
    request_validation_error_handler,
    validation_failed_handler,
)
from opsdesk.routes.auth import router as auth_router
from opsdesk.routes.equipment import router as equipment_router
from opsdesk.routes.health import router as health_router
from opsdesk.routes.users import router as users_router
from opsdesk.schemas.registry import SchemaRegistry, build_schema_registry
from opsdesk.utils.logging import configure_logging

logger = logging.getLogger(__name__)


def _get_cors_origins(app_settings: Settings) -> list[str]:
    """
    Get allowed CORS origins based on environment.

    - ENVIRONMENT=production: Uses CORS_ALLOWED_ORIGINS (empty = no web origins)
    - any other environment: Allows all origins for local development

    Returns:
        List of allowed origin URLs, or ["*"] for development.
    """
    if app_settings.is_production():
        origins = app_settings.CORS_ALLOWED_ORIGINS
        if origins:
            logger.info(f"CORS configured for production with {len(origins)} allowed origins")
        else:
            logger.warning(
                "CORS_ALLOWED_ORIGINS not set in production. "
                "No web origins allowed. Set CORS_ALLOWED_ORIGINS for web clients."
            )
        return list(origins)

    logger.info(f"CORS configured for {app_settings.ENVIRONMENT}: allowing all origins")
    return ["*"]


def create_app(
    app_settings: Settings = settings,
    schema_registry: Optional[SchemaRegistry] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to build the app from
        schema_registry: Prebuilt registry; built from settings when omitted

    Returns:
        Configured FastAPI instance
    """
    configure_logging(app_settings.LOG_LEVEL)

    app = FastAPI(
        title="OpsDesk API",
        description="Backend service for the OpsDesk business management app",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # Built once, read-only for the lifetime of the process
    app.state.schema_registry = schema_registry or build_schema_registry(
        locale=app_settings.VALIDATION_LOCALE,
        messages_file=app_settings.VALIDATION_MESSAGES_FILE or None,
    )

    app.add_exception_handler(RequestValidationFailed, validation_failed_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    # Middleware added last runs first: request logger is outermost
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_get_cors_origins(app_settings),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        EdgeAuthMiddleware,
        protected_prefixes=app_settings.PROTECTED_PATH_PREFIXES,
        cookie_name=app_settings.AUTH_COOKIE_NAME,
        login_path=app_settings.LOGIN_PATH,
        connect_src=app_settings.CSP_CONNECT_SRC,
    )
    app.add_middleware(ErrorLoggingMiddleware)
    app.add_middleware(
        RequestLoggerMiddleware,
        slow_request_threshold_ms=app_settings.SLOW_REQUEST_THRESHOLD_MS,
    )

    # Register routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(equipment_router)

    logger.info("FastAPI app initialized successfully")
    return app


app = create_app()

"""FastAPI application factory and main entry point."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from school_admin.api.v1.router import api_router
from school_admin.clients.backend_api import BackendAPIClient, BackendAPIError, build_http_client
from school_admin.common.request_id import RequestIDMiddleware
from school_admin.core.config import AppConfig, Settings
from school_admin.core.errors import (
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from school_admin.core.logging import get_logger, setup_logging
from school_admin.db.base import Base
from school_admin.db.session import build_engine, build_session_factory
from school_admin.models import AuditLog  # noqa: F401
from school_admin.services.importer.session import ImportSessionStore

logger = get_logger(__name__)


async def load_app_config(http: httpx.AsyncClient) -> AppConfig:
    """Fetch the school configuration once; fall back to defaults if the backend is down."""
    try:
        app_config = await BackendAPIClient(http).get_app_config()
    except BackendAPIError as e:
        logger.warning(
            "Could not load app config from backend, using defaults",
            extra={"status_code": e.status_code, "error": e.message},
        )
        return AppConfig()
    logger.info("App config loaded", extra={"terms_per_session": app_config.terms_per_session})
    return app_config


def create_app(settings: Settings, http_transport: httpx.AsyncBaseTransport | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Settings for this application instance
        http_transport: Transport for the backend HTTP client (tests pass a mock)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        # Startup
        setup_logging(settings)
        app.state.http_client = build_http_client(settings, transport=http_transport)
        app.state.app_config = await load_app_config(app.state.http_client)
        engine = build_engine(settings)
        # Audit table only; no migrations
        Base.metadata.create_all(bind=engine)
        app.state.session_factory = build_session_factory(engine)
        app.state.import_store = ImportSessionStore(ttl_seconds=settings.IMPORT_SESSION_TTL_SECONDS)
        yield
        # Shutdown
        await app.state.http_client.aclose()
        engine.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="School admin console API - bulk imports and exam question builder",
        openapi_url="/openapi.json" if settings.ENV != "prod" else None,
        docs_url="/docs" if settings.ENV != "prod" else None,
        redoc_url="/redoc" if settings.ENV != "prod" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Add middleware (order matters - first added is outermost)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add exception handlers
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Include API routers
    app.include_router(api_router, prefix=settings.API_PREFIX)

    # Root endpoint
    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint - API information."""
        return {
            "message": settings.PROJECT_NAME,
            "version": "1.0.0",
            "docs_url": "/docs" if settings.ENV != "prod" else None,
        }

    return app


def app_factory() -> FastAPI:
    """Entry point for ``uvicorn school_admin.main:app_factory --factory``."""
    return create_app(Settings())

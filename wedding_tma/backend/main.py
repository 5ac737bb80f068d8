"""
FastAPI Application Entry Point.

Builds the wedding Mini App backend. The storage provider is resolved once
here and stored on app.state; request handlers receive it through a
dependency and never look at configuration to pick a backend.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wedding_tma.backend.api import health
from wedding_tma.backend.api.v1 import router as api_v1_router
from wedding_tma.backend.core.concurrency import shutdown_pools
from wedding_tma.backend.core.config import get_app_config, get_settings
from wedding_tma.backend.core.database import dispose_engine
from wedding_tma.backend.core.exception_handlers import register_exception_handlers
from wedding_tma.backend.core.logging import get_logger, log_with_source, setup_logging
from wedding_tma.backend.core.middleware import RequestContextMiddleware
from wedding_tma.backend.storage import StorageProvider, create_storage_provider

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    app_config = get_app_config()
    setup_logging(level=app_config.logging.level)

    if app_config.features.security_startup_checks_enabled:
        from wedding_tma.backend.core.startup_checks import run_startup_checks
        run_startup_checks()

    log_with_source(
        logger,
        "internal",
        "info",
        "Application starting",
        app_name=app_config.application.name,
        env=app_config.application.environment,
        storage_provider=app.state.storage_provider.name,
    )
    yield
    log_with_source(logger, "internal", "info", "Application shutting down")
    await shutdown_pools()
    await dispose_engine()


def create_app(storage_provider: StorageProvider | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        storage_provider: Provider to use instead of the one named in
            storage.yaml

    Raises:
        ConfigurationError: If the configured storage provider is unknown
            or its credentials are missing
    """
    app_config = get_app_config()
    app_settings = app_config.application

    if storage_provider is None:
        storage_provider = create_storage_provider(app_config.storage, get_settings())

    docs_enabled = app_settings.docs_enabled
    app = FastAPI(
        title=app_settings.name,
        description=app_settings.description,
        version=app_settings.version,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.storage_provider = storage_provider

    app.add_middleware(
        RequestContextMiddleware,
        log_requests=app_config.features.api_request_logging,
    )

    cors_origins = app_settings.cors.origins
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(api_v1_router, prefix=app_settings.api_prefix)

    return app


def get_app() -> FastAPI:
    """
    Get the application instance (lazy initialization).

    This function creates the app on first call and caches it.
    Use this instead of importing `app` directly to avoid
    import-time configuration errors.
    """
    global _app
    if _app is None:
        _app = create_app()
    return _app


# For uvicorn: `uvicorn wedding_tma.backend.main:app`
def __getattr__(name: str) -> FastAPI:
    """Support lazy access to `app` for uvicorn compatibility."""
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

"""GophKeeper Server - FastAPI Application Factory."""

import ssl
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from gophkeeper.api import api_router
from gophkeeper.api.health import router as health_router
from gophkeeper.core import (
    Settings,
    create_engine,
    create_session_maker,
    get_settings,
    setup_logging,
)
from gophkeeper.core.logging import get_logger
from gophkeeper.middleware import BearerAuthMiddleware, ContentTypeMiddleware

# Import all models to ensure they're registered with Base for Alembic
from gophkeeper.models import (  # noqa: F401
    Card,
    Media,
    Note,
    Password,
    Session,
    User,
)
from gophkeeper.services.auth import Authorizer
from gophkeeper.services.certs import ensure_certificates
from gophkeeper.services.crypto import Cipher

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings: Settings = app.state.settings
    setup_logging(level=settings.log_level, format_type=settings.log_format)
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await app.state.engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The Authorizer and Cipher are built here so a bad secret, lifetime or
    cipher key fails at startup rather than on the first request.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Personal secrets manager",
        version=settings.app_version,
        lifespan=lifespan,
        # OpenAPI docs only in debug mode
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
    )

    app.state.settings = settings
    app.state.authorizer = Authorizer.from_settings(settings)
    app.state.cipher = Cipher(settings.crypto_key, settings.crypto_salt)
    app.state.engine = create_engine(settings)
    app.state.session_maker = create_session_maker(app.state.engine)

    # Starlette runs middleware in LIFO order: content type is checked first
    app.add_middleware(BearerAuthMiddleware)
    app.add_middleware(ContentTypeMiddleware)

    # Include routers
    app.include_router(health_router)  # Health at root level
    app.include_router(api_router)

    return app


def run() -> None:
    """Run the server under uvicorn with (mutual) TLS."""
    settings = get_settings()
    setup_logging(level=settings.log_level, format_type=settings.log_format)

    if ensure_certificates(settings.tls_cert_path, settings.tls_key_path):
        logger.info(f"Generated TLS certificate in {settings.certs_dir}")

    uvicorn.run(
        "gophkeeper.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        ssl_certfile=str(settings.tls_cert_path),
        ssl_keyfile=str(settings.tls_key_path),
        ssl_ca_certs=str(settings.tls_ca_path),
        ssl_cert_reqs=ssl.CERT_REQUIRED if settings.tls_require_client_cert else ssl.CERT_NONE,
        log_config=None,
    )

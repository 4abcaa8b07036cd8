"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. The settings and the storage context are injected here and
kept on app.state; routes and dependencies read them from the request.
Lifespan creates missing tables at startup and disposes the engine at
shutdown.

Errors: services raise PageVaultError subclasses, which one handler turns
into {"message": ...} responses. Request validation failures become 400s.
Database failures become a bare 500 with no internal detail.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from pagevault import __version__
from pagevault.api import api_router
from pagevault.config import Settings, get_settings
from pagevault.db.engine import Database
from pagevault.errors import InternalError, PageVaultError
from pagevault.middleware.request_id import RequestIdMiddleware
from pagevault.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at
    shutdown. Failing to open the store here is fatal for the process.
    """
    settings: Settings = app.state.settings
    logger.info(
        "pagevault.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    await app.state.db.create_all()
    logger.info("pagevault.database_ready")

    yield

    logger.info("pagevault.shutdown")
    await app.state.db.dispose()


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PageVaultError)
    async def pagevault_error_handler(request: Request, exc: PageVaultError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message},
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
            }
            for e in exc.errors()
        ]
        logger.info("http.validation_error", path=request.url.path, errors=errors)
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request data", "errors": errors},
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("http.database_error", path=request.url.path)
        return JSONResponse(
            status_code=InternalError.status_code,
            content={"message": InternalError.default_message},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.exception("http.unhandled_error", path=request.url.path)
        return JSONResponse(
            status_code=InternalError.status_code,
            content={"message": InternalError.default_message},
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="PageVault",
        description="Multi-tenant page store with JWT authentication",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = Database(settings.database_url, echo=settings.debug)

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RequestId → Security → handler
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: pagevault.main:app)
app = create_app()

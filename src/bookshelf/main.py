"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan owns the process-wide resources: the token service
and the database handle are built at startup and released at shutdown,
and both live on app.state for the dependencies to pick up.

A missing token secret raises ConfigError in the lifespan, so the
server refuses to start instead of failing on the first login.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from bookshelf import __version__
from bookshelf.api import api_router
from bookshelf.auth.jwt import TokenService
from bookshelf.config import settings
from bookshelf.db.engine import Database
from bookshelf.errors import BookshelfError, InternalError, Unauthenticated
from bookshelf.logging_config import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    logger.info(
        "bookshelf.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    app.state.tokens = TokenService.from_settings(settings)

    database = Database.from_settings(settings)
    database.open()
    app.state.database = database
    logger.info("bookshelf.database_opened", dialect=database.engine.dialect.name)

    yield

    logger.info("bookshelf.shutdown")
    await database.close()


async def bookshelf_error_handler(request: Request, exc: BookshelfError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request body", "error": errors},
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("db.unhandled_error", path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal error", "error": exc.__class__.__name__},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("http.unhandled_error", path=request.url.path)
    error = InternalError("Internal error")
    return JSONResponse(status_code=error.status_code, content=error.to_body())


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    configure_logging(settings)

    app = FastAPI(
        title="Bookshelf API",
        description="Books, personal libraries and private notes with per-owner access control",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler

    from bookshelf.middleware.request_id import RequestIdMiddleware
    from bookshelf.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    # ── Error mapping ─────────────────────────────────────────
    app.add_exception_handler(BookshelfError, bookshelf_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: bookshelf.main:app)
app = create_app()

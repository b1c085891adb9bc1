"""
User API — FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers and routers;
       lifespan() owns the connection pool for the lifetime of the process.
Who:   uvicorn (`userapi.main:app` or `python -m userapi`) and the test-suite.

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                     FastAPI App                      │
    │                                                      │
    │  Middleware:  [Request ID] → [Access Logging]        │
    │                                                      │
    │  Routes:      /users CRUD  │  /health  /health/ready │
    │                                                      │
    │  Exception Handlers:                                 │
    │    Validation→422  NotFound→404  Conflict→409        │
    │    Store→500       anything else→500                 │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, load settings, create the pool
    Shutdown: dispose the pool (close every pooled connection)

    A Database passed to create_app() is used as-is and left open on
    shutdown; its owner disposes it.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from userapi import __version__
from userapi.config import get_settings
from userapi.database import Database
from userapi.exceptions import (
    ConflictError,
    NotFoundError,
    StoreError,
    UserApiError,
    ValidationError,
)
from userapi.middleware.logging import RequestLoggingMiddleware
from userapi.middleware.request_id import RequestIDMiddleware, request_id_var
from userapi.routes import health, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure process-wide logging.

    Format: 2024-01-15T12:00:00 [INFO] userapi.repositories.user_repository: Created user 1
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Third-party loggers are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("User API %s starting up...", __version__)

    owns_database = getattr(app.state, "database", None) is None
    if owns_database:
        app.state.database = Database.from_settings(settings)

    logger.info("Server ready on %s:%d", settings.server_host, settings.server_port)

    yield

    logger.info("User API shutting down...")
    if owns_database:
        await app.state.database.dispose()
        app.state.database = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details=None) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the shared error body.

    Handler hierarchy:
        ValidationError / RequestValidationError → 422
        NotFoundError                            → 404
        ConflictError                            → 409
        StoreError                               → 500 (generic message)
        UserApiError (base)                      → 500
        Exception (fallback)                     → 500 (generic message)

    StoreError and unexpected errors never echo driver or SQL text; the
    detail is logged server-side with the request ID.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=422,
            content=_error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        # Pydantic failures share the ValidationError response format
        error = ValidationError(
            message="Request validation failed",
            context={"errors": jsonable_encoder(exc.errors())},
        )
        return await handle_validation_error(request, error)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body("not_found", exc.message),
        )

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        details = {"field": exc.field} if exc.field else None
        return JSONResponse(
            status_code=409,
            content=_error_body("conflict", exc.message, details),
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        logger.error(
            "[%s] Store error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error",
                "An internal error occurred. Please try again later.",
            ),
        )

    @app.exception_handler(UserApiError)
    async def handle_app_error(request: Request, exc: UserApiError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again later.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: Pool to serve requests from. When omitted, the lifespan
                  builds one from the environment at startup.
    """
    app = FastAPI(
        title="User API",
        description="CRUD service over a single users table.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.database = database

    # Last added runs first: RequestID → Logging → routes
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(health.router)

    return app


# uvicorn entry point: `uvicorn userapi.main:app`
app = create_app()

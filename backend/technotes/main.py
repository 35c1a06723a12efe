"""
TechNotes Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn technotes.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip → CORS     │
    │                                                     │
    │  Routes:      /notes   /users   /health              │
    │                                                     │
    │  Exception Handlers:                                │
    │   Validation/NotFound/Dependency/Store → 400        │
    │   Conflict → 409          anything else → 500       │
    └─────────────────────────────────────────────────────┘

Every error body carries `message`, plus `error` and `request_id`.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from technotes import __version__
from technotes.config import settings
from technotes.database import dispose_engine
from technotes.exceptions import StorePersistenceError, TechNotesError, ValidationError
from technotes.middleware.logging import RequestLoggingMiddleware
from technotes.middleware.request_id import RequestIDMiddleware, request_id_var
from technotes.routes import health, notes, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    When:    Called once during app startup, before anything else logs.
    Format:  %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:  logging, configuration check, banner.
    Shutdown: dispose the database engine (close all pooled connections).
    """
    setup_logging()
    logger.info("TechNotes Backend %s starting up (store=%s)", __version__, settings.store_backend)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving; /health reports whether the store actually works
        logger.error("Configuration error: %s", str(e))

    if settings.store_backend == "memory":
        logger.warning("In-memory store active: records are lost on restart")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("TechNotes Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    details: Optional[dict] = None,
) -> JSONResponse:
    # Picked up by RequestLoggingMiddleware for the access log line
    request.state.error_code = error
    content = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _field_name(loc: tuple) -> str:
    # ("body", "title") → "title"; a body that is not valid JSON → "body"
    parts = [str(part) for part in loc if part != "body"]
    return ".".join(parts) or "body"


def validation_error_from_request(exc: RequestValidationError) -> ValidationError:
    """Translate FastAPI's schema errors into the application's ValidationError."""
    errors = exc.errors()
    fields = sorted({_field_name(tuple(err.get("loc", ()))) for err in errors})
    if any(err.get("type") == "missing" for err in errors):
        message = "All fields are required"
    else:
        message = "Invalid data received"
    return ValidationError(message=f"{message}: {', '.join(fields)}", fields=fields)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        RequestValidationError  → 400 (converted to ValidationError)
        TechNotesError subtypes → their own status_code (400 or 409)
        StarletteHTTPException  → its status (unknown route, wrong method)
        Exception (fallback)    → 500, stack trace logged, never returned
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        error = validation_error_from_request(exc)
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), error.message)
        return _error_response(request, 400, error.error_code, error.message, error.context)

    @app.exception_handler(TechNotesError)
    async def handle_app_error(request: Request, exc: TechNotesError):
        rid = request_id_var.get("")
        if isinstance(exc, StorePersistenceError):
            # Driver details go to the log only
            logger.error("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
            return _error_response(request, exc.status_code, exc.error_code, exc.message)
        logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        details = exc.context if isinstance(exc, ValidationError) else None
        return _error_response(request, exc.status_code, exc.error_code, exc.message, details)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return _error_response(request, exc.status_code, "http_error", str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error_response(
            request,
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Why factory (not module-level app):
        Tests can build a fresh app and override dependencies on it
        without touching the module-level instance.
    """
    app = FastAPI(
        title="TechNotes API",
        description="Notes and users for a repair shop's internal ticketing.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router)
    app.include_router(users.router)
    app.include_router(health.router)

    return app


app = create_app()

"""
PetSitter Connect Backend — FastAPI Application Factory
========================================================

What:  Builds and configures the FastAPI application.
How:   create_app() wires logging, lifecycle, middleware, exception handlers
       and routers; the module-level `app` is what uvicorn serves
       (uvicorn petsitter.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware:  RateLimit → RequestID → Logging → CORS     │
    │                                                          │
    │  Routes ({API_PREFIX}):                                  │
    │    /listings ...          listings.py                    │
    │    /applications ...      applications.py                │
    │    /sitters/{id}/...      applications.py                │
    │    /health                health.py                      │
    │                                                          │
    │  Exception Handlers:                                     │
    │    ValidationError / ConflictError / bad request → 400   │
    │    NotFoundError → 404                                   │
    │    InternalError / PersistenceError / other → 500        │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config check → create tables → optional demo seed
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from petsitter import __version__
from petsitter.config import settings
from petsitter.database import async_session_factory, dispose_engine, init_models
from petsitter.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    PersistenceError,
    PetSitterError,
    ValidationError,
)
from petsitter.middleware.logging import RequestLoggingMiddleware
from petsitter.middleware.rate_limit import RateLimitMiddleware
from petsitter.middleware.request_id import RequestIDMiddleware, request_id_var
from petsitter.routes import applications, health, listings
from petsitter.seed import seed_demo_data
from petsitter.store import PetSitterStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2026-05-01T12:00:00 [INFO] petsitter.services.application_service: ...
    Level comes from LOG_LEVEL. Chatty third-party loggers are capped at WARNING.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if not settings.db_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Configure logging
        2. Validate production settings (logged, not fatal, so /health still answers)
        3. Create missing tables when DB_CREATE_TABLES is on
        4. Seed demo data when SEED_DEMO_DATA is on
    Shutdown:
        Dispose the engine so pooled connections are closed.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("PetSitter Connect backend %s starting (%s)", __version__, settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    if settings.db_create_tables:
        await init_models()
        logger.info("Database schema ready")

    if settings.seed_demo_data:
        await seed_demo_data(PetSitterStore(async_session_factory))

    logger.info(
        "Server ready at http://%s:%d%s",
        settings.backend_host, settings.backend_port, settings.api_prefix,
    )
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("PetSitter Connect backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(
    request: Request,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
        "path": request.url.path,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if details:
        body["details"] = details
    return body


def _describe_validation_errors(exc: RequestValidationError) -> list:
    described = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        described.append({
            "field": ".".join(loc),
            "message": err.get("msg", "Invalid value"),
            "type": err.get("type", "value_error"),
        })
    return described


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes and the shared error body.

    Handler table:
        ValidationError          → 400 validation_error
        RequestValidationError   → 400 validation_error (malformed body/params)
        ConflictError            → 400 conflict
        NotFoundError            → 404 not_found
        InternalError            → 500 internal_error (message is client-safe)
        PersistenceError         → 500 server_error (generic message)
        PetSitterError / other   → 500 internal_server_error

    Server-side failures log their context; the response never carries stack
    traces, SQL or driver messages.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body(request, "validation_error", exc.message, exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = _describe_validation_errors(exc)
        first = errors[0] if errors else None
        if first and first["field"]:
            message = f"{first['field']}: {first['message']}"
        elif first:
            message = first["message"]
        else:
            message = "Invalid request"
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), message)
        return JSONResponse(
            status_code=400,
            content=_error_body(request, "validation_error", message, {"errors": errors}),
        )

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.warning("[%s] Conflict: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body(request, "conflict", exc.message, exc.context),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body(request, "not_found", exc.message),
        )

    @app.exception_handler(InternalError)
    async def handle_internal_error(request: Request, exc: InternalError):
        logger.error(
            "[%s] Internal error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "internal_error", exc.message),
        )

    @app.exception_handler(PersistenceError)
    async def handle_persistence_error(request: Request, exc: PersistenceError):
        logger.error(
            "[%s] Persistence error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "server_error", exc.message),
        )

    @app.exception_handler(PetSitterError)
    async def handle_petsitter_error(request: Request, exc: PetSitterError):
        logger.error("[%s] Unhandled application error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "internal_server_error", exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""), str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                request,
                "internal_server_error",
                "An unexpected error occurred. Please try again later.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Assemble the FastAPI application; tests call this for a fresh instance."""
    app = FastAPI(
        title="PetSitter Connect API",
        description=(
            "Marketplace backend where pet owners post care listings and sitters "
            "apply. Accepting one application rejects the listing's other applications."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Middleware ────────────────────────────────────────────────────────
    # Registered innermost first; RateLimit runs first on each request.
    origins = settings.cors_origins_list
    allow_any_origin = origins == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=not allow_any_origin,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    prefix = settings.api_prefix
    app.include_router(listings.router, prefix=prefix)
    app.include_router(applications.router, prefix=prefix)
    app.include_router(health.router, prefix=prefix)

    return app


app = create_app()

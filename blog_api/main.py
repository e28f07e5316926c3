"""
Blog API — FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn blog_api.main:app).
When:  Once at server startup.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │ Req ID   │→│  Logging        │→│ GZip / CORS  │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │ /blogs CRUD  │ │ /storage/... │ │ GET /health │  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ Validation→422 │ NotFound→404 │ Upload/DB→500 │  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:   configure logging, create the storage directories
    Shutdown:  dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from blog_api import __version__
from blog_api.config import settings
from blog_api.database import dispose_engine
from blog_api.exceptions import (
    BlogApiError,
    DatabaseError,
    ImageUploadError,
    NotFoundError,
    ValidationError,
)
from blog_api.middleware.logging import RequestLoggingMiddleware
from blog_api.middleware.request_id import RequestIDMiddleware, request_id_var
from blog_api.routes import blogs, health, storage
from blog_api.services.image_service import BLOG_IMAGE_DIR, image_service

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Third-party libraries that log every operation
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Blog API %s starting up...", __version__)

    blog_dir = image_service.storage_root / BLOG_IMAGE_DIR
    blog_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Public storage directory: %s", image_service.storage_root)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Blog API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _validation_message(field: str, error: Dict[str, Any]) -> str:
    """Human-readable message for one pydantic error entry."""
    error_type = error.get("type", "")
    ctx = error.get("ctx") or {}

    if error_type in ("missing", "string_too_short"):
        return f"The {field} field is required."
    if error_type == "string_too_long":
        return f"The {field} field must not be greater than {ctx.get('max_length')} characters."
    if error_type == "string_type":
        return f"The {field} field must be a string."
    if error_type in ("int_parsing", "int_type"):
        return f"The {field} field must be an integer."
    if error_type in ("json_invalid", "model_attributes_type", "dict_type"):
        return "The request body must be a JSON object."
    return str(error.get("msg", "Invalid value."))


def format_validation_errors(errors: List[Dict[str, Any]]) -> Dict[str, List[str]]:
    """
    Group pydantic errors by field name.

    ("body", "title") → "title"; ("path", "blog_id") → "blog_id";
    errors about the body as a whole are reported under "body".
    """
    grouped: Dict[str, List[str]] = {}
    for error in errors:
        loc = [part for part in error.get("loc", ()) if part not in ("body", "path", "query")]
        field = str(loc[0]) if loc else "body"
        message = _validation_message(field, error)
        messages = grouped.setdefault(field, [])
        if message not in messages:
            messages.append(message)
    return grouped


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        RequestValidationError  → 422 {"errors": {...}}
        ValidationError         → 422 {"errors": {...}}
        NotFoundError           → 404 {"message": ...}
        ImageUploadError        → 500 {"error": "Image upload failed: ..."}
        DatabaseError           → 500 {"error": ...}
        BlogApiError (base)     → 500 {"error": ...}
        Exception (fallback)    → 500 {"error": ...}

    Context dicts and stack traces are logged, never returned.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Body or path parameters failed schema validation."""
        rid = request_id_var.get("")
        errors = format_validation_errors(exc.errors())
        logger.warning("[%s] Validation error: %s", rid, errors)
        return JSONResponse(status_code=422, content={"errors": errors})

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.errors)
        return JSONResponse(status_code=422, content={"errors": exc.errors})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"message": exc.message})

    @app.exception_handler(ImageUploadError)
    async def handle_image_upload_error(request: Request, exc: ImageUploadError):
        """Image rejected or not written — the message says which check failed."""
        rid = request_id_var.get("")
        logger.error("[%s] Image upload failed: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={"error": f"Image upload failed: {exc.message}"},
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(BlogApiError)
    async def handle_app_error(request: Request, exc: BlogApiError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "An unexpected error occurred. Please try again later."},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Blog API",
        description=(
            "CRUD API for blog posts. Cover images are sent as URLs or base64 "
            "data URIs; uploaded images are served from /storage/."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS
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

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(blogs.router)
    app.include_router(storage.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()

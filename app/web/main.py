"""
ClearView Web Interface
FastAPI JSON API over the title search service
"""
import traceback
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.web.routers import api
from clearview.utils.logging_config import setup_default_logging
from clearview.utils.time import now_utc

# Configure loguru
setup_default_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("ClearView Web starting up...")
    yield
    logger.info("ClearView Web shutting down...")


# Create FastAPI app
app = FastAPI(
    title="ClearView",
    description="Hillsborough County Title Search",
    version="0.1.0",
    lifespan=lifespan
)

# Include routers
app.include_router(api.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "timestamp": now_utc().isoformat()}


# =============================================================================
# Error Handlers
# =============================================================================

def _generate_error_id() -> str:
    """Generate a short error ID for tracking."""
    return str(uuid.uuid4())[:8].upper()


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with a JSON body."""
    error_id = _generate_error_id()

    # Log 4xx and 5xx errors
    if exc.status_code >= 400:
        log_fn = logger.warning if exc.status_code < 500 else logger.error
        log_fn(f"HTTP {exc.status_code} [ID: {error_id}]: {exc.detail} - {request.method} {request.url}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "status_code": exc.status_code,
            "error_id": error_id,
            "path": str(request.url.path)
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions with detailed logging."""
    error_id = _generate_error_id()

    tb = traceback.format_exc()
    logger.error(
        f"Unhandled exception [ID: {error_id}]\n"
        f"Request: {request.method} {request.url}\n"
        f"Exception: {type(exc).__name__}: {exc}\n"
        f"Traceback:\n{tb}"
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": f"An unexpected error occurred: {type(exc).__name__}",
            "error_id": error_id,
            "path": str(request.url.path)
        }
    )

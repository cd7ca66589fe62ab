"""Main entry point for the Moments Archive application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from moments_archive.api.v1 import (
    categories_router,
    moments_router,
    submissions_router,
    uploads_router,
)
from moments_archive.core.errors import ArchiveError, DataError, RateLimitExceeded
from moments_archive.core.settings import settings

logger = logging.getLogger(__name__)


def configure_logging(level: str = settings.log_level) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


configure_logging()

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="A curated archive of design moments",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(submissions_router, prefix="/api/v1")
app.include_router(moments_router, prefix="/api/v1")
app.include_router(uploads_router, prefix="/api/v1")
app.include_router(categories_router, prefix="/api/v1")

# Serve locally stored uploads; MEDIA_BASE_URL should point here.
app.mount("/media", StaticFiles(directory=settings.media_root, check_dir=False), name="media")


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    result = exc.result
    retry_after = result.reset_in_hour if result.remaining_hour == 0 else result.reset_in_day
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.message,
            "remaining": {"hour": result.remaining_hour, "day": result.remaining_day},
            "reset_in": {"hour": result.reset_in_hour, "day": result.reset_in_day},
        },
        headers={
            "Retry-After": str(retry_after),
            "X-RateLimit-Remaining-Hour": str(result.remaining_hour),
            "X-RateLimit-Remaining-Day": str(result.remaining_day),
        },
    )


@app.exception_handler(DataError)
async def data_error_handler(request: Request, exc: DataError) -> JSONResponse:
    cause = exc.cause
    logger.error(
        "%s %s failed: %s",
        request.method,
        request.url.path,
        exc.message,
        exc_info=(type(cause), cause, cause.__traceback__) if cause is not None else None,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(ArchiveError)
async def archive_error_handler(request: Request, exc: ArchiveError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "A curated archive of design moments",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("moments_archive.main:app", host="0.0.0.0", port=8000, reload=settings.debug)

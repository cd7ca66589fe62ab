"""Version 1 API endpoints."""

from .endpoints import (
    categories_router,
    moments_router,
    submissions_router,
    uploads_router,
)

__all__ = [
    "submissions_router",
    "moments_router",
    "uploads_router",
    "categories_router",
]

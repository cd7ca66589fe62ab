"""API endpoint modules for version 1."""

from .categories import router as categories_router
from .moments import router as moments_router
from .submissions import router as submissions_router
from .uploads import router as uploads_router

__all__ = [
    "categories_router",
    "moments_router",
    "submissions_router",
    "uploads_router",
]

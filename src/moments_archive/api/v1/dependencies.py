"""Shared API dependencies for curator authentication and common services."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from moments_archive.core.security import verify_admin_password
from moments_archive.core.settings import settings
from moments_archive.db.session import get_db
from moments_archive.services.color import ColorExtractor, get_color_extractor
from moments_archive.services.media import MediaStore, get_media_store
from moments_archive.services.moments import MomentService
from moments_archive.services.rate_limiter import RateLimiter, get_rate_limiter
from moments_archive.services.submissions import SubmissionService

UNKNOWN_CLIENT = "unknown"

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter)]
ColorExtractorDep = Annotated[ColorExtractor, Depends(get_color_extractor)]
MediaStoreDep = Annotated[MediaStore, Depends(get_media_store)]


def require_admin(
    x_admin_password: Annotated[str | None, Header()] = None,
) -> None:
    """Gate curator endpoints on the shared admin secret.

    Raises:
        HTTPException: 500 if no secret is configured, 401 on a mismatch.
    """
    expected = settings.admin_password
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Admin password not configured",
        )
    if not verify_admin_password(x_admin_password, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )


AdminDep = Depends(require_admin)


def client_identity(request: Request) -> str:
    """Identify the caller for rate limiting.

    The first X-Forwarded-For hop wins, then the socket peer.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client is not None and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


ClientIdentityDep = Annotated[str, Depends(client_identity)]


def get_submission_service(
    db: SessionDep,
    color_extractor: ColorExtractorDep,
    media_store: MediaStoreDep,
) -> SubmissionService:
    """Build the submission service for one request."""
    return SubmissionService(db, color_extractor=color_extractor, media_store=media_store)


def get_moment_service(db: SessionDep, color_extractor: ColorExtractorDep) -> MomentService:
    """Build the moment service for one request."""
    return MomentService(db, color_extractor=color_extractor)


SubmissionServiceDep = Annotated[SubmissionService, Depends(get_submission_service)]
MomentServiceDep = Annotated[MomentService, Depends(get_moment_service)]

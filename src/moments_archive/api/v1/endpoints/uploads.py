"""Media upload endpoints for visitors and curators."""

from __future__ import annotations

import logging

from fastapi import APIRouter, File, UploadFile, status

from moments_archive.api.v1.dependencies import (
    AdminDep,
    ClientIdentityDep,
    MediaStoreDep,
    RateLimiterDep,
)
from moments_archive.core.errors import RateLimitExceeded, ValidationFailed
from moments_archive.core.settings import settings
from moments_archive.schemas import QuotaWindows, UploadResponse
from moments_archive.services.media import (
    ADMIN_UPLOAD_PREFIX,
    PUBLIC_UPLOAD_PREFIX,
    MediaStore,
    sanitize_filename,
    validate_upload,
)

logger = logging.getLogger(__name__)

UPLOAD_NAMESPACE = "upload"

router = APIRouter(prefix="/uploads", tags=["uploads"])


async def _store(file: UploadFile, store: MediaStore, prefix: str) -> str:
    # One byte past the cap is enough to tell an oversized body.
    data = await file.read(settings.max_upload_bytes + 1)
    if not data:
        raise ValidationFailed("No file provided")
    validate_upload(file.content_type, len(data), max_bytes=settings.max_upload_bytes)
    filename = sanitize_filename(file.filename, prefix)
    return store.upload(data, file.content_type or "application/octet-stream", filename)


@router.post("/public", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_public(
    limiter: RateLimiterDep,
    identity: ClientIdentityDep,
    store: MediaStoreDep,
    file: UploadFile = File(...),
) -> UploadResponse:
    """Accept media from a visitor preparing a submission."""
    result = limiter.check(identity, UPLOAD_NAMESPACE)
    if not result.allowed:
        logger.info("Upload rate limit hit for %s", identity)
        raise RateLimitExceeded(result)
    url = await _store(file, store, PUBLIC_UPLOAD_PREFIX)
    return UploadResponse(
        url=url,
        remaining=QuotaWindows(hour=result.remaining_hour, day=result.remaining_day),
    )


@router.post(
    "",
    response_model=UploadResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    dependencies=[AdminDep],
)
async def upload_admin(store: MediaStoreDep, file: UploadFile = File(...)) -> UploadResponse:
    """Accept media from a curator; not rate limited."""
    url = await _store(file, store, ADMIN_UPLOAD_PREFIX)
    return UploadResponse(url=url)

"""Submission intake and curator review endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Query, status

from moments_archive.api.v1.dependencies import (
    AdminDep,
    ClientIdentityDep,
    RateLimiterDep,
    SubmissionServiceDep,
)
from moments_archive.core.errors import RateLimitExceeded
from moments_archive.models import Submission, SubmissionStatus
from moments_archive.schemas import (
    ApprovalRequest,
    ApprovalResponse,
    QuotaWindows,
    RateLimitStatusResponse,
    RejectionRequest,
    RejectionResponse,
    SubmissionListResponse,
    SubmissionReceipt,
    SubmissionResponse,
)

logger = logging.getLogger(__name__)

SUBMISSION_NAMESPACE = "submission"

router = APIRouter(prefix="/submissions", tags=["submissions"])


@router.post("", response_model=SubmissionReceipt, status_code=status.HTTP_201_CREATED)
async def create_submission(
    service: SubmissionServiceDep,
    limiter: RateLimiterDep,
    identity: ClientIdentityDep,
    payload: dict[str, Any] = Body(...),
) -> SubmissionReceipt:
    """Nominate a moment for the archive.

    The quota is spent before anything else is looked at, so even rejected
    or honeypot requests count against the caller.
    """
    result = limiter.check(identity, SUBMISSION_NAMESPACE)
    if not result.allowed:
        logger.info("Submission rate limit hit for %s", identity)
        raise RateLimitExceeded(result)
    return service.create(payload, identity)


@router.get("/rate-limit", response_model=RateLimitStatusResponse)
async def submission_rate_limit(
    limiter: RateLimiterDep,
    identity: ClientIdentityDep,
) -> RateLimitStatusResponse:
    """Report the caller's remaining submission quota without spending it."""
    result = limiter.status(identity, SUBMISSION_NAMESPACE)
    return RateLimitStatusResponse(
        allowed=result.allowed,
        remaining=QuotaWindows(hour=result.remaining_hour, day=result.remaining_day),
        reset_in=QuotaWindows(hour=result.reset_in_hour, day=result.reset_in_day),
    )


@router.get("", response_model=SubmissionListResponse, dependencies=[AdminDep])
async def list_submissions(
    service: SubmissionServiceDep,
    status_filter: SubmissionStatus | None = Query(None, alias="status"),
) -> SubmissionListResponse:
    """Return the moderation queue, newest first."""
    submissions = service.list(status_filter)
    return SubmissionListResponse(
        submissions=[SubmissionResponse.model_validate(item) for item in submissions],
        pending_count=service.pending_count(),
    )


@router.get("/{submission_id}", response_model=SubmissionResponse, dependencies=[AdminDep])
async def get_submission(submission_id: str, service: SubmissionServiceDep) -> Submission:
    return service.get(submission_id)


@router.post(
    "/{submission_id}/approve",
    response_model=ApprovalResponse,
    dependencies=[AdminDep],
)
async def approve_submission(
    submission_id: str,
    request: ApprovalRequest,
    service: SubmissionServiceDep,
) -> ApprovalResponse:
    """Publish a pending submission as a moment."""
    result = await service.approve(submission_id, request)
    return ApprovalResponse(
        submission=SubmissionResponse.model_validate(result.submission),
        moment_id=result.moment.id,
        moment_slug=result.moment.slug,
    )


@router.post(
    "/{submission_id}/reject",
    response_model=RejectionResponse,
    dependencies=[AdminDep],
)
async def reject_submission(
    submission_id: str,
    service: SubmissionServiceDep,
    request: RejectionRequest | None = None,
) -> RejectionResponse:
    """Reject a pending submission and delete it along with its media."""
    review_note = request.review_note if request is not None else None
    deleted = service.reject(submission_id, review_note)
    return RejectionResponse(deleted=deleted)

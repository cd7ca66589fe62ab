"""Submission intake and review.

A submission is created PENDING and moves exactly once, to APPROVED (with a
newly published moment) or to REJECTED (after which the record is deleted).
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from moments_archive.core.errors import (
    DataError,
    NotFoundError,
    SlugConflictError,
    StateConflictError,
    ValidationFailed,
)
from moments_archive.core.settings import settings
from moments_archive.db.time import utcnow
from moments_archive.db.transactions import data_errors
from moments_archive.models import Moment, Submission, SubmissionStatus
from moments_archive.repositories import MomentRepository, SubmissionRepository
from moments_archive.schemas.common import first_error_message
from moments_archive.schemas.submission import (
    ApprovalRequest,
    SubmissionCreate,
    SubmissionReceipt,
)
from moments_archive.services.color import ColorExtractor
from moments_archive.services.media import MediaStore
from moments_archive.services.slugs import allocate_unique_slug, generate_slug

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApprovalResult:
    """The approved submission and the moment it became."""

    submission: Submission
    moment: Moment


def is_honeypot_filled(payload: Mapping[str, Any]) -> bool:
    """Return True when the hidden anti-bot field carries any text."""
    value = payload.get("honeypot")
    return value is not None and bool(str(value).strip())


class SubmissionService:
    """Service handling the submission lifecycle and its state transitions."""

    def __init__(
        self,
        db: Session,
        *,
        color_extractor: ColorExtractor,
        media_store: MediaStore,
        slug_max_attempts: int = settings.slug_max_attempts,
    ) -> None:
        self.db = db
        self.submissions = SubmissionRepository(db)
        self.moments = MomentRepository(db)
        self.color_extractor = color_extractor
        self.media_store = media_store
        self.slug_max_attempts = slug_max_attempts

    # --- Intake ---------------------------------------------------------------------
    def create(self, payload: Mapping[str, Any], submitter_ip: str) -> SubmissionReceipt:
        """Persist a visitor nomination as PENDING.

        A filled honeypot yields a receipt indistinguishable from a real one
        while nothing is stored.

        Raises:
            ValidationFailed: If a required field is missing or malformed.
            DataError: If the submission could not be stored.
        """
        if is_honeypot_filled(payload):
            logger.info("Honeypot filled by %s; discarding submission", submitter_ip)
            return SubmissionReceipt(id=uuid.uuid4().hex)

        try:
            data = SubmissionCreate.model_validate(payload)
        except ValidationError as exc:
            raise ValidationFailed(first_error_message(exc)) from exc

        with data_errors(self.db, "Failed to create submission"):
            submission = self.submissions.add(
                Submission(
                    media_url=data.media_url,
                    source_url=data.source_url,
                    creator_name=data.creator_name,
                    creator_url=data.creator_url,
                    title=data.title,
                    description=data.description,
                    submitter_note=data.submitter_note,
                    submitter_ip=submitter_ip,
                    status=SubmissionStatus.PENDING,
                )
            )
            self.db.commit()
        return SubmissionReceipt(id=submission.id)

    # --- Queries --------------------------------------------------------------------
    def get(self, submission_id: str) -> Submission:
        """Return a submission or raise `NotFoundError`."""
        with data_errors(self.db, f"Failed to fetch submission: {submission_id}"):
            submission = self.submissions.get_by_id(submission_id)
        if submission is None:
            raise NotFoundError("Submission not found")
        return submission

    def list(self, status: SubmissionStatus | None = None) -> list[Submission]:
        """Return submissions newest first, optionally filtered by status."""
        with data_errors(self.db, "Failed to fetch submissions"):
            return self.submissions.list_by_status(status)

    def pending_count(self) -> int:
        """Return the size of the moderation queue."""
        with data_errors(self.db, "Failed to count pending submissions"):
            return self.submissions.count_by_status(SubmissionStatus.PENDING)

    # --- Review ---------------------------------------------------------------------
    def _require_pending(self, submission_id: str) -> Submission:
        submission = self.get(submission_id)
        if submission.status != SubmissionStatus.PENDING:
            raise StateConflictError(f"Submission already {submission.status.value.lower()}")
        return submission

    def _transition(self, submission_id: str, status: SubmissionStatus, **values: Any) -> None:
        """Move a PENDING submission to `status` within the current transaction.

        The update is conditional on the row still being PENDING, so two
        concurrent reviews cannot both succeed.
        """
        result = self.db.execute(
            update(Submission)
            .where(
                Submission.id == submission_id,
                Submission.status == SubmissionStatus.PENDING,
            )
            .values(status=status, reviewed_at=utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise StateConflictError("Submission already reviewed")

    def _mark_approved(self, submission_id: str, moment_id: str) -> None:
        self._transition(submission_id, SubmissionStatus.APPROVED, moment_id=moment_id)

    def _parse_approval(self, fields: ApprovalRequest | Mapping[str, Any]) -> ApprovalRequest:
        if isinstance(fields, ApprovalRequest):
            return fields
        try:
            return ApprovalRequest.model_validate(fields)
        except ValidationError as exc:
            raise ValidationFailed(first_error_message(exc)) from exc

    async def approve(
        self,
        submission_id: str,
        fields: ApprovalRequest | Mapping[str, Any],
    ) -> ApprovalResult:
        """Publish a PENDING submission as a moment.

        The moment insert and the status change commit together; if either
        fails, neither is kept and the submission stays PENDING.

        Raises:
            NotFoundError: If the submission does not exist.
            StateConflictError: If it was already approved or rejected.
            ValidationFailed: If the editorial fields are invalid.
            SlugConflictError: If the chosen slug was taken concurrently.
            DataError: On any other persistence failure.
        """
        submission = self._require_pending(submission_id)
        request = self._parse_approval(fields)

        with data_errors(self.db, f"Failed to approve submission: {submission_id}"):
            slug = allocate_unique_slug(
                generate_slug(request.title),
                self.moments.slug_exists,
                max_attempts=self.slug_max_attempts,
            )
        dominant_color = await self.color_extractor.extract(submission.media_url)

        with data_errors(self.db, f"Failed to approve submission: {submission_id}"):
            try:
                moment = self.moments.add(
                    Moment(
                        slug=slug,
                        title=request.title,
                        category=request.category,
                        description=request.description,
                        tags=list(request.tags),
                        dominant_color=dominant_color,
                        year=request.year,
                        year_approximate=request.year_approximate,
                        media_url=submission.media_url,
                        source_url=submission.source_url,
                        creator_name=submission.creator_name,
                        creator_url=submission.creator_url,
                    )
                )
                self._mark_approved(submission_id, moment.id)
                self.db.commit()
            except IntegrityError as exc:
                self.db.rollback()
                if self.moments.slug_exists(slug):
                    raise SlugConflictError(
                        f"A moment with the slug '{slug}' already exists"
                    ) from exc
                raise DataError(f"Failed to approve submission: {submission_id}", exc) from exc
            except StateConflictError:
                self.db.rollback()
                raise
            self.db.refresh(submission)

        logger.info("Approved submission %s as moment %s (%s)", submission_id, moment.id, slug)
        return ApprovalResult(submission=submission, moment=moment)

    def reject(self, submission_id: str, review_note: str | None = None) -> str:
        """Reject a PENDING submission, clean up its media and delete the record.

        Media cleanup is best effort: a failure is logged and the record is
        deleted regardless.

        Returns:
            The id of the deleted submission.
        """
        submission = self._require_pending(submission_id)
        media_url = submission.media_url

        with data_errors(self.db, f"Failed to reject submission: {submission_id}"):
            try:
                self._transition(
                    submission_id,
                    SubmissionStatus.REJECTED,
                    review_note=review_note or None,
                )
                self.db.commit()
            except StateConflictError:
                self.db.rollback()
                raise

        try:
            self.media_store.delete(media_url)
        except Exception as exc:  # cleanup never blocks record deletion
            logger.warning("Failed to delete media for submission %s: %s", submission_id, exc)

        with data_errors(self.db, f"Failed to delete submission: {submission_id}"):
            self.db.expire(submission)
            self.submissions.delete(submission)
            self.db.commit()

        logger.info("Rejected and deleted submission %s", submission_id)
        return submission_id

"""Data access helpers for working with submissions."""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from moments_archive.models.submission import Submission, SubmissionStatus

__all__ = ["SubmissionRepository"]


class SubmissionRepository:
    """Thin wrapper around database access for submission entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, submission_id: str) -> Submission | None:
        """Return a submission by identifier."""
        return self.session.get(Submission, submission_id)

    def list_by_status(self, status: SubmissionStatus | None = None) -> list[Submission]:
        """Return submissions newest first, optionally filtered by status."""
        stmt = select(Submission)
        if status is not None:
            stmt = stmt.where(Submission.status == status)
        stmt = stmt.order_by(Submission.created_at.desc(), Submission.id.desc())
        return list(self.session.scalars(stmt))

    def count_by_status(self, status: SubmissionStatus) -> int:
        """Return how many submissions are in `status`."""
        stmt = select(func.count()).select_from(Submission).where(Submission.status == status)
        return int(self.session.scalar(stmt) or 0)

    def add(self, submission: Submission) -> Submission:
        """Stage a new submission and flush it."""
        self.session.add(submission)
        self.session.flush()
        return submission

    def delete(self, submission: Submission) -> None:
        """Remove a submission row."""
        self.session.delete(submission)
        self.session.flush()

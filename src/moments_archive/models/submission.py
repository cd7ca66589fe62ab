# src/moments_archive/models/submission.py
"""Models tracking visitor nominations awaiting curator review."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from moments_archive.db.session import Base
from moments_archive.db.time import utcnow
from moments_archive.models.moment import new_id


class SubmissionStatus(StrEnum):
    """Review states. PENDING is the only state with outgoing transitions."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Submission(Base):
    """State machine representing a visitor-nominated candidate."""

    __tablename__ = "submission"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)

    media_url: Mapped[str] = mapped_column(Text, nullable=False)
    source_url: Mapped[str] = mapped_column(Text, nullable=False)
    creator_name: Mapped[str] = mapped_column(Text, nullable=False)
    creator_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    submitter_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    submitter_ip: Mapped[str] = mapped_column(String(64), nullable=False)

    status: Mapped[SubmissionStatus] = mapped_column(
        Enum(
            SubmissionStatus,
            native_enum=False,
            length=16,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        default=SubmissionStatus.PENDING,
        index=True,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    review_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    moment_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("moment.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )

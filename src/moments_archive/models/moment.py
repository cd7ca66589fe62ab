# src/moments_archive/models/moment.py
"""SQLAlchemy model for published archive entries."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from moments_archive.core.categories import Category
from moments_archive.db.session import Base
from moments_archive.db.time import utcnow
from moments_archive.models.types import TagList

MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 5000
MAX_TAG_LENGTH = 50
MAX_TAGS_COUNT = 20


def new_id() -> str:
    """Return an opaque primary key."""
    return uuid.uuid4().hex


class Moment(Base):
    """A design work published in the archive together with curator commentary."""

    __tablename__ = "moment"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    # Unique at the database level; the service-side lookup only improves the error message.
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(MAX_TITLE_LENGTH), nullable=False)
    category: Mapped[Category] = mapped_column(
        Enum(
            Category,
            native_enum=False,
            length=32,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        index=True,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)

    creator_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    creator_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_url: Mapped[str] = mapped_column(Text, nullable=False)
    media_url: Mapped[str] = mapped_column(Text, nullable=False)

    tags: Mapped[list[str]] = mapped_column(TagList, nullable=False, default=list)
    # Display hint derived from the media; "#rrggbb".
    dominant_color: Mapped[str | None] = mapped_column(String(7), nullable=True)

    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    year_approximate: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    published_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    @property
    def year_label(self) -> str | None:
        """Return the display form of the creation year ("1990s" when approximate)."""
        if self.year is None:
            return None
        if self.year_approximate:
            return f"{self.year}s"
        return str(self.year)

"""Data access helpers for working with moments."""
from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from moments_archive.core.categories import Category
from moments_archive.models.moment import Moment

__all__ = ["MomentRepository"]


class MomentRepository:
    """Thin wrapper around database access for moment entities.

    Tags cross this boundary as ``list[str]``; the JSON text they are stored
    as is handled by the ``TagList`` column type.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, moment_id: str) -> Moment | None:
        """Return a moment by identifier."""
        return self.session.get(Moment, moment_id)

    def get_by_slug(self, slug: str) -> Moment | None:
        """Return a moment by its public slug."""
        return self.session.scalars(select(Moment).where(Moment.slug == slug)).first()

    def slug_exists(self, slug: str) -> bool:
        """Return True if any moment already uses `slug`."""
        stmt = select(func.count()).select_from(Moment).where(Moment.slug == slug)
        return bool(self.session.scalar(stmt))

    def list_recent(self, category: Category | None = None) -> list[Moment]:
        """Return moments newest first, optionally limited to one category."""
        stmt = select(Moment)
        if category is not None:
            stmt = stmt.where(Moment.category == category)
        stmt = stmt.order_by(Moment.published_at.desc(), Moment.id.desc())
        return list(self.session.scalars(stmt))

    def list_same_category(
        self, category: Category, *, exclude_id: str, limit: int
    ) -> list[Moment]:
        """Return up to `limit` newest moments in `category`, excluding one id."""
        stmt = (
            select(Moment)
            .where(Moment.id != exclude_id, Moment.category == category)
            .order_by(Moment.published_at.desc())
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def list_other_categories(
        self, category: Category, *, exclude_id: str, limit: int
    ) -> list[Moment]:
        """Return up to `limit` newest moments outside `category`, excluding one id."""
        stmt = (
            select(Moment)
            .where(Moment.id != exclude_id, Moment.category != category)
            .order_by(Moment.published_at.desc())
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def first_published_after(self, published_at: datetime) -> tuple[str, str] | None:
        """Return ``(slug, title)`` of the earliest moment strictly after `published_at`."""
        stmt = (
            select(Moment.slug, Moment.title)
            .where(Moment.published_at > published_at)
            .order_by(Moment.published_at.asc(), Moment.id.asc())
            .limit(1)
        )
        row = self.session.execute(stmt).first()
        return (row.slug, row.title) if row is not None else None

    def last_published_before(self, published_at: datetime) -> tuple[str, str] | None:
        """Return ``(slug, title)`` of the latest moment strictly before `published_at`."""
        stmt = (
            select(Moment.slug, Moment.title)
            .where(Moment.published_at < published_at)
            .order_by(Moment.published_at.desc(), Moment.id.desc())
            .limit(1)
        )
        row = self.session.execute(stmt).first()
        return (row.slug, row.title) if row is not None else None

    def add(self, moment: Moment) -> Moment:
        """Stage a new moment and flush so constraint violations surface here."""
        self.session.add(moment)
        self.session.flush()
        return moment

    def delete(self, moment: Moment) -> None:
        """Remove a single moment."""
        self.session.delete(moment)
        self.session.flush()

    def existing_slugs(self, slugs: Sequence[str]) -> list[str]:
        """Return the subset of `slugs` that exist."""
        if not slugs:
            return []
        stmt = select(Moment.slug).where(Moment.slug.in_(list(slugs)))
        return list(self.session.scalars(stmt))

    def delete_by_slugs(self, slugs: Sequence[str]) -> int:
        """Delete every moment whose slug is listed and return how many went."""
        if not slugs:
            return 0
        result = self.session.execute(delete(Moment).where(Moment.slug.in_(list(slugs))))
        return int(result.rowcount or 0)

    def delete_all(self) -> int:
        """Delete every moment and return how many went."""
        result = self.session.execute(delete(Moment))
        return int(result.rowcount or 0)

    def count(self) -> int:
        """Return the number of published moments."""
        return int(self.session.scalar(select(func.count()).select_from(Moment)) or 0)

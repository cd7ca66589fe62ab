"""Curator-facing moment management and public browsing."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from moments_archive.core.categories import Category
from moments_archive.core.errors import DataError, NotFoundError, SlugConflictError
from moments_archive.core.settings import settings
from moments_archive.db.transactions import data_errors
from moments_archive.models import Moment
from moments_archive.repositories import MomentRepository
from moments_archive.schemas.moment import MomentCreate, MomentUpdate
from moments_archive.services.adjacency import Adjacency, adjacent_moments
from moments_archive.services.color import ColorExtractor, get_color_extractor
from moments_archive.services.ranking import related_moments
from moments_archive.services.slugs import allocate_unique_slug, generate_slug

logger = logging.getLogger(__name__)

ALL_CATEGORIES: Final[str] = "All"


@dataclass(frozen=True)
class MomentDetail:
    moment: Moment
    related: list[Moment]
    adjacent: Adjacency


def matches_search(moment: Moment, term: str) -> bool:
    """Case-insensitive match against title, description, creator and tags."""
    needle = term.casefold()
    haystack = [moment.title, moment.description, moment.creator_name or "", *moment.tags]
    return any(needle in value.casefold() for value in haystack)


class MomentService:
    """Service for browsing and curating published moments."""

    def __init__(
        self,
        db: Session,
        *,
        color_extractor: ColorExtractor | None = None,
        related_limit: int = settings.related_limit,
        slug_max_attempts: int = settings.slug_max_attempts,
    ) -> None:
        self.db = db
        self.repo = MomentRepository(db)
        self.color_extractor = color_extractor or get_color_extractor()
        self.related_limit = related_limit
        self.slug_max_attempts = slug_max_attempts

    def list(self, category: str | None = None, search: str | None = None) -> list[Moment]:
        """Return moments newest first.

        ``category`` may be a category name or ``"All"``; unknown names raise
        `ValidationFailed`.
        """
        selected = None
        if category and category != ALL_CATEGORIES:
            selected = Category.parse(category)
        with data_errors(self.db, "Failed to fetch moments"):
            moments = self.repo.list_recent(selected)
        term = (search or "").strip()
        if term:
            moments = [moment for moment in moments if matches_search(moment, term)]
        return moments

    def get_by_slug(self, slug: str) -> Moment:
        with data_errors(self.db, f"Failed to fetch moment: {slug}"):
            moment = self.repo.get_by_slug(slug)
        if moment is None:
            raise NotFoundError("Moment not found")
        return moment

    def detail(self, slug: str) -> MomentDetail:
        """Return a moment with its related strip and chronological neighbours."""
        moment = self.get_by_slug(slug)
        with data_errors(self.db, f"Failed to fetch moment: {slug}"):
            related = related_moments(self.repo, moment, self.related_limit)
            adjacent = adjacent_moments(self.repo, moment.published_at)
        return MomentDetail(moment=moment, related=related, adjacent=adjacent)

    def _insert(self, moment: Moment) -> Moment:
        with data_errors(self.db, "Failed to create moment"):
            try:
                self.repo.add(moment)
                self.db.commit()
            except IntegrityError as exc:
                self.db.rollback()
                if self.repo.slug_exists(moment.slug):
                    raise SlugConflictError(
                        f"A moment with the slug '{moment.slug}' already exists"
                    ) from exc
                raise DataError("Failed to create moment", exc) from exc
            self.db.refresh(moment)
        return moment

    async def create(self, data: MomentCreate) -> Moment:
        """Publish a moment directly, bypassing the submission queue.

        An explicit slug must be free; otherwise one is derived from the title.

        Raises:
            SlugConflictError: If the explicit slug is taken.
        """
        with data_errors(self.db, "Failed to create moment"):
            if data.slug:
                slug = generate_slug(data.slug)
                if self.repo.slug_exists(slug):
                    raise SlugConflictError(f"A moment with the slug '{slug}' already exists")
            else:
                slug = allocate_unique_slug(
                    generate_slug(data.title),
                    self.repo.slug_exists,
                    max_attempts=self.slug_max_attempts,
                )

        dominant_color = await self.color_extractor.extract(data.media_url)
        moment = self._insert(
            Moment(
                slug=slug,
                title=data.title,
                category=data.category,
                description=data.description,
                creator_name=data.creator_name,
                creator_url=data.creator_url,
                source_url=data.source_url,
                media_url=data.media_url,
                tags=list(data.tags),
                dominant_color=dominant_color,
                year=data.year,
                year_approximate=data.year_approximate,
            )
        )
        logger.info("Created moment %s (%s)", moment.id, moment.slug)
        return moment

    async def update(self, slug: str, data: MomentUpdate) -> Moment:
        """Apply the fields present in `data`; a new media URL refreshes the color."""
        moment = self.get_by_slug(slug)
        changes = data.model_dump(exclude_unset=True)
        for required in ("title", "category", "description", "media_url", "source_url"):
            if changes.get(required, ...) is None:
                changes.pop(required)

        media_url = changes.get("media_url")
        if media_url is not None and media_url != moment.media_url:
            changes["dominant_color"] = await self.color_extractor.extract(media_url)

        with data_errors(self.db, f"Failed to update moment: {slug}"):
            for field, value in changes.items():
                setattr(moment, field, value)
            self.db.commit()
            self.db.refresh(moment)
        logger.info("Updated moment %s: %s", slug, ", ".join(sorted(changes)) or "no changes")
        return moment

    def delete(self, slug: str) -> None:
        moment = self.get_by_slug(slug)
        with data_errors(self.db, f"Failed to delete moment: {slug}"):
            self.repo.delete(moment)
            self.db.commit()
        logger.info("Deleted moment %s", slug)

    def bulk_delete(self, slugs: Sequence[str]) -> tuple[list[str], list[str]]:
        """Delete the listed moments and report ``(deleted, missing)`` slugs."""
        requested = list(dict.fromkeys(slugs))
        with data_errors(self.db, "Failed to delete moments"):
            existing = set(self.repo.existing_slugs(requested))
            self.repo.delete_by_slugs(sorted(existing))
            self.db.commit()
        deleted = [slug for slug in requested if slug in existing]
        missing = [slug for slug in requested if slug not in existing]
        logger.info("Bulk deleted %d moments (%d missing)", len(deleted), len(missing))
        return deleted, missing

    def delete_all(self) -> int:
        """Remove every moment. Submissions keep their history via SET NULL."""
        with data_errors(self.db, "Failed to delete moments"):
            count = self.repo.delete_all()
            self.db.commit()
        logger.warning("Deleted all %d moments", count)
        return count

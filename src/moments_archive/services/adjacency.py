"""Chronological previous/next navigation between moments."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from moments_archive.repositories.moment_repo import MomentRepository


@dataclass(frozen=True)
class MomentNav:
    slug: str
    title: str


@dataclass(frozen=True)
class Adjacency:
    """Immediate neighbours by ``published_at``; ``None`` at either end of the archive."""

    prev: MomentNav | None
    next: MomentNav | None


def adjacent_moments(repo: MomentRepository, published_at: datetime) -> Adjacency:
    """Return the moments published immediately before and after `published_at`.

    Comparisons are strict, so a moment never lists itself.
    """
    later = repo.first_published_after(published_at)
    earlier = repo.last_published_before(published_at)
    return Adjacency(
        prev=MomentNav(*earlier) if earlier is not None else None,
        next=MomentNav(*later) if later is not None else None,
    )

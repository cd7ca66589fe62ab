"""Related-content ranking for the "more like this" strip."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Final

from moments_archive.core.categories import Category
from moments_archive.db.time import as_utc
from moments_archive.models.moment import Moment
from moments_archive.repositories.moment_repo import MomentRepository

DEFAULT_RELATED_LIMIT: Final[int] = 3
# Pool sizes pulled from the database before scoring.
SAME_CATEGORY_POOL: Final[int] = 50
OTHER_CATEGORY_POOL: Final[int] = 20

SHARED_TAG_WEIGHT: Final[int] = 2
SAME_CATEGORY_WEIGHT: Final[int] = 1


def relevance_score(source_tags: Iterable[str], source_category: Category, candidate: Moment) -> int:
    """Return ``2 * shared tags + (1 if same category else 0)``."""
    wanted = set(source_tags)
    shared = sum(1 for tag in candidate.tags if tag in wanted)
    same_category = 1 if candidate.category == source_category else 0
    return SHARED_TAG_WEIGHT * shared + SAME_CATEGORY_WEIGHT * same_category


def rank_related(
    source_tags: Iterable[str],
    source_category: Category,
    candidates: Sequence[Moment],
    limit: int = DEFAULT_RELATED_LIMIT,
) -> list[Moment]:
    """Order `candidates` by relevance, newest first among equal scores.

    Pure and deterministic: the result depends only on the arguments.
    """
    tags = list(source_tags)
    scored = [
        (relevance_score(tags, source_category, candidate), candidate)
        for candidate in candidates
    ]
    scored.sort(key=lambda item: (item[0], as_utc(item[1].published_at)), reverse=True)
    return [candidate for _, candidate in scored[: max(0, limit)]]


def related_moments(
    repo: MomentRepository,
    moment: Moment,
    limit: int = DEFAULT_RELATED_LIMIT,
) -> list[Moment]:
    """Return up to `limit` moments similar to `moment`.

    Other categories are only consulted when the same-category pool is
    smaller than `limit`.
    """
    pool = repo.list_same_category(
        moment.category, exclude_id=moment.id, limit=SAME_CATEGORY_POOL
    )
    if len(pool) < limit:
        pool += repo.list_other_categories(
            moment.category, exclude_id=moment.id, limit=OTHER_CATEGORY_POOL
        )
    return rank_related(moment.tags, moment.category, pool, limit)

"""Tests for related-moment scoring and candidate pooling."""

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta

from moments_archive.core.categories import Category
from moments_archive.models import Moment
from moments_archive.repositories import MomentRepository
from moments_archive.services.ranking import rank_related, related_moments, relevance_score
from tests.conftest import BASE_TIME

X = Category.INTERFACES
Y = Category.TYPOGRAPHY


def _moment(slug: str, category: Category, tags: list[str], minutes: int = 0) -> Moment:
    return Moment(
        id=slug,
        slug=slug,
        title=slug.upper(),
        category=category,
        description="",
        source_url="https://example.com",
        media_url="https://example.com/m.png",
        tags=tags,
        published_at=BASE_TIME + timedelta(minutes=minutes),
    )


def test_scores_weigh_shared_tags_twice_category() -> None:
    b = _moment("b", X, ["a"])
    c = _moment("c", Y, ["a", "b"])
    d = _moment("d", X, [])

    assert relevance_score(["a", "b"], X, b) == 3
    assert relevance_score(["a", "b"], X, c) == 4
    assert relevance_score(["a", "b"], X, d) == 1


def test_rank_related_orders_by_score() -> None:
    """Verify the A/B/C/D example ranks C ahead of B and drops D at limit 2."""
    b = _moment("b", X, ["a"])
    c = _moment("c", Y, ["a", "b"])
    d = _moment("d", X, [])

    ranked = rank_related(["a", "b"], X, [b, c, d], limit=2)

    assert [item.slug for item in ranked] == ["c", "b"]


def test_rank_related_breaks_ties_by_newest() -> None:
    old = _moment("old", X, ["a"], minutes=1)
    new = _moment("new", X, ["a"], minutes=5)

    ranked = rank_related(["a"], X, [old, new], limit=3)

    assert [item.slug for item in ranked] == ["new", "old"]


def test_rank_related_is_deterministic() -> None:
    candidates = [_moment(f"m{i}", X if i % 2 else Y, ["a"] * (i % 3), minutes=i) for i in range(8)]

    first = rank_related(["a"], X, candidates, limit=4)
    second = rank_related(["a"], X, list(reversed(candidates)), limit=4)

    assert [item.slug for item in first] == [item.slug for item in second]


def test_related_prefers_same_category_pool(
    make_moment: Callable[..., Moment], db_session
) -> None:
    source = make_moment(slug="source", category=X, tags=["a", "b"])
    make_moment(slug="same-1", category=X, tags=[])
    make_moment(slug="same-2", category=X, tags=["a"])
    make_moment(slug="same-3", category=X, tags=[])
    make_moment(slug="other", category=Y, tags=["a", "b"])

    related = related_moments(MomentRepository(db_session), source, limit=3)

    slugs = [item.slug for item in related]
    assert "other" not in slugs
    assert "source" not in slugs
    assert slugs[0] == "same-2"


def test_related_falls_back_to_other_categories(
    make_moment: Callable[..., Moment], db_session
) -> None:
    source = make_moment(slug="source", category=X, tags=["a", "b"])
    make_moment(slug="same", category=X, tags=["a"])
    make_moment(slug="other", category=Y, tags=["a", "b"])
    make_moment(slug="unrelated", category=Y, tags=[])

    related = related_moments(MomentRepository(db_session), source, limit=3)

    assert [item.slug for item in related] == ["other", "same", "unrelated"]

"""URL slug helpers for moments."""
from __future__ import annotations

import re
from collections.abc import Callable

from moments_archive.core.errors import ValidationFailed

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile(r"-+")

FALLBACK_SLUG = "moment"


def generate_slug(title: str) -> str:
    """Return a URL-friendly slug for `title`.

    Characters outside ``[a-z0-9]``, whitespace and ``-`` are dropped, runs of
    whitespace become a single dash and leading/trailing dashes are trimmed.
    """
    slug = _DISALLOWED.sub("", title.lower())
    slug = _WHITESPACE.sub("-", slug.strip())
    slug = _DASHES.sub("-", slug).strip("-")
    return slug or FALLBACK_SLUG


def allocate_unique_slug(
    base: str,
    exists: Callable[[str], bool],
    *,
    max_attempts: int,
) -> str:
    """Return `base`, or the first of ``base-1``, ``base-2``, … that is free.

    The lookup only picks a likely-free candidate; the unique constraint on
    ``moment.slug`` is what rejects a concurrent duplicate.

    Raises:
        ValidationFailed: If no free slug was found within `max_attempts` tries.
    """
    candidate = base
    for counter in range(1, max_attempts + 1):
        if not exists(candidate):
            return candidate
        candidate = f"{base}-{counter}"
    raise ValidationFailed(
        f"Could not find a free slug for '{base}' after {max_attempts} attempts"
    )

"""Validators and helpers shared by the request schemas."""
from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import urlsplit

from pydantic import ValidationError

from moments_archive.models.moment import MAX_TAG_LENGTH, MAX_TAGS_COUNT


def is_http_url(value: str) -> bool:
    """Return True for absolute http/https URLs with a host."""
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def require_http_url(value: str, label: str) -> str:
    """Return `value` unchanged or raise ValueError naming the field."""
    if not is_http_url(value):
        raise ValueError(f"Invalid {label} format")
    return value


def blank_to_none(value: object) -> object:
    """Treat empty or whitespace-only optional strings as absent."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def normalize_tags(value: object) -> list[str]:
    """Accept a list or a comma-separated string and return clean, distinct tags.

    Raises:
        ValueError: If there are too many tags or one of them is too long.
    """
    if value is None:
        return []
    if isinstance(value, str):
        raw: Iterable[object] = value.split(",")
    elif isinstance(value, list | tuple | set):
        raw = value
    else:
        raise ValueError("Tags must be a list of strings")

    tags: list[str] = []
    for item in raw:
        if not isinstance(item, str):
            raise ValueError("Tags must be a list of strings")
        tag = item.strip()
        if not tag or tag in tags:
            continue
        if len(tag) > MAX_TAG_LENGTH:
            raise ValueError(f"Each tag must be under {MAX_TAG_LENGTH} characters")
        tags.append(tag)

    if len(tags) > MAX_TAGS_COUNT:
        raise ValueError(f"Maximum {MAX_TAGS_COUNT} tags allowed")
    return tags


def first_error_message(exc: ValidationError) -> str:
    """Condense a pydantic error into one actionable sentence."""
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    error = errors[0]
    field = ".".join(str(part) for part in error.get("loc", ()))
    if error.get("type") == "missing":
        return f"{field} is required"
    ctx_error = (error.get("ctx") or {}).get("error")
    message = str(ctx_error) if ctx_error else error.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message

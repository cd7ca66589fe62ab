"""Column types mapping stored representations to Python values."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy import Text
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator

logger = logging.getLogger(__name__)


def encode_tags(tags: Iterable[str]) -> str:
    """Serialize a tag collection to the JSON text kept in the database."""
    return json.dumps([str(tag) for tag in tags])


def decode_tags(raw: str | None) -> list[str]:
    """Parse stored tag JSON, failing closed to an empty list.

    Non-string members of a stored array are dropped.
    """
    if raw is None:
        return []
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Failed to parse stored tags JSON: %r", raw)
        return []
    if not isinstance(parsed, list):
        return []
    return [tag for tag in parsed if isinstance(tag, str)]


class TagList(TypeDecorator[list[str]]):
    """Text column holding a JSON array of tag strings."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> str:
        return encode_tags(value or [])

    def process_result_value(self, value: Any, dialect: Dialect) -> list[str]:
        return decode_tags(value)

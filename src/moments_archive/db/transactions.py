"""Helpers for grouping writes and translating persistence failures."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from moments_archive.core.errors import DataError


@contextmanager
def data_errors(db: Session, message: str) -> Iterator[None]:
    """Roll back and re-raise any SQLAlchemy failure as `DataError(message)`.

    Errors from the archive's own taxonomy pass through untouched.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        raise DataError(message, exc) from exc

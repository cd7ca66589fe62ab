# src/moments_archive/models/__init__.py
"""SQLAlchemy models for the Moments Archive."""

from .moment import Moment
from .submission import Submission, SubmissionStatus

__all__ = [
    "Moment",
    "Submission", "SubmissionStatus",
]

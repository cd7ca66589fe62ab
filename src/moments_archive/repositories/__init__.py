"""Persistence wrappers around the ORM models."""

from .moment_repo import MomentRepository
from .submission_repo import SubmissionRepository

__all__ = ["MomentRepository", "SubmissionRepository"]

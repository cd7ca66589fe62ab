"""Error taxonomy shared by the repositories, services and API layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from moments_archive.services.rate_limiter import RateLimitResult


class ArchiveError(Exception):
    """Base class for all errors the archive reports to callers."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(ArchiveError, ValueError):
    """Malformed or missing input the caller can correct."""

    status_code = 400


class SlugConflictError(ValidationFailed):
    """A moment with the requested slug already exists."""

    status_code = 409


class NotFoundError(ArchiveError):
    """Unknown submission id or moment slug."""

    status_code = 404


class StateConflictError(ArchiveError):
    """The submission has already left the PENDING state."""

    status_code = 409


class RateLimitExceeded(ArchiveError):
    """The caller spent its quota for a namespace."""

    status_code = 429

    def __init__(self, result: RateLimitResult) -> None:
        super().__init__(result.reason or "Rate limit exceeded")
        self.result = result


class DataError(ArchiveError):
    """Persistence failure.

    The message is safe to show to callers; `cause` keeps the original
    exception for logs only.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class RateLimitUnavailable(ArchiveError):
    """The shared quota store could not serialize the update in time."""

    status_code = 503

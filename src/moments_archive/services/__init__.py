"""Business services for the moments archive."""

from .moments import MomentService
from .rate_limiter import RateLimiter, get_rate_limiter
from .submissions import SubmissionService

__all__ = ["MomentService", "RateLimiter", "SubmissionService", "get_rate_limiter"]

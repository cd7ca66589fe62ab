"""Rate-limit Pydantic schemas."""

from pydantic import BaseModel


class QuotaWindows(BaseModel):
    """A value per rolling window."""

    hour: int
    day: int


class RateLimitStatusResponse(BaseModel):
    """Pre-flight quota report for the calling client."""

    allowed: bool
    remaining: QuotaWindows
    reset_in: QuotaWindows


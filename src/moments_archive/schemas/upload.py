"""Upload Pydantic schemas."""

from pydantic import BaseModel

from moments_archive.schemas.rate_limit import QuotaWindows


class UploadResponse(BaseModel):
    """Public URL of stored media; visitors also see their remaining quota."""

    url: str
    remaining: QuotaWindows | None = None

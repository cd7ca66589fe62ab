# src/moments_archive/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .category import CategoryResponse
from .moment import (
    AdjacentResponse,
    BulkDeleteRequest,
    BulkDeleteResponse,
    MomentCreate,
    MomentDetailResponse,
    MomentNav,
    MomentResponse,
    MomentUpdate,
)
from .rate_limit import QuotaWindows, RateLimitStatusResponse
from .upload import UploadResponse
from .submission import (
    ApprovalRequest,
    ApprovalResponse,
    RejectionRequest,
    RejectionResponse,
    SubmissionCreate,
    SubmissionListResponse,
    SubmissionReceipt,
    SubmissionResponse,
)

__all__ = [
    "CategoryResponse",
    "AdjacentResponse", "BulkDeleteRequest", "BulkDeleteResponse", "MomentCreate",
    "MomentDetailResponse", "MomentNav", "MomentResponse", "MomentUpdate",
    "QuotaWindows", "RateLimitStatusResponse", "UploadResponse",
    "ApprovalRequest", "ApprovalResponse", "RejectionRequest", "RejectionResponse",
    "SubmissionCreate", "SubmissionListResponse", "SubmissionReceipt", "SubmissionResponse",
]

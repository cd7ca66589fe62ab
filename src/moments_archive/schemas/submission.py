# src/moments_archive/schemas/submission.py
"""Submission-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from moments_archive.core.categories import Category
from moments_archive.models.moment import MAX_DESCRIPTION_LENGTH, MAX_TITLE_LENGTH
from moments_archive.models.submission import SubmissionStatus
from moments_archive.schemas.common import blank_to_none, normalize_tags, require_http_url

MAX_CREATOR_NAME_LENGTH = 100
MAX_SUBMITTER_NOTE_LENGTH = 1000


class SubmissionCreate(BaseModel):
    """Schema for a public nomination.

    Accepts both snake_case and the camelCase names used by the web form.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    media_url: str = Field(..., min_length=1)
    source_url: str = Field(..., min_length=1)
    creator_name: str = Field(..., min_length=1, max_length=MAX_CREATOR_NAME_LENGTH)
    creator_url: str | None = None
    title: str | None = Field(None, max_length=MAX_TITLE_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    submitter_note: str | None = Field(None, max_length=MAX_SUBMITTER_NOTE_LENGTH)

    @field_validator("creator_url", "title", "description", "submitter_note", mode="before")
    @classmethod
    def _optional_blank(cls, value: object) -> object:
        return blank_to_none(value)

    @field_validator("media_url")
    @classmethod
    def _media_url(cls, value: str) -> str:
        return require_http_url(value, "media URL")

    @field_validator("source_url")
    @classmethod
    def _source_url(cls, value: str) -> str:
        return require_http_url(value, "source URL")

    @field_validator("creator_url")
    @classmethod
    def _creator_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return require_http_url(value, "creator URL")


class SubmissionReceipt(BaseModel):
    """Returned to the visitor after a nomination."""

    success: bool = True
    id: str


class SubmissionResponse(BaseModel):
    """Schema for submission information returned to curators."""

    id: str
    media_url: str
    source_url: str
    creator_name: str
    creator_url: str | None
    title: str | None
    description: str | None
    submitter_note: str | None
    submitter_ip: str
    status: SubmissionStatus
    reviewed_at: datetime | None
    review_note: str | None
    moment_id: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SubmissionListResponse(BaseModel):
    """Moderation queue page with the badge count."""

    submissions: list[SubmissionResponse]
    pending_count: int


class ApprovalRequest(BaseModel):
    """Final editorial fields a curator supplies when approving."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    category: Category
    description: str = Field(..., min_length=1, max_length=MAX_DESCRIPTION_LENGTH)
    tags: list[str] = Field(default_factory=list)
    year: int | None = Field(None, ge=0, le=9999)
    year_approximate: bool = False

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, value: object) -> Category:
        return Category.parse(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value: object) -> list[str]:
        return normalize_tags(value)


class ApprovalResponse(BaseModel):
    """Outcome of an approval."""

    success: bool = True
    submission: SubmissionResponse
    moment_id: str
    moment_slug: str


class RejectionRequest(BaseModel):
    """Optional curator note recorded when rejecting."""

    review_note: str | None = Field(None, max_length=MAX_SUBMITTER_NOTE_LENGTH)


class RejectionResponse(BaseModel):
    """Outcome of a rejection; the record no longer exists."""

    success: bool = True
    deleted: str

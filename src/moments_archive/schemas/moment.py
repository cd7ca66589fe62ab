# src/moments_archive/schemas/moment.py
"""Moment-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from moments_archive.core.categories import Category
from moments_archive.models.moment import MAX_DESCRIPTION_LENGTH, MAX_TITLE_LENGTH
from moments_archive.schemas.common import blank_to_none, normalize_tags, require_http_url


class MomentCreate(BaseModel):
    """Schema for a curator creating a moment directly."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    category: Category
    description: str = Field(..., min_length=1, max_length=MAX_DESCRIPTION_LENGTH)
    media_url: str = Field(..., min_length=1)
    source_url: str = Field(..., min_length=1)
    slug: str | None = Field(None, max_length=255, description="Defaults to a slug of the title")
    creator_name: str | None = None
    creator_url: str | None = None
    tags: list[str] = Field(default_factory=list)
    year: int | None = Field(None, ge=0, le=9999)
    year_approximate: bool = False

    @field_validator("slug", "creator_name", "creator_url", mode="before")
    @classmethod
    def _optional_blank(cls, value: object) -> object:
        return blank_to_none(value)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, value: object) -> Category:
        return Category.parse(value)

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

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value: object) -> list[str]:
        return normalize_tags(value)


class MomentUpdate(BaseModel):
    """Partial curator edit. The slug is immutable and therefore absent."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(None, min_length=1, max_length=MAX_TITLE_LENGTH)
    category: Category | None = None
    description: str | None = Field(None, min_length=1, max_length=MAX_DESCRIPTION_LENGTH)
    media_url: str | None = None
    source_url: str | None = None
    creator_name: str | None = None
    creator_url: str | None = None
    tags: list[str] | None = None
    year: int | None = Field(None, ge=0, le=9999)
    year_approximate: bool | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, value: object) -> Category | None:
        if value is None:
            return None
        return Category.parse(value)

    @field_validator("media_url", "source_url")
    @classmethod
    def _required_urls(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return require_http_url(value, "URL")

    @field_validator("creator_url")
    @classmethod
    def _creator_url(cls, value: str | None) -> str | None:
        if value is None or not value:
            return value
        return require_http_url(value, "creator URL")

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value: object) -> list[str] | None:
        if value is None:
            return None
        return normalize_tags(value)


class MomentResponse(BaseModel):
    """Schema for moment information returned by the API."""

    id: str
    slug: str
    title: str
    category: Category
    description: str
    creator_name: str | None
    creator_url: str | None
    source_url: str
    media_url: str
    tags: list[str]
    dominant_color: str | None
    year: int | None
    year_approximate: bool
    year_label: str | None
    published_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MomentNav(BaseModel):
    """Minimal reference used by previous/next navigation."""

    slug: str
    title: str

    model_config = ConfigDict(from_attributes=True)


class AdjacentResponse(BaseModel):
    """Immediate chronological neighbours of a moment."""

    prev: MomentNav | None
    next: MomentNav | None


class MomentDetailResponse(BaseModel):
    """Everything the single-moment page needs."""

    moment: MomentResponse
    related: list[MomentResponse]
    adjacent: AdjacentResponse


class BulkDeleteRequest(BaseModel):
    """Slugs of the moments a curator wants removed."""

    slugs: list[str] = Field(..., min_length=1)


class BulkDeleteResponse(BaseModel):
    """Which of the requested slugs were removed."""

    success: bool = True
    deleted: list[str]
    missing: list[str]

"""Category Pydantic schemas."""

from pydantic import BaseModel


class CategoryResponse(BaseModel):
    """A category with its curator-facing metadata."""

    name: str
    description: str
    tag_suggestions: list[str]

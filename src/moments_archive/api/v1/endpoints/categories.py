"""Category listing for filters and the curator tag picker."""

from __future__ import annotations

from fastapi import APIRouter

from moments_archive.core.categories import Category, category_description, tag_suggestions
from moments_archive.schemas import CategoryResponse

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories() -> list[CategoryResponse]:
    return [
        CategoryResponse(
            name=category.value,
            description=category_description(category),
            tag_suggestions=tag_suggestions(category),
        )
        for category in Category
    ]

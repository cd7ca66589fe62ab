"""Public browsing and curator management of moments."""

from __future__ import annotations

from fastapi import APIRouter, Query, Response, status

from moments_archive.api.v1.dependencies import AdminDep, MomentServiceDep
from moments_archive.models import Moment
from moments_archive.schemas import (
    AdjacentResponse,
    BulkDeleteRequest,
    BulkDeleteResponse,
    MomentCreate,
    MomentDetailResponse,
    MomentNav,
    MomentResponse,
    MomentUpdate,
)

router = APIRouter(prefix="/moments", tags=["moments"])


@router.get("", response_model=list[MomentResponse])
async def list_moments(
    service: MomentServiceDep,
    category: str | None = Query(None),
    search: str | None = Query(None),
) -> list[Moment]:
    """List moments newest first, optionally by category or free-text search."""
    return service.list(category=category, search=search)


@router.get("/{slug}", response_model=MomentDetailResponse)
async def get_moment(slug: str, service: MomentServiceDep) -> MomentDetailResponse:
    """Return a moment with related moments and its chronological neighbours."""
    detail = service.detail(slug)
    prev, next_ = detail.adjacent.prev, detail.adjacent.next
    return MomentDetailResponse(
        moment=MomentResponse.model_validate(detail.moment),
        related=[MomentResponse.model_validate(item) for item in detail.related],
        adjacent=AdjacentResponse(
            prev=MomentNav(slug=prev.slug, title=prev.title) if prev else None,
            next=MomentNav(slug=next_.slug, title=next_.title) if next_ else None,
        ),
    )


@router.post(
    "",
    response_model=MomentResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[AdminDep],
)
async def create_moment(data: MomentCreate, service: MomentServiceDep) -> Moment:
    return await service.create(data)


@router.patch("/{slug}", response_model=MomentResponse, dependencies=[AdminDep])
async def update_moment(slug: str, data: MomentUpdate, service: MomentServiceDep) -> Moment:
    return await service.update(slug, data)


@router.delete(
    "/{slug}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[AdminDep],
)
async def delete_moment(slug: str, service: MomentServiceDep) -> Response:
    service.delete(slug)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/bulk-delete", response_model=BulkDeleteResponse, dependencies=[AdminDep])
async def bulk_delete_moments(
    request: BulkDeleteRequest,
    service: MomentServiceDep,
) -> BulkDeleteResponse:
    """Delete several moments at once; unknown slugs are reported, not fatal."""
    deleted, missing = service.bulk_delete(request.slugs)
    return BulkDeleteResponse(deleted=deleted, missing=missing)

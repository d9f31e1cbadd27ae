"""Content routes for the locations directory and single-location pages."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from inmo_api.api.context import get_page_context
from inmo_api.schemas.common import PageContext, render_page
from inmo_api.services.dependencies import get_location_service
from inmo_api.services.location_service import LocationService

router = APIRouter()


@router.get("")
@router.get("/", include_in_schema=False)
async def locations_main(
    context: PageContext = Depends(get_page_context),
    service: LocationService = Depends(get_location_service),
) -> dict[str, Any]:
    result = await service.get_main_page(context)
    return result.model_dump(by_alias=True, mode="json")


@router.get("/{slug}")
async def location_single(
    slug: str,
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    context: PageContext = Depends(get_page_context),
    service: LocationService = Depends(get_location_service),
) -> dict[str, Any]:
    """Unknown slugs answer 200 with ``notFound`` and the busiest cities."""

    return render_page(
        await service.get_location_page(context, slug, page=page, limit=limit)
    )

"""Content routes for the property-type directory and single-type pages."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from inmo_api.api.context import get_page_context
from inmo_api.schemas.common import PageContext, render_page
from inmo_api.services.dependencies import get_property_type_service
from inmo_api.services.property_type_service import PropertyTypeService

router = APIRouter()


@router.get("")
@router.get("/", include_in_schema=False)
async def property_types_main(
    context: PageContext = Depends(get_page_context),
    service: PropertyTypeService = Depends(get_property_type_service),
) -> dict[str, Any]:
    result = await service.get_main_page(context)
    return result.model_dump(by_alias=True, mode="json")


@router.get("/{slug}")
async def property_type_single(
    slug: str,
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    context: PageContext = Depends(get_page_context),
    service: PropertyTypeService = Depends(get_property_type_service),
) -> dict[str, Any]:
    return render_page(
        await service.get_type_page(context, slug, page=page, limit=limit)
    )

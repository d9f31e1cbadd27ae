"""Content routes for property listings and single property pages."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, Request

from inmo_api.api.context import get_page_context
from inmo_api.schemas.common import PageContext, render_page
from inmo_api.schemas.property import PropertyCarousel
from inmo_api.services.dependencies import get_property_service
from inmo_api.services.property_service import PropertyService, featured_title
from inmo_api.settings import get_settings

router = APIRouter()


def split_tags(tags: str | None) -> list[str]:
    """``"comprar/apartamento/piantini"`` -> ``["comprar", "apartamento", "piantini"]``."""

    if not tags:
        return []
    return [tag for tag in tags.strip("/").split("/") if tag]


@router.get("")
@router.get("/", include_in_schema=False)
async def list_properties(
    request: Request,
    tags: str | None = Query(
        None, description="Slash-separated listing tags: operation, type, location"
    ),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, le=100),
    context: PageContext = Depends(get_page_context),
    service: PropertyService = Depends(get_property_service),
) -> dict[str, Any]:
    """Filtered, paginated listings. ``min_price``, ``bedrooms`` etc. override tags."""

    page_data = await service.get_list_page(
        context,
        split_tags(tags),
        dict(request.query_params),
        page=page,
        limit=limit or get_settings().default_page_limit,
    )
    return page_data.model_dump(by_alias=True, mode="json")


@router.get("/featured")
async def featured_properties(
    limit: int = Query(12, ge=1, le=50),
    context: PageContext = Depends(get_page_context),
    service: PropertyService = Depends(get_property_service),
) -> dict[str, Any]:
    carousel = PropertyCarousel(
        id="featured",
        title=featured_title(context.language),
        properties=await service.get_featured(context, limit=limit),
    )
    return carousel.model_dump(by_alias=True, mode="json")


@router.get("/{slug}")
async def get_property(
    slug: str,
    tags: str | None = Query(None, description="Tags of the page the user came from"),
    context: PageContext = Depends(get_page_context),
    service: PropertyService = Depends(get_property_service),
) -> dict[str, Any]:
    """Single listing; an unknown slug answers 200 with ``notFound: true``."""

    result = await service.get_property_page(context, slug, split_tags(tags))
    return render_page(result)

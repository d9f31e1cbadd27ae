"""Content routes for the video library: gallery, category pages and videos."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from inmo_api.api.context import get_page_context
from inmo_api.schemas.common import PageContext, render_page
from inmo_api.services.dependencies import get_video_service
from inmo_api.services.video_service import VideoService

router = APIRouter()


@router.get("")
@router.get("/", include_in_schema=False)
async def videos_main(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    context: PageContext = Depends(get_page_context),
    service: VideoService = Depends(get_video_service),
) -> dict[str, Any]:
    result = await service.get_main_page(context, page=page, limit=limit)
    return result.model_dump(by_alias=True, mode="json")


@router.get("/{category_slug}")
async def videos_category(
    category_slug: str,
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    context: PageContext = Depends(get_page_context),
    service: VideoService = Depends(get_video_service),
) -> dict[str, Any]:
    result = await service.get_category_page(
        context, category_slug, page=page, limit=limit
    )
    return render_page(result)


@router.get("/{category_slug}/{slug}")
async def video_single(
    category_slug: str,
    slug: str,
    context: PageContext = Depends(get_page_context),
    service: VideoService = Depends(get_video_service),
) -> dict[str, Any]:
    return render_page(await service.get_video_page(context, category_slug, slug))

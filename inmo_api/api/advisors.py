"""Content routes for the advisor directory and advisor profiles."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from inmo_api.api.context import get_page_context
from inmo_api.schemas.common import PageContext, render_page
from inmo_api.services.advisor_service import AdvisorService
from inmo_api.services.dependencies import get_advisor_service

router = APIRouter()


@router.get("")
@router.get("/", include_in_schema=False)
async def list_advisors(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    context: PageContext = Depends(get_page_context),
    service: AdvisorService = Depends(get_advisor_service),
) -> dict[str, Any]:
    result = await service.get_list_page(context, page=page, limit=limit)
    return result.model_dump(by_alias=True, mode="json")


@router.get("/{slug}")
async def get_advisor(
    slug: str,
    context: PageContext = Depends(get_page_context),
    service: AdvisorService = Depends(get_advisor_service),
) -> dict[str, Any]:
    return render_page(await service.get_advisor_page(context, slug))

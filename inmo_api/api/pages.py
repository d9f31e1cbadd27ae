"""Content routes for the homepage and the contact page."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from inmo_api.api.context import get_page_context
from inmo_api.schemas.common import PageContext
from inmo_api.services.contact_service import ContactService
from inmo_api.services.dependencies import get_contact_service, get_homepage_service
from inmo_api.services.homepage_service import HomepageService

router = APIRouter()


@router.get("/homepage")
async def homepage(
    context: PageContext = Depends(get_page_context),
    service: HomepageService = Depends(get_homepage_service),
) -> dict[str, Any]:
    page = await service.get_page(context)
    return page.model_dump(by_alias=True, mode="json")


@router.get("/contact")
async def contact(
    context: PageContext = Depends(get_page_context),
    service: ContactService = Depends(get_contact_service),
) -> dict[str, Any]:
    page = await service.get_page(context)
    return page.model_dump(by_alias=True, mode="json")

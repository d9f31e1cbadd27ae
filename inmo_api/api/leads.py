"""FastAPI router for contact-form lead intake."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request, status

from inmo_api.api.context import get_tenant
from inmo_api.api.envelope import success
from inmo_api.schemas.common import TenantConfig
from inmo_api.schemas.leads import LeadSubmission
from inmo_api.services.dependencies import get_lead_service
from inmo_api.services.lead_service import LeadService

router = APIRouter()


def client_ip(request: Request) -> str | None:
    """First ``x-forwarded-for`` hop, then ``x-real-ip``, then the socket peer."""

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",", 1)[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else None


@router.post("", status_code=status.HTTP_201_CREATED)
@router.post("/", status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def submit_lead(
    payload: LeadSubmission,
    request: Request,
    tenant: TenantConfig = Depends(get_tenant),
    service: LeadService = Depends(get_lead_service),
) -> dict[str, Any]:
    created = await service.submit(
        tenant.id,
        payload,
        client_ip=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    return success(created)

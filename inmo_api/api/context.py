"""Per-request inputs shared by the content routers: tenant, language, tracking."""

from __future__ import annotations

from fastapi import Depends, Query, Request

from inmo_api.schemas.common import PageContext, TenantConfig
from inmo_api.services.dependencies import get_tenant_service
from inmo_api.services.tenant_service import TenantService
from inmo_api.utils.locale import resolve_language
from inmo_api.utils.tracking import extract_tracking_string

ORIGINAL_HOST_HEADER = "x-original-host"


def request_domain(request: Request) -> str | None:
    """``x-original-host``, then ``?domain=``, then the ``Host`` header."""

    return (
        request.headers.get(ORIGINAL_HOST_HEADER)
        or request.query_params.get("domain")
        or request.headers.get("host")
    )


async def get_tenant(
    request: Request,
    service: TenantService = Depends(get_tenant_service),
) -> TenantConfig:
    return await service.resolve(request_domain(request))


async def get_page_context(
    request: Request,
    lang: str | None = Query(None, description="Response language: es, en or fr"),
    path: str | None = Query(
        None, description="Front-end page path; its /en or /fr prefix sets the language"
    ),
    tenant: TenantConfig = Depends(get_tenant),
) -> PageContext:
    return PageContext(
        tenant=tenant,
        language=resolve_language(lang, path),
        tracking=extract_tracking_string(request.query_params),
    )

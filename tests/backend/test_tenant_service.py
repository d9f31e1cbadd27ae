"""Tests for resolving the tenant behind a request hostname."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from inmo_api.cache import tenant_domain_key
from inmo_api.db.models import Tenant
from inmo_api.db.repositories import TenantRepository
from inmo_api.errors import NotFoundError
from inmo_api.services.tenant_service import TenantService, normalize_domain
from inmo_api.utils.dates import days_ago

from tests.backend.support.factories import make_tenant, settle
from tests.backend.support.memory_cache import MemoryCache


def _service(
    session: AsyncSession, cache: MemoryCache | None = None, default_slug: str = "clic"
) -> TenantService:
    return TenantService(
        TenantRepository(session), cache=cache, default_slug=default_slug
    )


@pytest.mark.parametrize(
    ("host", "expected"),
    [
        ("Clic.DO:8080", "clic.do"),
        ("  localhost ", "localhost"),
        ("", None),
        (None, None),
        (":443", None),
    ],
)
def test_normalize_domain(host: str | None, expected: str | None) -> None:
    assert normalize_domain(host) == expected


@pytest.mark.asyncio
async def test_resolves_exact_suffix_and_slug_matches(session: AsyncSession) -> None:
    await make_tenant(session, slug="clic", dominio_personalizado="www.clic.do")
    await make_tenant(session, slug="costa", dominio_personalizado="costa.com.do")
    await settle(session)
    service = _service(session)

    assert (await service.resolve("www.clic.do")).slug == "clic"
    assert (await service.resolve("clic.do:3000")).slug == "clic"
    assert (await service.resolve("costa")).slug == "costa"


@pytest.mark.asyncio
async def test_unknown_domain_falls_back_to_default_slug(session: AsyncSession) -> None:
    await make_tenant(session, slug="clic", created_at=days_ago(30))
    await make_tenant(
        session, slug="nuevo", dominio_personalizado="nuevo.do", created_at=days_ago(1)
    )
    await settle(session)

    tenant = await _service(session).resolve("unknown.example")

    assert tenant.slug == "clic"
    assert tenant.contact["email"] == "info@clic.do"
    assert tenant.business_info == {"years_experience": 12}


@pytest.mark.asyncio
async def test_without_default_newest_active_tenant_wins(session: AsyncSession) -> None:
    await make_tenant(session, slug="viejo", created_at=days_ago(30))
    await make_tenant(
        session, slug="nuevo", dominio_personalizado="nuevo.do", created_at=days_ago(1)
    )
    await make_tenant(
        session,
        slug="inactivo",
        dominio_personalizado="inactivo.do",
        activo=False,
        created_at=days_ago(0),
    )
    await settle(session)

    tenant = await _service(session, default_slug="missing").resolve(None)

    assert tenant.slug == "nuevo"


@pytest.mark.asyncio
async def test_no_active_tenant_raises(session: AsyncSession) -> None:
    await make_tenant(session, activo=False)
    await settle(session)

    with pytest.raises(NotFoundError, match="Tenant not found"):
        await _service(session).resolve("clic.do")


@pytest.mark.asyncio
async def test_resolved_tenant_is_cached_by_domain(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    await make_tenant(session)
    await settle(session)
    service = _service(session, memory_cache)

    first = await service.resolve("CLIC.do")
    cached = memory_cache.store[tenant_domain_key("clic.do")]
    second = await service.resolve("clic.do:443")

    assert cached["slug"] == "clic"
    assert second == first

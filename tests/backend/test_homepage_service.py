"""Tests for homepage assembly from concurrently gathered reads."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inmo_api.db.models import Tenant
from inmo_api.schemas.common import PageContext
from inmo_api.services.content_cache import HOMEPAGE_FAMILY, page_cache_key
from inmo_api.services.homepage_service import HomepageService, build_sections

from tests.backend.support.factories import (
    make_advisor,
    make_article,
    make_faq,
    make_property,
    make_testimonial,
    settle,
)
from tests.backend.support.memory_cache import MemoryCache


@pytest.mark.asyncio
async def test_homepage_collects_every_section(
    session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
    tenant: Tenant,
    context: PageContext,
) -> None:
    await make_property(session, tenant, title="Apto Destacado", destacada=True)
    await make_property(
        session,
        tenant,
        title="Casa Alquiler",
        tipo="casa",
        categoria_slug="casa",
        operacion="alquiler",
        precio_venta=None,
        precio_alquiler=1800,
    )
    await make_testimonial(session, tenant)
    await make_advisor(session, tenant)
    await make_faq(session, tenant)
    await make_article(session, tenant, title="Mercado 2026")
    await settle(session)

    page = await HomepageService(session_factory).get_page(context)

    assert page.type == "homepage"
    assert [section.type for section in page.sections] == [
        "hero",
        "property-carousel",
        "testimonials",
        "advisors",
        "faq",
    ]
    assert page.sections[0].title == "CLIC Inmobiliaria - Bienes Raíces Premium"
    assert page.quick_stats.total_count == 2
    assert page.quick_stats.for_sale == 1
    assert page.quick_stats.for_rent == 1
    assert {stat.slug: stat.count for stat in page.property_types} == {
        "apartamento": 1,
        "casa": 1,
    }
    assert set(page.featured_by_type) == {"apartamento", "casa"}
    assert page.featured_by_type["casa"].title == "casa Destacados"
    assert [city.name for city in page.hot_items.cities] == ["Santo Domingo"]
    assert page.hot_items.cities[0].count == 2
    assert [article.title for article in page.related_content.articles] == [
        "Mercado 2026"
    ]
    assert page.seo.structured_data["@type"] == "RealEstateAgent"
    assert page.seo.structured_data["email"] == "info@clic.do"
    assert page.seo.canonical_url == "/"


@pytest.mark.asyncio
async def test_empty_tenant_gets_only_the_hero(
    session_factory: async_sessionmaker[AsyncSession], context: PageContext
) -> None:
    english = context.model_copy(update={"language": "en"})

    page = await HomepageService(session_factory).get_page(english)

    assert [section.type for section in page.sections] == ["hero"]
    assert page.sections[0].title == "CLIC Inmobiliaria - Premium Real Estate"
    assert page.hot_items.cities == []
    assert page.featured_by_type == {}
    assert page.seo.canonical_url == "/en"


@pytest.mark.asyncio
async def test_homepage_is_served_from_cache(
    session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
    tenant: Tenant,
    context: PageContext,
    memory_cache: MemoryCache,
) -> None:
    service = HomepageService(session_factory, cache=memory_cache)
    first = await service.get_page(context)
    assert page_cache_key(HOMEPAGE_FAMILY, context) in memory_cache.store

    await make_property(session, tenant, title="Nueva", destacada=True)
    await settle(session)
    second = await service.get_page(context)

    assert first.quick_stats.total_count == 0
    assert second.quick_stats.total_count == 0


def test_build_sections_skips_empty_blocks(context: PageContext) -> None:
    sections = build_sections(
        context, featured=[], testimonials=[], advisors=[], faqs=[]
    )

    assert [section.type for section in sections] == ["hero"]
    assert sections[0].tagline == "Tu próximo hogar te espera"

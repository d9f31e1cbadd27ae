"""Tests for the property-type directory and single-type pages."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from inmo_api.cache import content_prefix
from inmo_api.db.models import Tenant
from inmo_api.db.repositories import PropertyRepository
from inmo_api.schemas.common import (
    Found,
    NotFoundWithFallback,
    PageContext,
    render_page,
)
from inmo_api.services.content_cache import PROPERTY_TYPES_FAMILY
from inmo_api.services.property_type_service import PropertyTypeService

from tests.backend.support.factories import make_property, settle
from tests.backend.support.memory_cache import MemoryCache

INVENTORY = {"apartamento": 4, "casa": 3, "villa": 2, "terreno": 1}


async def _seed_inventory(session: AsyncSession, tenant: Tenant) -> None:
    for tipo, count in INVENTORY.items():
        for number in range(count):
            await make_property(session, tenant, title=f"{tipo} {number}", tipo=tipo)
    await make_property(
        session, tenant, title="Oficina inactiva", tipo="oficina", activo=False
    )
    await settle(session)


@pytest.mark.asyncio
async def test_main_page_features_the_three_busiest_types(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    await _seed_inventory(session, tenant)

    page = await PropertyTypeService(PropertyRepository(session)).get_main_page(
        context
    )

    assert page.type == "property-types-main"
    assert [item.slug for item in page.property_types] == list(INVENTORY)
    assert [item.name for item in page.featured_types] == [
        "Apartamentos",
        "Casas",
        "Villas",
    ]
    assert [item.slug for item in page.remaining_types] == ["terreno"]
    assert page.total_properties == 10

    apartments = page.property_types[0]
    assert apartments.icon == "🏢"
    assert apartments.description == (
        "Modernos espacios urbanos con todas las comodidades"
    )
    assert apartments.url == "/tipos-de-propiedad/apartamento"
    assert apartments.listings_url == "/comprar/apartamento"

    assert [carousel.slug for carousel in page.featured_by_type] == [
        "apartamento",
        "casa",
        "villa",
    ]
    assert len(page.featured_by_type[0].properties) == 4
    assert page.seo.title == "Tipos de Propiedades | 10 Inmuebles Disponibles"
    assert page.seo.structured_data["numberOfItems"] == 4


@pytest.mark.asyncio
async def test_type_names_follow_the_language(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    await make_property(session, tenant, title="Apto Naco")
    await make_property(session, tenant, title="Nave", tipo="nave industrial")
    await settle(session)
    english = context.model_copy(update={"language": "en"})

    types = await PropertyTypeService(PropertyRepository(session)).list_types(
        english
    )

    by_slug = {item.slug: item for item in types}
    assert by_slug["apartamento"].name == "Apartments"
    assert by_slug["apartamento"].url == "/en/property-types/apartamento"
    unknown = by_slug["nave-industrial"]
    assert unknown.name == "nave industrial"
    assert (unknown.icon, unknown.color, unknown.description) == ("🏠", "#6B7280", "")


@pytest.mark.asyncio
async def test_main_page_is_served_from_cache(
    session: AsyncSession,
    tenant: Tenant,
    context: PageContext,
    memory_cache: MemoryCache,
) -> None:
    await make_property(session, tenant, title="Casa Arroyo", tipo="casa")
    await settle(session)
    service = PropertyTypeService(PropertyRepository(session), cache=memory_cache)

    first = await service.get_main_page(context)
    await make_property(session, tenant, title="Casa Cerros", tipo="casa")
    await settle(session)
    second = await service.get_main_page(context)

    assert first.total_properties == second.total_properties == 1
    prefix = content_prefix(PROPERTY_TYPES_FAMILY, tenant.id)
    assert [key for key in memory_cache.store if key.startswith(prefix)]


@pytest.mark.asyncio
async def test_type_page_lists_only_that_type(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    await _seed_inventory(session, tenant)

    result = await PropertyTypeService(PropertyRepository(session)).get_type_page(
        context, "casa", page=2, limit=2
    )

    assert isinstance(result, Found)
    page = result.page
    assert page.type == "property-types-single"
    assert page.property_type.name == "Casas"
    assert len(page.properties) == 1
    assert page.properties[0].title.startswith("casa ")
    assert page.pagination.total == 3
    assert page.pagination.has_prev is True
    assert page.breadcrumbs[-1].url == "/tipos-de-propiedad/casa"
    assert page.seo.title.startswith("Casas | ")


@pytest.mark.asyncio
async def test_unknown_type_is_a_soft_404_with_suggestions(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    await _seed_inventory(session, tenant)

    result = await PropertyTypeService(PropertyRepository(session)).get_type_page(
        context, "castillo"
    )

    assert isinstance(result, NotFoundWithFallback)
    fallback = result.fallback
    assert fallback.not_found is True
    assert fallback.not_found_message == "Tipo de propiedad no encontrado"
    assert fallback.property_type.slug == "castillo"
    assert fallback.properties == []
    assert [item.slug for item in fallback.suggested_types] == list(INVENTORY)
    body = render_page(result)
    assert body["notFound"] is True
    assert body["suggestedTypes"][0]["name"] == "Apartamentos"

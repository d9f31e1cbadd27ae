"""Tests for testimonial pages and the grouped FAQ page."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

import inmo_api.db.repositories as repos
import inmo_api.services.testimonial_service as testimonials
from inmo_api.db.models import Tenant
from inmo_api.schemas.common import Found, NotFoundWithFallback, PageContext
from inmo_api.services.content_cache import TESTIMONIALS_FAMILY, page_cache_key
from inmo_api.utils.dates import days_ago

from tests.backend.support.factories import make_faq, make_testimonial, settle
from tests.backend.support.memory_cache import MemoryCache


def _service(
    session: AsyncSession, cache: MemoryCache | None = None
) -> testimonials.TestimonialService:
    return testimonials.TestimonialService(
        repos.TestimonialRepository(session),
        repos.FAQRepository(session),
        cache=cache,
    )


@pytest.mark.asyncio
async def test_main_page_puts_featured_first_and_caches(
    session: AsyncSession,
    tenant: Tenant,
    context: PageContext,
    memory_cache: MemoryCache,
) -> None:
    await make_testimonial(session, tenant, client="Ana Rodríguez", fecha=days_ago(1))
    await make_testimonial(
        session,
        tenant,
        client="Carlos Gómez",
        category="vendedores",
        destacado=True,
        rating=4.0,
        fecha=days_ago(30),
    )
    await make_testimonial(session, tenant, client="Oculto", publicado=False)
    await settle(session)

    page = await _service(session, memory_cache).get_main_page(context)

    assert page.type == "testimonials-main"
    assert [item.client_name for item in page.recent_testimonials] == [
        "Carlos Gómez",
        "Ana Rodríguez",
    ]
    assert [item.client_name for item in page.featured_testimonials] == [
        "Carlos Gómez"
    ]
    counts = {category.slug: category.count for category in page.categories}
    assert counts == {
        "compradores": 1,
        "vendedores": 1,
        "inversionistas": 0,
        "inquilinos": 0,
    }
    assert page.stats.total_testimonials == 2
    assert page.stats.average_rating == 4.5
    assert page.stats.verified_clients == 1
    assert page.recent_testimonials[1].url == "/testimonios/compradores/ana-rodríguez"
    assert page_cache_key(TESTIMONIALS_FAMILY, context, "main", 1, 12) in (
        memory_cache.store
    )


@pytest.mark.asyncio
async def test_category_page_only_lists_that_category(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    await make_testimonial(session, tenant, client="Ana Rodríguez")
    await make_testimonial(
        session, tenant, client="Marc Dubois", category="inversionistas"
    )
    english = context.model_copy(update={"language": "en"})
    await settle(session)

    result = await _service(session).get_category_page(english, "inversionistas")

    assert isinstance(result, Found)
    page = result.page
    assert page.category.name == "Investors"
    assert page.category.count == 1
    assert [item.client_name for item in page.testimonials] == ["Marc Dubois"]
    assert page.seo.canonical_url == "/en/testimonials/inversionistas"


@pytest.mark.asyncio
async def test_unknown_category_suggests_all_categories(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    await make_testimonial(session, tenant)
    await settle(session)

    result = await _service(session).get_category_page(context, "turistas")

    assert isinstance(result, NotFoundWithFallback)
    fallback = result.fallback
    assert fallback.not_found_message == "Categoría no encontrada"
    assert fallback.category.slug == "turistas"
    assert len(fallback.testimonials) == 1
    assert [category.slug for category in fallback.suggested_categories] == list(
        testimonials.TESTIMONIAL_CATEGORIES
    )


@pytest.mark.asyncio
async def test_testimonial_page_resolves_id_prefix_slug(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    row = await make_testimonial(session, tenant, client="Sin Slug", slug=None)
    await make_testimonial(session, tenant, client="Ana Rodríguez")
    await settle(session)

    result = await _service(session).get_testimonial_page(
        context, "compradores", f"testimonio-{row.id[:8]}"
    )

    assert isinstance(result, Found)
    page = result.page
    assert page.testimonial.client_name == "Sin Slug"
    assert page.testimonial.title == "Testimonio de Sin Slug"
    assert page.testimonial.rating == 5
    assert page.category.name == "Compradores Exitosos"
    assert [item.client_name for item in page.related_testimonials] == [
        "Ana Rodríguez"
    ]


@pytest.mark.asyncio
async def test_missing_testimonial_returns_fallback(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    await make_testimonial(session, tenant)
    await settle(session)

    result = await _service(session).get_testimonial_page(
        context, "compradores", "no-existe"
    )

    assert isinstance(result, NotFoundWithFallback)
    fallback = result.fallback
    assert fallback.not_found_message == "Testimonio no encontrado"
    assert fallback.testimonial.slug == "no-existe"
    assert len(fallback.suggested_testimonials) == 1


def test_testimonial_text_prefers_language_then_any_value() -> None:
    row = testimonials.TestimonialRow(contenido={"en": "", "fr": "Très bien"})

    assert testimonials.testimonial_text(row, "en") == "Très bien"

    row = testimonials.TestimonialRow(
        contenido=None, traducciones={"en": {"contenido": "Great service"}}
    )
    assert testimonials.testimonial_text(row, "en") == "Great service"


@pytest.mark.asyncio
async def test_faqs_page_groups_by_context_in_order(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    await make_faq(session, tenant, question="¿Cuánto cuesta?", orden=2)
    await make_faq(
        session, tenant, question="¿Puedo alquilar?", contexto="alquiler", orden=1
    )
    await make_faq(session, tenant, question="¿Hay financiamiento?", orden=3)
    await make_faq(session, tenant, question="Oculta", publicado=False)
    await settle(session)

    page = await _service(session).get_faqs_page(context)

    assert page.type == "faqs"
    assert [faq.question for faq in page.faqs] == [
        "¿Puedo alquilar?",
        "¿Cuánto cuesta?",
        "¿Hay financiamiento?",
    ]
    assert [group.category for group in page.grouped_faqs] == ["alquiler", "compra"]
    assert len(page.grouped_faqs[1].items) == 2
    assert page.seo.canonical_url == "/faqs"

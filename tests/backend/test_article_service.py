"""Tests for blog listings, category pages and the article soft 404."""

from __future__ import annotations

import logging

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from inmo_api.db.models import Article as ArticleRow
from inmo_api.db.models import Tenant
from inmo_api.db.repositories import ArticleRepository
from inmo_api.schemas.common import (
    Found,
    NotFoundWithFallback,
    PageContext,
    render_page,
)
from inmo_api.services.article_service import ArticleService
from inmo_api.utils.dates import days_ago

from tests.backend.support.factories import (
    make_advisor,
    make_article,
    make_category,
    settle,
)
from tests.backend.support.failures import fail_updates_to


@pytest.mark.asyncio
async def test_main_page_lists_articles_with_stats(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    guides = await make_category(session, tenant, "guias")
    await make_article(
        session, tenant, title="Primera", category=guides, published_at=days_ago(2)
    )
    await make_article(
        session, tenant, title="Segunda", destacado=True, published_at=days_ago(5)
    )
    await make_article(session, tenant, title="Borrador", publicado=False)
    await settle(session)

    page = await ArticleService(ArticleRepository(session)).get_main_page(
        context, page=1, limit=10
    )

    assert page.type == "articles-main"
    assert [article.title for article in page.recent_articles] == ["Segunda", "Primera"]
    assert [article.title for article in page.featured_articles] == ["Segunda"]
    assert {category.slug for category in page.categories} == {"guias", "general"}
    assert page.stats.total_articles == 2
    assert page.pagination.total_pages == 1
    assert page.recent_articles[1].url == "/articulos/guias/primera"
    assert page.recent_articles[0].url == "/articulos/general/segunda"


@pytest.mark.asyncio
async def test_main_page_urls_carry_tracking(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    await make_article(session, tenant, title="Mercado")
    tracked = context.model_copy(update={"language": "en", "tracking": "?ref=ig"})
    await settle(session)

    page = await ArticleService(ArticleRepository(session)).get_main_page(tracked)

    article = page.recent_articles[0]
    assert article.url == "/en/articles/general/mercado?ref=ig"
    assert article.read_time == "3 min read"
    assert page.seo.canonical_url == "/en/articles"


@pytest.mark.asyncio
async def test_general_category_holds_uncategorized_articles(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    guides = await make_category(session, tenant, "guias")
    await make_article(session, tenant, title="Sin categoria")
    await make_article(session, tenant, title="Con categoria", category=guides)
    await settle(session)

    result = await ArticleService(ArticleRepository(session)).get_category_page(
        context, "general"
    )

    assert isinstance(result, Found)
    assert result.page.category.slug == "general"
    assert [article.title for article in result.page.articles] == ["Sin categoria"]


@pytest.mark.asyncio
async def test_unknown_category_returns_fallback_with_suggestions(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    guides = await make_category(session, tenant, "guias")
    await make_article(session, tenant, title="Guia", category=guides)
    await settle(session)

    result = await ArticleService(ArticleRepository(session)).get_category_page(
        context, "inexistente"
    )

    assert isinstance(result, NotFoundWithFallback)
    fallback = result.fallback
    assert fallback.not_found is True
    assert fallback.not_found_message == "Artículo no encontrado"
    assert [article.title for article in fallback.articles] == ["Guia"]
    assert [category.slug for category in fallback.suggested_categories] == ["guias"]
    body = render_page(result)
    assert body["notFound"] is True
    assert body["suggestedCategories"][0]["slug"] == "guias"


@pytest.mark.asyncio
async def test_article_page_includes_author_and_counts_view(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    advisor = await make_advisor(session, tenant)
    guides = await make_category(session, tenant, "guias")
    row = await make_article(
        session,
        tenant,
        title="Comprar en Punta Cana",
        category=guides,
        autor_id=advisor.usuario_id,
        vistas=4,
    )
    await make_article(session, tenant, title="Otra guia", category=guides)
    await settle(session)

    result = await ArticleService(ArticleRepository(session)).get_article_page(
        context, "guias", row.slug
    )

    assert isinstance(result, Found)
    page = result.page
    assert page.article.content
    assert page.article.author.name == "Juan Pérez"
    assert page.article.author.slug == advisor.slug
    assert page.category.slug == "guias"
    assert [article.title for article in page.related_articles] == ["Otra guia"]
    assert page.seo.structured_data["@type"] == "Article"

    await session.commit()
    refreshed = await session.get(ArticleRow, row.id, populate_existing=True)
    assert refreshed is not None
    assert refreshed.vistas == 5


@pytest.mark.asyncio
async def test_missing_article_serves_suggestions(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    await make_article(session, tenant, title="Reciente")
    french = context.model_copy(update={"language": "fr"})
    await settle(session)

    result = await ArticleService(ArticleRepository(session)).get_article_page(
        french, "guias", "no-existe"
    )

    assert isinstance(result, NotFoundWithFallback)
    fallback = result.fallback
    assert fallback.not_found_message == "Article non trouvé"
    assert fallback.article.slug == "no-existe"
    assert [article.title for article in fallback.suggested_articles] == ["Reciente"]


@pytest.mark.asyncio
async def test_failed_view_count_does_not_break_the_article_page(
    session: AsyncSession,
    tenant: Tenant,
    context: PageContext,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    guides = await make_category(session, tenant, "guias")
    row = await make_article(
        session, tenant, title="Comprar en Punta Cana", category=guides, vistas=4
    )
    await settle(session)
    fail_updates_to(monkeypatch, session, "articulos")

    with caplog.at_level(logging.WARNING):
        result = await ArticleService(ArticleRepository(session)).get_article_page(
            context, "guias", row.slug
        )

    assert isinstance(result, Found)
    assert result.page.article.title == "Comprar en Punta Cana"
    assert any(
        message.startswith(f"Failed to increment views for article {row.id}")
        for message in caplog.messages
    )

"""Blog queries over ``articulos`` and ``categorias_contenido``."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import Select, case, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError

from inmo_api.db.models import AdvisorProfile, Article, ContentCategory
from inmo_api.utils.dates import start_of_month

from .base import BaseRepository

logger = logging.getLogger(__name__)

ARTICLE_CATEGORY_TYPE = "articulo"


def published_articles(tenant_id: str) -> Select[tuple[Article]]:
    """Published rows; a ``NULL`` workflow state counts as published."""

    return select(Article).where(
        Article.tenant_id == tenant_id,
        Article.publicado.is_(True),
        or_(Article.estado.is_(None), Article.estado == "publicado"),
    )


def _newest_first():
    # NULL publication dates sort last on every backend.
    return (
        case((Article.fecha_publicacion.is_(None), 1), else_=0),
        Article.fecha_publicacion.desc(),
    )


@dataclass(slots=True)
class ArticleTotals:
    total_articles: int = 0
    total_views: int = 0
    featured_count: int = 0
    published_this_month: int = 0


class ArticleRepository(BaseRepository):
    async def list_featured(self, tenant_id: str, *, limit: int = 6) -> list[Article]:
        query = (
            published_articles(tenant_id)
            .where(Article.destacado.is_(True))
            .order_by(*_newest_first())
            .limit(limit)
        )
        return await self._all(query)

    async def list_recent(
        self,
        tenant_id: str,
        *,
        limit: int,
        offset: int = 0,
        category_id: str | None = None,
        uncategorized: bool = False,
    ) -> tuple[list[Article], int]:
        """Featured first, then newest; optionally restricted to one category."""

        query = published_articles(tenant_id)
        if uncategorized:
            query = query.where(Article.categoria_id.is_(None))
        elif category_id is not None:
            query = query.where(Article.categoria_id == category_id)

        total = await self._count(query)
        rows = await self._all(
            query.order_by(Article.destacado.desc(), *_newest_first())
            .limit(limit)
            .offset(offset)
        )
        return rows, total

    async def get_by_slug(self, tenant_id: str, slug: str) -> Article | None:
        return await self._first(
            published_articles(tenant_id).where(Article.slug == slug)
        )

    async def list_related(self, article: Article, *, limit: int = 4) -> list[Article]:
        """Other articles, same category first."""

        same_category = (
            Article.categoria_id == article.categoria_id
            if article.categoria_id is not None
            else Article.categoria_id.is_(None)
        )
        query = (
            published_articles(article.tenant_id)
            .where(Article.id != article.id)
            .order_by(case((same_category, 0), else_=1), *_newest_first())
            .limit(limit)
        )
        return await self._all(query)

    async def list_categories(
        self, tenant_id: str
    ) -> list[tuple[ContentCategory, int]]:
        """Active article categories with their published-article counts."""

        article_count = (
            select(func.count(Article.id))
            .where(
                Article.categoria_id == ContentCategory.id,
                Article.tenant_id == tenant_id,
                Article.publicado.is_(True),
                or_(Article.estado.is_(None), Article.estado == "publicado"),
            )
            .correlate(ContentCategory)
            .scalar_subquery()
        )
        query = (
            select(ContentCategory, article_count.label("article_count"))
            .where(
                ContentCategory.tenant_id == tenant_id,
                ContentCategory.activa.is_(True),
                ContentCategory.tipo == ARTICLE_CATEGORY_TYPE,
            )
            .order_by(ContentCategory.orden.asc(), ContentCategory.nombre.asc())
        )
        result = await self._session.execute(query)
        return [(category, int(count or 0)) for category, count in result.all()]

    async def get_category(self, tenant_id: str, slug: str) -> ContentCategory | None:
        query = select(ContentCategory).where(
            ContentCategory.tenant_id == tenant_id,
            ContentCategory.slug == slug,
            ContentCategory.activa.is_(True),
            ContentCategory.tipo == ARTICLE_CATEGORY_TYPE,
        )
        return await self._first(query)

    async def count_uncategorized(self, tenant_id: str) -> int:
        return await self._count(
            published_articles(tenant_id).where(Article.categoria_id.is_(None))
        )

    async def totals(self, tenant_id: str) -> ArticleTotals:
        base = published_articles(tenant_id).subquery()
        query = select(
            func.count(),
            func.coalesce(func.sum(base.c.vistas), 0),
            func.sum(case((base.c.destacado.is_(True), 1), else_=0)),
            func.sum(
                case((base.c.fecha_publicacion >= start_of_month(), 1), else_=0)
            ),
        ).select_from(base)
        total, views, featured, this_month = (await self._session.execute(query)).one()
        return ArticleTotals(
            total_articles=int(total or 0),
            total_views=int(views or 0),
            featured_count=int(featured or 0),
            published_this_month=int(this_month or 0),
        )

    async def author_profiles(
        self, tenant_id: str, user_ids: Iterable[str]
    ) -> dict[str, AdvisorProfile]:
        """Advisor profiles of article authors keyed by user id."""

        ids = {user_id for user_id in user_ids if user_id}
        if not ids:
            return {}
        query = select(AdvisorProfile).where(
            AdvisorProfile.tenant_id == tenant_id,
            AdvisorProfile.usuario_id.in_(ids),
        )
        profiles = await self._all(query)
        return {profile.usuario_id: profile for profile in profiles}

    async def increment_views(self, article_id: str) -> None:
        """Bump the view counter; a failure is logged and never propagated."""

        try:
            async with self._session.begin_nested():
                await self._session.execute(
                    update(Article)
                    .where(Article.id == article_id)
                    .values(vistas=func.coalesce(Article.vistas, 0) + 1)
                    .execution_options(synchronize_session=False)
                )
        except SQLAlchemyError as exc:
            logger.warning(
                "Failed to increment views for article %s: %s", article_id, exc
            )

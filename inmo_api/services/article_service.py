"""Blog pages: main listing, category listing and single article."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from inmo_api.db.models import AdvisorProfile, ContentCategory
from inmo_api.db.models import Article as ArticleRow
from inmo_api.db.repositories import ArticleRepository
from inmo_api.schemas.article import (
    Article,
    ArticleAuthor,
    ArticleCategory,
    ArticlesCategoryPage,
    ArticleSinglePage,
    ArticlesMainPage,
    ArticleStats,
    ArticleTag,
)
from inmo_api.schemas.common import (
    Found,
    NotFoundWithFallback,
    PageContext,
    SEOData,
    TenantConfig,
)
from inmo_api.utils.dates import as_utc
from inmo_api.utils.locale import build_url, pick, translated_attr
from inmo_api.utils.pagination import offset_for, paginate
from inmo_api.utils.seo import (
    SCHEMA_CONTEXT,
    absolute_url,
    breadcrumbs,
    generate_seo,
)
from inmo_api.utils.text import DEFAULT_READ_TIME_MINUTES, calculate_read_time, slugify

logger = logging.getLogger(__name__)

GENERAL_CATEGORY_SLUG = "general"
DEFAULT_ARTICLE_IMAGE = "/images/placeholder-article.jpg"
DEFAULT_AUTHOR_AVATAR = "/images/team/clic-experts.jpg"
FEATURED_LIMIT = 6
RELATED_LIMIT = 4
SUGGESTED_LIMIT = 6
CATEGORY_FALLBACK_LIMIT = 12


def team_name(language: str) -> str:
    return pick(language, "Equipo CLIC", "CLIC Team", "Équipe CLIC")


def read_time_label(minutes: int, language: str) -> str:
    unit = pick(language, "min de lectura", "min read", "min de lecture")
    return f"{minutes} {unit}"


def article_not_found_text(language: str) -> str:
    return pick(
        language, "Artículo no encontrado", "Article not found", "Article non trouvé"
    )


def blog_title(language: str) -> str:
    return pick(
        language,
        "Blog y Artículos Inmobiliarios",
        "Real Estate Blog & Articles",
        "Blog et Articles Immobiliers",
    )


def general_category(language: str, article_count: int | None = None) -> ArticleCategory:
    return ArticleCategory(
        id=GENERAL_CATEGORY_SLUG,
        name=pick(language, "General", "General", "Général"),
        slug=GENERAL_CATEGORY_SLUG,
        description=pick(
            language, "Artículos generales", "General articles", "General articles"
        ),
        article_count=article_count,
        url=build_url(f"/articulos/{GENERAL_CATEGORY_SLUG}", language),
    )


def category_to_schema(
    category: ContentCategory, language: str, article_count: int | None = None
) -> ArticleCategory:
    return ArticleCategory(
        id=category.id,
        name=translated_attr(category, "nombre", language) or category.slug,
        slug=category.slug,
        description=translated_attr(category, "descripcion", language),
        article_count=article_count,
        url=build_url(f"/articulos/{category.slug}", language),
    )


def author_to_schema(
    row: ArticleRow,
    profile: AdvisorProfile | None,
    *,
    language: str,
    tenant: TenantConfig,
) -> ArticleAuthor:
    user = row.autor
    fallback_avatar = (
        tenant.branding.get("isotipo_url")
        or tenant.branding.get("logo_url")
        or DEFAULT_AUTHOR_AVATAR
    )
    if user is None:
        return ArticleAuthor(name=team_name(language), avatar=fallback_avatar)

    name = f"{user.nombre or ''} {user.apellido or ''}".strip()
    return ArticleAuthor(
        id=user.id,
        name=name or team_name(language),
        avatar=(profile.foto_url if profile else None)
        or user.avatar_url
        or fallback_avatar,
        slug=profile.slug if profile else None,
        position=profile.titulo_profesional if profile else None,
        bio=profile.biografia if profile else None,
        email=user.email,
        phone=(profile.telefono_directo if profile else None) or user.telefono,
    )


def article_to_schema(
    row: ArticleRow,
    *,
    context: PageContext,
    profile: AdvisorProfile | None = None,
    include_content: bool = False,
) -> Article:
    language = context.language
    category = (
        category_to_schema(row.categoria, language) if row.categoria is not None else None
    )
    category_slug = category.slug if category else GENERAL_CATEGORY_SLUG
    minutes = row.tiempo_lectura or calculate_read_time(row.contenido)

    tags = None
    if row.tags:
        tags = [
            ArticleTag(id=slugify(str(tag)), name=str(tag), slug=slugify(str(tag)))
            for tag in row.tags
        ]

    return Article(
        id=row.id,
        slug=row.slug,
        title=translated_attr(row, "titulo", language) or "",
        excerpt=translated_attr(row, "extracto", language) or "",
        content=(translated_attr(row, "contenido", language) or "")
        if include_content
        else None,
        featured_image=row.imagen_principal or DEFAULT_ARTICLE_IMAGE,
        published_at=as_utc(row.fecha_publicacion or row.created_at),
        views=row.vistas or 0,
        read_time=read_time_label(minutes, language),
        read_time_minutes=minutes,
        featured=bool(row.destacado),
        url=build_url(
            f"/articulos/{category_slug}/{row.slug}", language, context.tracking
        ),
        author=author_to_schema(
            row, profile, language=language, tenant=context.tenant
        ),
        category=category,
        tags=tags,
    )


class ArticleService:
    def __init__(self, repository: ArticleRepository) -> None:
        self._repository = repository

    async def get_main_page(
        self, context: PageContext, *, page: int = 1, limit: int = 12
    ) -> ArticlesMainPage:
        tenant_id = context.tenant.id
        featured = await self._repository.list_featured(tenant_id, limit=FEATURED_LIMIT)
        recent, total = await self._repository.list_recent(
            tenant_id, limit=limit, offset=offset_for(page, limit)
        )
        categories = await self._categories(context)
        totals = await self._repository.totals(tenant_id)

        stats = ArticleStats(
            total_articles=total,
            total_categories=len(categories),
            total_views=totals.total_views,
            average_read_time=DEFAULT_READ_TIME_MINUTES,
            published_this_month=totals.published_this_month,
            featured_count=totals.featured_count,
        )
        return ArticlesMainPage(
            language=context.language,
            tenant=context.tenant,
            seo=self._main_seo(context, total),
            tracking_string=context.tracking,
            breadcrumbs=breadcrumbs(
                context.language, (blog_title(context.language), "/articulos")
            ),
            featured_articles=await self._to_schemas(featured, context),
            recent_articles=await self._to_schemas(recent, context),
            categories=categories,
            stats=stats,
            pagination=paginate(total, page, limit),
        )

    async def get_category_page(
        self,
        context: PageContext,
        category_slug: str,
        *,
        page: int = 1,
        limit: int = 12,
    ) -> Found[ArticlesCategoryPage] | NotFoundWithFallback[ArticlesCategoryPage]:
        tenant_id = context.tenant.id
        language = context.language
        offset = offset_for(page, limit)

        category: ArticleCategory | None = None
        rows: list[ArticleRow] = []
        total = 0
        if category_slug == GENERAL_CATEGORY_SLUG:
            rows, total = await self._repository.list_recent(
                tenant_id, limit=limit, offset=offset, uncategorized=True
            )
            if total:
                category = general_category(language, total)
        else:
            row = await self._repository.get_category(tenant_id, category_slug)
            if row is not None:
                rows, total = await self._repository.list_recent(
                    tenant_id, limit=limit, offset=offset, category_id=row.id
                )
                category = category_to_schema(row, language, total)

        if category is None:
            return NotFoundWithFallback(
                await self._category_fallback(context, category_slug, limit)
            )

        title = pick(
            language,
            f"Artículos sobre {category.name}",
            f"{category.name} Articles",
            f"Articles sur {category.name}",
        )
        description = pick(
            language,
            f"Lee {total} artículos sobre {category.name.lower()}. Información y"
            f" consejos de expertos inmobiliarios de {context.tenant.name}.",
            f"Read {total} articles about {category.name.lower()}. Information and"
            f" expert advice from {context.tenant.name} real estate professionals.",
            f"Lisez {total} articles sur {category.name.lower()}. Informations et"
            f" conseils d'experts immobiliers de {context.tenant.name}.",
        )
        canonical = build_url(f"/articulos/{category.slug}", language)
        seo = generate_seo(
            f"{title} | {context.tenant.name}",
            description,
            canonical_url=canonical,
            site_name=context.tenant.name,
            structured_data={
                "@context": SCHEMA_CONTEXT,
                "@type": "CollectionPage",
                "name": title,
                "description": description,
                "url": absolute_url(context.tenant.domain, canonical),
            },
        )
        return Found(
            ArticlesCategoryPage(
                language=language,
                tenant=context.tenant,
                seo=seo,
                tracking_string=context.tracking,
                breadcrumbs=breadcrumbs(
                    language,
                    (blog_title(language), "/articulos"),
                    (category.name, f"/articulos/{category.slug}"),
                ),
                category=category,
                articles=await self._to_schemas(rows, context),
                pagination=paginate(total, page, limit),
            )
        )

    async def get_article_page(
        self, context: PageContext, category_slug: str, slug: str
    ) -> Found[ArticleSinglePage] | NotFoundWithFallback[ArticleSinglePage]:
        language = context.language
        row = await self._repository.get_by_slug(context.tenant.id, slug)
        if row is None:
            return NotFoundWithFallback(
                await self._article_fallback(context, category_slug, slug)
            )

        profiles = await self._repository.author_profiles(
            context.tenant.id, [row.autor_id] if row.autor_id else []
        )
        article = article_to_schema(
            row,
            context=context,
            profile=profiles.get(row.autor_id or ""),
            include_content=True,
        )
        category = article.category or general_category(language)
        related = await self._repository.list_related(row, limit=RELATED_LIMIT)

        await self._repository.increment_views(row.id)

        return Found(
            ArticleSinglePage(
                language=language,
                tenant=context.tenant,
                seo=self._single_seo(context, article, category),
                tracking_string=context.tracking,
                breadcrumbs=breadcrumbs(
                    language,
                    (blog_title(language), "/articulos"),
                    (category.name, f"/articulos/{category.slug}"),
                    (article.title, f"/articulos/{category.slug}/{article.slug}"),
                ),
                article=article,
                category=category,
                related_articles=await self._to_schemas(related, context),
            )
        )

    async def _categories(self, context: PageContext) -> list[ArticleCategory]:
        """Categories holding at least one article, plus ``general`` when needed."""

        rows = await self._repository.list_categories(context.tenant.id)
        categories = [
            category_to_schema(category, context.language, count)
            for category, count in rows
            if count > 0
        ]
        uncategorized = await self._repository.count_uncategorized(context.tenant.id)
        if uncategorized > 0:
            categories.append(general_category(context.language, uncategorized))
        return categories

    async def _to_schemas(
        self, rows: Sequence[ArticleRow], context: PageContext
    ) -> list[Article]:
        profiles = await self._repository.author_profiles(
            context.tenant.id, [row.autor_id for row in rows if row.autor_id]
        )
        return [
            article_to_schema(
                row, context=context, profile=profiles.get(row.autor_id or "")
            )
            for row in rows
        ]

    async def _recent(self, context: PageContext, limit: int) -> list[Article]:
        rows, _ = await self._repository.list_recent(context.tenant.id, limit=limit)
        return await self._to_schemas(rows, context)

    async def _category_fallback(
        self, context: PageContext, category_slug: str, limit: int
    ) -> ArticlesCategoryPage:
        language = context.language
        logger.info("Article category %r not found; serving fallback", category_slug)
        canonical = build_url(f"/articulos/{category_slug}", language)
        return ArticlesCategoryPage(
            language=language,
            tenant=context.tenant,
            seo=SEOData(
                title=f"{category_slug} | {context.tenant.name}",
                description=pick(
                    language,
                    "Categoría no encontrada",
                    "Category not found",
                    "Catégorie non trouvée",
                ),
                canonical_url=canonical,
            ),
            tracking_string=context.tracking,
            not_found=True,
            not_found_message=article_not_found_text(language),
            category=ArticleCategory(
                id="",
                name=category_slug,
                slug=category_slug,
                description="",
                article_count=0,
            ),
            articles=await self._recent(context, CATEGORY_FALLBACK_LIMIT),
            suggested_categories=await self._categories(context),
            pagination=paginate(0, 1, limit),
        )

    async def _article_fallback(
        self, context: PageContext, category_slug: str, slug: str
    ) -> ArticleSinglePage:
        language = context.language
        logger.info("Article %r not found; serving fallback", slug)
        not_found_text = article_not_found_text(language)
        url = build_url(f"/articulos/{category_slug}/{slug}", language)
        suggested = await self._recent(context, SUGGESTED_LIMIT)
        return ArticleSinglePage(
            language=language,
            tenant=context.tenant,
            seo=SEOData(
                title=f"{slug} | {context.tenant.name}",
                description=not_found_text,
                canonical_url=url,
            ),
            tracking_string=context.tracking,
            not_found=True,
            not_found_message=not_found_text,
            article=Article(
                id="",
                slug=slug,
                title=not_found_text,
                content="",
                featured_image="",
                read_time="0 min",
                read_time_minutes=0,
                url=url,
            ),
            category=ArticleCategory(id="", name=category_slug, slug=category_slug),
            related_articles=suggested,
            suggested_articles=suggested,
        )

    def _main_seo(self, context: PageContext, total: int) -> SEOData:
        language = context.language
        title = blog_title(language)
        description = pick(
            language,
            f"Descubre {total} artículos sobre bienes raíces, inversión inmobiliaria y"
            " tendencias del mercado. Consejos de expertos para comprar, vender y"
            " alquilar propiedades.",
            f"Discover {total} articles about real estate, property investment and"
            " market trends. Expert advice for buying, selling and renting"
            " properties.",
            f"Découvrez {total} articles sur l'immobilier, l'investissement"
            " immobilier et les tendances du marché. Conseils d'experts pour acheter,"
            " vendre et louer des propriétés.",
        )
        canonical = build_url("/articulos", language)
        return generate_seo(
            f"{title} | {context.tenant.name}",
            description,
            canonical_url=canonical,
            site_name=context.tenant.name,
            structured_data={
                "@context": SCHEMA_CONTEXT,
                "@type": "Blog",
                "name": title,
                "description": description,
                "url": absolute_url(context.tenant.domain, canonical),
                "publisher": {
                    "@type": "Organization",
                    "name": context.tenant.name,
                    "logo": context.tenant.branding.get("logo_url"),
                },
            },
        )

    def _single_seo(
        self, context: PageContext, article: Article, category: ArticleCategory
    ) -> SEOData:
        tenant = context.tenant
        canonical = build_url(
            f"/articulos/{category.slug}/{article.slug}", context.language
        )
        author: dict[str, str] = {"@type": "Person", "name": article.author.name}
        if article.author.slug:
            author["url"] = absolute_url(
                tenant.domain, f"/asesores/{article.author.slug}"
            )
        return generate_seo(
            f"{article.title} | {tenant.name}",
            article.excerpt,
            canonical_url=canonical,
            og_image=article.featured_image,
            page_type="article",
            site_name=tenant.name,
            structured_data={
                "@context": SCHEMA_CONTEXT,
                "@type": "Article",
                "headline": article.title,
                "description": article.excerpt,
                "image": article.featured_image,
                "datePublished": article.published_at.isoformat()
                if article.published_at
                else None,
                "author": author,
                "publisher": {
                    "@type": "Organization",
                    "name": tenant.name,
                    "logo": tenant.branding.get("logo_url"),
                },
                "mainEntityOfPage": {
                    "@type": "WebPage",
                    "@id": absolute_url(tenant.domain, canonical),
                },
            },
        )

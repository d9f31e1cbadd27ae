"""Testimonial pages (main, category, single) and the FAQ page."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from inmo_api.cache import CacheClient
from inmo_api.db.models import FAQ
from inmo_api.db.models import Testimonial as TestimonialRow
from inmo_api.db.repositories import FAQRepository, TestimonialRepository
from inmo_api.schemas.common import (
    Found,
    NotFoundWithFallback,
    PageContext,
    SEOData,
)
from inmo_api.schemas.property import RelatedFAQ, RelatedTestimonial
from inmo_api.schemas.testimonial import (
    FAQGroup,
    FAQItem,
    FAQsPage,
    Testimonial,
    TestimonialCategory,
    TestimonialsCategoryPage,
    TestimonialSinglePage,
    TestimonialsMainPage,
    TestimonialStats,
)
from inmo_api.services.caching import CacheableService, cached
from inmo_api.services.content_cache import (
    FAQS_FAMILY,
    PAGE_DESERIALIZE_ERROR,
    TESTIMONIALS_FAMILY,
    content_ttl,
    page_cache_key,
    page_deserializer,
    serialize_page,
)
from inmo_api.utils.dates import as_utc
from inmo_api.utils.locale import build_url, get_localized_text, pick, translated_attr
from inmo_api.utils.pagination import offset_for, paginate
from inmo_api.utils.seo import breadcrumbs, generate_seo
from inmo_api.utils.text import excerpt

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "compradores"
DEFAULT_RATING = 5.0
DEFAULT_CLIENT_NAME = "Cliente"
FAQ_CATEGORY_DEFAULT = "general"
FEATURED_LIMIT = 6
RELATED_LIMIT = 6

# Categories are a fixed editorial taxonomy; rows reference them by slug.
TESTIMONIAL_CATEGORIES: dict[str, dict[str, dict[str, str]]] = {
    "compradores": {
        "name": {
            "es": "Compradores Exitosos",
            "en": "Successful Buyers",
            "fr": "Acheteurs Réussis",
        },
        "description": {
            "es": "Historias reales de familias y personas que encontraron su"
            " hogar ideal.",
            "en": "Real stories of families and people who found their ideal home.",
            "fr": "Histoires réelles de familles qui ont trouvé leur maison idéale.",
        },
    },
    "vendedores": {
        "name": {
            "es": "Vendedores Satisfechos",
            "en": "Satisfied Sellers",
            "fr": "Vendeurs Satisfaits",
        },
        "description": {
            "es": "Propietarios que vendieron sus propiedades de manera rápida y"
            " eficiente.",
            "en": "Owners who sold their properties quickly and efficiently.",
            "fr": "Propriétaires qui ont vendu leurs propriétés rapidement et"
            " efficacement.",
        },
    },
    "inversionistas": {
        "name": {"es": "Inversionistas", "en": "Investors", "fr": "Investisseurs"},
        "description": {
            "es": "Inversores que han multiplicado su capital con propiedades"
            " dominicanas.",
            "en": "Investors who have multiplied their capital with Dominican"
            " properties.",
            "fr": "Investisseurs qui ont multiplié leur capital avec des propriétés"
            " dominicaines.",
        },
    },
    "inquilinos": {
        "name": {"es": "Inquilinos", "en": "Tenants", "fr": "Locataires"},
        "description": {
            "es": "Personas que encontraron el alquiler perfecto con nuestra ayuda.",
            "en": "People who found the perfect rental with our help.",
            "fr": "Personnes qui ont trouvé la location parfaite avec notre aide.",
        },
    },
}


def testimonials_title(language: str) -> str:
    return pick(language, "Testimonios", "Testimonials", "Témoignages")


def testimonial_not_found_text(language: str) -> str:
    return pick(
        language,
        "Testimonio no encontrado",
        "Testimonial not found",
        "Témoignage non trouvé",
    )


def testimonial_slug(row: TestimonialRow) -> str:
    return row.slug or f"testimonio-{(row.id or 'default')[:8]}"


def testimonial_category(row: TestimonialRow) -> str:
    if row.categoria in TESTIMONIAL_CATEGORIES:
        return row.categoria
    return DEFAULT_CATEGORY


def category_url(slug: str, language: str, tracking: str = "") -> str:
    return build_url(f"/testimonios/{slug}", language, tracking)


def category_to_schema(
    slug: str,
    language: str,
    *,
    tracking: str = "",
    count: int | None = None,
) -> TestimonialCategory:
    config = TESTIMONIAL_CATEGORIES[slug]
    return TestimonialCategory(
        slug=slug,
        name=get_localized_text(config["name"], language),
        description=get_localized_text(config["description"], language),
        url=category_url(slug, language, tracking),
        count=count,
    )


def all_categories(
    language: str,
    *,
    tracking: str = "",
    counts: Mapping[str, int] | None = None,
) -> list[TestimonialCategory]:
    return [
        category_to_schema(
            slug,
            language,
            tracking=tracking,
            count=(counts or {}).get(slug, 0) if counts is not None else None,
        )
        for slug in TESTIMONIAL_CATEGORIES
    ]


def _parse_rating(value: Any) -> float:
    try:
        rating = float(value)
    except (TypeError, ValueError):
        return DEFAULT_RATING
    return rating or DEFAULT_RATING


def default_title(rating: float, language: str) -> str:
    if rating >= 5:
        return pick(
            language,
            "Excelente experiencia",
            "Excellent experience",
            "Excellente expérience",
        )
    if rating >= 4:
        return pick(
            language,
            "Muy buena experiencia",
            "Very good experience",
            "Très bonne expérience",
        )
    return pick(language, "Buena experiencia", "Good experience", "Bonne expérience")


def testimonial_text(row: TestimonialRow, language: str) -> str:
    """Body in ``language``: the ``contenido`` column, then ``traducciones``."""

    content = row.contenido
    text = ""
    if isinstance(content, str):
        text = content
    elif isinstance(content, Mapping):
        text = get_localized_text(content, language) or next(
            (value for value in content.values() if isinstance(value, str) and value),
            "",
        )
    if not text:
        overlay = (row.traducciones or {}).get(language)
        if isinstance(overlay, Mapping):
            text = overlay.get("contenido") or ""
    return text


def format_testimonial(
    row: TestimonialRow,
    language: str,
    *,
    tracking: str = "",
    category_slug: str | None = None,
) -> Testimonial:
    text = testimonial_text(row, language)
    rating = _parse_rating(row.rating)
    slug = testimonial_slug(row)
    category = category_slug or testimonial_category(row)
    featured = bool(row.destacado)
    return Testimonial(
        id=row.id,
        slug=slug,
        title=translated_attr(row, "titulo", language)
        or default_title(rating, language),
        content=text,
        excerpt=excerpt(text),
        full_testimonial=text,
        rating=round(rating),
        client_name=row.cliente_nombre or DEFAULT_CLIENT_NAME,
        client_avatar=row.cliente_foto,
        client_location=row.cliente_ubicacion,
        client_verified=featured,
        featured=featured,
        published_at=as_utc(row.fecha),
        category=category,
        url=build_url(f"/testimonios/{category}/{slug}", language, tracking),
    )


def format_testimonials(
    rows: Sequence[TestimonialRow], context: PageContext
) -> list[Testimonial]:
    return [
        format_testimonial(row, context.language, tracking=context.tracking)
        for row in rows
    ]


def related_testimonial(row: TestimonialRow, language: str) -> RelatedTestimonial:
    """Compact testimonial shown beside listings."""

    return RelatedTestimonial(
        id=row.id,
        content=testimonial_text(row, language),
        rating=round(_parse_rating(row.rating)),
        client_name=row.cliente_nombre or DEFAULT_CLIENT_NAME,
        client_photo=row.cliente_foto,
    )


def faq_to_schema(row: FAQ, language: str) -> FAQItem:
    return FAQItem(
        id=row.id,
        question=translated_attr(row, "pregunta", language) or "",
        answer=translated_attr(row, "respuesta", language) or "",
        category=row.contexto or FAQ_CATEGORY_DEFAULT,
        order=row.orden or 0,
    )


def related_faq(row: FAQ, language: str) -> RelatedFAQ:
    item = faq_to_schema(row, language)
    return RelatedFAQ(
        question=item.question, answer=item.answer, category=item.category
    )


def group_faqs(items: Sequence[FAQItem]) -> list[FAQGroup]:
    """Group FAQs by category keeping first-seen category order."""

    groups: dict[str, FAQGroup] = {}
    for item in items:
        group = groups.setdefault(item.category, FAQGroup(category=item.category))
        group.items.append(item)
    return list(groups.values())


class TestimonialService(CacheableService):
    def __init__(
        self,
        repository: TestimonialRepository,
        faq_repository: FAQRepository,
        *,
        cache: CacheClient | None = None,
    ) -> None:
        super().__init__(cache=cache)
        self._repository = repository
        self._faqs = faq_repository

    @cached(
        lambda _self, context, *, page=1, limit=12: page_cache_key(
            TESTIMONIALS_FAMILY, context, "main", page, limit
        ),
        ttl=content_ttl,
        serializer=serialize_page,
        deserializer=page_deserializer(TestimonialsMainPage),
        deserialize_error_message=PAGE_DESERIALIZE_ERROR,
    )
    async def get_main_page(
        self, context: PageContext, *, page: int = 1, limit: int = 12
    ) -> TestimonialsMainPage:
        tenant_id = context.tenant.id
        language = context.language
        recent, total = await self._repository.list_testimonials(
            tenant_id, limit=limit, offset=offset_for(page, limit)
        )
        featured, _ = await self._repository.list_testimonials(
            tenant_id, limit=FEATURED_LIMIT, featured_only=True
        )
        counts = await self._repository.category_counts(tenant_id)
        rated_total, average, featured_count = await self._repository.rating_summary(
            tenant_id
        )

        title = pick(
            language,
            "Testimonios de Clientes",
            "Client Testimonials",
            "Témoignages Clients",
        )
        description = pick(
            language,
            f"Lee {total} testimonios de clientes satisfechos que encontraron su"
            " propiedad ideal con nosotros.",
            f"Read {total} testimonials from satisfied clients who found their ideal"
            " property with us.",
            f"Lisez {total} témoignages de clients satisfaits qui ont trouvé leur"
            " propriété idéale avec nous.",
        )
        seo = generate_seo(
            f"{title} | {context.tenant.name}",
            description,
            canonical_url=build_url("/testimonios", language),
            site_name=context.tenant.name,
        )
        return TestimonialsMainPage(
            language=language,
            tenant=context.tenant,
            seo=seo,
            tracking_string=context.tracking,
            breadcrumbs=breadcrumbs(
                language, (testimonials_title(language), "/testimonios")
            ),
            featured_testimonials=format_testimonials(featured, context),
            recent_testimonials=format_testimonials(recent, context),
            categories=all_categories(
                language, tracking=context.tracking, counts=counts
            ),
            stats=TestimonialStats(
                total_testimonials=rated_total,
                average_rating=round(average, 1) if average is not None else 5.0,
                total_categories=len(TESTIMONIAL_CATEGORIES),
                verified_clients=featured_count,
            ),
            pagination=paginate(total, page, limit),
        )

    async def get_category_page(
        self,
        context: PageContext,
        category_slug: str,
        *,
        page: int = 1,
        limit: int = 12,
    ) -> (
        Found[TestimonialsCategoryPage] | NotFoundWithFallback[TestimonialsCategoryPage]
    ):
        language = context.language
        tenant = context.tenant
        if category_slug not in TESTIMONIAL_CATEGORIES:
            return NotFoundWithFallback(
                await self._category_fallback(context, category_slug, limit)
            )

        rows, total = await self._repository.list_testimonials(
            tenant.id,
            limit=limit,
            offset=offset_for(page, limit),
            category=category_slug,
        )
        category = category_to_schema(
            category_slug, language, tracking=context.tracking, count=total
        )
        seo = generate_seo(
            f"{category.name} | {testimonials_title(language)} | {tenant.name}",
            category.description or "",
            canonical_url=category_url(category_slug, language),
            site_name=tenant.name,
        )
        return Found(
            TestimonialsCategoryPage(
                language=language,
                tenant=tenant,
                seo=seo,
                tracking_string=context.tracking,
                breadcrumbs=breadcrumbs(
                    language,
                    (testimonials_title(language), "/testimonios"),
                    (category.name, f"/testimonios/{category_slug}"),
                ),
                category=category,
                testimonials=[
                    format_testimonial(
                        row,
                        language,
                        tracking=context.tracking,
                        category_slug=category_slug,
                    )
                    for row in rows
                ],
                pagination=paginate(total, page, limit),
            )
        )

    async def get_testimonial_page(
        self, context: PageContext, category_slug: str, slug: str
    ) -> Found[TestimonialSinglePage] | NotFoundWithFallback[TestimonialSinglePage]:
        language = context.language
        tenant = context.tenant
        known = category_slug in TESTIMONIAL_CATEGORIES
        category = category_to_schema(
            category_slug if known else DEFAULT_CATEGORY, language
        )
        category.slug = category_slug

        row = await self._repository.get_by_slug(tenant.id, slug)
        if row is None:
            return NotFoundWithFallback(
                await self._testimonial_fallback(context, category, slug)
            )

        testimonial = format_testimonial(
            row, language, tracking=context.tracking, category_slug=category_slug
        )
        related_rows, _ = await self._repository.list_testimonials(
            tenant.id, limit=RELATED_LIMIT, exclude_id=row.id
        )
        seo = generate_seo(
            f"{testimonial.title} - {testimonial.client_name} | {tenant.name}",
            testimonial.excerpt,
            canonical_url=build_url(
                f"/testimonios/{category_slug}/{testimonial.slug}", language
            ),
            site_name=tenant.name,
        )
        return Found(
            TestimonialSinglePage(
                language=language,
                tenant=tenant,
                seo=seo,
                tracking_string=context.tracking,
                breadcrumbs=breadcrumbs(
                    language,
                    (testimonials_title(language), "/testimonios"),
                    (category.name, f"/testimonios/{category_slug}"),
                    (
                        testimonial.client_name,
                        f"/testimonios/{category_slug}/{testimonial.slug}",
                    ),
                ),
                testimonial=testimonial,
                category=category,
                related_testimonials=[
                    format_testimonial(
                        related,
                        language,
                        tracking=context.tracking,
                        category_slug=category_slug,
                    )
                    for related in related_rows
                ],
            )
        )

    @cached(
        lambda _self, context, *, limit=20: page_cache_key(FAQS_FAMILY, context, limit),
        ttl=content_ttl,
        serializer=serialize_page,
        deserializer=page_deserializer(FAQsPage),
        deserialize_error_message=PAGE_DESERIALIZE_ERROR,
    )
    async def get_faqs_page(self, context: PageContext, *, limit: int = 20) -> FAQsPage:
        language = context.language
        tenant = context.tenant
        rows = await self._faqs.list_faqs(tenant.id, limit=limit)
        items = [faq_to_schema(row, language) for row in rows]

        title = pick(
            language,
            "Preguntas Frecuentes",
            "Frequently Asked Questions",
            "Questions Fréquentes",
        )
        total = len(items)
        description = pick(
            language,
            f"Encuentra respuestas a las {total} preguntas más frecuentes sobre"
            " bienes raíces y nuestros servicios.",
            f"Find answers to the {total} most frequently asked questions about real"
            " estate and our services.",
            f"Trouvez des réponses aux {total} questions les plus fréquemment posées"
            " sur l'immobilier et nos services.",
        )
        return FAQsPage(
            language=language,
            tenant=tenant,
            seo=generate_seo(
                f"{title} | {tenant.name}",
                description,
                canonical_url=build_url("/faqs", language),
                site_name=tenant.name,
            ),
            tracking_string=context.tracking,
            breadcrumbs=breadcrumbs(language, (title, "/faqs")),
            faqs=items,
            grouped_faqs=group_faqs(items),
        )

    async def _category_fallback(
        self, context: PageContext, category_slug: str, limit: int
    ) -> TestimonialsCategoryPage:
        language = context.language
        logger.info(
            "Testimonial category %r not found; serving fallback", category_slug
        )
        rows, _ = await self._repository.list_testimonials(
            context.tenant.id, limit=limit
        )
        testimonials = format_testimonials(rows, context)
        not_found = pick(
            language,
            "Categoría no encontrada",
            "Category not found",
            "Catégorie non trouvée",
        )
        return TestimonialsCategoryPage(
            language=language,
            tenant=context.tenant,
            seo=SEOData(
                title=f"{category_slug} | {testimonials_title(language)}"
                f" | {context.tenant.name}",
                description=not_found,
                canonical_url=category_url(category_slug, language),
            ),
            tracking_string=context.tracking,
            breadcrumbs=breadcrumbs(
                language,
                (testimonials_title(language), "/testimonios"),
                (category_slug, f"/testimonios/{category_slug}"),
            ),
            not_found=True,
            not_found_message=not_found,
            category=TestimonialCategory(
                slug=category_slug,
                name=category_slug,
                description="",
                url=category_url(category_slug, language, context.tracking),
            ),
            testimonials=testimonials,
            suggested_categories=all_categories(language, tracking=context.tracking),
            pagination=paginate(len(testimonials), 1, limit),
        )

    async def _testimonial_fallback(
        self, context: PageContext, category: TestimonialCategory, slug: str
    ) -> TestimonialSinglePage:
        language = context.language
        logger.info("Testimonial %r not found; serving fallback", slug)
        rows, _ = await self._repository.list_testimonials(
            context.tenant.id, limit=RELATED_LIMIT
        )
        related = [
            format_testimonial(
                row, language, tracking=context.tracking, category_slug=category.slug
            )
            for row in rows
        ]
        not_found = testimonial_not_found_text(language)
        url = build_url(
            f"/testimonios/{category.slug}/{slug}", language, context.tracking
        )
        return TestimonialSinglePage(
            language=language,
            tenant=context.tenant,
            seo=SEOData(
                title=f"{testimonials_title(language)} | {context.tenant.name}",
                description=not_found,
                canonical_url=url,
            ),
            tracking_string=context.tracking,
            breadcrumbs=breadcrumbs(
                language,
                (testimonials_title(language), "/testimonios"),
                (category.name, f"/testimonios/{category.slug}"),
                (slug, f"/testimonios/{category.slug}/{slug}"),
            ),
            not_found=True,
            not_found_message=not_found,
            testimonial=Testimonial(
                id="",
                slug=slug,
                title=not_found,
                category=category.slug,
                url=url,
                client_name="",
            ),
            category=category,
            related_testimonials=related,
            suggested_testimonials=related,
        )

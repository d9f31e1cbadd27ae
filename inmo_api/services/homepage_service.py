"""Homepage assembly: independent reads gathered, then shaped into sections."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from inmo_api.cache import CacheClient
from inmo_api.db.connection import get_session_factory
from inmo_api.db.repositories import (
    AdvisorRepository,
    ArticleRepository,
    FAQRepository,
    PropertyRepository,
    TestimonialRepository,
)
from inmo_api.db.repositories.property_repository import LocationCount
from inmo_api.schemas.advisor import Advisor
from inmo_api.schemas.article import Article
from inmo_api.schemas.common import PageContext, SEOData
from inmo_api.schemas.homepage import (
    AdvisorsSection,
    FAQSection,
    FeaturedTypeGroup,
    HeroSection,
    HomepagePage,
    HomepageRelatedContent,
    HomepageSection,
    HotItems,
    LocationHotItem,
    PropertyCarouselSection,
    PropertyTypeStat,
    TestimonialsSection,
)
from inmo_api.schemas.property import PropertyCard, QuickStats
from inmo_api.schemas.testimonial import FAQItem, Testimonial
from inmo_api.services.advisor_service import advisor_to_schema
from inmo_api.services.article_service import article_to_schema
from inmo_api.services.caching import CacheableService, cached
from inmo_api.services.content_cache import (
    HOMEPAGE_FAMILY,
    PAGE_DESERIALIZE_ERROR,
    content_ttl,
    page_cache_key,
    page_deserializer,
    serialize_page,
)
from inmo_api.services.property_service import featured_title, property_cards
from inmo_api.services.testimonial_service import faq_to_schema, format_testimonials
from inmo_api.utils.locale import build_url, pick
from inmo_api.utils.seo import SCHEMA_CONTEXT, absolute_url, generate_seo, home_crumb
from inmo_api.utils.text import slugify

logger = logging.getLogger(__name__)

T = TypeVar("T")
SessionFactory = Callable[[], AsyncSession]

FEATURED_LIMIT = 12
CITIES_LIMIT = 8
SECTORS_LIMIT = 12
TESTIMONIALS_LIMIT = 6
ADVISORS_LIMIT = 4
FAQS_LIMIT = 6
ARTICLES_LIMIT = 4
FEATURED_TYPES = 3
FEATURED_PER_TYPE = 6

HOMEPAGE_KEYWORDS = (
    "bienes raíces, propiedades, casas, apartamentos, venta, alquiler,"
    " inmobiliaria, República Dominicana, Punta Cana, Santo Domingo"
)


def hero_section(tenant_name: str, language: str) -> HeroSection:
    return HeroSection(
        title=tenant_name
        + pick(
            language,
            " - Bienes Raíces Premium",
            " - Premium Real Estate",
            " - Immobilier Premium",
        ),
        tagline=pick(
            language,
            "Tu próximo hogar te espera",
            "Your next home awaits",
            "Votre prochaine maison vous attend",
        ),
        subtitle=pick(
            language,
            "Explora nuestra selección de propiedades exclusivas en República"
            " Dominicana. Casas, apartamentos, villas y más con asesoría"
            " personalizada.",
            "Explore our selection of exclusive properties in the Dominican"
            " Republic. Houses, apartments, villas and more with personalized"
            " advice.",
            "Explorez notre sélection de propriétés exclusives en République"
            " Dominicaine. Maisons, appartements, villas et plus avec des conseils"
            " personnalisés.",
        ),
    )


def type_group_title(tipo: str, language: str) -> str:
    return pick(
        language, f"{tipo} Destacados", f"Featured {tipo}", f"{tipo} en Vedette"
    )


def type_group_subtitle(tipo: str, language: str) -> str:
    lowered = tipo.lower()
    return pick(
        language,
        f"Explora las mejores opciones de {lowered}",
        f"Explore the best {lowered} options",
        f"Explorez les meilleures options de {lowered}",
    )


def location_hot_item(
    location: LocationCount, language: str, tracking: str = ""
) -> LocationHotItem:
    return LocationHotItem(
        slug=location.slug,
        name=location.name,
        url=build_url(f"/comprar/{location.slug}", language, tracking),
        count=location.count,
        count_venta=location.count_venta,
        count_alquiler=location.count_alquiler,
    )


def build_sections(
    context: PageContext,
    *,
    featured: list[PropertyCard],
    testimonials: list[Testimonial],
    advisors: list[Advisor],
    faqs: list[FAQItem],
) -> list[HomepageSection]:
    """Hero first; the remaining sections only when they have content."""

    language = context.language
    sections: list[HomepageSection] = [hero_section(context.tenant.name, language)]
    if featured:
        sections.append(
            PropertyCarouselSection(
                title=featured_title(language),
                properties=featured,
                view_all_url=build_url("/comprar", language, context.tracking),
            )
        )
    if testimonials:
        sections.append(
            TestimonialsSection(
                title=pick(
                    language,
                    "Lo que dicen nuestros clientes",
                    "What our clients say",
                    "Ce que disent nos clients",
                ),
                testimonials=testimonials,
            )
        )
    if advisors:
        sections.append(
            AdvisorsSection(
                title=pick(language, "Nuestro Equipo", "Our Team", "Notre Équipe"),
                advisors=advisors,
            )
        )
    if faqs:
        sections.append(
            FAQSection(
                title=pick(
                    language,
                    "Preguntas Frecuentes",
                    "Frequently Asked Questions",
                    "Questions Fréquentes",
                ),
                faqs=faqs,
            )
        )
    return sections


class HomepageService(CacheableService):
    """Builds the homepage from reads that each run on their own session.

    An ``AsyncSession`` cannot run statements concurrently, so every gathered
    read opens a short-lived session from ``session_factory`` and maps its rows
    to response models before that session closes.
    """

    def __init__(
        self,
        session_factory: SessionFactory | None = None,
        *,
        cache: CacheClient | None = None,
    ) -> None:
        super().__init__(cache=cache)
        self._session_factory = session_factory or get_session_factory()

    async def _read(self, reader: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async with self._session_factory() as session:
            return await reader(session)

    @cached(
        lambda _self, context: page_cache_key(HOMEPAGE_FAMILY, context),
        ttl=content_ttl,
        serializer=serialize_page,
        deserializer=page_deserializer(HomepagePage),
        deserialize_error_message=PAGE_DESERIALIZE_ERROR,
    )
    async def get_page(self, context: PageContext) -> HomepagePage:
        tenant_id = context.tenant.id
        language = context.language
        tracking = context.tracking

        async def featured(session: AsyncSession) -> list[PropertyCard]:
            rows = await PropertyRepository(session).list_featured(
                tenant_id, limit=FEATURED_LIMIT
            )
            return property_cards(rows, context)

        async def hot_items(session: AsyncSession) -> HotItems:
            repository = PropertyRepository(session)
            cities = await repository.location_counts(
                tenant_id, level="ciudad", limit=CITIES_LIMIT
            )
            sectors = await repository.location_counts(
                tenant_id, level="sector", limit=SECTORS_LIMIT
            )
            return HotItems(
                cities=[location_hot_item(c, language, tracking) for c in cities],
                sectors=[location_hot_item(s, language, tracking) for s in sectors],
            )

        async def type_stats(session: AsyncSession) -> list[PropertyTypeStat]:
            counts = await PropertyRepository(session).type_counts(tenant_id)
            return [
                PropertyTypeStat(
                    slug=slugify(row.tipo),
                    type=row.tipo,
                    count=row.count,
                    count_venta=row.count_venta,
                    count_alquiler=row.count_alquiler,
                    url=build_url(f"/comprar/{slugify(row.tipo)}", language, tracking),
                )
                for row in counts
            ]

        async def quick_stats(session: AsyncSession) -> QuickStats:
            totals = await PropertyRepository(session).totals(tenant_id)
            return QuickStats(
                total_count=totals.total,
                for_sale=totals.for_sale,
                for_rent=totals.for_rent,
                new_this_month=totals.new_this_month,
            )

        async def testimonials(session: AsyncSession) -> list[Testimonial]:
            rows, _ = await TestimonialRepository(session).list_testimonials(
                tenant_id, limit=TESTIMONIALS_LIMIT
            )
            return format_testimonials(rows, context)

        async def advisors(session: AsyncSession) -> list[Advisor]:
            rows = await AdvisorRepository(session).list_team(
                tenant_id, limit=ADVISORS_LIMIT
            )
            return [
                advisor_to_schema(row, language, tracking=tracking) for row in rows
            ]

        async def faqs(session: AsyncSession) -> list[FAQItem]:
            rows = await FAQRepository(session).list_faqs(tenant_id, limit=FAQS_LIMIT)
            return [faq_to_schema(row, language) for row in rows]

        async def articles(session: AsyncSession) -> list[Article]:
            repository = ArticleRepository(session)
            rows, _ = await repository.list_recent(tenant_id, limit=ARTICLES_LIMIT)
            profiles = await repository.author_profiles(
                tenant_id, [row.autor_id for row in rows if row.autor_id]
            )
            return [
                article_to_schema(
                    row, context=context, profile=profiles.get(row.autor_id or "")
                )
                for row in rows
            ]

        (
            featured_cards,
            hot,
            property_types,
            stats,
            testimonial_items,
            team,
            faq_items,
            article_items,
        ) = await asyncio.gather(
            self._read(featured),
            self._read(hot_items),
            self._read(type_stats),
            self._read(quick_stats),
            self._read(testimonials),
            self._read(advisors),
            self._read(faqs),
            self._read(articles),
        )
        featured_by_type = await self._featured_by_type(context, property_types)
        logger.debug(
            "Homepage for tenant %s: %d featured, %d types, %d testimonials",
            tenant_id,
            len(featured_cards),
            len(property_types),
            len(testimonial_items),
        )

        return HomepagePage(
            language=language,
            tenant=context.tenant,
            seo=self._homepage_seo(context),
            tracking_string=tracking,
            breadcrumbs=[home_crumb(language)],
            sections=build_sections(
                context,
                featured=featured_cards,
                testimonials=testimonial_items,
                advisors=team,
                faqs=faq_items,
            ),
            hot_items=hot,
            quick_stats=stats,
            property_types=property_types,
            featured_by_type=featured_by_type,
            related_content=HomepageRelatedContent(
                articles=article_items, testimonials=testimonial_items
            ),
        )

    async def _featured_by_type(
        self, context: PageContext, property_types: list[PropertyTypeStat]
    ) -> dict[str, FeaturedTypeGroup]:
        top = property_types[:FEATURED_TYPES]

        def reader(tipo: str) -> Callable[[AsyncSession], Awaitable[list[PropertyCard]]]:
            async def read(session: AsyncSession) -> list[PropertyCard]:
                rows = await PropertyRepository(session).list_featured_by_type(
                    context.tenant.id, tipo, limit=FEATURED_PER_TYPE
                )
                return property_cards(rows, context)

            return read

        groups = await asyncio.gather(*(self._read(reader(stat.type)) for stat in top))
        return {
            stat.slug: FeaturedTypeGroup(
                slug=stat.slug,
                title=type_group_title(stat.type, context.language),
                subtitle=type_group_subtitle(stat.type, context.language),
                properties=cards,
            )
            for stat, cards in zip(top, groups)
            if cards
        }

    def _homepage_seo(self, context: PageContext) -> SEOData:
        language = context.language
        tenant = context.tenant
        title = tenant.name + pick(
            language,
            " - Bienes Raíces y Propiedades en República Dominicana",
            " - Real Estate and Properties in Dominican Republic",
            " - Immobilier et Propriétés en République Dominicaine",
        )
        description = pick(
            language,
            f"Encuentra tu hogar ideal con {tenant.name}. Amplia selección de"
            " propiedades en venta y alquiler en República Dominicana. Asesores"
            " expertos a tu servicio con más de 18 años de experiencia.",
            f"Find your ideal home with {tenant.name}. Wide selection of properties"
            " for sale and rent in Dominican Republic. Expert advisors at your"
            " service with over 18 years of experience.",
            f"Trouvez votre maison idéale avec {tenant.name}. Large sélection de"
            " propriétés à vendre et à louer en République Dominicaine. Conseillers"
            " experts à votre service avec plus de 18 ans d'expérience.",
        )
        canonical = build_url("/", language)
        contact = tenant.contact or {}
        structured_data = {
            "@context": SCHEMA_CONTEXT,
            "@type": "RealEstateAgent",
            "name": tenant.name,
            "description": description,
            "url": absolute_url(tenant.domain, canonical),
            "areaServed": "República Dominicana",
        }
        if tenant.branding.get("logo_url"):
            structured_data["logo"] = tenant.branding["logo_url"]
        if contact.get("phone"):
            structured_data["telephone"] = contact["phone"]
        if contact.get("email"):
            structured_data["email"] = contact["email"]
        return generate_seo(
            title,
            description,
            canonical_url=canonical,
            keywords=HOMEPAGE_KEYWORDS,
            og_image=tenant.branding.get("logo_url"),
            site_name=tenant.name,
            structured_data=structured_data,
        )

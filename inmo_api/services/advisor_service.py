"""Advisor directory and advisor profile pages."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from inmo_api.cache import CacheClient
from inmo_api.db.models import AdvisorProfile
from inmo_api.db.repositories import (
    AdvisorRepository,
    PropertyRepository,
    TestimonialRepository,
)
from inmo_api.schemas.advisor import (
    Advisor,
    AdvisorsAggregate,
    AdvisorSinglePage,
    AdvisorsListPage,
    AdvisorStats,
    SocialLinks,
)
from inmo_api.schemas.common import (
    Found,
    NotFoundWithFallback,
    PageContext,
    SEOData,
)
from inmo_api.services.caching import CacheableService, cached
from inmo_api.services.content_cache import (
    ADVISORS_FAMILY,
    PAGE_DESERIALIZE_ERROR,
    content_ttl,
    page_cache_key,
    page_deserializer,
    serialize_page,
)
from inmo_api.services.property_service import property_cards
from inmo_api.services.testimonial_service import format_testimonials
from inmo_api.utils.locale import build_url, pick, translated_attr
from inmo_api.utils.pagination import paginate
from inmo_api.utils.seo import breadcrumbs, generate_seo

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGES = ["Español"]
DEFAULT_SATISFACTION = 4.8
ADVISOR_PROPERTIES_LIMIT = 12
ADVISOR_TESTIMONIALS_LIMIT = 6
SUGGESTED_LIMIT = 6

_SOCIAL_NETWORKS = ("instagram", "facebook", "linkedin", "youtube", "tiktok")


def default_position(language: str) -> str:
    return pick(
        language,
        "Asesor Inmobiliario",
        "Real Estate Advisor",
        "Conseiller Immobilier",
    )


def advisors_title(language: str) -> str:
    return pick(
        language,
        "Nuestros Asesores Inmobiliarios",
        "Our Real Estate Advisors",
        "Nos Conseillers Immobiliers",
    )


def advisor_not_found_text(language: str) -> str:
    return pick(
        language, "Asesor no encontrado", "Advisor not found", "Conseiller non trouvé"
    )


def _social_links(networks: Mapping[str, object] | None) -> SocialLinks:
    networks = networks or {}
    return SocialLinks(
        **{
            name: str(networks[name])
            for name in _SOCIAL_NETWORKS
            if networks.get(name)
        }
    )


def advisor_to_schema(
    profile: AdvisorProfile,
    language: str,
    *,
    tracking: str = "",
    properties_count: int = 0,
) -> Advisor:
    user = profile.usuario
    full_name = f"{user.nombre or ''} {user.apellido or ''}".strip()
    phone = profile.telefono_directo or user.telefono
    satisfaction = profile.satisfaccion_cliente
    return Advisor(
        id=profile.id,
        slug=profile.slug,
        code=profile.codigo,
        name=full_name or pick(language, "Asesor", "Advisor", "Conseiller"),
        first_name=user.nombre,
        last_name=user.apellido,
        avatar=profile.foto_url or user.avatar_url,
        position=translated_attr(profile, "titulo_profesional", language)
        or default_position(language),
        bio=translated_attr(profile, "biografia", language) or "",
        email=user.email,
        phone=phone,
        whatsapp=profile.whatsapp or phone,
        specialties=list(profile.especialidades or []),
        languages=list(profile.idiomas or []) or list(DEFAULT_LANGUAGES),
        stats=AdvisorStats(
            properties_count=properties_count,
            total_sales=profile.ventas_totales or 0,
            years_experience=profile.experiencia_anos or 0,
            client_satisfaction=satisfaction
            if satisfaction is not None
            else DEFAULT_SATISFACTION,
        ),
        social=_social_links(profile.redes_sociales),
        featured=bool(profile.destacado),
        url=build_url(f"/asesores/{profile.slug}", language, tracking),
    )


def aggregate(advisors: Sequence[Advisor]) -> AdvisorsAggregate:
    if not advisors:
        return AdvisorsAggregate()
    satisfaction = sum(a.stats.client_satisfaction for a in advisors) / len(advisors)
    return AdvisorsAggregate(
        total_advisors=len(advisors),
        total_experience=sum(a.stats.years_experience for a in advisors),
        total_sales=sum(a.stats.total_sales for a in advisors),
        average_satisfaction=round(satisfaction, 1),
    )


class AdvisorService(CacheableService):
    def __init__(
        self,
        repository: AdvisorRepository,
        *,
        properties: PropertyRepository,
        testimonials: TestimonialRepository,
        cache: CacheClient | None = None,
    ) -> None:
        super().__init__(cache=cache)
        self._repository = repository
        self._properties = properties
        self._testimonials = testimonials

    async def list_advisors(
        self, context: PageContext, *, limit: int = 50
    ) -> list[Advisor]:
        """Web-visible advisors with their active listing counts."""

        profiles = await self._repository.list_advisors(context.tenant.id, limit=limit)
        counts = await self._properties.count_by_advisors(
            context.tenant.id,
            [(profile.id, profile.usuario_id) for profile in profiles],
        )
        return [
            advisor_to_schema(
                profile,
                context.language,
                tracking=context.tracking,
                properties_count=counts.get(profile.id, 0),
            )
            for profile in profiles
        ]

    @cached(
        lambda _self, context, *, page=1, limit=50: page_cache_key(
            ADVISORS_FAMILY, context, "list", page, limit
        ),
        ttl=content_ttl,
        serializer=serialize_page,
        deserializer=page_deserializer(AdvisorsListPage),
        deserialize_error_message=PAGE_DESERIALIZE_ERROR,
    )
    async def get_list_page(
        self, context: PageContext, *, page: int = 1, limit: int = 50
    ) -> AdvisorsListPage:
        language = context.language
        tenant = context.tenant
        advisors = await self.list_advisors(context, limit=limit)
        total = len(advisors)

        title = advisors_title(language)
        description = pick(
            language,
            f"Conoce a nuestro equipo de {total} asesores inmobiliarios"
            " profesionales. Expertos en bienes raíces listos para ayudarte.",
            f"Meet our team of {total} professional real estate advisors. Real"
            " estate experts ready to help you.",
            f"Découvrez notre équipe de {total} conseillers immobiliers"
            " professionnels. Des experts prêts à vous aider.",
        )
        return AdvisorsListPage(
            language=language,
            tenant=tenant,
            seo=generate_seo(
                f"{title} | {tenant.name}",
                description,
                canonical_url=build_url("/asesores", language),
                keywords="asesores inmobiliarios, agentes de bienes raíces,"
                " expertos inmobiliarios",
                site_name=tenant.name,
            ),
            tracking_string=context.tracking,
            breadcrumbs=breadcrumbs(language, (title, "/asesores")),
            advisors=advisors,
            total_advisors=total,
            stats=aggregate(advisors),
            pagination=paginate(total, page, limit),
        )

    async def get_advisor_page(
        self, context: PageContext, slug: str
    ) -> Found[AdvisorSinglePage] | NotFoundWithFallback[AdvisorSinglePage]:
        language = context.language
        tenant = context.tenant
        profile = await self._repository.get_by_slug(tenant.id, slug)
        if profile is None:
            return NotFoundWithFallback(await self._advisor_fallback(context, slug))

        listings = await self._properties.list_by_advisor(
            tenant.id,
            profile_id=profile.id,
            user_id=profile.usuario_id,
            limit=ADVISOR_PROPERTIES_LIMIT,
        )
        testimonials, _ = await self._testimonials.list_testimonials(
            tenant.id,
            limit=ADVISOR_TESTIMONIALS_LIMIT,
            advisor_profile_id=profile.id,
        )
        if not testimonials:
            testimonials, _ = await self._testimonials.list_testimonials(
                tenant.id, limit=ADVISOR_TESTIMONIALS_LIMIT
            )

        advisor = advisor_to_schema(
            profile,
            language,
            tracking=context.tracking,
            properties_count=len(listings),
        )
        return Found(
            AdvisorSinglePage(
                language=language,
                tenant=tenant,
                seo=self._advisor_seo(context, advisor),
                tracking_string=context.tracking,
                breadcrumbs=breadcrumbs(
                    language,
                    (advisors_title(language), "/asesores"),
                    (advisor.name, f"/asesores/{advisor.slug}"),
                ),
                advisor=advisor,
                properties=property_cards(listings, context),
                testimonials=format_testimonials(testimonials, context),
            )
        )

    async def _advisor_fallback(
        self, context: PageContext, slug: str
    ) -> AdvisorSinglePage:
        language = context.language
        logger.info("Advisor %r not found; serving fallback", slug)
        not_found = advisor_not_found_text(language)
        url = build_url(f"/asesores/{slug}", language)
        return AdvisorSinglePage(
            language=language,
            tenant=context.tenant,
            seo=SEOData(
                title=f"{slug} | {context.tenant.name}",
                description=not_found,
                canonical_url=url,
            ),
            tracking_string=context.tracking,
            not_found=True,
            not_found_message=not_found,
            advisor=Advisor(
                id="",
                slug=slug,
                name=slug,
                position="",
                languages=[],
                stats=AdvisorStats(client_satisfaction=0),
                url=url,
            ),
            suggested_advisors=await self.list_advisors(context, limit=SUGGESTED_LIMIT),
        )

    def _advisor_seo(self, context: PageContext, advisor: Advisor) -> SEOData:
        language = context.language
        count = advisor.stats.properties_count
        if advisor.bio:
            description = advisor.bio[:150]
        else:
            description = pick(
                language,
                f"{advisor.name}, asesor inmobiliario con {count} propiedades activas.",
                f"{advisor.name}, real estate advisor with {count} active properties.",
                f"{advisor.name}, conseiller immobilier avec {count} propriétés"
                " actives.",
            )
        return generate_seo(
            f"{advisor.name} - {default_position(language)} | {context.tenant.name}",
            description,
            canonical_url=build_url(f"/asesores/{advisor.slug}", language),
            keywords=f"{advisor.name}, asesor inmobiliario",
            og_image=advisor.avatar,
            site_name=context.tenant.name,
        )

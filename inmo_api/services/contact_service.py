"""Contact page: office details, team and the enquiry options."""

from __future__ import annotations

import logging

from inmo_api.cache import CacheClient
from inmo_api.db.models import AdvisorProfile
from inmo_api.db.repositories import AdvisorRepository
from inmo_api.schemas.common import PageContext, SEOData
from inmo_api.schemas.contact import (
    ContactInfo,
    ContactPage,
    MainContact,
    Office,
    OfficeCoordinates,
    OfficeHours,
    ServiceOption,
    TeamMember,
)
from inmo_api.services.advisor_service import default_position
from inmo_api.services.caching import CacheableService, cached
from inmo_api.services.content_cache import (
    CONTACT_FAMILY,
    PAGE_DESERIALIZE_ERROR,
    content_ttl,
    page_cache_key,
    page_deserializer,
    serialize_page,
)
from inmo_api.utils.locale import build_url, pick, translated_attr
from inmo_api.utils.seo import SCHEMA_CONTEXT, breadcrumbs, generate_seo

logger = logging.getLogger(__name__)

TEAM_LIMIT = 6
CONTACT_OG_IMAGE = "/og-contact.jpg"

DEFAULT_PHONE = "+1 809 487 2542"
DEFAULT_WHATSAPP = "8295148080"
DEFAULT_EMAIL = "info@clicinmobiliaria.com"
DEFAULT_ADDRESS = "Calle Erik Leonard Ekman No. 34, Edificio The Box Working Space"
OFFICE_CITY = "Santo Domingo, República Dominicana"
OFFICE_COORDINATES = OfficeCoordinates(lat=18.4958553, lng=-69.9454147)

SERVICE_VALUES = ("asesor", "vender", "desarrollo", "comprar", "otro")


def team_member(profile: AdvisorProfile, language: str) -> TeamMember:
    user = profile.usuario
    phone = profile.telefono_directo or user.telefono or ""
    return TeamMember(
        id=profile.id,
        name=f"{user.nombre or ''} {user.apellido or ''}".strip(),
        title=translated_attr(profile, "titulo_profesional", language)
        or default_position(language),
        phone=phone,
        email=user.email or "",
        whatsapp=profile.whatsapp or phone,
        avatar=profile.foto_url or user.avatar_url or "",
        specialties=list(profile.especialidades or []),
        slug=profile.slug or "",
    )


def contact_info(contact: dict, language: str) -> ContactInfo:
    """Office block from the tenant's contact settings with CLIC defaults."""

    phone = contact.get("phone") or DEFAULT_PHONE
    address = contact.get("address") or DEFAULT_ADDRESS
    return ContactInfo(
        main=MainContact(
            phone=phone,
            whatsapp=contact.get("whatsapp") or DEFAULT_WHATSAPP,
            email=contact.get("email") or DEFAULT_EMAIL,
            address=address,
        ),
        offices=[
            Office(
                name="Oficina Principal - Santo Domingo",
                address=address,
                city=OFFICE_CITY,
                phone=phone,
                coordinates=OFFICE_COORDINATES,
            )
        ],
        hours=OfficeHours(
            weekdays=pick(
                language,
                "Lunes - Viernes: 8:00 AM - 6:00 PM",
                "Monday - Friday: 8:00 AM - 6:00 PM",
                "Lundi - Vendredi: 8:00 AM - 6:00 PM",
            ),
            saturday=pick(
                language,
                "Sábado: 9:00 AM - 2:00 PM",
                "Saturday: 9:00 AM - 2:00 PM",
                "Samedi: 9:00 AM - 2:00 PM",
            ),
            sunday=pick(
                language, "Domingo: Cerrado", "Sunday: Closed", "Dimanche: Fermé"
            ),
        ),
    )


def service_options(language: str) -> list[ServiceOption]:
    labels = {
        "asesor": pick(
            language,
            "Quiero ser parte de CLIC como asesor",
            "I want to be part of CLIC as an advisor",
            "Je veux faire partie de CLIC en tant que conseiller",
        ),
        "vender": pick(
            language,
            "Quiero vender mi propiedad",
            "I want to sell my property",
            "Je veux vendre ma propriété",
        ),
        "desarrollo": pick(
            language,
            "Quiero que vendan mi proyecto",
            "I want you to sell my project",
            "Je veux que vous vendiez mon projet",
        ),
        "comprar": pick(language, "Quiero comprar", "I want to buy", "Je veux acheter"),
        "otro": pick(
            language,
            "Quiero otro servicio",
            "I want another service",
            "Je veux un autre service",
        ),
    }
    return [ServiceOption(value=value, label=labels[value]) for value in SERVICE_VALUES]


class ContactService(CacheableService):
    def __init__(
        self, repository: AdvisorRepository, *, cache: CacheClient | None = None
    ) -> None:
        super().__init__(cache=cache)
        self._repository = repository

    @cached(
        lambda _self, context: page_cache_key(CONTACT_FAMILY, context),
        ttl=content_ttl,
        serializer=serialize_page,
        deserializer=page_deserializer(ContactPage),
        deserialize_error_message=PAGE_DESERIALIZE_ERROR,
    )
    async def get_page(self, context: PageContext) -> ContactPage:
        language = context.language
        profiles = await self._repository.list_team(context.tenant.id, limit=TEAM_LIMIT)
        logger.debug(
            "Contact page for tenant %s with %d advisors",
            context.tenant.id,
            len(profiles),
        )
        info = contact_info(context.tenant.contact or {}, language)
        return ContactPage(
            language=language,
            tenant=context.tenant,
            seo=self._contact_seo(context, info),
            tracking_string=context.tracking,
            breadcrumbs=breadcrumbs(
                language,
                (pick(language, "Contacto", "Contact", "Contact"), "/contacto"),
            ),
            contact_info=info,
            team=[team_member(profile, language) for profile in profiles],
            services=service_options(language),
        )

    def _contact_seo(self, context: PageContext, info: ContactInfo) -> SEOData:
        language = context.language
        title = pick(
            language,
            "Contacto - CLIC Inmobiliaria",
            "Contact - CLIC Real Estate",
            "Contact - CLIC Immobilier",
        )
        description = pick(
            language,
            "Contáctanos para vender tu propiedad, desarrollar tu proyecto o"
            " encontrar tu hogar ideal en República Dominicana. Respuesta en menos"
            " de 24 horas.",
            "Contact us to sell your property, develop your project or find your"
            " ideal home in Dominican Republic. Response within 24 hours.",
            "Contactez-nous pour vendre votre propriété, développer votre projet ou"
            " trouver votre maison idéale en République Dominicaine. Réponse en"
            " moins de 24 heures.",
        )
        office = info.offices[0]
        structured_data = {
            "@context": SCHEMA_CONTEXT,
            "@type": "ContactPage",
            "name": title,
            "description": description,
            "mainEntity": {
                "@type": "RealEstateAgent",
                "name": context.tenant.name,
                "telephone": info.main.phone,
                "email": info.main.email,
                "address": {
                    "@type": "PostalAddress",
                    "streetAddress": office.address,
                    "addressLocality": "Santo Domingo",
                    "addressCountry": "DO",
                },
                "geo": {
                    "@type": "GeoCoordinates",
                    "latitude": office.coordinates.lat,
                    "longitude": office.coordinates.lng,
                },
            },
        }
        return generate_seo(
            title,
            description,
            canonical_url=build_url("/contacto", language),
            og_image=CONTACT_OG_IMAGE,
            site_name=context.tenant.name,
            structured_data=structured_data,
        )

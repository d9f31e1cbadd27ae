"""Listing pages: filtered catalogue and single property detail."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

from inmo_api.db.models import Property, User
from inmo_api.db.repositories import (
    AdvisorRepository,
    FAQRepository,
    ListingFilters,
    PropertyRepository,
    TestimonialRepository,
)
from inmo_api.db.repositories.property_repository import (
    OPERATION_RENT,
    OPERATION_SALE,
)
from inmo_api.schemas.common import (
    Found,
    NotFoundWithFallback,
    PageContext,
    SEOData,
)
from inmo_api.schemas.property import (
    AgentSummary,
    Amenity,
    AmenityBadge,
    AvailableFilters,
    CardLocation,
    Coordinates,
    DisplayPrice,
    FilterOption,
    FullLocation,
    ListRelatedContent,
    PropertyAgent,
    PropertyCard,
    PropertyCarousel,
    PropertyCategoryRef,
    PropertyDetail,
    PropertyFeatures,
    PropertyFilters,
    PropertyListPage,
    QuickStats,
    SinglePropertyPage,
    SingleRelatedContent,
    TypedPrice,
)
from inmo_api.services.testimonial_service import related_faq, related_testimonial
from inmo_api.utils.dates import as_utc, is_recent
from inmo_api.utils.locale import build_property_url, build_url, pick, translated_attr
from inmo_api.utils.pagination import offset_for, paginate
from inmo_api.utils.pricing import (
    DEFAULT_CURRENCY,
    PRICE_TYPE_RENTAL,
    PRICE_TYPE_SALE,
    format_price,
)
from inmo_api.utils.seo import breadcrumbs, generate_seo

logger = logging.getLogger(__name__)

FEATURED_LIMIT = 12
SIMILAR_LIMIT = 6
RELATED_FAQ_LIMIT = 5
RELATED_TESTIMONIAL_LIMIT = 3
POPULAR_LOCATION_LIMIT = 8
BADGE_LIMIT = 2

OPERATION_SLUGS: dict[str, str] = {
    "comprar": OPERATION_SALE,
    "buy": OPERATION_SALE,
    "acheter": OPERATION_SALE,
    "venta": OPERATION_SALE,
    "alquilar": OPERATION_RENT,
    "rent": OPERATION_RENT,
    "louer": OPERATION_RENT,
    "alquiler": OPERATION_RENT,
}

PROPERTY_TYPE_SLUGS: dict[str, str] = {
    "casa": "casa",
    "casas": "casa",
    "house": "casa",
    "houses": "casa",
    "apartamento": "apartamento",
    "apartamentos": "apartamento",
    "apartment": "apartamento",
    "local": "local",
    "locales": "local",
    "commercial": "local",
    "terreno": "terreno",
    "terrenos": "terreno",
    "land": "terreno",
    "oficina": "oficina",
    "oficinas": "oficina",
    "office": "oficina",
    "penthouse": "penthouse",
    "villa": "villa",
}

# (slug, Spanish name, English name); other languages use the Spanish name.
FILTER_PROPERTY_TYPES = (
    ("casa", "Casa", "House"),
    ("apartamento", "Apartamento", "Apartment"),
    ("local", "Local", "Commercial"),
    ("terreno", "Terreno", "Land"),
    ("oficina", "Oficina", "Office"),
    ("penthouse", "Penthouse", "Penthouse"),
    ("villa", "Villa", "Villa"),
)

_BEDROOMS_RE = re.compile(
    r"^(\d+)-(?:habitaciones?|bedrooms?|chambres?)$", re.IGNORECASE
)
_BATHROOMS_RE = re.compile(
    r"^(\d+)-(?:banos?|bathrooms?|salles?-de-bains?)$", re.IGNORECASE
)


def _int_param(params: Mapping[str, str], name: str) -> int | None:
    raw = params.get(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.debug("Ignoring non-numeric %s=%r", name, raw)
        return None


def parse_filters(
    tags: Sequence[str], params: Mapping[str, str] | None = None
) -> ListingFilters:
    """
    Turn URL tags (``/comprar/apartamento/santo-domingo``) into listing filters.

    Operation and type slugs are recognised in any supported language, bedroom
    and bathroom tags look like ``3-habitaciones`` or ``2-bathrooms``. Any other
    tag is a location: the first one is the city, the second the sector.
    Query parameters win over values parsed from tags.
    """
    filters = ListingFilters()
    for tag in tags:
        if not tag:
            continue
        lowered = tag.lower()
        if lowered in OPERATION_SLUGS:
            filters.operacion = OPERATION_SLUGS[lowered]
            continue
        if lowered in PROPERTY_TYPE_SLUGS:
            filters.tipo = PROPERTY_TYPE_SLUGS[lowered]
            continue
        if match := _BEDROOMS_RE.match(tag):
            filters.habitaciones = int(match.group(1))
            continue
        if match := _BATHROOMS_RE.match(tag):
            filters.banos = int(match.group(1))
            continue
        if not filters.ciudad:
            filters.ciudad = tag.replace("-", " ")
        elif not filters.sector:
            filters.sector = tag.replace("-", " ")

    params = params or {}
    if (value := _int_param(params, "min_price")) is not None:
        filters.min_price = value
    if (value := _int_param(params, "max_price")) is not None:
        filters.max_price = value
    if (value := _int_param(params, "bedrooms")) is not None:
        filters.habitaciones = value
    if (value := _int_param(params, "bathrooms")) is not None:
        filters.banos = value
    if params.get("tipo"):
        filters.tipo = params["tipo"]
    if params.get("operacion"):
        filters.operacion = params["operacion"]
    return filters


def listing_values(listing: Property) -> dict[str, Any]:
    return {
        "slug": listing.slug,
        "precio_venta": listing.precio_venta,
        "categoria_slug": listing.categoria_slug,
        "sector_slug": listing.sector_slug,
        "ciudad_slug": listing.ciudad_slug,
    }


def listing_price(listing: Property) -> float:
    return listing.precio_venta or listing.precio_alquiler or listing.precio or 0


def operation_type(listing: Property) -> str:
    if listing.operacion:
        return listing.operacion
    return OPERATION_SALE if listing.precio_venta else OPERATION_RENT


def listing_features(listing: Property) -> PropertyFeatures:
    return PropertyFeatures(
        bedrooms=listing.habitaciones or 0,
        bathrooms=listing.banos or 0,
        half_bathrooms=listing.medios_banos or 0,
        parking_spaces=listing.estacionamientos or 0,
        area_construction=listing.m2_construccion or 0,
        area_total=listing.m2_terreno or 0,
    )


def _amenity_name(entry: Any) -> str:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, Mapping):
        return entry.get("nombre") or entry.get("name") or ""
    return ""


def _amenity_field(entry: Any, *keys: str) -> str | None:
    if not isinstance(entry, Mapping):
        return None
    for key in keys:
        if entry.get(key):
            return entry[key]
    return None


def amenity_badges(amenities: Sequence[Any] | None) -> list[AmenityBadge]:
    return [
        AmenityBadge(
            text=_amenity_name(entry), icon=_amenity_field(entry, "icono", "icon")
        )
        for entry in list(amenities or [])[:BADGE_LIMIT]
    ]


def parse_amenities(amenities: Sequence[Any] | None) -> list[Amenity]:
    return [
        Amenity(
            id=index,
            name=_amenity_name(entry),
            icon=_amenity_field(entry, "icono", "icon"),
            category=_amenity_field(entry, "categoria", "category"),
        )
        for index, entry in enumerate(amenities or [])
    ]


def gallery(listing: Property) -> list[str]:
    """Main image first, then gallery entries, without duplicates."""

    images: list[str] = []
    if listing.imagen_principal:
        images.append(listing.imagen_principal)
    for entry in listing.imagenes or []:
        url = entry if isinstance(entry, str) else _amenity_field(entry, "url", "src")
        if url and url not in images:
            images.append(url)
    return images


def property_card(listing: Property, language: str, tracking: str = "") -> PropertyCard:
    price = listing_price(listing)
    currency = listing.moneda or DEFAULT_CURRENCY
    operation = operation_type(listing)
    return PropertyCard(
        id=listing.id,
        slug=listing.slug,
        code=listing.codigo,
        title=translated_attr(listing, "titulo", language) or "",
        location=CardLocation(
            city=listing.ciudad, sector=listing.sector, address=listing.direccion
        ),
        price=DisplayPrice(
            amount=price,
            currency=currency,
            display=format_price(price, currency, operation, language),
        ),
        operation_type=operation,
        features=listing_features(listing),
        main_image=listing.imagen_principal or "",
        is_featured=bool(listing.destacada),
        is_new=is_recent(listing.created_at),
        url=build_property_url(listing_values(listing), language, tracking),
        amenity_badges=amenity_badges(listing.amenidades),
    )


def property_cards(
    rows: Sequence[Property], context: PageContext
) -> list[PropertyCard]:
    return [property_card(row, context.language, context.tracking) for row in rows]


def property_detail(
    listing: Property, language: str, tracking: str = ""
) -> PropertyDetail:
    currency = listing.moneda or DEFAULT_CURRENCY
    operation = operation_type(listing)
    price = listing_price(listing)
    images = gallery(listing)

    prices: list[TypedPrice] = []
    if listing.precio_venta:
        prices.append(
            TypedPrice(
                type=PRICE_TYPE_SALE,
                amount=listing.precio_venta,
                currency=currency,
                display=format_price(listing.precio_venta, currency, "venta", language),
            )
        )
    if listing.precio_alquiler:
        prices.append(
            TypedPrice(
                type=PRICE_TYPE_RENTAL,
                amount=listing.precio_alquiler,
                currency=currency,
                display=format_price(
                    listing.precio_alquiler, currency, "alquiler", language
                ),
            )
        )

    coordinates = None
    if listing.latitud and listing.longitud:
        coordinates = Coordinates(lat=listing.latitud, lng=listing.longitud)

    description = (
        translated_attr(listing, "descripcion", language)
        or listing.short_description
        or ""
    )
    return PropertyDetail(
        id=listing.id,
        slug=listing.slug,
        code=listing.codigo,
        created_at=as_utc(listing.created_at),
        updated_at=as_utc(listing.updated_at),
        title=translated_attr(listing, "titulo", language) or "",
        description=description,
        location=FullLocation(
            country=listing.pais,
            province=listing.provincia,
            city=listing.ciudad,
            sector=listing.sector,
        ),
        address=listing.direccion,
        coordinates=coordinates,
        category=PropertyCategoryRef(slug=listing.tipo, name=listing.tipo),
        operation_type=operation,
        prices=prices,
        primary_price=TypedPrice(
            type=operation,
            amount=price,
            currency=currency,
            display=format_price(price, currency, operation, language),
        ),
        features=listing_features(listing),
        images=images,
        main_image=listing.imagen_principal or (images[0] if images else ""),
        amenities=parse_amenities(listing.amenidades),
        amenity_badges=amenity_badges(listing.amenidades),
        status=listing.estado_propiedad,
        is_featured=bool(listing.destacada),
        is_project=bool(listing.is_project),
        is_new=is_recent(listing.created_at),
        is_furnished=bool(listing.is_furnished),
        is_exclusive=bool(listing.exclusiva),
        url=build_property_url(listing_values(listing), language, tracking),
    )


def properties_title(language: str) -> str:
    return pick(language, "Propiedades", "Properties", "Propriétés")


def canonical_path(detail: PropertyDetail) -> str:
    """Listing URL without the tracking query string."""

    return detail.url.split("?", 1)[0]


def list_title(filters: ListingFilters, language: str) -> str:
    parts = [properties_title(language)]
    if filters.operacion == OPERATION_SALE:
        parts.append(pick(language, "en Venta", "for Sale", "à Vendre"))
    elif filters.operacion == OPERATION_RENT:
        parts.append(pick(language, "en Alquiler", "for Rent", "à Louer"))
    if filters.ciudad:
        parts.append(f"{pick(language, 'en', 'in', 'à')} {filters.ciudad.title()}")
    return " ".join(parts)


def list_description(total: int, language: str) -> str:
    return pick(
        language,
        f"Encuentra {total} propiedades disponibles. Amplia selección de inmuebles"
        " con fotos, precios y características detalladas.",
        f"Find {total} available properties. Wide selection of real estate with"
        " photos, prices and detailed features.",
        f"Trouvez {total} propriétés disponibles. Large sélection de biens"
        " immobiliers avec photos, prix et caractéristiques détaillées.",
    )


def list_keywords(language: str) -> str:
    return pick(
        language,
        "propiedades, inmuebles, bienes raíces, casas, apartamentos",
        "properties, real estate, homes, apartments, houses",
        "propriétés, immobilier, maisons, appartements",
    )


def featured_title(language: str) -> str:
    return pick(
        language,
        "Propiedades Destacadas",
        "Featured Properties",
        "Propriétés en Vedette",
    )


def property_not_found_text(language: str) -> str:
    return pick(
        language,
        "Propiedad no encontrada",
        "Property not found",
        "Propriété non trouvée",
    )


def agent_summary(
    user: User, *, slug: str | None = None, photo: str | None = None
) -> AgentSummary:
    return AgentSummary(
        id=user.id,
        slug=slug or "",
        full_name=f"{user.nombre or ''} {user.apellido or ''}".strip(),
        photo_url=photo or user.avatar_url or "",
        phone=user.telefono or "",
        whatsapp=user.telefono or "",
        email=user.email or "",
        is_main=True,
    )


class PropertyService:
    """Assemble listing and single-property pages for one tenant."""

    def __init__(
        self,
        repository: PropertyRepository,
        *,
        faqs: FAQRepository,
        testimonials: TestimonialRepository,
        advisors: AdvisorRepository,
    ) -> None:
        self._repository = repository
        self._faqs = faqs
        self._testimonials = testimonials
        self._advisors = advisors

    async def get_featured(
        self, context: PageContext, *, limit: int = FEATURED_LIMIT
    ) -> list[PropertyCard]:
        rows = await self._repository.list_featured(context.tenant.id, limit=limit)
        return property_cards(rows, context)

    async def get_list_page(
        self,
        context: PageContext,
        tags: Sequence[str] = (),
        params: Mapping[str, str] | None = None,
        *,
        page: int = 1,
        limit: int = 32,
    ) -> PropertyListPage:
        tenant = context.tenant
        language = context.language
        filters = parse_filters(tags, params)
        logger.debug("Listing filters for %s: %s", tenant.slug, filters.as_dict())

        rows, total = await self._repository.list_properties(
            tenant.id, filters=filters, limit=limit, offset=offset_for(page, limit)
        )
        properties = property_cards(rows, context)
        totals = await self._repository.totals(tenant.id)
        featured = await self.get_featured(context)

        title = list_title(filters, language)
        path = "/" + "/".join(tag for tag in tags if tag)
        canonical = build_url(path, language)
        seo = generate_seo(
            title,
            list_description(total, language),
            canonical_url=canonical,
            keywords=list_keywords(language),
            og_image=properties[0].main_image if properties else None,
            site_name=tenant.name,
        )
        carousels = []
        if featured:
            carousels.append(
                PropertyCarousel(
                    id="featured", title=featured_title(language), properties=featured
                )
            )

        return PropertyListPage(
            language=language,
            tenant=tenant,
            seo=seo,
            tracking_string=context.tracking,
            breadcrumbs=breadcrumbs(language, (title, path)),
            title=title,
            properties=properties,
            total_properties=total,
            pagination=paginate(total, page, limit),
            filters=PropertyFilters(
                active=filters.as_dict(),
                available=await self._available_filters(context),
            ),
            aggregated_stats=QuickStats(
                total_count=totals.total,
                for_sale=totals.for_sale,
                for_rent=totals.for_rent,
                new_this_month=totals.new_this_month,
            ),
            carousels=carousels,
            related_content=ListRelatedContent(
                faqs=await self._related_faqs(context),
                testimonials=await self._related_testimonials(context),
            ),
        )

    async def get_property_page(
        self, context: PageContext, slug: str, tags: Sequence[str] = ()
    ) -> Found[SinglePropertyPage] | NotFoundWithFallback[SinglePropertyPage]:
        tenant = context.tenant
        language = context.language
        listing = await self._repository.get_by_slug(tenant.id, slug)
        if listing is None:
            return NotFoundWithFallback(
                await self._property_fallback(context, slug, tags)
            )

        detail = property_detail(listing, language, context.tracking)
        similar = await self._repository.list_similar(listing, limit=SIMILAR_LIMIT)

        main_agent = None
        if listing.agente is not None:
            profile = await self._advisors.get_for_user(tenant.id, listing.agente.id)
            main_agent = agent_summary(
                listing.agente,
                slug=profile.slug if profile else None,
                photo=profile.foto_url if profile else None,
            )

        return Found(
            SinglePropertyPage(
                language=language,
                tenant=tenant,
                seo=self._property_seo(context, detail),
                tracking_string=context.tracking,
                breadcrumbs=breadcrumbs(
                    language,
                    (properties_title(language), "/propiedades"),
                    (detail.title, canonical_path(detail)),
                ),
                property=detail,
                agent=PropertyAgent(main=main_agent),
                related_content=SingleRelatedContent(
                    similar_properties=property_cards(similar, context),
                    faqs=await self._related_faqs(context),
                    testimonials=await self._related_testimonials(context),
                ),
            )
        )

    async def _available_filters(self, context: PageContext) -> AvailableFilters:
        tenant_id = context.tenant.id
        language = context.language
        cities = await self._repository.location_counts(
            tenant_id, level="ciudad", limit=POPULAR_LOCATION_LIMIT
        )
        sectors = await self._repository.location_counts(
            tenant_id, level="sector", limit=POPULAR_LOCATION_LIMIT
        )
        return AvailableFilters(
            property_types=[
                FilterOption(slug=slug, name=english if language == "en" else spanish)
                for slug, spanish, english in FILTER_PROPERTY_TYPES
            ],
            locations=[
                FilterOption(
                    slug=location.slug,
                    name=location.name,
                    type=kind,
                    count=location.count,
                )
                for kind, group in (("ciudad", cities), ("sector", sectors))
                for location in group
            ],
            operations=[
                FilterOption(
                    slug=pick(language, "comprar", "buy", "acheter"),
                    value=OPERATION_SALE,
                ),
                FilterOption(
                    slug=pick(language, "alquilar", "rent", "louer"),
                    value=OPERATION_RENT,
                ),
            ],
        )

    async def _related_faqs(self, context: PageContext):
        rows = await self._faqs.list_faqs(context.tenant.id, limit=RELATED_FAQ_LIMIT)
        return [related_faq(row, context.language) for row in rows]

    async def _related_testimonials(self, context: PageContext):
        rows, _ = await self._testimonials.list_testimonials(
            context.tenant.id, limit=RELATED_TESTIMONIAL_LIMIT
        )
        return [related_testimonial(row, context.language) for row in rows]

    async def _property_fallback(
        self, context: PageContext, slug: str, tags: Sequence[str]
    ) -> SinglePropertyPage:
        language = context.language
        logger.info("Property %r not found; serving fallback", slug)
        not_found = property_not_found_text(language)
        path = "/" + "/".join(tag for tag in (*tags, slug) if tag)
        return SinglePropertyPage(
            language=language,
            tenant=context.tenant,
            seo=SEOData(
                title=f"{not_found} | {context.tenant.name}",
                description=not_found,
                canonical_url=build_url(path, language),
            ),
            tracking_string=context.tracking,
            not_found=True,
            not_found_message=not_found,
            suggested_properties=await self.get_featured(context),
        )

    def _property_seo(self, context: PageContext, detail: PropertyDetail) -> SEOData:
        tenant = context.tenant
        location = ", ".join(
            part for part in (detail.location.sector, detail.location.city) if part
        )
        price = detail.primary_price.display
        if detail.description:
            description = detail.description[:150]
        else:
            description = (
                f"{detail.title} en {location}. {detail.features.bedrooms} hab,"
                f" {detail.features.bathrooms} baños. {price}"
            )
        return generate_seo(
            f"{detail.title} | {price} | {tenant.name}",
            description,
            canonical_url=canonical_path(detail),
            keywords=f"{detail.title}, {location}, {detail.category.name or ''},"
            " inmuebles",
            og_image=detail.main_image or None,
            page_type="property",
            site_name=tenant.name,
        )

"""Property-type directory and single-type listing pages."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from inmo_api.cache import CacheClient
from inmo_api.db.repositories import ListingFilters, PropertyRepository
from inmo_api.db.repositories.property_repository import TypeCount
from inmo_api.schemas.common import (
    Found,
    NotFoundWithFallback,
    PageContext,
    SEOData,
)
from inmo_api.schemas.property_type import (
    PropertyType,
    PropertyTypeCarousel,
    PropertyTypeSinglePage,
    PropertyTypesMainPage,
)
from inmo_api.services.caching import CacheableService, cached
from inmo_api.services.content_cache import (
    PAGE_DESERIALIZE_ERROR,
    PROPERTY_TYPES_FAMILY,
    content_ttl,
    page_cache_key,
    page_deserializer,
    serialize_page,
)
from inmo_api.services.property_service import property_cards
from inmo_api.utils.locale import build_url, pick
from inmo_api.utils.pagination import offset_for, paginate
from inmo_api.utils.seo import SCHEMA_CONTEXT, absolute_url, breadcrumbs, generate_seo
from inmo_api.utils.text import slugify

logger = logging.getLogger(__name__)

FEATURED_TYPES = 3
FEATURED_PER_TYPE = 6
SUGGESTED_LIMIT = 8

DEFAULT_STYLE = ("🏠", "#6B7280")

TYPE_STYLES: dict[str, tuple[str, str]] = {
    "apartamento": ("🏢", "#3B82F6"),
    "casa": ("🏠", "#10B981"),
    "villa": ("🏰", "#8B5CF6"),
    "penthouse": ("🌆", "#F59E0B"),
    "terreno": ("🌳", "#22C55E"),
    "locales-comerciales": ("🏪", "#EF4444"),
    "local-comercial": ("🏪", "#EF4444"),
    "local": ("🏪", "#EF4444"),
    "oficina": ("🏛️", "#6366F1"),
    "townhouse": ("🏘️", "#14B8A6"),
    "loft": ("🏙️", "#EC4899"),
    "edificio": ("🏗️", "#F97316"),
    "hotel": ("🏨", "#0EA5E9"),
}

TYPE_NAMES: dict[str, tuple[str, str, str]] = {
    "apartamento": ("Apartamentos", "Apartments", "Appartements"),
    "casa": ("Casas", "Houses", "Maisons"),
    "villa": ("Villas", "Villas", "Villas"),
    "penthouse": ("Penthouses", "Penthouses", "Penthouses"),
    "terreno": ("Terrenos", "Land", "Terrains"),
    "locales-comerciales": (
        "Locales Comerciales",
        "Commercial Spaces",
        "Locaux Commerciaux",
    ),
    "local-comercial": (
        "Locales Comerciales",
        "Commercial Spaces",
        "Locaux Commerciaux",
    ),
    "local": ("Locales", "Locals", "Locaux"),
    "oficina": ("Oficinas", "Offices", "Bureaux"),
    "townhouse": ("Townhouses", "Townhouses", "Maisons de Ville"),
    "loft": ("Lofts", "Lofts", "Lofts"),
    "edificio": ("Edificios", "Buildings", "Bâtiments"),
    "hotel": ("Hoteles", "Hotels", "Hôtels"),
}

TYPE_DESCRIPTIONS: dict[str, tuple[str, str, str]] = {
    "apartamento": (
        "Modernos espacios urbanos con todas las comodidades",
        "Modern urban spaces with all amenities",
        "Espaces urbains modernes avec toutes les commodités",
    ),
    "casa": (
        "Espacios familiares amplios y confortables",
        "Spacious and comfortable family homes",
        "Maisons familiales spacieuses et confortables",
    ),
    "villa": (
        "Lujo y exclusividad en ubicaciones privilegiadas",
        "Luxury and exclusivity in prime locations",
        "Luxe et exclusivité dans des emplacements privilégiés",
    ),
    "penthouse": (
        "Vistas panorámicas únicas y acabados premium",
        "Unique panoramic views and premium finishes",
        "Vues panoramiques uniques et finitions premium",
    ),
    "terreno": (
        "Oportunidades de inversión y desarrollo",
        "Investment and development opportunities",
        "Opportunités d'investissement et de développement",
    ),
    "locales-comerciales": (
        "Espacios ideales para tu negocio",
        "Ideal spaces for your business",
        "Espaces idéaux pour votre entreprise",
    ),
}


def property_types_title(language: str) -> str:
    return pick(
        language, "Tipos de Propiedades", "Property Types", "Types de Propriétés"
    )


def property_type_not_found_text(language: str) -> str:
    return pick(
        language,
        "Tipo de propiedad no encontrado",
        "Property type not found",
        "Type de propriété non trouvé",
    )


def property_type_to_schema(
    row: TypeCount, language: str, tracking: str = ""
) -> PropertyType:
    slug = slugify(row.tipo)
    icon, color = TYPE_STYLES.get(slug, DEFAULT_STYLE)
    names = TYPE_NAMES.get(slug)
    description = TYPE_DESCRIPTIONS.get(slug)
    return PropertyType(
        slug=slug,
        type=row.tipo,
        name=pick(language, *names) if names else row.tipo,
        count=row.count,
        count_venta=row.count_venta,
        count_alquiler=row.count_alquiler,
        icon=icon,
        color=color,
        description=pick(language, *description) if description else "",
        url=build_url(f"/tipos-de-propiedad/{slug}", language, tracking),
        listings_url=build_url(f"/comprar/{slug}", language, tracking),
    )


class PropertyTypeService(CacheableService):
    def __init__(
        self, properties: PropertyRepository, *, cache: CacheClient | None = None
    ) -> None:
        super().__init__(cache=cache)
        self._properties = properties

    async def list_types(self, context: PageContext) -> list[PropertyType]:
        """Types with available listings, busiest first."""

        rows = await self._properties.type_counts(context.tenant.id)
        return [
            property_type_to_schema(row, context.language, context.tracking)
            for row in rows
        ]

    @cached(
        lambda _self, context: page_cache_key(PROPERTY_TYPES_FAMILY, context, "main"),
        ttl=content_ttl,
        serializer=serialize_page,
        deserializer=page_deserializer(PropertyTypesMainPage),
        deserialize_error_message=PAGE_DESERIALIZE_ERROR,
    )
    async def get_main_page(self, context: PageContext) -> PropertyTypesMainPage:
        language = context.language
        types = await self.list_types(context)
        featured = types[:FEATURED_TYPES]

        carousels: list[PropertyTypeCarousel] = []
        for item in featured:
            listings = await self._properties.list_featured_by_type(
                context.tenant.id, item.type, limit=FEATURED_PER_TYPE
            )
            if listings:
                carousels.append(
                    PropertyTypeCarousel(
                        slug=item.slug,
                        name=item.name,
                        properties=property_cards(listings, context),
                        view_all_url=item.listings_url,
                    )
                )

        total = sum(item.count for item in types)
        return PropertyTypesMainPage(
            language=language,
            tenant=context.tenant,
            seo=self._main_seo(context, types, total),
            tracking_string=context.tracking,
            breadcrumbs=breadcrumbs(
                language, (property_types_title(language), "/tipos-de-propiedad")
            ),
            property_types=types,
            featured_types=featured,
            remaining_types=types[FEATURED_TYPES:],
            featured_by_type=carousels,
            total_properties=total,
        )

    async def get_type_page(
        self, context: PageContext, slug: str, *, page: int = 1, limit: int = 12
    ) -> Found[PropertyTypeSinglePage] | NotFoundWithFallback[PropertyTypeSinglePage]:
        language = context.language
        types = await self.list_types(context)
        current = next((item for item in types if item.slug == slug), None)
        if current is None:
            return NotFoundWithFallback(
                self._type_fallback(context, slug, types, limit)
            )

        rows, total = await self._properties.list_properties(
            context.tenant.id,
            filters=ListingFilters(tipo=current.type),
            limit=limit,
            offset=offset_for(page, limit),
        )
        return Found(
            PropertyTypeSinglePage(
                language=language,
                tenant=context.tenant,
                seo=self._type_seo(context, current),
                tracking_string=context.tracking,
                breadcrumbs=breadcrumbs(
                    language,
                    (property_types_title(language), "/tipos-de-propiedad"),
                    (current.name, f"/tipos-de-propiedad/{current.slug}"),
                ),
                property_type=current,
                properties=property_cards(rows, context),
                pagination=paginate(total, page, limit),
            )
        )

    def _type_fallback(
        self,
        context: PageContext,
        slug: str,
        types: Sequence[PropertyType],
        limit: int,
    ) -> PropertyTypeSinglePage:
        language = context.language
        logger.info("Property type %r not found; serving fallback", slug)
        not_found = property_type_not_found_text(language)
        url = build_url(f"/tipos-de-propiedad/{slug}", language)
        return PropertyTypeSinglePage(
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
            property_type=PropertyType(slug=slug, type=slug, name=slug, url=url),
            pagination=paginate(0, 1, limit),
            suggested_types=list(types[:SUGGESTED_LIMIT]),
        )

    def _main_seo(
        self, context: PageContext, types: Sequence[PropertyType], total: int
    ) -> SEOData:
        language = context.language
        tenant = context.tenant
        canonical = build_url("/tipos-de-propiedad", language)
        if not types:
            return generate_seo(
                property_types_title(language),
                pick(
                    language,
                    "Explora propiedades por tipo",
                    "Explore properties by type",
                    "Explorez les propriétés par type",
                ),
                canonical_url=canonical,
                site_name=tenant.name,
            )

        top = ", ".join(item.name for item in types[:FEATURED_TYPES])
        title = pick(
            language,
            f"Tipos de Propiedades | {total} Inmuebles Disponibles",
            f"Property Types | {total} Properties Available",
            f"Types de Propriétés | {total} Biens Disponibles",
        )
        description = pick(
            language,
            f"Explora {total} propiedades por tipo: {top} y más. Encuentra el"
            " inmueble perfecto para ti.",
            f"Explore {total} properties by type: {top} and more. Find the perfect"
            " property for you.",
            f"Explorez {total} propriétés par type : {top} et plus. Trouvez la"
            " propriété parfaite pour vous.",
        )
        available = pick(
            language,
            "propiedades disponibles",
            "properties available",
            "propriétés disponibles",
        )
        return generate_seo(
            title,
            description,
            canonical_url=canonical,
            keywords=f"{top}, bienes raíces, propiedades, inmuebles",
            site_name=tenant.name,
            structured_data={
                "@context": SCHEMA_CONTEXT,
                "@type": "ItemList",
                "name": title,
                "description": description,
                "numberOfItems": len(types),
                "itemListElement": [
                    {
                        "@type": "ListItem",
                        "position": position,
                        "name": item.name,
                        "url": absolute_url(
                            tenant.domain,
                            build_url(f"/tipos-de-propiedad/{item.slug}", language),
                        ),
                        "description": f"{item.count} {available}",
                    }
                    for position, item in enumerate(types, start=1)
                ],
            },
        )

    def _type_seo(self, context: PageContext, item: PropertyType) -> SEOData:
        language = context.language
        description = item.description or pick(
            language,
            f"{item.count} {item.name.lower()} disponibles en venta y alquiler.",
            f"{item.count} {item.name.lower()} available for sale and rent.",
            f"{item.count} {item.name.lower()} disponibles à la vente et à la"
            " location.",
        )
        return generate_seo(
            f"{item.name} | {context.tenant.name}",
            description,
            canonical_url=build_url(f"/tipos-de-propiedad/{item.slug}", language),
            site_name=context.tenant.name,
        )

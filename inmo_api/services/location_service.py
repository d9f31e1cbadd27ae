"""Locations directory plus one page per city or sector.

Cities are ranked by their number of available listings.  The four busiest get
a carousel of listings on the directory page; the icon, colour, hero image and
blurb of well-known destinations come from the tables below, every other place
gets the neutral pin.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from inmo_api.cache import CacheClient
from inmo_api.db.repositories import ListingFilters, PropertyRepository
from inmo_api.db.repositories.property_repository import LocationCount
from inmo_api.schemas.common import (
    Found,
    NotFoundWithFallback,
    PageContext,
    SEOData,
)
from inmo_api.schemas.location import (
    Location,
    LocationCarousel,
    LocationSinglePage,
    LocationsIntro,
    LocationsMainPage,
    LocationStats,
)
from inmo_api.services.caching import CacheableService, cached
from inmo_api.services.content_cache import (
    LOCATIONS_FAMILY,
    PAGE_DESERIALIZE_ERROR,
    content_ttl,
    page_cache_key,
    page_deserializer,
    serialize_page,
)
from inmo_api.services.property_service import property_cards
from inmo_api.utils.locale import build_url, pick
from inmo_api.utils.pagination import offset_for, paginate
from inmo_api.utils.seo import SCHEMA_CONTEXT, absolute_url, breadcrumbs, generate_seo

logger = logging.getLogger(__name__)

CITIES_LIMIT = 50
SECTORS_LIMIT = 100
FEATURED_CITIES = 4
FEATURED_PER_CITY = 6
SUGGESTED_LIMIT = 8
STRUCTURED_ITEMS_LIMIT = 10

DEFAULT_ICON = "📍"
DEFAULT_COLOR = "#6B7280"

_UNSPLASH = "https://images.unsplash.com/photo-{}?w=800&q=80"

# slug -> (icon, colour, hero photo id)
CITY_STYLES: dict[str, tuple[str, str, str]] = {
    "santo-domingo": ("🏙️", "#3B82F6", "1569025690938-a00729c9e1f9"),
    "distrito-nacional": ("🏛️", "#3B82F6", "1569025690938-a00729c9e1f9"),
    "santiago": ("🌄", "#10B981", "1596436889106-be35e843f974"),
    "punta-cana": ("🏖️", "#F59E0B", "1582610116397-edb318620f90"),
    "bavaro": ("🌴", "#F59E0B", "1582610116397-edb318620f90"),
    "la-romana": ("⛳", "#8B5CF6", "1535139262971-c51845709a48"),
    "cap-cana": ("🏰", "#EC4899", "1499793983690-e29da59ef1c2"),
    "puerto-plata": ("🚢", "#06B6D4", "1590523741831-ab7e8b8f9c7f"),
    "samana": ("🐋", "#14B8A6", "1544551763-46a013bb70d5"),
    "las-terrenas": ("🏄", "#14B8A6", "1507525428034-b723cf961d3e"),
    "sosua": ("🤿", "#06B6D4", "1544551763-77ef2d0cfc6c"),
    "cabarete": ("🪁", "#22C55E", "1530053969600-caed2596d242"),
    "jarabacoa": ("🏔️", "#22C55E", "1501785888041-af3ef285b470"),
    "constanza": ("🌲", "#16A34A", "1506905925346-21bda4d32df4"),
}

CITY_DESCRIPTIONS: dict[str, tuple[str, str, str]] = {
    "santo-domingo": (
        "Capital de República Dominicana con una mezcla única de historia colonial"
        " y modernidad. Apartamentos de lujo, casas familiares y oportunidades de"
        " inversión.",
        "Capital of Dominican Republic with a unique mix of colonial history and"
        " modernity. Luxury apartments, family homes and investment opportunities.",
        "Capitale de la République Dominicaine avec un mélange unique d'histoire"
        " coloniale et de modernité. Appartements de luxe, maisons familiales et"
        " opportunités d'investissement.",
    ),
    "santiago": (
        "Segunda ciudad más grande del país, centro económico del Cibao. Ideal para"
        " inversiones comerciales y residenciales.",
        "Second largest city in the country, economic center of Cibao. Ideal for"
        " commercial and residential investments.",
        "Deuxième plus grande ville du pays, centre économique du Cibao. Idéal pour"
        " les investissements commerciaux et résidentiels.",
    ),
    "punta-cana": (
        "Destino turístico de clase mundial con playas de arena blanca. Villas de"
        " lujo, condominios frente al mar y alta rentabilidad por alquiler.",
        "World-class tourist destination with white sand beaches. Luxury villas,"
        " oceanfront condos and high rental yield.",
        "Destination touristique de classe mondiale avec des plages de sable blanc."
        " Villas de luxe, condos en bord de mer et rendement locatif élevé.",
    ),
    "la-romana": (
        "Casa de Campo y playas paradisíacas. Propiedades de lujo en uno de los"
        " destinos más exclusivos del Caribe.",
        "Casa de Campo and pristine beaches. Luxury properties in one of the most"
        " exclusive Caribbean destinations.",
        "Casa de Campo et plages paradisiaques. Propriétés de luxe dans l'une des"
        " destinations les plus exclusives des Caraïbes.",
    ),
    "cap-cana": (
        "El desarrollo de lujo más exclusivo del Caribe. Marina, campos de golf y"
        " residencias de alto nivel.",
        "The most exclusive luxury development in the Caribbean. Marina, golf"
        " courses and high-end residences.",
        "Le développement de luxe le plus exclusif des Caraïbes. Marina, terrains"
        " de golf et résidences haut de gamme.",
    ),
    "puerto-plata": (
        "Costa norte con historia y cultura. Precios accesibles y gran potencial de"
        " valorización.",
        "North coast with history and culture. Affordable prices and great"
        " appreciation potential.",
        "Côte nord avec histoire et culture. Prix abordables et grand potentiel de"
        " valorisation.",
    ),
}

# slug -> ((title es, en, fr), (subtitle es, en, fr)); titles take the city name.
CAROUSEL_COPY: dict[str, tuple[tuple[str, str, str], tuple[str, str, str]]] = {
    "santo-domingo": (
        (
            "Propiedades destacadas en {name}",
            "Featured properties in {name}",
            "Propriétés en vedette à {name}",
        ),
        (
            "La capital dominicana ofrece las mejores oportunidades de inversión"
            " urbana",
            "The Dominican capital offers the best urban investment opportunities",
            "La capitale dominicaine offre les meilleures opportunités"
            " d'investissement urbain",
        ),
    ),
    "punta-cana": (
        (
            "Descubre propiedades en {name}",
            "Discover properties in {name}",
            "Découvrez des propriétés à {name}",
        ),
        (
            "Villas y apartamentos frente al mar con alta rentabilidad turística",
            "Oceanfront villas and apartments with high tourist rental yield",
            "Villas et appartements en bord de mer avec rendement locatif"
            " touristique élevé",
        ),
    ),
    "santiago": (
        (
            "Oportunidades inmobiliarias en {name}",
            "Real estate opportunities in {name}",
            "Opportunités immobilières à {name}",
        ),
        (
            "El centro económico del Cibao con propiedades para todos los"
            " presupuestos",
            "The economic center of Cibao with properties for all budgets",
            "Le centre économique du Cibao avec des propriétés pour tous les"
            " budgets",
        ),
    ),
}

_GENERIC_CAROUSEL = (
    (
        "Propiedades disponibles en {name}",
        "Available properties in {name}",
        "Propriétés disponibles à {name}",
    ),
    (
        "Encuentra tu próxima inversión en esta ubicación privilegiada",
        "Find your next investment in this prime location",
        "Trouvez votre prochain investissement dans cet emplacement privilégié",
    ),
)


def locations_title(language: str) -> str:
    return pick(language, "Ubicaciones", "Locations", "Emplacements")


def location_not_found_text(language: str) -> str:
    return pick(
        language,
        "Ubicación no encontrada",
        "Location not found",
        "Emplacement non trouvé",
    )


def locations_intro(language: str) -> LocationsIntro:
    return LocationsIntro(
        intro=pick(
            language,
            "Descubre las mejores ubicaciones para invertir en bienes raíces en"
            " República Dominicana. Desde la vibrante capital Santo Domingo hasta"
            " las paradisíacas playas de Punta Cana, te ayudamos a encontrar la"
            " propiedad perfecta en la zona que mejor se adapte a tu estilo de"
            " vida.",
            "Discover the best locations to invest in real estate in the Dominican"
            " Republic. From the vibrant capital Santo Domingo to the pristine"
            " beaches of Punta Cana, we help you find the perfect property in the"
            " area that best suits your lifestyle.",
            "Découvrez les meilleurs emplacements pour investir dans l'immobilier"
            " en République Dominicaine. De la vibrante capitale Saint-Domingue aux"
            " plages paradisiaques de Punta Cana, nous vous aidons à trouver la"
            " propriété parfaite dans la zone qui correspond le mieux à votre"
            " style de vie.",
        ),
        benefits=[
            pick(
                language,
                "Presencia en las principales ciudades y destinos turísticos",
                "Presence in major cities and tourist destinations",
                "Présence dans les principales villes et destinations touristiques",
            ),
            pick(
                language,
                "Propiedades en zonas de alta plusvalía y rentabilidad",
                "Properties in high-value and high-yield areas",
                "Propriétés dans des zones à forte plus-value et rentabilité",
            ),
            pick(
                language,
                "Conocimiento local de cada mercado inmobiliario",
                "Local knowledge of each real estate market",
                "Connaissance locale de chaque marché immobilier",
            ),
            pick(
                language,
                "Asesoría sobre regulaciones y zonificación por área",
                "Advice on regulations and zoning by area",
                "Conseils sur les réglementations et le zonage par zone",
            ),
        ],
        cta=pick(
            language,
            "¿Buscas una ubicación específica? Nuestros asesores conocen cada zona"
            " y pueden ayudarte a encontrar la propiedad ideal.",
            "Looking for a specific location? Our advisors know each area and can"
            " help you find the ideal property.",
            "Vous cherchez un emplacement spécifique? Nos conseillers connaissent"
            " chaque zone et peuvent vous aider à trouver la propriété idéale.",
        ),
    )


def carousel_copy(name: str, slug: str, language: str) -> tuple[str, str]:
    titles, subtitles = CAROUSEL_COPY.get(slug, _GENERIC_CAROUSEL)
    return pick(language, *titles).format(name=name), pick(language, *subtitles)


def location_to_schema(
    row: LocationCount, language: str, *, level: str, tracking: str = ""
) -> Location:
    icon, color, photo = CITY_STYLES.get(
        row.slug, (DEFAULT_ICON, DEFAULT_COLOR, None)
    )
    description = CITY_DESCRIPTIONS.get(row.slug)
    return Location(
        slug=row.slug,
        name=row.name,
        level=level,
        city=row.city,
        count=row.count,
        count_venta=row.count_venta,
        count_alquiler=row.count_alquiler,
        icon=icon,
        color=color,
        hero_image=_UNSPLASH.format(photo) if photo else None,
        description=pick(language, *description) if description else "",
        url=build_url(f"/ubicaciones/{row.slug}", language, tracking),
        listings_url=build_url(f"/comprar/{row.slug}", language, tracking),
    )


class LocationService(CacheableService):
    def __init__(
        self, properties: PropertyRepository, *, cache: CacheClient | None = None
    ) -> None:
        super().__init__(cache=cache)
        self._properties = properties

    async def list_locations(
        self, context: PageContext, *, level: str, limit: int
    ) -> list[Location]:
        rows = await self._properties.location_counts(
            context.tenant.id, level=level, limit=limit
        )
        return [
            location_to_schema(
                row, context.language, level=level, tracking=context.tracking
            )
            for row in rows
        ]

    @cached(
        lambda _self, context: page_cache_key(LOCATIONS_FAMILY, context, "main"),
        ttl=content_ttl,
        serializer=serialize_page,
        deserializer=page_deserializer(LocationsMainPage),
        deserialize_error_message=PAGE_DESERIALIZE_ERROR,
    )
    async def get_main_page(self, context: PageContext) -> LocationsMainPage:
        language = context.language
        cities = await self.list_locations(context, level="ciudad", limit=CITIES_LIMIT)
        sectors = await self.list_locations(
            context, level="sector", limit=SECTORS_LIMIT
        )
        featured = cities[:FEATURED_CITIES]

        carousels: list[LocationCarousel] = []
        for city in featured:
            listings = await self._properties.list_featured_by_location(
                context.tenant.id, city.name, limit=FEATURED_PER_CITY
            )
            if not listings:
                continue
            title, subtitle = carousel_copy(city.name, city.slug, language)
            carousels.append(
                LocationCarousel(
                    slug=city.slug,
                    name=city.name,
                    title=title,
                    subtitle=subtitle,
                    properties=property_cards(listings, context),
                    view_all_url=city.listings_url,
                )
            )

        stats = LocationStats(
            total_cities=len(cities),
            total_sectors=len(sectors),
            total_properties=sum(city.count for city in cities),
        )
        return LocationsMainPage(
            language=language,
            tenant=context.tenant,
            seo=self._main_seo(context, cities, stats),
            tracking_string=context.tracking,
            breadcrumbs=breadcrumbs(
                language, (locations_title(language), "/ubicaciones")
            ),
            cities=cities,
            sectors=sectors,
            featured_cities=featured,
            featured_by_location=carousels,
            stats=stats,
            content=locations_intro(language),
        )

    async def get_location_page(
        self, context: PageContext, slug: str, *, page: int = 1, limit: int = 12
    ) -> Found[LocationSinglePage] | NotFoundWithFallback[LocationSinglePage]:
        """A city (or, failing that, a sector) by slug with its listings."""

        language = context.language
        cities = await self.list_locations(context, level="ciudad", limit=CITIES_LIMIT)
        sectors = await self.list_locations(
            context, level="sector", limit=SECTORS_LIMIT
        )
        location = next((city for city in cities if city.slug == slug), None)
        if location is None:
            location = next((sector for sector in sectors if sector.slug == slug), None)
        if location is None:
            return NotFoundWithFallback(
                self._location_fallback(context, slug, cities, limit)
            )

        if location.level == "ciudad":
            filters = ListingFilters(ciudad=location.name)
            children = [sector for sector in sectors if sector.city == location.name]
        else:
            filters = ListingFilters(sector=location.name)
            children = []
        rows, total = await self._properties.list_properties(
            context.tenant.id,
            filters=filters,
            limit=limit,
            offset=offset_for(page, limit),
        )

        trail = [
            (locations_title(language), "/ubicaciones"),
            (location.name, f"/ubicaciones/{location.slug}"),
        ]
        return Found(
            LocationSinglePage(
                language=language,
                tenant=context.tenant,
                seo=self._location_seo(context, location),
                tracking_string=context.tracking,
                breadcrumbs=breadcrumbs(language, *trail),
                location=location,
                properties=property_cards(rows, context),
                sectors=children,
                pagination=paginate(total, page, limit),
            )
        )

    def _location_fallback(
        self,
        context: PageContext,
        slug: str,
        cities: Sequence[Location],
        limit: int,
    ) -> LocationSinglePage:
        language = context.language
        logger.info("Location %r not found; serving fallback", slug)
        not_found = location_not_found_text(language)
        url = build_url(f"/ubicaciones/{slug}", language)
        return LocationSinglePage(
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
            location=Location(slug=slug, name=slug, url=url),
            pagination=paginate(0, 1, limit),
            suggested_locations=list(cities[:SUGGESTED_LIMIT]),
        )

    def _main_seo(
        self, context: PageContext, cities: Sequence[Location], stats: LocationStats
    ) -> SEOData:
        language = context.language
        tenant = context.tenant
        canonical = build_url("/ubicaciones", language)
        if not cities:
            return generate_seo(
                locations_title(language),
                pick(
                    language,
                    "Explora propiedades por ubicación",
                    "Explore properties by location",
                    "Explorez les propriétés par emplacement",
                ),
                canonical_url=canonical,
                site_name=tenant.name,
            )

        top = ", ".join(city.name for city in cities[:3])
        title = pick(
            language,
            f"Ubicaciones | Propiedades en {top} y más",
            f"Locations | Properties in {top} and more",
            f"Emplacements | Propriétés à {top} et plus",
        )
        description = pick(
            language,
            f"Explora {stats.total_properties} propiedades en {stats.total_cities}"
            f" ciudades de República Dominicana. Encuentra casas, apartamentos y"
            f" villas en {top}.",
            f"Explore {stats.total_properties} properties in {stats.total_cities}"
            f" cities in the Dominican Republic. Find houses, apartments and villas"
            f" in {top}.",
            f"Explorez {stats.total_properties} propriétés dans"
            f" {stats.total_cities} villes en République Dominicaine. Trouvez"
            f" maisons, appartements et villas à {top}.",
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
            keywords=f"{top}, bienes raíces, propiedades, República Dominicana",
            site_name=tenant.name,
            structured_data={
                "@context": SCHEMA_CONTEXT,
                "@type": "ItemList",
                "name": title,
                "description": description,
                "numberOfItems": stats.total_cities,
                "itemListElement": [
                    {
                        "@type": "ListItem",
                        "position": position,
                        "name": city.name,
                        "url": absolute_url(
                            tenant.domain,
                            build_url(f"/ubicaciones/{city.slug}", language),
                        ),
                        "description": f"{city.count} {available}",
                    }
                    for position, city in enumerate(
                        cities[:STRUCTURED_ITEMS_LIMIT], start=1
                    )
                ],
            },
        )

    def _location_seo(self, context: PageContext, location: Location) -> SEOData:
        language = context.language
        name = location.name
        title = pick(
            language,
            f"Propiedades en {name}",
            f"Properties in {name}",
            f"Propriétés à {name}",
        )
        description = location.description or pick(
            language,
            f"{location.count} propiedades disponibles en {name}. Casas,"
            " apartamentos y villas en venta y alquiler.",
            f"{location.count} properties available in {name}. Houses, apartments"
            " and villas for sale and rent.",
            f"{location.count} propriétés disponibles à {name}. Maisons,"
            " appartements et villas à vendre et à louer.",
        )
        return generate_seo(
            f"{title} | {context.tenant.name}",
            description,
            canonical_url=build_url(f"/ubicaciones/{location.slug}", language),
            og_image=location.hero_image,
            site_name=context.tenant.name,
        )

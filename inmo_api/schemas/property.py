"""Property cards, full property detail and the listing/single page payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from inmo_api.schemas.common import CamelModel, ContentPage, Pagination


class CardLocation(CamelModel):
    city: str | None = None
    sector: str | None = None
    address: str | None = None


class DisplayPrice(CamelModel):
    amount: float = 0
    currency: str = "USD"
    display: str = ""


class PropertyFeatures(CamelModel):
    bedrooms: int = 0
    bathrooms: int = 0
    half_bathrooms: int = 0
    parking_spaces: int = 0
    area_construction: float = 0
    area_total: float = 0


class AmenityBadge(CamelModel):
    text: str
    icon: str | None = None


class PropertyCard(CamelModel):
    id: str
    slug: str
    code: str | None = None
    title: str
    location: CardLocation = Field(default_factory=CardLocation)
    price: DisplayPrice = Field(default_factory=DisplayPrice)
    operation_type: str | None = None
    features: PropertyFeatures = Field(default_factory=PropertyFeatures)
    main_image: str = ""
    is_featured: bool = False
    is_new: bool = False
    url: str
    amenity_badges: list[AmenityBadge] = Field(default_factory=list)


class FullLocation(CamelModel):
    country: str | None = None
    province: str | None = None
    city: str | None = None
    sector: str | None = None


class Coordinates(CamelModel):
    lat: float
    lng: float


class TypedPrice(CamelModel):
    type: str
    amount: float
    currency: str
    display: str


class PropertyCategoryRef(CamelModel):
    slug: str | None = None
    name: str | None = None


class Amenity(CamelModel):
    id: int
    name: str
    icon: str | None = None
    category: str | None = None


class PropertyDetail(CamelModel):
    """Everything the single-property page renders."""

    id: str
    slug: str
    code: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    title: str
    description: str = ""
    location: FullLocation = Field(default_factory=FullLocation)
    address: str | None = None
    coordinates: Coordinates | None = None
    category: PropertyCategoryRef = Field(default_factory=PropertyCategoryRef)
    operation_type: str | None = None
    prices: list[TypedPrice] = Field(default_factory=list)
    primary_price: TypedPrice
    features: PropertyFeatures = Field(default_factory=PropertyFeatures)
    images: list[str] = Field(default_factory=list)
    main_image: str = ""
    amenities: list[Amenity] = Field(default_factory=list)
    amenity_badges: list[AmenityBadge] = Field(default_factory=list)
    status: str | None = None
    is_featured: bool = False
    is_project: bool = False
    is_new: bool = False
    is_furnished: bool = False
    is_exclusive: bool = False
    url: str


class FilterOption(CamelModel):
    slug: str
    name: str | None = None
    value: str | None = None
    type: str | None = None
    count: int | None = None


class AvailableFilters(CamelModel):
    property_types: list[FilterOption] = Field(default_factory=list)
    locations: list[FilterOption] = Field(default_factory=list)
    operations: list[FilterOption] = Field(default_factory=list)


class PropertyFilters(CamelModel):
    active: dict[str, Any] = Field(default_factory=dict)
    available: AvailableFilters = Field(default_factory=AvailableFilters)


class QuickStats(CamelModel):
    total_count: int = 0
    for_sale: int = 0
    for_rent: int = 0
    new_this_month: int = 0


class PropertyCarousel(CamelModel):
    id: str
    title: str
    properties: list[PropertyCard] = Field(default_factory=list)


class RelatedFAQ(CamelModel):
    question: str
    answer: str
    category: str | None = None


class RelatedTestimonial(CamelModel):
    id: str
    content: str
    rating: int = 5
    client_name: str
    client_photo: str | None = None


class ListRelatedContent(CamelModel):
    faqs: list[RelatedFAQ] = Field(default_factory=list)
    testimonials: list[RelatedTestimonial] = Field(default_factory=list)


class PropertyListPage(ContentPage):
    type: str = "property-list"
    title: str = ""
    properties: list[PropertyCard] = Field(default_factory=list)
    total_properties: int = 0
    pagination: Pagination
    filters: PropertyFilters = Field(default_factory=PropertyFilters)
    aggregated_stats: QuickStats = Field(default_factory=QuickStats)
    carousels: list[PropertyCarousel] = Field(default_factory=list)
    related_content: ListRelatedContent = Field(default_factory=ListRelatedContent)


class AgentSummary(CamelModel):
    id: str
    slug: str | None = None
    full_name: str
    photo_url: str | None = None
    phone: str | None = None
    whatsapp: str | None = None
    email: str | None = None
    is_main: bool = True


class PropertyAgent(CamelModel):
    main: AgentSummary | None = None
    cocaptors: list[AgentSummary] = Field(default_factory=list)
    properties_count: int = 0
    should_show_properties: bool = False


class SingleRelatedContent(CamelModel):
    similar_properties: list[PropertyCard] = Field(default_factory=list)
    articles: list[Any] = Field(default_factory=list)
    videos: list[Any] = Field(default_factory=list)
    faqs: list[RelatedFAQ] = Field(default_factory=list)
    testimonials: list[RelatedTestimonial] = Field(default_factory=list)
    agent_properties: list[PropertyCard] = Field(default_factory=list)


class SinglePropertyPage(ContentPage):
    type: str = "single-property"
    property: PropertyDetail | None = None
    agent: PropertyAgent = Field(default_factory=PropertyAgent)
    related_content: SingleRelatedContent = Field(default_factory=SingleRelatedContent)
    suggested_properties: list[PropertyCard] | None = None

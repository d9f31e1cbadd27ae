"""Homepage payload: hero, carousels, team and popular locations."""

from __future__ import annotations

from typing import Literal, Union

from pydantic import Field

from inmo_api.schemas.advisor import Advisor
from inmo_api.schemas.article import Article
from inmo_api.schemas.common import CamelModel, ContentPage
from inmo_api.schemas.property import PropertyCard, QuickStats
from inmo_api.schemas.testimonial import FAQItem, Testimonial


class HeroSection(CamelModel):
    type: Literal["hero"] = "hero"
    title: str
    tagline: str
    subtitle: str
    show_search: bool = True


class PropertyCarouselSection(CamelModel):
    type: Literal["property-carousel"] = "property-carousel"
    title: str
    properties: list[PropertyCard] = Field(default_factory=list)
    view_all_url: str


class TestimonialsSection(CamelModel):
    type: Literal["testimonials"] = "testimonials"
    title: str
    testimonials: list[Testimonial] = Field(default_factory=list)


class AdvisorsSection(CamelModel):
    type: Literal["advisors"] = "advisors"
    title: str
    advisors: list[Advisor] = Field(default_factory=list)


class FAQSection(CamelModel):
    type: Literal["faq"] = "faq"
    title: str
    faqs: list[FAQItem] = Field(default_factory=list)


HomepageSection = Union[
    HeroSection,
    PropertyCarouselSection,
    TestimonialsSection,
    AdvisorsSection,
    FAQSection,
]


class LocationHotItem(CamelModel):
    slug: str
    name: str
    url: str
    count: int = 0
    count_venta: int = 0
    count_alquiler: int = 0


class HotItems(CamelModel):
    cities: list[LocationHotItem] = Field(default_factory=list)
    sectors: list[LocationHotItem] = Field(default_factory=list)


class PropertyTypeStat(CamelModel):
    slug: str
    type: str
    count: int = 0
    count_venta: int = 0
    count_alquiler: int = 0
    url: str


class FeaturedTypeGroup(CamelModel):
    slug: str
    title: str
    subtitle: str
    properties: list[PropertyCard] = Field(default_factory=list)


class HomepageRelatedContent(CamelModel):
    articles: list[Article] = Field(default_factory=list)
    testimonials: list[Testimonial] = Field(default_factory=list)


class HomepagePage(ContentPage):
    type: str = "homepage"
    sections: list[HomepageSection] = Field(default_factory=list)
    hot_items: HotItems = Field(default_factory=HotItems)
    quick_stats: QuickStats = Field(default_factory=QuickStats)
    property_types: list[PropertyTypeStat] = Field(default_factory=list)
    featured_by_type: dict[str, FeaturedTypeGroup] = Field(default_factory=dict)
    related_content: HomepageRelatedContent = Field(
        default_factory=HomepageRelatedContent
    )

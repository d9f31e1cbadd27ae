"""Schemas for the locations directory and single-location pages."""

from __future__ import annotations

from pydantic import Field

from inmo_api.schemas.common import CamelModel, ContentPage, Pagination
from inmo_api.schemas.property import PropertyCard


class Location(CamelModel):
    slug: str
    name: str
    level: str = "ciudad"
    city: str | None = None
    count: int = 0
    count_venta: int = 0
    count_alquiler: int = 0
    icon: str = ""
    color: str = ""
    hero_image: str | None = None
    description: str = ""
    url: str
    listings_url: str = ""


class LocationCarousel(CamelModel):
    slug: str
    name: str
    title: str
    subtitle: str
    properties: list[PropertyCard] = Field(default_factory=list)
    view_all_url: str


class LocationStats(CamelModel):
    total_cities: int = 0
    total_sectors: int = 0
    total_properties: int = 0


class LocationsIntro(CamelModel):
    intro: str
    benefits: list[str] = Field(default_factory=list)
    cta: str


class LocationsMainPage(ContentPage):
    type: str = "locations-main"
    cities: list[Location] = Field(default_factory=list)
    sectors: list[Location] = Field(default_factory=list)
    featured_cities: list[Location] = Field(default_factory=list)
    featured_by_location: list[LocationCarousel] = Field(default_factory=list)
    stats: LocationStats = Field(default_factory=LocationStats)
    content: LocationsIntro


class LocationSinglePage(ContentPage):
    type: str = "locations-single"
    location: Location
    properties: list[PropertyCard] = Field(default_factory=list)
    sectors: list[Location] = Field(default_factory=list)
    pagination: Pagination
    suggested_locations: list[Location] | None = None

"""Schemas for the property-type directory and single-type pages."""

from __future__ import annotations

from pydantic import Field

from inmo_api.schemas.common import CamelModel, ContentPage, Pagination
from inmo_api.schemas.property import PropertyCard


class PropertyType(CamelModel):
    slug: str
    type: str
    name: str
    count: int = 0
    count_venta: int = 0
    count_alquiler: int = 0
    icon: str = ""
    color: str = ""
    description: str = ""
    url: str
    listings_url: str = ""


class PropertyTypeCarousel(CamelModel):
    slug: str
    name: str
    properties: list[PropertyCard] = Field(default_factory=list)
    view_all_url: str


class PropertyTypesMainPage(ContentPage):
    type: str = "property-types-main"
    property_types: list[PropertyType] = Field(default_factory=list)
    featured_types: list[PropertyType] = Field(default_factory=list)
    remaining_types: list[PropertyType] = Field(default_factory=list)
    featured_by_type: list[PropertyTypeCarousel] = Field(default_factory=list)
    total_properties: int = 0


class PropertyTypeSinglePage(ContentPage):
    type: str = "property-types-single"
    property_type: PropertyType
    properties: list[PropertyCard] = Field(default_factory=list)
    pagination: Pagination
    suggested_types: list[PropertyType] | None = None

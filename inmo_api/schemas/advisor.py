"""Advisor (real-estate agent) cards and pages."""

from __future__ import annotations

from pydantic import Field

from inmo_api.schemas.common import CamelModel, ContentPage, Pagination
from inmo_api.schemas.property import PropertyCard
from inmo_api.schemas.testimonial import Testimonial


class AdvisorStats(CamelModel):
    properties_count: int = 0
    total_sales: int = 0
    years_experience: int = 0
    client_satisfaction: float = 4.8


class SocialLinks(CamelModel):
    instagram: str | None = None
    facebook: str | None = None
    linkedin: str | None = None
    youtube: str | None = None
    tiktok: str | None = None


class Advisor(CamelModel):
    id: str
    slug: str
    code: str | None = None
    name: str
    first_name: str | None = None
    last_name: str | None = None
    avatar: str | None = None
    position: str
    bio: str = ""
    email: str | None = None
    phone: str | None = None
    whatsapp: str | None = None
    specialties: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=lambda: ["Español"])
    stats: AdvisorStats = Field(default_factory=AdvisorStats)
    social: SocialLinks = Field(default_factory=SocialLinks)
    featured: bool = False
    url: str


class AdvisorsAggregate(CamelModel):
    total_advisors: int = 0
    total_experience: int = 0
    total_sales: int = 0
    average_satisfaction: float = 4.8


class AdvisorsListPage(ContentPage):
    type: str = "advisors-list"
    advisors: list[Advisor] = Field(default_factory=list)
    total_advisors: int = 0
    stats: AdvisorsAggregate = Field(default_factory=AdvisorsAggregate)
    pagination: Pagination


class AdvisorSinglePage(ContentPage):
    type: str = "advisor-single"
    advisor: Advisor
    properties: list[PropertyCard] = Field(default_factory=list)
    testimonials: list[Testimonial] = Field(default_factory=list)
    suggested_advisors: list[Advisor] | None = None

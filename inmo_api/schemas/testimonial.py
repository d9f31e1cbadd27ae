"""Testimonials, FAQs and their pages."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from inmo_api.schemas.common import CamelModel, ContentPage, Pagination


class TestimonialAgent(CamelModel):
    name: str = "Equipo CLIC"
    avatar: str = ""
    slug: str = ""
    position: str = "Asesor Inmobiliario"


class Testimonial(CamelModel):
    id: str
    slug: str
    title: str
    content: str = ""
    excerpt: str = ""
    full_testimonial: str = ""
    rating: int = 5
    client_name: str = "Cliente"
    client_avatar: str | None = None
    client_location: str | None = None
    client_verified: bool = False
    featured: bool = False
    published_at: datetime | None = None
    category: str
    url: str
    views: str = "0"
    read_time: str = "2 min"
    status: str = "approved"
    agent: TestimonialAgent = Field(default_factory=TestimonialAgent)


class TestimonialCategory(CamelModel):
    slug: str
    name: str
    description: str | None = None
    url: str | None = None
    count: int | None = None


class TestimonialStats(CamelModel):
    total_testimonials: int = 0
    average_rating: float = 5.0
    total_categories: int = 0
    verified_clients: int = 0


class TestimonialsMainPage(ContentPage):
    type: str = "testimonials-main"
    featured_testimonials: list[Testimonial] = Field(default_factory=list)
    recent_testimonials: list[Testimonial] = Field(default_factory=list)
    categories: list[TestimonialCategory] = Field(default_factory=list)
    stats: TestimonialStats = Field(default_factory=TestimonialStats)
    pagination: Pagination


class TestimonialsCategoryPage(ContentPage):
    type: str = "testimonials-category"
    category: TestimonialCategory
    testimonials: list[Testimonial] = Field(default_factory=list)
    pagination: Pagination
    suggested_categories: list[TestimonialCategory] | None = None


class TestimonialSinglePage(ContentPage):
    type: str = "testimonials-single"
    testimonial: Testimonial
    category: TestimonialCategory
    related_testimonials: list[Testimonial] = Field(default_factory=list)
    suggested_testimonials: list[Testimonial] | None = None


class FAQItem(CamelModel):
    id: str
    question: str
    answer: str
    category: str = "general"
    order: int = 0


class FAQGroup(CamelModel):
    category: str
    items: list[FAQItem] = Field(default_factory=list)


class FAQsPage(ContentPage):
    type: str = "faqs"
    faqs: list[FAQItem] = Field(default_factory=list)
    grouped_faqs: list[FAQGroup] = Field(default_factory=list)

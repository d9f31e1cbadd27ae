"""FastAPI dependency wiring for the content, proposal and lead services.

Factories only resolve infrastructure (database session + cache) and hand the
repositories to the service constructors, so the service modules stay free of
web-layer imports.
"""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inmo_api.cache import CacheClient, get_cache_client
from inmo_api.db.connection import get_db, get_session_factory
from inmo_api.db.repositories import (
    AdvisorRepository,
    ArticleRepository,
    FAQRepository,
    LeadRepository,
    PropertyRepository,
    ProposalRepository,
    TenantRepository,
    TestimonialRepository,
    VideoRepository,
)
from inmo_api.services.advisor_service import AdvisorService
from inmo_api.services.article_service import ArticleService
from inmo_api.services.contact_service import ContactService
from inmo_api.services.homepage_service import HomepageService
from inmo_api.services.lead_service import LeadService
from inmo_api.services.location_service import LocationService
from inmo_api.services.property_service import PropertyService
from inmo_api.services.property_type_service import PropertyTypeService
from inmo_api.services.proposal_service import ProposalService
from inmo_api.services.tenant_service import TenantService
from inmo_api.services.testimonial_service import TestimonialService
from inmo_api.services.video_service import VideoService


def get_tenant_service(
    session: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache_client),
) -> TenantService:
    return TenantService(TenantRepository(session), cache=cache)


def get_article_service(session: AsyncSession = Depends(get_db)) -> ArticleService:
    return ArticleService(ArticleRepository(session))


def get_video_service(session: AsyncSession = Depends(get_db)) -> VideoService:
    return VideoService(VideoRepository(session))


def get_property_service(session: AsyncSession = Depends(get_db)) -> PropertyService:
    """Listings plus the FAQ, testimonial and agent lookups a detail page needs."""

    return PropertyService(
        PropertyRepository(session),
        faqs=FAQRepository(session),
        testimonials=TestimonialRepository(session),
        advisors=AdvisorRepository(session),
    )


def get_advisor_service(
    session: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache_client),
) -> AdvisorService:
    return AdvisorService(
        AdvisorRepository(session),
        properties=PropertyRepository(session),
        testimonials=TestimonialRepository(session),
        cache=cache,
    )


def get_testimonial_service(
    session: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache_client),
) -> TestimonialService:
    return TestimonialService(
        TestimonialRepository(session), FAQRepository(session), cache=cache
    )


def get_homepage_service(
    cache: CacheClient = Depends(get_cache_client),
) -> HomepageService:
    """Homepage reads run concurrently, each on its own session."""

    return HomepageService(get_session_factory(), cache=cache)


def get_contact_service(
    session: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache_client),
) -> ContactService:
    return ContactService(AdvisorRepository(session), cache=cache)


def get_location_service(
    session: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache_client),
) -> LocationService:
    return LocationService(PropertyRepository(session), cache=cache)


def get_property_type_service(
    session: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache_client),
) -> PropertyTypeService:
    return PropertyTypeService(PropertyRepository(session), cache=cache)


def get_proposal_service(session: AsyncSession = Depends(get_db)) -> ProposalService:
    return ProposalService(ProposalRepository(session))


def get_lead_service(session: AsyncSession = Depends(get_db)) -> LeadService:
    return LeadService(LeadRepository(session))


__all__ = [
    "get_advisor_service",
    "get_article_service",
    "get_contact_service",
    "get_homepage_service",
    "get_lead_service",
    "get_location_service",
    "get_property_service",
    "get_property_type_service",
    "get_proposal_service",
    "get_tenant_service",
    "get_testimonial_service",
    "get_video_service",
]

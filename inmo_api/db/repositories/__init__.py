"""Repository layer: SQLAlchemy queries returning ORM rows to the services."""

from inmo_api.db.repositories.advisor_repository import AdvisorRepository
from inmo_api.db.repositories.article_repository import ArticleRepository
from inmo_api.db.repositories.base import BaseRepository
from inmo_api.db.repositories.lead_repository import LeadRepository
from inmo_api.db.repositories.property_repository import (
    ListingFilters,
    PropertyRepository,
)
from inmo_api.db.repositories.proposal_repository import ProposalRepository
from inmo_api.db.repositories.tenant_repository import TenantRepository
from inmo_api.db.repositories.testimonial_repository import (
    FAQRepository,
    TestimonialRepository,
)
from inmo_api.db.repositories.video_repository import VideoRepository

__all__ = [
    "AdvisorRepository",
    "ArticleRepository",
    "BaseRepository",
    "FAQRepository",
    "LeadRepository",
    "ListingFilters",
    "PropertyRepository",
    "ProposalRepository",
    "TenantRepository",
    "TestimonialRepository",
    "VideoRepository",
]

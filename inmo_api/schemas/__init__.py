"""Pydantic schemas for API responses."""

from inmo_api.schemas.advisor import (  # noqa: F401
    Advisor,
    AdvisorSinglePage,
    AdvisorsListPage,
)
from inmo_api.schemas.article import (  # noqa: F401
    Article,
    ArticleCategory,
    ArticlesCategoryPage,
    ArticlesMainPage,
    ArticleSinglePage,
)
from inmo_api.schemas.common import (  # noqa: F401
    ContentPage,
    Found,
    NotFoundWithFallback,
    PageContext,
    Pagination,
    SEOData,
    TenantConfig,
    render_page,
)
from inmo_api.schemas.contact import ContactPage  # noqa: F401
from inmo_api.schemas.homepage import HomepagePage  # noqa: F401
from inmo_api.schemas.location import (  # noqa: F401
    LocationSinglePage,
    LocationsMainPage,
)
from inmo_api.schemas.property import (  # noqa: F401
    PropertyCard,
    PropertyDetail,
    PropertyListPage,
    SinglePropertyPage,
)
from inmo_api.schemas.property_type import (  # noqa: F401
    PropertyTypeSinglePage,
    PropertyTypesMainPage,
)
from inmo_api.schemas.testimonial import (  # noqa: F401
    FAQsPage,
    Testimonial,
    TestimonialSinglePage,
    TestimonialsCategoryPage,
    TestimonialsMainPage,
)
from inmo_api.schemas.video import (  # noqa: F401
    Video,
    VideoCategory,
    VideosCategoryPage,
    VideoSinglePage,
    VideosMainPage,
)

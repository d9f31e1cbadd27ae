"""Building blocks shared by every content page payload."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SUPPORTED_LANGUAGES = ("es", "en", "fr")


class CamelModel(BaseModel):
    """Base model whose JSON keys are camelCase (``hasNext``, ``notFound``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Pagination(CamelModel):
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=1)
    has_next: bool
    has_prev: bool


class Breadcrumb(BaseModel):
    name: str
    url: str


class SEOData(BaseModel):
    """SEO block consumed verbatim by the rendering layer (snake_case keys)."""

    title: str
    description: str
    keywords: str | None = None
    canonical_url: str | None = None
    og_image: str | None = None
    hreflang: dict[str, str] | None = None
    structured_data: dict[str, Any] = Field(default_factory=dict)


class TenantConfig(BaseModel):
    """Resolved tenant with the pieces of ``configuracion`` handlers read."""

    id: str
    slug: str
    name: str
    domain: str | None = None
    branding: dict[str, Any] = Field(default_factory=dict)
    contact: dict[str, Any] = Field(default_factory=dict)
    business_info: dict[str, Any] = Field(default_factory=dict)


class PageContext(BaseModel):
    """Per-request inputs every content handler needs."""

    tenant: TenantConfig
    language: str = "es"
    tracking: str = ""


class ContentPage(CamelModel):
    """Common envelope for content pages."""

    type: str
    language: str
    tenant: TenantConfig
    seo: SEOData
    tracking_string: str = ""
    breadcrumbs: list[Breadcrumb] = Field(default_factory=list)
    not_found: bool = False
    not_found_message: str | None = None


PageT = TypeVar("PageT", bound=ContentPage)
FallbackT = TypeVar("FallbackT", bound=ContentPage)


@dataclass(frozen=True)
class Found(Generic[PageT]):
    """The requested entity exists; ``page`` is the regular payload."""

    page: PageT


@dataclass(frozen=True)
class NotFoundWithFallback(Generic[FallbackT]):
    """The entity is missing; ``fallback`` carries substitute content."""

    fallback: FallbackT


PageResult = Found[PageT] | NotFoundWithFallback[FallbackT]


def render_page(result: Found[Any] | NotFoundWithFallback[Any]) -> dict[str, Any]:
    """Serialise whichever variant a content service produced."""

    if isinstance(result, Found):
        page = result.page
    else:
        page = result.fallback
    return page.model_dump(by_alias=True, mode="json")


__all__ = [
    "Breadcrumb",
    "CamelModel",
    "ContentPage",
    "Found",
    "NotFoundWithFallback",
    "PageContext",
    "PageResult",
    "Pagination",
    "SEOData",
    "SUPPORTED_LANGUAGES",
    "TenantConfig",
    "render_page",
]

"""SEO metadata and breadcrumb builders for content pages."""

from __future__ import annotations

from typing import Any

from inmo_api.schemas.common import Breadcrumb, SEOData
from inmo_api.utils.locale import build_url, generate_hreflang_urls, pick

DEFAULT_SITE_NAME = "CLIC Inmobiliaria"
SCHEMA_CONTEXT = "https://schema.org"
MAX_DESCRIPTION_LENGTH = 160


def generate_seo(
    title: str,
    description: str,
    *,
    canonical_url: str | None = None,
    keywords: str | None = None,
    og_image: str | None = None,
    page_type: str = "website",
    site_name: str = DEFAULT_SITE_NAME,
    structured_data: dict[str, Any] | None = None,
) -> SEOData:
    """Build the SEO block; ``structured_data`` replaces the default WebPage."""

    if structured_data is None:
        structured_data = {
            "@context": SCHEMA_CONTEXT,
            "@type": "RealEstateListing" if page_type == "property" else "WebPage",
            "name": title,
            "description": description,
        }
        if canonical_url:
            structured_data["url"] = canonical_url
        if og_image:
            structured_data["image"] = og_image
        if site_name:
            structured_data["publisher"] = {"@type": "Organization", "name": site_name}

    return SEOData(
        title=title,
        description=(description or "")[:MAX_DESCRIPTION_LENGTH],
        keywords=keywords,
        canonical_url=canonical_url,
        og_image=og_image,
        hreflang=generate_hreflang_urls(canonical_url) if canonical_url else None,
        structured_data=structured_data,
    )


def home_crumb(language: str) -> Breadcrumb:
    return Breadcrumb(
        name=pick(language, "Inicio", "Home", "Accueil"),
        url=build_url("/", language),
    )


def breadcrumbs(language: str, *trail: tuple[str, str]) -> list[Breadcrumb]:
    """Home followed by ``(name, spanish_path)`` pairs translated to ``language``."""

    crumbs = [home_crumb(language)]
    for name, path in trail:
        crumbs.append(Breadcrumb(name=name, url=build_url(path, language)))
    return crumbs


def absolute_url(domain: str | None, path: str) -> str:
    """Prefix ``path`` with the tenant's public domain when one is configured."""

    if not domain:
        return path
    base = domain if domain.startswith("http") else f"https://{domain}"
    return f"{base.rstrip('/')}{path}"

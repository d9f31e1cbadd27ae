"""Cache policy for rendered content pages and favorites summaries.

Key builders, TTLs and the (de)serialisers used with
:func:`inmo_api.services.caching.cached` live here so the content services
only describe *what* they cache.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel

from inmo_api.cache import content_key, favorites_summary_key
from inmo_api.schemas.common import PageContext
from inmo_api.schemas.favorites import PropertyReactionSummary
from inmo_api.settings import get_settings

ModelT = TypeVar("ModelT", bound=BaseModel)

HOMEPAGE_FAMILY = "homepage"
ADVISORS_FAMILY = "advisors"
TESTIMONIALS_FAMILY = "testimonials"
FAQS_FAMILY = "faqs"
CONTACT_FAMILY = "contact"
LOCATIONS_FAMILY = "locations"
PROPERTY_TYPES_FAMILY = "property-types"

FAVORITES_SUMMARY_TTL: int = 120

PAGE_DESERIALIZE_ERROR = "Failed to deserialize cached page for key {key}: {error}"
SUMMARY_DESERIALIZE_ERROR = (
    "Failed to deserialize cached reaction summary for key {key}: {error}"
)


def content_ttl() -> int:
    return get_settings().content_cache_ttl


def page_cache_key(family: str, context: PageContext, *parts: object) -> str:
    """Key a page by tenant, language and tracking string plus any paging args."""

    return content_key(
        family, context.tenant.id, context.language, context.tracking, *parts
    )


def serialize_page(page: BaseModel) -> dict[str, Any]:
    return page.model_dump(mode="json")


def page_deserializer(model: type[ModelT]) -> Callable[[Any], ModelT]:
    def deserialize(payload: Any) -> ModelT:
        if not isinstance(payload, dict):
            raise TypeError(f"Expected cached {model.__name__} to be a mapping")
        return model.model_validate(payload)

    return deserialize


def summary_cache_key(list_id: str) -> str:
    return favorites_summary_key(list_id)


def serialize_summary(
    summary: dict[str, PropertyReactionSummary],
) -> dict[str, dict[str, Any]]:
    return {
        property_id: entry.model_dump() for property_id, entry in summary.items()
    }


def deserialize_summary(payload: Any) -> dict[str, PropertyReactionSummary]:
    if not isinstance(payload, dict):
        raise TypeError("Expected cached reaction summary to be a mapping")
    return {
        property_id: PropertyReactionSummary.model_validate(entry)
        for property_id, entry in payload.items()
    }


__all__ = [
    "ADVISORS_FAMILY",
    "CONTACT_FAMILY",
    "FAQS_FAMILY",
    "FAVORITES_SUMMARY_TTL",
    "HOMEPAGE_FAMILY",
    "LOCATIONS_FAMILY",
    "PAGE_DESERIALIZE_ERROR",
    "PROPERTY_TYPES_FAMILY",
    "SUMMARY_DESERIALIZE_ERROR",
    "TESTIMONIALS_FAMILY",
    "content_ttl",
    "deserialize_summary",
    "page_cache_key",
    "page_deserializer",
    "serialize_page",
    "serialize_summary",
    "summary_cache_key",
]

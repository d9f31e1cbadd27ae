"""Caching helpers dedicated to favorites orchestration."""

from __future__ import annotations

import logging

from inmo_api.cache import CacheClient, invalidate_favorites_summary
from inmo_api.schemas.favorites import PropertyReactionSummary
from inmo_api.services.content_cache import (
    FAVORITES_SUMMARY_TTL,
    SUMMARY_DESERIALIZE_ERROR,
    deserialize_summary,
    serialize_summary,
    summary_cache_key,
)

logger = logging.getLogger(__name__)


class FavoritesCache:
    """Wrap cache interactions for the per-list reaction summary.

    The summary is cached per list and dropped on every reaction or comment
    mutation.
    """

    def __init__(self, client: CacheClient) -> None:
        self._client = client

    async def read_summary(
        self, *, list_id: str
    ) -> dict[str, PropertyReactionSummary] | None:
        key = summary_cache_key(list_id)
        cached = await self._client.get_json(key)
        if cached is None:
            return None
        try:
            return deserialize_summary(cached)
        except (TypeError, ValueError) as exc:
            logger.warning(SUMMARY_DESERIALIZE_ERROR.format(key=key, error=exc))
            await self.invalidate(list_id=list_id)
            return None

    async def write_summary(
        self, *, list_id: str, summary: dict[str, PropertyReactionSummary]
    ) -> None:
        await self._client.set_json(
            summary_cache_key(list_id),
            serialize_summary(summary),
            ttl=FAVORITES_SUMMARY_TTL,
        )

    async def invalidate(self, *, list_id: str) -> None:
        await invalidate_favorites_summary(self._client, list_id)

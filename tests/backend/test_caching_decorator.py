"""Tests for the two-tier ``cached`` service decorator."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from inmo_api.cache import local_cache_get
from inmo_api.services.caching import CacheableService, cached

from tests.backend.support.memory_cache import MemoryCache


class CountingService(CacheableService):
    def __init__(self, cache: MemoryCache | None = None) -> None:
        super().__init__(cache=cache)
        self.calls = 0

    @cached(
        lambda _self, slug, *, skip=False: None if skip else f"demo:{slug}",
        ttl=lambda: 45,
        serializer=lambda value: {"slug": value},
        deserializer=lambda payload: payload["slug"],
        deserialize_error_message="Bad payload for {key}: {error}",
    )
    async def load(self, slug: str, *, skip: bool = False) -> str | None:
        self.calls += 1
        return None if slug == "missing" else slug.upper()


@pytest.mark.asyncio
async def test_second_call_is_served_from_cache(memory_cache: MemoryCache) -> None:
    service = CountingService(memory_cache)

    assert await service.load("piantini") == "PIANTINI"
    assert await service.load("piantini") == "PIANTINI"

    assert service.calls == 1
    assert memory_cache.store["demo:piantini"] == {"slug": "PIANTINI"}
    assert memory_cache.ttls["demo:piantini"] == 45


@pytest.mark.asyncio
async def test_local_cache_covers_a_missing_redis() -> None:
    first = CountingService()
    second = CountingService()

    await first.load("naco")
    assert await second.load("naco") == "NACO"

    assert second.calls == 0
    assert await local_cache_get("demo:naco") == {"slug": "NACO"}


@pytest.mark.asyncio
async def test_none_key_and_none_result_are_not_cached(
    memory_cache: MemoryCache,
) -> None:
    service = CountingService(memory_cache)

    await service.load("naco", skip=True)
    await service.load("naco", skip=True)
    await service.load("missing")
    await service.load("missing")

    assert service.calls == 4
    assert memory_cache.store == {}


@pytest.mark.asyncio
async def test_undecodable_payload_falls_through(
    memory_cache: MemoryCache, caplog: pytest.LogCaptureFixture
) -> None:
    class BrokenPayload(dict[str, Any]):
        def __getitem__(self, key: str) -> Any:
            raise ValueError("corrupt")

    memory_cache.store["demo:naco"] = BrokenPayload()
    service = CountingService(memory_cache)

    with caplog.at_level(logging.WARNING):
        assert await service.load("naco") == "NACO"

    assert service.calls == 1
    assert "Bad payload for demo:naco: corrupt" in caplog.messages

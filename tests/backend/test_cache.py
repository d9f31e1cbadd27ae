"""Unit tests for the Redis cache facade, key builders and invalidation."""

from __future__ import annotations

import fnmatch
import json
from collections.abc import AsyncIterator
from unittest.mock import AsyncMock, MagicMock

import pytest

import inmo_api.cache as cache
from inmo_api.cache import (
    CacheClient,
    content_key,
    content_prefix,
    favorites_summary_key,
    invalidate_favorites_summary,
    invalidate_tenant_content,
    local_cache_get,
    local_cache_set,
    tenant_domain_key,
)


class InMemoryRedis:
    """Lightweight async Redis double used for cache client tests."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}
        self._ttl: dict[str, int | None] = {}

    async def get(self, key: str) -> str | None:
        return self._store.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> None:
        self._store[key] = value
        self._ttl[key] = ex

    async def delete(self, *keys: str) -> None:
        for key in keys:
            self._store.pop(key, None)
            self._ttl.pop(key, None)

    async def scan_iter(self, match: str) -> AsyncIterator[str]:
        for key in list(self._store.keys()):
            if fnmatch.fnmatch(key, match):
                yield key


@pytest.fixture
def _reset_redis_state(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cache, "_redis_client", None)
    monkeypatch.setattr(cache, "_redis_disabled", False)


@pytest.mark.asyncio
async def test_cache_client_round_trip() -> None:
    """CacheClient should round-trip JSON payloads and honour TTL settings."""

    fake_redis = InMemoryRedis()
    client = CacheClient(fake_redis)

    await client.set_json("demo", {"value": 42}, ttl=120)
    assert json.loads(fake_redis._store["demo"]) == {"value": 42}
    assert fake_redis._ttl["demo"] == 120
    assert await client.get_json("demo") == {"value": 42}

    await client.set_json("default-ttl", [1])
    assert fake_redis._ttl["default-ttl"] == cache._DEFAULT_TTL_SECONDS

    await client.delete("demo")
    assert await client.get_json("demo") is None


@pytest.mark.asyncio
async def test_undecodable_payload_is_a_miss() -> None:
    fake_redis = InMemoryRedis()
    fake_redis._store["broken"] = "{not json"

    assert await CacheClient(fake_redis).get_json("broken") is None


@pytest.mark.asyncio
async def test_disabled_client_is_a_no_op() -> None:
    client = CacheClient(None)

    assert client.enabled is False
    await client.set_json("key", {"a": 1})
    await client.delete("key")
    await client.delete_pattern("*")
    assert await client.get_json("key") is None


@pytest.mark.asyncio
async def test_cache_handles_redis_connection_error() -> None:
    mock_redis = MagicMock()
    mock_redis.get = AsyncMock(side_effect=cache.RedisConnectionError("down"))
    mock_redis.set = AsyncMock(side_effect=cache.RedisTimeoutError("slow"))

    client = CacheClient(mock_redis)

    assert await client.get_json("key") is None
    await client.set_json("key", {"a": 1})


@pytest.mark.asyncio
async def test_cache_only_catches_redis_errors() -> None:
    mock_redis = MagicMock()
    mock_redis.get = AsyncMock(side_effect=ValueError("Not a Redis error"))

    with pytest.raises(ValueError):
        await CacheClient(mock_redis).get_json("key")


@pytest.mark.asyncio
async def test_delete_pattern_clears_matching_keys() -> None:
    fake_redis = InMemoryRedis()
    client = CacheClient(fake_redis)
    await client.set_json("content:homepage:t-1:aaa", {"value": 1})
    await client.set_json("content:faqs:t-1:bbb", {"value": 2})
    await client.set_json("content:homepage:t-2:ccc", {"value": 3})

    await client.delete_pattern("content:*:t-1:*")

    assert list(fake_redis._store) == ["content:homepage:t-2:ccc"]


def test_key_builders() -> None:
    key = content_key("homepage", "t-1", "es", "", None)

    assert key.startswith(content_prefix("homepage", "t-1"))
    assert key == content_key("homepage", "t-1", "es", "", None)
    assert key != content_key("homepage", "t-1", "en", "", None)
    assert content_prefix("faqs") == "content:faqs:"
    assert favorites_summary_key("abc") == "favorites:summary:abc"
    assert tenant_domain_key(" CLIC.do ") == "tenants:domain:clic.do"


@pytest.mark.asyncio
async def test_local_cache_drops_expired_entries() -> None:
    await local_cache_set("short", "value", ttl=10)
    assert await local_cache_get("short") == "value"

    cache._local_cache["short"] = (0.0, "value")

    assert await local_cache_get("short") is None
    assert "short" not in cache._local_cache


@pytest.mark.asyncio
async def test_invalidate_tenant_content_purges_both_tiers() -> None:
    fake_redis = InMemoryRedis()
    client = CacheClient(fake_redis)
    mine = content_key("homepage", "t-1", "es")
    other = content_key("homepage", "t-2", "es")
    for key in (mine, other):
        await client.set_json(key, {"ok": True})
        await local_cache_set(key, {"ok": True})

    await invalidate_tenant_content(client, "t-1")

    assert await client.get_json(mine) is None
    assert await local_cache_get(mine) is None
    assert await client.get_json(other) == {"ok": True}
    assert await local_cache_get(other) == {"ok": True}


@pytest.mark.asyncio
async def test_invalidate_favorites_summary() -> None:
    fake_redis = InMemoryRedis()
    client = CacheClient(fake_redis)
    key = favorites_summary_key("list-1")
    await client.set_json(key, {})
    await local_cache_set(key, {})

    await invalidate_favorites_summary(client, "list-1")

    assert key not in fake_redis._store
    assert await local_cache_get(key) is None


@pytest.mark.asyncio
@pytest.mark.usefixtures("_reset_redis_state")
async def test_get_redis_disables_after_failed_ping(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    broken = MagicMock()
    broken.ping = AsyncMock(side_effect=cache.RedisConnectionError("refused"))
    broken.aclose = AsyncMock()
    from_url = MagicMock(return_value=broken)
    monkeypatch.setattr(cache.Redis, "from_url", from_url)

    assert await cache.get_redis() is None
    assert await cache.get_redis() is None

    from_url.assert_called_once()
    broken.aclose.assert_awaited_once()


@pytest.mark.asyncio
@pytest.mark.usefixtures("_reset_redis_state")
async def test_get_redis_reuses_connected_client(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    healthy = MagicMock()
    healthy.ping = AsyncMock(return_value=True)
    healthy.aclose = AsyncMock()
    monkeypatch.setattr(cache.Redis, "from_url", MagicMock(return_value=healthy))

    first = await cache.get_redis()
    second = await cache.get_redis()
    await cache.close_redis()

    assert first is healthy
    assert second is healthy
    healthy.aclose.assert_awaited_once()

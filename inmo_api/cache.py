from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Sequence
from hashlib import sha256
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from inmo_api.settings import get_settings

logger = logging.getLogger(__name__)

_DEFAULT_TTL_SECONDS = 600
_CONTENT_PREFIX = "content"
_FAVORITES_SUMMARY_PREFIX = "favorites:summary"
_TENANT_PREFIX = "tenants:domain"

_LOCAL_CACHE_DEFAULT_TTL = 300
_local_cache: dict[str, tuple[float, Any]] = {}
_local_cache_lock = asyncio.Lock()

_redis_client: Redis | None = None
_client_lock = asyncio.Lock()
_redis_disabled = False

_CONNECTION_ERRORS = (RedisConnectionError, RedisTimeoutError, OSError)


async def local_cache_get(key: str) -> Any | None:
    """Return a value from the in-process fallback cache when it remains valid."""

    async with _local_cache_lock:
        cached_entry = _local_cache.get(key)
        if cached_entry is None:
            return None

        expires_at, value = cached_entry
        if expires_at < time.time():
            _local_cache.pop(key, None)
            return None
        return value


async def local_cache_set(key: str, value: Any, ttl: int | None = None) -> None:
    """Persist ``value`` in the in-process cache while respecting the supplied TTL."""

    ttl_seconds = ttl if ttl is not None and ttl > 0 else _LOCAL_CACHE_DEFAULT_TTL
    async with _local_cache_lock:
        _local_cache[key] = (time.time() + ttl_seconds, value)


async def local_cache_evict(
    *,
    keys: Sequence[str] | None = None,
    prefixes: Sequence[str] | None = None,
) -> None:
    """Remove cached entries matching explicit keys or whole key prefixes."""

    async with _local_cache_lock:
        for exact_key in keys or ():
            _local_cache.pop(exact_key, None)

        if prefixes:
            matching_keys = [
                existing_key
                for existing_key in _local_cache
                if any(existing_key.startswith(prefix) for prefix in prefixes)
            ]
            for matching_key in matching_keys:
                _local_cache.pop(matching_key, None)


async def local_cache_clear_all() -> None:
    """Remove every entry from the in-process cache (used between tests)."""

    async with _local_cache_lock:
        _local_cache.clear()


def _digest(*parts: object) -> str:
    signature = "|".join("" if part is None else str(part) for part in parts)
    return sha256(signature.encode("utf-8")).hexdigest()[:32]


def content_prefix(family: str, tenant_id: str | None = None) -> str:
    if tenant_id is None:
        return f"{_CONTENT_PREFIX}:{family}:"
    return f"{_CONTENT_PREFIX}:{family}:{tenant_id}:"


def content_key(family: str, tenant_id: str, *parts: object) -> str:
    """Key for a rendered content payload, e.g. ``content:homepage:<tenant>:<digest>``.

    ``parts`` carry language, tracking string and paging; they are hashed so
    arbitrary tracking values cannot produce unbounded key lengths.
    """
    return f"{content_prefix(family, tenant_id)}{_digest(*parts)}"


def favorites_summary_key(list_id: str) -> str:
    return f"{_FAVORITES_SUMMARY_PREFIX}:{list_id}"


def tenant_domain_key(domain: str) -> str:
    return f"{_TENANT_PREFIX}:{domain.strip().lower()}"


async def get_redis() -> Redis | None:
    """Get Redis client, returning None if connection fails."""
    global _redis_client, _redis_disabled

    if _redis_disabled:
        logger.debug("Redis connection disabled after previous failure; skipping attempt.")
        return None

    async with _client_lock:
        if _redis_client is not None:
            return _redis_client

        if _redis_disabled:
            return None

        client = Redis.from_url(
            get_settings().redis_url, decode_responses=True, encoding="utf-8"
        )
        try:
            await client.ping()
        except _CONNECTION_ERRORS as exc:
            logger.warning("Redis connection failed: %s. Caching will be disabled.", exc)
            await client.aclose()
            _redis_disabled = True
            return None

        _redis_client = client
        logger.info("Redis connection established successfully")
        return _redis_client


class CacheClient:
    """JSON facade over Redis that degrades to no-ops when Redis is unreachable."""

    def __init__(self, redis: Redis | None) -> None:
        self._redis = redis

    @property
    def enabled(self) -> bool:
        return self._redis is not None

    async def get_json(self, key: str) -> Any:
        if self._redis is None:
            return None
        try:
            payload = await self._redis.get(key)
        except _CONNECTION_ERRORS as exc:
            logger.debug("Redis get failed for key %s: %s", key, exc)
            return None
        if payload is None:
            return None
        try:
            return json.loads(payload)
        except json.JSONDecodeError:
            logger.debug("Discarding undecodable cache payload for key %s", key)
            return None

    async def set_json(self, key: str, value: Any, ttl: int | None = None) -> None:
        if self._redis is None:
            return
        encoded = json.dumps(value, default=str)
        try:
            await self._redis.set(key, encoded, ex=ttl or _DEFAULT_TTL_SECONDS)
        except _CONNECTION_ERRORS as exc:
            logger.debug("Redis set failed for key %s: %s", key, exc)

    async def delete(self, *keys: str) -> None:
        if self._redis is None or not keys:
            return
        try:
            await self._redis.delete(*keys)
        except _CONNECTION_ERRORS as exc:
            logger.debug("Redis delete failed: %s", exc)

    async def delete_pattern(self, pattern: str) -> None:
        if self._redis is None:
            return
        try:
            async for key in self._redis.scan_iter(match=pattern):
                await self._redis.delete(key)
        except _CONNECTION_ERRORS as exc:
            logger.debug("Redis delete_pattern failed for %s: %s", pattern, exc)


async def get_cache_client() -> CacheClient:
    redis = await get_redis()
    return CacheClient(redis)


async def close_redis() -> None:
    """Close the global Redis connection gracefully."""
    global _redis_client, _redis_disabled
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
    _redis_disabled = False


async def invalidate_favorites_summary(cache: CacheClient, list_id: str) -> None:
    """Drop the cached reaction summary of a shared favorites list."""

    key = favorites_summary_key(list_id)
    await cache.delete(key)
    await local_cache_evict(keys=[key])


async def invalidate_tenant_content(cache: CacheClient, tenant_id: str) -> None:
    """Purge every cached content payload of one tenant (all families)."""

    await cache.delete_pattern(f"{_CONTENT_PREFIX}:*:{tenant_id}:*")
    async with _local_cache_lock:
        stale = [
            key
            for key in _local_cache
            if key.startswith(f"{_CONTENT_PREFIX}:") and f":{tenant_id}:" in key
        ]
        for key in stale:
            _local_cache.pop(key, None)


__all__ = [
    "CacheClient",
    "close_redis",
    "content_key",
    "content_prefix",
    "favorites_summary_key",
    "get_cache_client",
    "get_redis",
    "invalidate_favorites_summary",
    "invalidate_tenant_content",
    "local_cache_clear_all",
    "local_cache_evict",
    "local_cache_get",
    "local_cache_set",
    "tenant_domain_key",
]

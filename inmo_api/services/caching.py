"""Common caching utilities shared across service layers.

The :func:`cached` decorator wraps read-mostly service methods with two-tier
caching: Redis when it is reachable, plus the in-process fallback cache kept
in :mod:`inmo_api.cache`. Serialisation hooks convert pydantic payloads to
JSON-friendly dictionaries and back.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, Concatenate, ParamSpec, TypeVar, cast

from inmo_api.cache import CacheClient, local_cache_get, local_cache_set

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

CacheKeyBuilder = Callable[Concatenate["CacheableService", P], str | None]
CacheSerializer = Callable[[T], Any]
CacheDeserializer = Callable[[Any], T]
DecoratedCallable = Callable[Concatenate["CacheableService", P], Awaitable[T]]


class CacheableService:
    """Base class that exposes helper methods for two-tier caching.

    Services inheriting from this mixin gain ``_cache_get`` and ``_cache_set``,
    which consult the distributed cache first and then the in-process one.
    """

    def __init__(self, cache: CacheClient | None = None) -> None:
        self._cache = cache

    async def _cache_get(self, key: str) -> Any:
        cached: Any | None = None
        if self._cache is not None:
            cached = await self._cache.get_json(key)
        if cached is not None:
            return cached
        return await local_cache_get(key)

    async def _cache_set(self, key: str, value: Any, ttl: int | None = None) -> None:
        if self._cache is not None:
            await self._cache.set_json(key, value, ttl=ttl)
        if value is not None:
            await local_cache_set(key, value, ttl=ttl)


def cached(
    key_builder: CacheKeyBuilder[P],
    *,
    ttl: int | Callable[[], int] | None = None,
    serializer: CacheSerializer[T] | None = None,
    deserializer: CacheDeserializer[T] | None = None,
    deserialize_error_message: str | None = None,
) -> Callable[[DecoratedCallable], DecoratedCallable]:
    """Decorate an async service method with transparent caching behaviour.

    Parameters
    ----------
    key_builder:
        Callable that returns the cache key for the invocation.  Returning
        ``None`` short-circuits caching for the call.
    ttl:
        Cache lifetime in seconds, or a zero-argument callable resolved on each
        write so settings changes apply without re-importing the service.
    serializer / deserializer:
        Hooks converting between Python objects and JSON-serialisable payloads.
    deserialize_error_message:
        Optional ``str.format`` template (``{key}``, ``{error}``) logged when a
        cached payload cannot be rehydrated; the call then falls through to the
        wrapped method.
    """

    def decorator(func: DecoratedCallable) -> DecoratedCallable:
        @wraps(func)
        async def wrapper(
            self: "CacheableService", *args: P.args, **kwargs: P.kwargs
        ) -> T:
            cache_key = key_builder(self, *args, **kwargs)
            if cache_key:
                cached_value = await self._cache_get(cache_key)
                if cached_value is not None:
                    if deserializer is None:
                        return cast(T, cached_value)
                    try:
                        return deserializer(cached_value)
                    except (TypeError, ValueError) as exc:
                        if deserialize_error_message:
                            logger.warning(
                                deserialize_error_message.format(
                                    key=cache_key, error=exc
                                )
                            )

            result = await func(self, *args, **kwargs)

            if cache_key and result is not None:
                payload: Any = result
                if serializer is not None:
                    payload = serializer(result)
                lifetime = ttl() if callable(ttl) else ttl
                await self._cache_set(cache_key, payload, ttl=lifetime)

            return result

        return wrapper

    return decorator


__all__ = ["CacheableService", "cached"]

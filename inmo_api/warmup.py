"""Startup warmup so the first request does not pay for cold connections.

Each step logs its own timing and degrades to a warning: a cold cache or an
unreachable database at boot should not stop the API from starting.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from inmo_api.db.connection import begin_engine_transaction

logger = logging.getLogger(__name__)


async def warmup_database(
    resolve_db_type: Callable[[], str] | None = None,
    resolve_engine: Callable[[], AsyncEngine] | None = None,
) -> None:
    """Open a pooled connection and run ``SELECT 1``."""
    try:
        if resolve_db_type is None:
            from inmo_api.db.connection import get_database_type as resolve_db_type

        if resolve_engine is None:
            from inmo_api.db.connection import get_engine as resolve_engine

        start = time.time()
        db_type = resolve_db_type()
        logger.debug("Database warmup target detected as %s", db_type)

        if db_type != "postgresql":
            logger.warning(
                "Database warmup expected PostgreSQL but detected '%s'; continuing",
                db_type,
            )

        engine = resolve_engine()
        async with begin_engine_transaction(engine) as conn:
            await conn.execute(text("SELECT 1"))

        elapsed = (time.time() - start) * 1000
        logger.info("Database connection warmed up (%.0fms)", elapsed)
    except Exception as exc:
        logger.warning("Database warmup failed: %s", exc)


async def warmup_redis() -> None:
    """Connect to Redis and ``PING``; skipped when Redis is unavailable."""
    from inmo_api.cache import get_redis

    try:
        start = time.time()
        redis = await get_redis()

        if redis is None:
            logger.info("Redis warmup skipped (connection unavailable)")
            return

        await redis.ping()

        elapsed = (time.time() - start) * 1000
        logger.info("Redis connection warmed up (%.0fms)", elapsed)
    except Exception as exc:
        logger.warning("Redis warmup failed: %s", exc)


async def warmup_tenant_lookup(default_slug: str | None = None) -> None:
    """Resolve the default tenant once so its mapper and query plan are primed."""
    from inmo_api.db.connection import get_async_session_context
    from inmo_api.db.repositories import TenantRepository
    from inmo_api.settings import get_settings

    try:
        start = time.time()
        slug = default_slug or get_settings().default_tenant_slug
        async with get_async_session_context() as session:
            tenant = await TenantRepository(session).find_default(slug)

        elapsed = (time.time() - start) * 1000
        if tenant is None:
            logger.warning("Tenant warmup found no active tenant (%.0fms)", elapsed)
        else:
            logger.info("Tenant warmup resolved %r (%.0fms)", tenant.slug, elapsed)
    except Exception as exc:
        logger.warning("Tenant warmup failed: %s", exc)


async def warmup_all(
    resolve_db_type: Callable[[], str] | None = None,
    resolve_engine: Callable[[], AsyncEngine] | None = None,
) -> None:
    """Run every warmup step in sequence and log the total time."""
    logger.info("=" * 60)
    logger.info("Warming up API connections...")
    logger.info("=" * 60)

    start = time.time()

    await warmup_database(
        resolve_db_type=resolve_db_type,
        resolve_engine=resolve_engine,
    )
    await warmup_redis()
    await warmup_tenant_lookup()

    total_elapsed = (time.time() - start) * 1000
    logger.info("=" * 60)
    logger.info("API warmup complete (%.0fms)", total_elapsed)
    logger.info("=" * 60)

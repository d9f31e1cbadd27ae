"""Shared backend test fixtures for asynchronous database access and seeded tenants."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from inmo_api import cache as cache_module
from inmo_api.db.models import Base, Tenant
from inmo_api.schemas.common import PageContext
from inmo_api.services.tenant_service import tenant_config_from_row
from inmo_api.settings import get_settings

from tests.backend.support.factories import make_tenant
from tests.backend.support.memory_cache import MemoryCache


@pytest.fixture(autouse=True)
def _reset_process_caches() -> Iterator[None]:
    """Keep the in-process page cache and settings from leaking across tests."""

    cache_module._local_cache.clear()
    get_settings.cache_clear()
    yield
    cache_module._local_cache.clear()
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """File-backed SQLite engine so concurrent sessions see the same tables."""

    pytest.importorskip("aiosqlite")
    db_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", future=True
    )
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db_engine
    await db_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Provide a SQLite session for integration-style tests."""

    async with session_factory() as db_session:
        yield db_session
        if db_session.in_transaction():
            await db_session.rollback()


@pytest.fixture
def memory_cache() -> MemoryCache:
    return MemoryCache()


@pytest_asyncio.fixture
async def tenant(session: AsyncSession) -> Tenant:
    row = await make_tenant(session)
    await session.commit()
    return row


@pytest.fixture
def context(tenant: Tenant) -> PageContext:
    return PageContext(tenant=tenant_config_from_row(tenant), language="es")

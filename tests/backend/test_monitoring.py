"""Tests for slow statement logging on the async engine."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from inmo_api.monitoring import setup_query_monitoring


@pytest_asyncio.fixture
async def bare_engine() -> AsyncIterator[AsyncEngine]:
    pytest.importorskip("aiosqlite")
    db_engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    yield db_engine
    await db_engine.dispose()


def _slow_query_messages(caplog: pytest.LogCaptureFixture) -> list[str]:
    return [
        record.getMessage()
        for record in caplog.records
        if record.levelno == logging.WARNING and "Slow query" in record.getMessage()
    ]


@pytest.mark.asyncio
async def test_statements_over_threshold_are_logged(
    bare_engine: AsyncEngine, caplog: pytest.LogCaptureFixture
) -> None:
    setup_query_monitoring(bare_engine, slow_query_threshold=0.0)

    async with bare_engine.connect() as conn:
        await conn.execute(text("SELECT 1"))

    assert any(m.endswith("SELECT 1") for m in _slow_query_messages(caplog))


@pytest.mark.asyncio
async def test_fast_statements_stay_quiet(
    bare_engine: AsyncEngine, caplog: pytest.LogCaptureFixture
) -> None:
    setup_query_monitoring(bare_engine, slow_query_threshold=60.0)

    async with bare_engine.connect() as conn:
        await conn.execute(text("SELECT 1"))

    assert _slow_query_messages(caplog) == []

"""Regression tests for the startup warmup routines."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

import inmo_api.warmup as warmup
from inmo_api.db.models import Tenant


class _DummyTransaction:
    """Async context manager standing in for ``engine.begin()``."""

    def __init__(self) -> None:
        self.connection: AsyncMock = AsyncMock()

    async def __aenter__(self) -> AsyncMock:
        return self.connection

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: Any,
    ) -> bool:
        return False


def _warnings(caplog: pytest.LogCaptureFixture) -> list[str]:
    return [
        record.getMessage()
        for record in caplog.records
        if record.levelno >= logging.WARNING
    ]


@pytest.mark.asyncio
async def test_warmup_database_postgresql_executes_ping(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    caplog.set_level(logging.INFO)
    dummy_txn = _DummyTransaction()
    sentinel_engine = object()
    captured_engines: list[object] = []

    def _capture_engine(engine: object) -> _DummyTransaction:
        captured_engines.append(engine)
        return dummy_txn

    monkeypatch.setattr(warmup, "begin_engine_transaction", _capture_engine)

    await warmup.warmup_database(
        resolve_db_type=lambda: "postgresql",
        resolve_engine=lambda: sentinel_engine,
    )

    assert captured_engines == [sentinel_engine]
    executed_statement = dummy_txn.connection.execute.await_args.args[0]
    assert str(executed_statement).strip().upper() == "SELECT 1"
    assert _warnings(caplog) == []


@pytest.mark.asyncio
async def test_warmup_database_warns_on_non_postgres(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    caplog.set_level(logging.INFO)
    dummy_txn = _DummyTransaction()
    monkeypatch.setattr(warmup, "begin_engine_transaction", lambda _: dummy_txn)

    await warmup.warmup_database(
        resolve_db_type=lambda: "sqlite", resolve_engine=lambda: object()
    )

    assert dummy_txn.connection.execute.await_count == 1
    assert any("expected PostgreSQL" in message for message in _warnings(caplog))


@pytest.mark.asyncio
async def test_warmup_database_failure_is_logged_not_raised(
    caplog: pytest.LogCaptureFixture,
) -> None:
    def _broken_engine() -> Any:
        raise ConnectionError("database offline")

    await warmup.warmup_database(
        resolve_db_type=lambda: "postgresql", resolve_engine=_broken_engine
    )

    assert _warnings(caplog) == ["Database warmup failed: database offline"]


@pytest.mark.asyncio
async def test_warmup_redis_skips_without_connection(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    caplog.set_level(logging.INFO)
    monkeypatch.setattr("inmo_api.cache.get_redis", AsyncMock(return_value=None))

    await warmup.warmup_redis()

    assert "Redis warmup skipped (connection unavailable)" in caplog.messages


@pytest.mark.asyncio
async def test_warmup_redis_pings(monkeypatch: pytest.MonkeyPatch) -> None:
    redis = AsyncMock()
    monkeypatch.setattr("inmo_api.cache.get_redis", AsyncMock(return_value=redis))

    await warmup.warmup_redis()

    redis.ping.assert_awaited_once()


@pytest.mark.asyncio
async def test_warmup_tenant_lookup_resolves_default(
    caplog: pytest.LogCaptureFixture,
    monkeypatch: pytest.MonkeyPatch,
    session_factory: async_sessionmaker[AsyncSession],
    tenant: Tenant,
) -> None:
    caplog.set_level(logging.INFO)

    @asynccontextmanager
    async def _session_context() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    monkeypatch.setattr(
        "inmo_api.db.connection.get_async_session_context", _session_context
    )

    await warmup.warmup_tenant_lookup("otro")

    assert any("Tenant warmup resolved 'clic'" in m for m in caplog.messages)
    assert _warnings(caplog) == []


@pytest.mark.asyncio
async def test_warmup_all_runs_every_step(monkeypatch: pytest.MonkeyPatch) -> None:
    steps: list[str] = []

    async def _database(**_: Any) -> None:
        steps.append("database")

    async def _redis() -> None:
        steps.append("redis")

    async def _tenant() -> None:
        steps.append("tenant")

    monkeypatch.setattr(warmup, "warmup_database", _database)
    monkeypatch.setattr(warmup, "warmup_redis", _redis)
    monkeypatch.setattr(warmup, "warmup_tenant_lookup", _tenant)

    await warmup.warmup_all()

    assert steps == ["database", "redis", "tenant"]

"""Helpers that make selected statements fail inside an otherwise working session."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.dml import Update


def fail_updates_to(
    monkeypatch: pytest.MonkeyPatch, session: AsyncSession, table_name: str
) -> None:
    """Raise ``OperationalError`` for every UPDATE issued against ``table_name``."""

    execute = session.execute

    async def execute_or_fail(statement, *args, **kwargs):
        if isinstance(statement, Update) and statement.table.name == table_name:
            raise OperationalError("UPDATE", {}, Exception("database is locked"))
        return await execute(statement, *args, **kwargs)

    monkeypatch.setattr(session, "execute", execute_or_fail)

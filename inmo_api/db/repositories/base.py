"""Base repository utilities shared across all repository implementations."""

from __future__ import annotations

from typing import Any, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

RowT = TypeVar("RowT")


class BaseRepository:
    """Base repository providing common functionality for all repositories."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _all(self, query: Select[tuple[RowT]]) -> list[RowT]:
        result = await self._session.execute(query)
        return list(result.scalars().unique().all())

    async def _first(self, query: Select[tuple[RowT]]) -> RowT | None:
        result = await self._session.execute(query.limit(1))
        return result.scalars().unique().first()

    async def _count(self, query: Select[Any]) -> int:
        """Count the rows ``query`` would return, ignoring its ordering."""

        count_query = select(func.count()).select_from(
            query.order_by(None).subquery()
        )
        result = await self._session.execute(count_query)
        return int(result.scalar_one() or 0)

"""Insert-only access to ``leads``."""

from __future__ import annotations

from typing import Any

from inmo_api.db.models import Lead

from .base import BaseRepository


class LeadRepository(BaseRepository):
    async def create(self, tenant_id: str, values: dict[str, Any]) -> Lead:
        """Insert one lead and flush so constraint violations surface here."""

        lead = Lead(tenant_id=tenant_id, **values)
        self._session.add(lead)
        await self._session.flush()
        return lead

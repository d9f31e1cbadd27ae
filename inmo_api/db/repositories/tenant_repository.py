"""Tenant lookups by public hostname."""

from __future__ import annotations

from sqlalchemy import case, or_, select

from inmo_api.db.models import Tenant

from .base import BaseRepository


class TenantRepository(BaseRepository):
    async def find_by_domain(self, domain: str) -> Tenant | None:
        """Match the custom domain exactly, as a suffix, or the tenant slug."""

        query = select(Tenant).where(
            Tenant.activo.is_(True),
            or_(
                Tenant.dominio_personalizado == domain,
                Tenant.dominio_personalizado.like(f"%{domain}"),
                Tenant.slug == domain,
            ),
        )
        return await self._first(query)

    async def find_default(self, preferred_slug: str) -> Tenant | None:
        """Return the preferred active tenant, else the newest active one."""

        query = (
            select(Tenant)
            .where(Tenant.activo.is_(True))
            .order_by(
                case((Tenant.slug == preferred_slug, 0), else_=1),
                Tenant.created_at.desc(),
            )
        )
        return await self._first(query)

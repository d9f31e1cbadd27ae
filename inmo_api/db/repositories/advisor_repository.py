"""Advisor profile queries (``perfiles_asesor`` joined with ``usuarios``)."""

from __future__ import annotations

from sqlalchemy import Select, select

from inmo_api.db.models import AdvisorProfile, User

from .base import BaseRepository


def active_profiles(tenant_id: str) -> Select[tuple[AdvisorProfile]]:
    return (
        select(AdvisorProfile)
        .join(User, AdvisorProfile.usuario_id == User.id)
        .where(
            AdvisorProfile.tenant_id == tenant_id,
            AdvisorProfile.activo.is_(True),
            User.activo.is_(True),
        )
    )


class AdvisorRepository(BaseRepository):
    async def list_advisors(
        self, tenant_id: str, *, limit: int = 50
    ) -> list[AdvisorProfile]:
        """Web-visible advisors: featured first, then manual order, then name."""

        query = (
            active_profiles(tenant_id)
            .where(AdvisorProfile.visible_en_web.is_(True))
            .order_by(
                AdvisorProfile.destacado.desc(),
                AdvisorProfile.orden.asc(),
                User.nombre.asc(),
            )
            .limit(limit)
        )
        return await self._all(query)

    async def list_team(
        self, tenant_id: str, *, limit: int = 6
    ) -> list[AdvisorProfile]:
        query = (
            active_profiles(tenant_id)
            .order_by(AdvisorProfile.orden.asc(), AdvisorProfile.created_at.asc())
            .limit(limit)
        )
        return await self._all(query)

    async def get_by_slug(self, tenant_id: str, slug: str) -> AdvisorProfile | None:
        return await self._first(
            active_profiles(tenant_id).where(AdvisorProfile.slug == slug)
        )

    async def get_for_user(self, tenant_id: str, user_id: str) -> AdvisorProfile | None:
        query = select(AdvisorProfile).where(
            AdvisorProfile.tenant_id == tenant_id,
            AdvisorProfile.usuario_id == user_id,
        )
        return await self._first(query)

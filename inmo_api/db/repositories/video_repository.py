"""Video library queries over ``videos`` and the ``video`` content categories."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import Select, case, func, select, update
from sqlalchemy.exc import SQLAlchemyError

from inmo_api.db.models import ContentCategory, Video

from .base import BaseRepository

logger = logging.getLogger(__name__)

VIDEO_CATEGORY_TYPE = "video"


def published_videos(tenant_id: str) -> Select[tuple[Video]]:
    return select(Video).where(
        Video.tenant_id == tenant_id, Video.publicado.is_(True)
    )


def _newest_first():
    return (
        case((Video.fecha_publicacion.is_(None), 1), else_=0),
        Video.fecha_publicacion.desc(),
    )


@dataclass(slots=True)
class VideoTotals:
    total_videos: int = 0
    total_views: int = 0
    featured_count: int = 0


class VideoRepository(BaseRepository):
    async def list_featured(self, tenant_id: str, *, limit: int = 7) -> list[Video]:
        """Featured videos in editorial order; the first one heads the page."""

        query = (
            published_videos(tenant_id)
            .where(Video.destacado.is_(True))
            .order_by(Video.orden.asc(), *_newest_first())
            .limit(limit)
        )
        return await self._all(query)

    async def list_recent(
        self,
        tenant_id: str,
        *,
        limit: int,
        offset: int = 0,
        category_id: str | None = None,
        uncategorized: bool = False,
    ) -> tuple[list[Video], int]:
        query = published_videos(tenant_id)
        if uncategorized:
            query = query.where(Video.categoria_id.is_(None))
        elif category_id is not None:
            query = query.where(Video.categoria_id == category_id)

        total = await self._count(query)
        rows = await self._all(
            query.order_by(Video.destacado.desc(), *_newest_first())
            .limit(limit)
            .offset(offset)
        )
        return rows, total

    async def get_by_slug(self, tenant_id: str, slug: str) -> Video | None:
        return await self._first(published_videos(tenant_id).where(Video.slug == slug))

    async def list_related(self, video: Video, *, limit: int = 6) -> list[Video]:
        same_category = (
            Video.categoria_id == video.categoria_id
            if video.categoria_id is not None
            else Video.categoria_id.is_(None)
        )
        query = (
            published_videos(video.tenant_id)
            .where(Video.id != video.id)
            .order_by(case((same_category, 0), else_=1), *_newest_first())
            .limit(limit)
        )
        return await self._all(query)

    async def list_categories(
        self, tenant_id: str
    ) -> list[tuple[ContentCategory, int]]:
        """Active video categories with their published-video counts."""

        video_count = (
            select(func.count(Video.id))
            .where(
                Video.categoria_id == ContentCategory.id,
                Video.tenant_id == tenant_id,
                Video.publicado.is_(True),
            )
            .correlate(ContentCategory)
            .scalar_subquery()
        )
        query = (
            select(ContentCategory, video_count.label("video_count"))
            .where(
                ContentCategory.tenant_id == tenant_id,
                ContentCategory.activa.is_(True),
                ContentCategory.tipo == VIDEO_CATEGORY_TYPE,
            )
            .order_by(ContentCategory.orden.asc(), ContentCategory.nombre.asc())
        )
        result = await self._session.execute(query)
        return [(category, int(count or 0)) for category, count in result.all()]

    async def get_category(self, tenant_id: str, slug: str) -> ContentCategory | None:
        query = select(ContentCategory).where(
            ContentCategory.tenant_id == tenant_id,
            ContentCategory.slug == slug,
            ContentCategory.activa.is_(True),
            ContentCategory.tipo == VIDEO_CATEGORY_TYPE,
        )
        return await self._first(query)

    async def count_uncategorized(self, tenant_id: str) -> int:
        return await self._count(
            published_videos(tenant_id).where(Video.categoria_id.is_(None))
        )

    async def totals(self, tenant_id: str) -> VideoTotals:
        base = published_videos(tenant_id).subquery()
        query = select(
            func.count(),
            func.coalesce(func.sum(base.c.vistas), 0),
            func.sum(case((base.c.destacado.is_(True), 1), else_=0)),
        ).select_from(base)
        total, views, featured = (await self._session.execute(query)).one()
        return VideoTotals(
            total_videos=int(total or 0),
            total_views=int(views or 0),
            featured_count=int(featured or 0),
        )

    async def increment_views(self, video_id: str) -> None:
        """Bump the view counter; a failure is logged and never propagated."""

        try:
            async with self._session.begin_nested():
                await self._session.execute(
                    update(Video)
                    .where(Video.id == video_id)
                    .values(vistas=func.coalesce(Video.vistas, 0) + 1)
                    .execution_options(synchronize_session=False)
                )
        except SQLAlchemyError as exc:
            logger.warning("Failed to increment views for video %s: %s", video_id, exc)

"""Published testimonials and FAQs."""

from __future__ import annotations

from sqlalchemy import Select, case, func, or_, select

from inmo_api.db.models import FAQ, Testimonial

from .base import BaseRepository


def published_testimonials(tenant_id: str) -> Select[tuple[Testimonial]]:
    return select(Testimonial).where(
        Testimonial.tenant_id == tenant_id,
        Testimonial.publicado.is_(True),
    )


class TestimonialRepository(BaseRepository):
    async def list_testimonials(
        self,
        tenant_id: str,
        *,
        limit: int = 10,
        offset: int = 0,
        category: str | None = None,
        featured_only: bool = False,
        advisor_profile_id: str | None = None,
        exclude_id: str | None = None,
    ) -> tuple[list[Testimonial], int]:
        """Featured first, newest next."""

        query = published_testimonials(tenant_id)
        if category is not None:
            query = query.where(Testimonial.categoria == category)
        if featured_only:
            query = query.where(Testimonial.destacado.is_(True))
        if advisor_profile_id is not None:
            query = query.where(Testimonial.perfil_asesor_id == advisor_profile_id)
        if exclude_id is not None:
            query = query.where(Testimonial.id != exclude_id)

        total = await self._count(query)
        rows = await self._all(
            query.order_by(Testimonial.destacado.desc(), Testimonial.fecha.desc())
            .limit(limit)
            .offset(offset)
        )
        return rows, total

    async def get_by_slug(self, tenant_id: str, slug: str) -> Testimonial | None:
        """Match the stored slug or the ``testimonio-<id prefix>`` fallback slug."""

        conditions = [Testimonial.slug == slug]
        prefix = "testimonio-"
        if slug.startswith(prefix) and len(slug) > len(prefix):
            conditions.append(Testimonial.id.startswith(slug[len(prefix):]))
        return await self._first(
            published_testimonials(tenant_id).where(or_(*conditions))
        )

    async def category_counts(self, tenant_id: str) -> dict[str, int]:
        query = (
            select(Testimonial.categoria, func.count())
            .where(
                Testimonial.tenant_id == tenant_id,
                Testimonial.publicado.is_(True),
                Testimonial.categoria.is_not(None),
            )
            .group_by(Testimonial.categoria)
        )
        result = await self._session.execute(query)
        return {category: int(count) for category, count in result.all()}

    async def rating_summary(self, tenant_id: str) -> tuple[int, float | None, int]:
        """Return ``(total, average rating, featured count)``."""

        query = select(
            func.count(Testimonial.id),
            func.avg(Testimonial.rating),
            func.sum(case((Testimonial.destacado.is_(True), 1), else_=0)),
        ).where(Testimonial.tenant_id == tenant_id, Testimonial.publicado.is_(True))
        total, average, featured = (await self._session.execute(query)).one()
        rating = float(average) if average is not None else None
        return int(total or 0), rating, int(featured or 0)


class FAQRepository(BaseRepository):
    async def list_faqs(self, tenant_id: str, *, limit: int = 10) -> list[FAQ]:
        query = (
            select(FAQ)
            .where(FAQ.tenant_id == tenant_id, FAQ.publicado.is_(True))
            .order_by(FAQ.orden.asc(), FAQ.destacada.desc())
            .limit(limit)
        )
        return await self._all(query)

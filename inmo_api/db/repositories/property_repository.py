"""Listing queries: searchable catalogue, featured rows, similar listings, stats."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any

from sqlalchemy import Select, and_, case, func, literal, or_, select
from sqlalchemy.orm import joinedload

from inmo_api.db.models import Property
from inmo_api.utils.dates import days_ago
from inmo_api.utils.text import slugify

from .base import BaseRepository

AVAILABLE_STATUS = "disponible"
# Single-property pages still resolve reserved listings.
DETAIL_STATUSES = ("disponible", "reservado")

OPERATION_SALE = "venta"
OPERATION_RENT = "alquiler"


@dataclass(slots=True)
class ListingFilters:
    """Normalized listing filters parsed from URL tags and query parameters."""

    operacion: str | None = None
    tipo: str | None = None
    ciudad: str | None = None
    sector: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    habitaciones: int | None = None
    banos: int | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in asdict(self).items()
            if value not in (None, "")
        }


def effective_price():
    """SQL expression for the price a listing is filtered and sorted by."""

    return func.coalesce(Property.precio_venta, Property.precio_alquiler, Property.precio)


def available_listings(tenant_id: str) -> Select[tuple[Property]]:
    return select(Property).where(
        Property.tenant_id == tenant_id,
        Property.activo.is_(True),
        Property.estado_propiedad == AVAILABLE_STATUS,
    )


def apply_filters(query: Select[Any], filters: ListingFilters) -> Select[Any]:
    if filters.operacion:
        query = query.where(Property.operacion == filters.operacion)
    if filters.tipo:
        query = query.where(Property.tipo == filters.tipo)
    if filters.ciudad:
        query = query.where(func.lower(Property.ciudad) == filters.ciudad.lower())
    if filters.sector:
        query = query.where(func.lower(Property.sector) == filters.sector.lower())
    if filters.min_price is not None:
        query = query.where(func.coalesce(effective_price(), 0) >= filters.min_price)
    if filters.max_price is not None:
        query = query.where(
            func.coalesce(effective_price(), 999_999_999) <= filters.max_price
        )
    if filters.habitaciones:
        query = query.where(
            func.coalesce(Property.habitaciones, 0) >= filters.habitaciones
        )
    if filters.banos:
        query = query.where(func.coalesce(Property.banos, 0) >= filters.banos)
    return query


@dataclass(slots=True)
class LocationCount:
    name: str
    slug: str
    count: int
    count_venta: int = 0
    count_alquiler: int = 0
    city: str | None = None


@dataclass(slots=True)
class TypeCount:
    tipo: str
    count: int
    count_venta: int = 0
    count_alquiler: int = 0


@dataclass(slots=True)
class ListingTotals:
    total: int = 0
    for_sale: int = 0
    for_rent: int = 0
    new_this_month: int = 0


def _operation_count(operation: str):
    return func.sum(case((Property.operacion == operation, 1), else_=0))


class PropertyRepository(BaseRepository):
    """Read access to ``propiedades`` scoped by tenant."""

    async def list_properties(
        self,
        tenant_id: str,
        *,
        filters: ListingFilters | None = None,
        limit: int,
        offset: int = 0,
    ) -> tuple[list[Property], int]:
        query = apply_filters(available_listings(tenant_id), filters or ListingFilters())
        total = await self._count(query)
        rows = await self._all(
            query.order_by(Property.destacada.desc(), Property.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return rows, total

    async def get_by_slug(self, tenant_id: str, slug: str) -> Property | None:
        query = select(Property).where(
            Property.tenant_id == tenant_id,
            Property.slug == slug,
            Property.estado_propiedad.in_(DETAIL_STATUSES),
        ).options(joinedload(Property.agente))
        return await self._first(query)

    async def list_featured(self, tenant_id: str, *, limit: int = 12) -> list[Property]:
        query = (
            available_listings(tenant_id)
            .where(Property.destacada.is_(True))
            .order_by(Property.created_at.desc())
            .limit(limit)
        )
        return await self._all(query)

    async def list_featured_by_type(
        self, tenant_id: str, tipo: str, *, limit: int = 6
    ) -> list[Property]:
        query = (
            available_listings(tenant_id)
            .where(Property.tipo == tipo)
            .order_by(Property.destacada.desc(), Property.created_at.desc())
            .limit(limit)
        )
        return await self._all(query)

    async def list_featured_by_location(
        self, tenant_id: str, ciudad: str, *, limit: int = 6
    ) -> list[Property]:
        query = (
            available_listings(tenant_id)
            .where(func.lower(Property.ciudad) == ciudad.lower())
            .order_by(Property.destacada.desc(), Property.created_at.desc())
            .limit(limit)
        )
        return await self._all(query)

    async def list_similar(self, listing: Property, *, limit: int = 6) -> list[Property]:
        """Same type, city or sector; sector matches first, then type matches."""

        sector = (listing.sector or "").lower()
        ciudad = (listing.ciudad or "").lower()
        tipo = listing.tipo
        same_type = Property.tipo == tipo if tipo is not None else literal(False)
        query = (
            available_listings(listing.tenant_id)
            .where(
                Property.id != listing.id,
                or_(
                    same_type,
                    func.lower(Property.ciudad) == ciudad,
                    func.lower(Property.sector) == sector,
                ),
            )
            .order_by(
                case((func.lower(Property.sector) == sector, 0), else_=1),
                case((same_type, 0), else_=1),
                Property.destacada.desc(),
            )
            .limit(limit)
        )
        return await self._all(query)

    async def list_by_advisor(
        self,
        tenant_id: str,
        *,
        profile_id: str,
        user_id: str,
        limit: int = 12,
    ) -> list[Property]:
        query = (
            available_listings(tenant_id)
            .where(
                or_(
                    Property.perfil_asesor_id == profile_id,
                    Property.captador_id == user_id,
                    Property.agente_id == user_id,
                )
            )
            .order_by(Property.destacada.desc(), Property.created_at.desc())
            .limit(limit)
        )
        return await self._all(query)

    async def count_by_advisors(
        self, tenant_id: str, advisors: Sequence[tuple[str, str]]
    ) -> dict[str, int]:
        """Active listing counts keyed by profile id for ``(profile_id, user_id)`` pairs."""

        counts: dict[str, int] = {}
        for profile_id, user_id in advisors:
            query = available_listings(tenant_id).where(
                or_(
                    Property.perfil_asesor_id == profile_id,
                    Property.captador_id == user_id,
                    Property.agente_id == user_id,
                )
            )
            counts[profile_id] = await self._count(query)
        return counts

    async def location_counts(
        self, tenant_id: str, *, level: str, limit: int
    ) -> list[LocationCount]:
        """Most populated cities (``level='ciudad'``) or sectors with per-operation counts."""

        column = Property.ciudad if level == "ciudad" else Property.sector
        group_columns = [column] if level == "ciudad" else [column, Property.ciudad]
        query = (
            select(
                *group_columns,
                func.count().label("total"),
                _operation_count(OPERATION_SALE).label("count_venta"),
                _operation_count(OPERATION_RENT).label("count_alquiler"),
            )
            .where(
                Property.tenant_id == tenant_id,
                Property.activo.is_(True),
                Property.estado_propiedad == AVAILABLE_STATUS,
                column.is_not(None),
                column != "",
            )
            .group_by(*group_columns)
            .order_by(func.count().desc())
            .limit(limit)
        )
        result = await self._session.execute(query)
        locations: list[LocationCount] = []
        for row in result.all():
            name = row[0]
            locations.append(
                LocationCount(
                    name=name,
                    slug=slugify(name),
                    count=int(row.total or 0),
                    count_venta=int(row.count_venta or 0),
                    count_alquiler=int(row.count_alquiler or 0),
                    city=row[1] if level != "ciudad" else None,
                )
            )
        return locations

    async def type_counts(self, tenant_id: str) -> list[TypeCount]:
        query = (
            select(
                Property.tipo,
                func.count().label("total"),
                _operation_count(OPERATION_SALE).label("count_venta"),
                _operation_count(OPERATION_RENT).label("count_alquiler"),
            )
            .where(
                Property.tenant_id == tenant_id,
                Property.activo.is_(True),
                Property.estado_propiedad == AVAILABLE_STATUS,
                Property.tipo.is_not(None),
                Property.tipo != "",
            )
            .group_by(Property.tipo)
            .order_by(func.count().desc())
        )
        result = await self._session.execute(query)
        return [
            TypeCount(
                tipo=row.tipo,
                count=int(row.total or 0),
                count_venta=int(row.count_venta or 0),
                count_alquiler=int(row.count_alquiler or 0),
            )
            for row in result.all()
        ]

    async def totals(self, tenant_id: str) -> ListingTotals:
        """Available, for-sale, for-rent and last-30-days listing counts."""

        available = Property.estado_propiedad == AVAILABLE_STATUS
        query = select(
            func.sum(case((available, 1), else_=0)).label("total"),
            func.sum(
                case((and_(available, Property.operacion == OPERATION_SALE), 1), else_=0)
            ).label("for_sale"),
            func.sum(
                case((and_(available, Property.operacion == OPERATION_RENT), 1), else_=0)
            ).label("for_rent"),
            func.sum(
                case((and_(available, Property.created_at > days_ago(30)), 1), else_=0)
            ).label("new_this_month"),
        ).where(Property.tenant_id == tenant_id, Property.activo.is_(True))
        row = (await self._session.execute(query)).one()
        return ListingTotals(
            total=int(row.total or 0),
            for_sale=int(row.for_sale or 0),
            for_rent=int(row.for_rent or 0),
            new_this_month=int(row.new_this_month or 0),
        )

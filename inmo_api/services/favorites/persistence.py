"""Database-oriented helpers for device favorites lists."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, or_, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from inmo_api.db.models import (
    DeviceFavorites,
    FavoriteReaction,
    FavoriteVisitor,
    Property,
)
from inmo_api.utils.dates import utcnow

PUBLIC_CODE_PREFIX = "CLIC"
COMMENT_TYPE = "comment"


def public_code_for(list_id: int) -> str:
    """Share code derived from the row's sequence id, e.g. ``CLIC-0423``."""

    return f"{PUBLIC_CODE_PREFIX}-{list_id:04d}"


class FavoritesPersistence:
    """Encapsulates SQLAlchemy operations required by the favorites domain."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_list(self, device_id: str) -> DeviceFavorites | None:
        result = await self._session.execute(
            select(DeviceFavorites).where(DeviceFavorites.device_id == device_id)
        )
        return result.scalar_one_or_none()

    async def create_list(
        self,
        device_id: str,
        *,
        property_ids: Sequence[str] = (),
        owner_name: str | None = None,
    ) -> tuple[DeviceFavorites, bool]:
        """Insert a list unless the device already has one.

        Two first-time requests from the same device can both miss the
        lookup; the unique ``device_id`` turns the second insert into a
        no-op and both callers get the same row back.  The boolean is
        ``True`` only for the caller whose insert landed.
        """

        now = utcnow()
        stmt = self._insert()(DeviceFavorites).values(
            device_id=device_id,
            property_ids=list(property_ids),
            owner_name=owner_name,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_nothing(index_elements=["device_id"])
        result = await self._session.execute(stmt)
        created = result.rowcount == 1

        favorites = (
            await self._session.execute(
                select(DeviceFavorites).where(DeviceFavorites.device_id == device_id)
            )
        ).scalar_one()
        if favorites.public_code is None:
            favorites.public_code = public_code_for(favorites.id)
            await self._session.flush()
        return favorites, created

    async def commit(self) -> None:
        await self._session.commit()

    def _insert(self):
        dialect = self._session.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql_insert
        return sqlite_insert

    async def save_property_ids(
        self, favorites: DeviceFavorites, property_ids: Sequence[str]
    ) -> DeviceFavorites:
        # Reassign a new list so the JSON column is flagged dirty.
        favorites.property_ids = list(property_ids)
        favorites.updated_at = utcnow()
        await self._session.flush()
        return favorites

    async def save_owner(
        self,
        favorites: DeviceFavorites,
        *,
        owner_email: str | None = None,
        owner_name: str | None = None,
    ) -> DeviceFavorites:
        if owner_email is not None:
            favorites.owner_email = owner_email
        if owner_name is not None:
            favorites.owner_name = owner_name
        favorites.updated_at = utcnow()
        await self._session.flush()
        return favorites

    async def find_by_email(self, email: str) -> DeviceFavorites | None:
        query = (
            select(DeviceFavorites)
            .where(DeviceFavorites.owner_email == email)
            .order_by(DeviceFavorites.updated_at.desc())
            .limit(1)
        )
        result = await self._session.execute(query)
        return result.scalars().first()

    async def find_by_public_code(self, code: str) -> DeviceFavorites | None:
        query = (
            select(DeviceFavorites)
            .where(DeviceFavorites.public_code == code)
            .order_by(DeviceFavorites.updated_at.desc())
            .limit(1)
        )
        result = await self._session.execute(query)
        return result.scalars().first()

    async def fetch_properties(self, identifiers: Sequence[str]) -> list[Property]:
        """Listings referenced by id or slug, newest first."""

        if not identifiers:
            return []
        query = (
            select(Property)
            .where(
                or_(Property.id.in_(identifiers), Property.slug.in_(identifiers))
            )
            .order_by(Property.created_at.desc())
        )
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def upsert_visitor(
        self, list_id: str, visitor_device_id: str, alias: str
    ) -> FavoriteVisitor:
        result = await self._session.execute(
            select(FavoriteVisitor).where(
                FavoriteVisitor.list_id == list_id,
                FavoriteVisitor.visitor_device_id == visitor_device_id,
            )
        )
        visitor = result.scalar_one_or_none()
        if visitor is None:
            visitor = FavoriteVisitor(
                list_id=list_id,
                visitor_device_id=visitor_device_id,
                visitor_alias=alias,
            )
            self._session.add(visitor)
        else:
            visitor.visitor_alias = alias
            visitor.last_seen = utcnow()
        await self._session.flush()
        return visitor

    async def list_visitors(self, list_id: str) -> list[FavoriteVisitor]:
        query = (
            select(FavoriteVisitor)
            .where(FavoriteVisitor.list_id == list_id)
            .order_by(FavoriteVisitor.joined_at.desc())
        )
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def replace_reaction(
        self,
        *,
        list_id: str,
        property_id: str,
        visitor_device_id: str,
        visitor_alias: str,
        reaction_type: str,
        opposite_type: str,
    ) -> FavoriteReaction:
        """Drop the opposite reaction and upsert ``reaction_type`` in one flush."""

        await self._session.execute(
            delete(FavoriteReaction).where(
                FavoriteReaction.list_id == list_id,
                FavoriteReaction.property_id == property_id,
                FavoriteReaction.visitor_device_id == visitor_device_id,
                FavoriteReaction.reaction_type == opposite_type,
            )
        )
        result = await self._session.execute(
            select(FavoriteReaction).where(
                FavoriteReaction.list_id == list_id,
                FavoriteReaction.property_id == property_id,
                FavoriteReaction.visitor_device_id == visitor_device_id,
                FavoriteReaction.reaction_type == reaction_type,
            )
        )
        reaction = result.scalar_one_or_none()
        if reaction is None:
            reaction = FavoriteReaction(
                list_id=list_id,
                property_id=property_id,
                visitor_device_id=visitor_device_id,
                visitor_alias=visitor_alias,
                reaction_type=reaction_type,
            )
            self._session.add(reaction)
        else:
            reaction.visitor_alias = visitor_alias
            reaction.created_at = utcnow()
        await self._session.flush()
        return reaction

    async def delete_reaction(
        self,
        *,
        list_id: str,
        property_id: str,
        visitor_device_id: str,
        reaction_type: str,
    ) -> bool:
        result = await self._session.execute(
            delete(FavoriteReaction).where(
                FavoriteReaction.list_id == list_id,
                FavoriteReaction.property_id == property_id,
                FavoriteReaction.visitor_device_id == visitor_device_id,
                FavoriteReaction.reaction_type == reaction_type,
            )
        )
        return bool(result.rowcount)

    async def add_comment(
        self,
        *,
        list_id: str,
        property_id: str,
        visitor_device_id: str,
        visitor_alias: str,
        comment_text: str,
    ) -> FavoriteReaction:
        comment = FavoriteReaction(
            list_id=list_id,
            property_id=property_id,
            visitor_device_id=visitor_device_id,
            visitor_alias=visitor_alias,
            reaction_type=COMMENT_TYPE,
            comment_text=comment_text,
        )
        self._session.add(comment)
        await self._session.flush()
        return comment

    async def delete_comment(
        self, comment_id: int, visitor_device_id: str
    ) -> str | None:
        """Delete a comment only when ``visitor_device_id`` wrote it.

        Returns the owning ``list_id`` of the deleted comment, ``None`` when
        nothing matched.
        """

        result = await self._session.execute(
            select(FavoriteReaction).where(
                FavoriteReaction.id == comment_id,
                FavoriteReaction.visitor_device_id == visitor_device_id,
                FavoriteReaction.reaction_type == COMMENT_TYPE,
            )
        )
        comment = result.scalar_one_or_none()
        if comment is None:
            return None
        list_id = comment.list_id
        await self._session.delete(comment)
        await self._session.flush()
        return list_id

    async def list_reactions(
        self, list_id: str, *, property_id: str | None = None
    ) -> list[FavoriteReaction]:
        query = select(FavoriteReaction).where(FavoriteReaction.list_id == list_id)
        if property_id is not None:
            query = query.where(FavoriteReaction.property_id == property_id)
        result = await self._session.execute(
            query.order_by(FavoriteReaction.created_at.desc())
        )
        return list(result.scalars().all())

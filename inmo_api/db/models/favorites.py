"""SQLAlchemy ORM models for device-scoped favorites lists.

A list belongs to whichever browser generated its ``device_id``; knowing the
device id (or the list's public code / linked email) is the only credential.
Visitors and reactions reference the owning list through ``list_id``, which
stores the owner's ``device_id`` rather than the integer primary key so shared
links keep working after the list is recovered on another device.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from inmo_api.utils.dates import utcnow

from . import Base

REACTION_TYPES = ("like", "dislike", "comment")


class DeviceFavorites(Base):
    """Favorites list owned by a single device."""

    __tablename__ = "device_favorites"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    device_id: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )
    public_code: Mapped[str | None] = mapped_column(
        String(32),
        nullable=True,
        unique=True,
        index=True,
        doc=(
            "Human-shareable code such as ``CLIC-0423``.  Derived from ``id``"
            " once the row is flushed and never reassigned afterwards."
        ),
    )
    owner_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    owner_email: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True
    )
    property_ids: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Property identifiers in insertion order; the last one is the newest.",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        index=True,
    )


class FavoriteVisitor(Base):
    """Someone who opened a shared list from another device."""

    __tablename__ = "favorite_visitors"
    __table_args__ = (
        UniqueConstraint(
            "list_id",
            "visitor_device_id",
            name="unique_visitor_per_list",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    list_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    visitor_device_id: Mapped[str] = mapped_column(
        String(255), nullable=False, index=True
    )
    visitor_alias: Mapped[str] = mapped_column(String(255), nullable=False)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    last_seen: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class FavoriteReaction(Base):
    """Like, dislike or comment left by a visitor on one property of a list."""

    __tablename__ = "favorite_reactions"
    __table_args__ = (
        # Comments repeat freely; likes and dislikes are one row per visitor.
        Index(
            "unique_like_dislike_per_visitor",
            "list_id",
            "property_id",
            "visitor_device_id",
            "reaction_type",
            unique=True,
            postgresql_where=text("reaction_type <> 'comment'"),
            sqlite_where=text("reaction_type <> 'comment'"),
        ),
        CheckConstraint(
            "reaction_type IN ('like', 'dislike', 'comment')",
            name="ck_favorite_reactions_type",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    list_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    property_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    visitor_device_id: Mapped[str] = mapped_column(
        String(255), nullable=False, index=True
    )
    visitor_alias: Mapped[str] = mapped_column(String(255), nullable=False)
    reaction_type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    comment_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

"""Pydantic schemas that power the favorites API surface.

Request bodies keep every field optional: missing identifiers are reported by
:class:`~inmo_api.services.favorites_service.FavoritesService` with the
envelope's Spanish messages instead of FastAPI's 422 payload.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from inmo_api.schemas.common import CamelModel


class FavoritesSyncRequest(BaseModel):
    device_id: str | None = None
    property_ids: list[str] | None = None
    owner_name: str | None = None


class FavoritePropertyRequest(BaseModel):
    """Payload for ``/favorites/add`` and ``/favorites/remove``."""

    device_id: str | None = None
    property_id: str | None = None


class VisitorRequest(BaseModel):
    list_id: str | None = None
    visitor_device_id: str | None = None
    alias: str | None = None


class ReactionRequest(BaseModel):
    list_id: str | None = None
    property_id: str | None = None
    visitor_device_id: str | None = None
    visitor_alias: str | None = None
    reaction_type: str | None = None


class CommentRequest(BaseModel):
    list_id: str | None = None
    property_id: str | None = None
    visitor_device_id: str | None = None
    visitor_alias: str | None = None
    comment_text: str | None = None


class LinkEmailRequest(BaseModel):
    device_id: str | None = None
    email: str | None = None
    owner_name: str | None = None


class TransferRequest(BaseModel):
    """Copy the favorites of ``from_device_id`` into ``to_device_id``."""

    from_device_id: str | None = None
    to_device_id: str | None = None


class FavoritesList(BaseModel):
    """Read model for a ``device_favorites`` row."""

    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    device_id: str
    public_code: str | None = None
    owner_name: str | None = None
    owner_email: str | None = None
    property_ids: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Visitor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    list_id: str
    visitor_device_id: str
    visitor_alias: str
    joined_at: datetime
    last_seen: datetime


class Reaction(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    list_id: str
    property_id: str
    visitor_device_id: str
    visitor_alias: str
    reaction_type: str
    comment_text: str | None = None
    created_at: datetime


class PropertyReactionSummary(BaseModel):
    """Aggregated reactions for one property of a shared list."""

    model_config = ConfigDict(populate_by_name=True)

    likes: int = 0
    dislikes: int = 0
    comments: int = 0
    liked_by: list[str] = Field(default_factory=list, alias="likedBy")
    disliked_by: list[str] = Field(default_factory=list, alias="dislikedBy")


class GroupedReactions(BaseModel):
    likes: list[Reaction] = Field(default_factory=list)
    dislikes: list[Reaction] = Field(default_factory=list)
    comments: list[Reaction] = Field(default_factory=list)


class FavoritesOverview(FavoritesList):
    """List plus its visitors and per-property reaction summary."""

    visitors: list[Visitor] = Field(default_factory=list)
    reactions: dict[str, PropertyReactionSummary] = Field(default_factory=dict)


class FavoritePropertyCard(CamelModel):
    id: str
    slug: str
    code: str | None = None
    title: str
    description: str | None = None
    type: str | None = None
    operation: str | None = None
    price: float | None = None
    currency: str = "USD"
    city: str | None = None
    sector: str | None = None
    province: str | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    parking: int | None = None
    built_area: float | None = None
    land_area: float | None = None
    main_image: str | None = None
    images: list[Any] = Field(default_factory=list)
    is_project: bool = False
    created_at: datetime | None = None
    location: str = ""
    url: str


class FavoritesDetails(BaseModel):
    device_id: str
    properties: list[FavoritePropertyCard] = Field(default_factory=list)


class TransferResult(BaseModel):
    source: FavoritesList
    destination: FavoritesList
    added_property_ids: list[str] = Field(default_factory=list)

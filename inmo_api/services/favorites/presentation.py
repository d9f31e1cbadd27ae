"""Pure conversions from favorites rows to API schemas."""

from __future__ import annotations

from collections.abc import Iterable

from inmo_api.db.models import (
    DeviceFavorites,
    FavoriteReaction,
    FavoriteVisitor,
    Property,
)
from inmo_api.schemas.favorites import (
    FavoritePropertyCard,
    FavoritesDetails,
    FavoritesList,
    FavoritesOverview,
    GroupedReactions,
    PropertyReactionSummary,
    Reaction,
    Visitor,
)
from inmo_api.utils.dates import as_utc


def favorite_location(sector: str | None, ciudad: str | None) -> str:
    """``"sector, ciudad"`` without dangling separators when one side is missing."""

    return ", ".join(part for part in (sector or "", ciudad or "") if part)


class FavoritesPresentation:
    """Builds schema objects consumed by the favorites routes."""

    def list_to_schema(self, favorites: DeviceFavorites) -> FavoritesList:
        return FavoritesList(
            id=favorites.id,
            device_id=favorites.device_id,
            public_code=favorites.public_code,
            owner_name=favorites.owner_name,
            owner_email=favorites.owner_email,
            property_ids=list(favorites.property_ids or []),
            created_at=as_utc(favorites.created_at),
            updated_at=as_utc(favorites.updated_at),
        )

    def visitor_to_schema(self, visitor: FavoriteVisitor) -> Visitor:
        return Visitor(
            id=visitor.id,
            list_id=visitor.list_id,
            visitor_device_id=visitor.visitor_device_id,
            visitor_alias=visitor.visitor_alias,
            joined_at=as_utc(visitor.joined_at),
            last_seen=as_utc(visitor.last_seen),
        )

    def reaction_to_schema(self, reaction: FavoriteReaction) -> Reaction:
        return Reaction(
            id=reaction.id,
            list_id=reaction.list_id,
            property_id=reaction.property_id,
            visitor_device_id=reaction.visitor_device_id,
            visitor_alias=reaction.visitor_alias,
            reaction_type=reaction.reaction_type,
            comment_text=reaction.comment_text,
            created_at=as_utc(reaction.created_at),
        )

    def summarize_reactions(
        self, reactions: Iterable[FavoriteReaction]
    ) -> dict[str, PropertyReactionSummary]:
        """Per-property counts plus the aliases of who liked or disliked it."""

        summary: dict[str, PropertyReactionSummary] = {}
        for reaction in reactions:
            entry = summary.setdefault(reaction.property_id, PropertyReactionSummary())
            if reaction.reaction_type == "like":
                entry.likes += 1
                entry.liked_by.append(reaction.visitor_alias)
            elif reaction.reaction_type == "dislike":
                entry.dislikes += 1
                entry.disliked_by.append(reaction.visitor_alias)
            elif reaction.reaction_type == "comment":
                entry.comments += 1
        return summary

    def group_reactions(self, reactions: Iterable[FavoriteReaction]) -> GroupedReactions:
        grouped = GroupedReactions()
        buckets = {
            "like": grouped.likes,
            "dislike": grouped.dislikes,
            "comment": grouped.comments,
        }
        for reaction in reactions:
            bucket = buckets.get(reaction.reaction_type)
            if bucket is not None:
                bucket.append(self.reaction_to_schema(reaction))
        return grouped

    def empty_overview(self, device_id: str) -> FavoritesOverview:
        return FavoritesOverview(device_id=device_id)

    def overview(
        self,
        favorites: DeviceFavorites,
        *,
        visitors: Iterable[FavoriteVisitor],
        summary: dict[str, PropertyReactionSummary],
    ) -> FavoritesOverview:
        base = self.list_to_schema(favorites)
        return FavoritesOverview(
            **base.model_dump(),
            visitors=[self.visitor_to_schema(visitor) for visitor in visitors],
            reactions=summary,
        )

    def property_card(self, listing: Property) -> FavoritePropertyCard:
        operation_slug = "alquilar" if listing.operacion == "alquiler" else "comprar"
        return FavoritePropertyCard(
            id=listing.id,
            slug=listing.slug,
            code=listing.codigo,
            title=listing.titulo,
            description=listing.short_description or listing.descripcion,
            type=listing.tipo,
            operation=listing.operacion,
            price=listing.precio_venta or listing.precio_alquiler or listing.precio,
            currency=listing.moneda or "USD",
            city=listing.ciudad,
            sector=listing.sector,
            province=listing.provincia,
            bedrooms=listing.habitaciones,
            bathrooms=listing.banos,
            parking=listing.estacionamientos,
            built_area=listing.m2_construccion,
            land_area=listing.m2_terreno,
            main_image=listing.imagen_principal,
            images=list(listing.imagenes or []),
            is_project=bool(listing.is_project),
            created_at=as_utc(listing.created_at),
            location=favorite_location(listing.sector, listing.ciudad),
            url=f"/{operation_slug}/{listing.slug}",
        )

    def details(
        self, device_id: str, listings: Iterable[Property]
    ) -> FavoritesDetails:
        return FavoritesDetails(
            device_id=device_id,
            properties=[self.property_card(listing) for listing in listings],
        )

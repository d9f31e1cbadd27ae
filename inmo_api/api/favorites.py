"""FastAPI router for device favorites lists and their shared-list feedback."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from inmo_api.api.envelope import success
from inmo_api.schemas.favorites import (
    CommentRequest,
    FavoritePropertyRequest,
    FavoritesSyncRequest,
    LinkEmailRequest,
    ReactionRequest,
    TransferRequest,
    VisitorRequest,
)
from inmo_api.services.favorites_service import FavoritesService, get_favorites_service

router = APIRouter()


@router.get("/details/{device_id}")
async def get_details(
    device_id: str,
    service: FavoritesService = Depends(get_favorites_service),
) -> dict[str, Any]:
    """Favorites hydrated with the property cards the list page renders."""

    return success(await service.get_details(device_id))


@router.get("/visitors/{list_id}")
async def get_visitors(
    list_id: str,
    service: FavoritesService = Depends(get_favorites_service),
) -> dict[str, Any]:
    return success(await service.get_visitors(list_id))


@router.get("/reactions/{list_id}")
async def get_reactions(
    list_id: str,
    property_id: str | None = Query(
        None, description="Group one property's reactions into likes/dislikes/comments"
    ),
    service: FavoritesService = Depends(get_favorites_service),
) -> dict[str, Any]:
    return success(await service.get_reactions(list_id, property_id))


@router.get("/summary/{list_id}")
async def get_summary(
    list_id: str,
    service: FavoritesService = Depends(get_favorites_service),
) -> dict[str, Any]:
    return success(await service.get_reactions_summary(list_id))


@router.get("/by-email")
async def find_by_email(
    email: str | None = Query(None),
    service: FavoritesService = Depends(get_favorites_service),
) -> dict[str, Any]:
    return success(await service.find_by_email(email))


@router.get("/by-code/{code}")
async def find_by_code(
    code: str,
    service: FavoritesService = Depends(get_favorites_service),
) -> dict[str, Any]:
    return success(await service.find_by_public_code(code))


@router.post("/sync")
async def sync_favorites(
    payload: FavoritesSyncRequest,
    service: FavoritesService = Depends(get_favorites_service),
) -> dict[str, Any]:
    """Replace the stored property ids with the browser's copy."""

    favorites = await service.sync(
        payload.device_id, payload.property_ids, payload.owner_name
    )
    return success(favorites)


@router.post("/add")
async def add_favorite(
    payload: FavoritePropertyRequest,
    service: FavoritesService = Depends(get_favorites_service),
) -> dict[str, Any]:
    favorites, created = await service.add_property(
        payload.device_id, payload.property_id
    )
    return success(favorites, created=created)


@router.post("/remove")
async def remove_favorite(
    payload: FavoritePropertyRequest,
    service: FavoritesService = Depends(get_favorites_service),
) -> dict[str, Any]:
    favorites = await service.remove_property(payload.device_id, payload.property_id)
    return success(favorites)


@router.post("/link-email")
async def link_email(
    payload: LinkEmailRequest,
    service: FavoritesService = Depends(get_favorites_service),
) -> dict[str, Any]:
    favorites = await service.link_email(
        payload.device_id, payload.email, payload.owner_name
    )
    return success(favorites)


@router.post("/transfer")
async def transfer_favorites(
    payload: TransferRequest,
    service: FavoritesService = Depends(get_favorites_service),
) -> dict[str, Any]:
    result = await service.transfer_favorites(
        payload.from_device_id, payload.to_device_id
    )
    return success(result)


@router.post("/visitor")
async def register_visitor(
    payload: VisitorRequest,
    service: FavoritesService = Depends(get_favorites_service),
) -> dict[str, Any]:
    visitor = await service.register_visitor(
        payload.list_id, payload.visitor_device_id, payload.alias
    )
    return success(visitor)


@router.post("/reaction")
async def add_reaction(
    payload: ReactionRequest,
    service: FavoritesService = Depends(get_favorites_service),
) -> dict[str, Any]:
    reaction = await service.add_reaction(
        list_id=payload.list_id,
        property_id=payload.property_id,
        visitor_device_id=payload.visitor_device_id,
        visitor_alias=payload.visitor_alias,
        reaction_type=payload.reaction_type,
    )
    return success(reaction)


@router.delete("/reaction")
async def remove_reaction(
    payload: ReactionRequest = Body(...),
    service: FavoritesService = Depends(get_favorites_service),
) -> dict[str, Any]:
    removed = await service.remove_reaction(
        list_id=payload.list_id,
        property_id=payload.property_id,
        visitor_device_id=payload.visitor_device_id,
        reaction_type=payload.reaction_type,
    )
    return success(removed=removed)


@router.post("/comment")
async def add_comment(
    payload: CommentRequest,
    service: FavoritesService = Depends(get_favorites_service),
) -> dict[str, Any]:
    comment = await service.add_comment(
        list_id=payload.list_id,
        property_id=payload.property_id,
        visitor_device_id=payload.visitor_device_id,
        visitor_alias=payload.visitor_alias,
        comment_text=payload.comment_text,
    )
    return success(comment)


@router.delete("/comment/{comment_id}")
async def delete_comment(
    comment_id: int,
    visitor_device_id: str | None = Query(None),
    service: FavoritesService = Depends(get_favorites_service),
) -> dict[str, Any]:
    """Only the visitor who wrote the comment can delete it."""

    deleted = await service.delete_comment(comment_id, visitor_device_id)
    return success(deleted=deleted)


# Declared last so the fixed paths above take precedence.
@router.get("/{device_id}")
async def get_favorites(
    device_id: str,
    service: FavoritesService = Depends(get_favorites_service),
) -> dict[str, Any]:
    """The device's list with visitors and per-property reaction summary."""

    return success(await service.get_overview(device_id))

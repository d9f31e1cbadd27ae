"""Business logic powering the favorites API endpoints.

Persistence-oriented operations delegated to :class:`FavoritesPersistence`:
* ``get_list``/``create_list`` – device-keyed lookup and lazy creation.
* ``save_property_ids``/``save_owner`` – list mutations that advance
  ``updated_at``.
* ``find_by_email``/``find_by_public_code`` – recovery lookups.
* ``upsert_visitor``/``replace_reaction``/``add_comment`` and their deletes.

Presentation responsibilities handled by :class:`FavoritesPresentation`:
* ``summarize_reactions`` – per-property counts behind the shared list view.
* ``overview``/``empty_overview`` – list payload consumed by the API layer.
* ``property_card`` – card rendered on the favorites page.

Identifiers arrive straight from browsers, so every device id is checked for
UUID shape before a query is issued.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inmo_api.cache import CacheClient, get_cache_client
from inmo_api.db.connection import get_db
from inmo_api.db.models import DeviceFavorites
from inmo_api.errors import ConflictError, NotFoundError, ValidationError
from inmo_api.schemas.favorites import (
    FavoritesDetails,
    FavoritesList,
    FavoritesOverview,
    GroupedReactions,
    PropertyReactionSummary,
    Reaction,
    TransferResult,
    Visitor,
)
from inmo_api.services.favorites import (
    FavoritesCache,
    FavoritesPersistence,
    FavoritesPresentation,
)
from inmo_api.utils.text import MAX_FREE_TEXT_LENGTH, truncate
from inmo_api.utils.validation import is_email, is_uuid, normalize_email

logger = logging.getLogger(__name__)

_OPPOSITE_REACTION = {"like": "dislike", "dislike": "like"}

MISSING_DEVICE = "device_id requerido"
MISSING_DEVICE_AND_PROPERTY = "device_id y property_id requeridos"
MISSING_VISITOR_FIELDS = "list_id, visitor_device_id y alias requeridos"
MISSING_ALL_FIELDS = "Todos los campos son requeridos"
MISSING_VISITOR_DEVICE = "visitor_device_id requerido"
MISSING_EMAIL_FIELDS = "device_id y email requeridos"
MISSING_TRANSFER_FIELDS = "from_device_id y to_device_id requeridos"
INVALID_REACTION_TYPE = "reaction_type debe ser like o dislike"
INVALID_EMAIL = "Por favor ingresa un email válido"
LIST_NOT_FOUND = "Lista de favoritos no encontrada"
EMAIL_ALREADY_LINKED = "Este email ya está vinculado a otra lista de favoritos"


def _present(*values: str | None) -> bool:
    return all(value is not None and str(value).strip() for value in values)


def _require(message: str, *values: str | None) -> None:
    if not _present(*values):
        raise ValidationError(message)


def _require_device_id(value: str, field: str = "device_id") -> str:
    if not is_uuid(value):
        raise ValidationError(f"{field} inválido")
    return value.strip()


class FavoritesService:
    """Orchestrates persistence, presentation, and caching dependencies."""

    def __init__(
        self,
        *,
        persistence: FavoritesPersistence,
        presentation: FavoritesPresentation,
        cache: FavoritesCache,
    ) -> None:
        self._persistence = persistence
        self._presentation = presentation
        self._cache = cache

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------
    async def get_overview(self, device_id: str | None) -> FavoritesOverview:
        """List with visitors and reaction summary; empty default when unknown."""

        _require(MISSING_DEVICE, device_id)
        device_id = _require_device_id(device_id)
        favorites = await self._persistence.get_list(device_id)
        if favorites is None:
            return self._presentation.empty_overview(device_id)
        return await self._build_overview(favorites)

    async def get_or_create(self, device_id: str | None) -> FavoritesList:
        _require(MISSING_DEVICE, device_id)
        favorites, _ = await self._get_or_create(_require_device_id(device_id))
        return self._presentation.list_to_schema(favorites)

    async def add_property(
        self, device_id: str | None, property_id: str | None
    ) -> tuple[FavoritesList, bool]:
        """Move ``property_id`` to the end of the list, creating the list if needed.

        Returns the list and whether it was created by this call.
        """

        _require(MISSING_DEVICE_AND_PROPERTY, device_id, property_id)
        device_id = _require_device_id(device_id)
        property_id = property_id.strip()

        favorites, created = await self._get_or_create(device_id)
        property_ids = [pid for pid in favorites.property_ids or [] if pid != property_id]
        property_ids.append(property_id)
        await self._persistence.save_property_ids(favorites, property_ids)
        return self._presentation.list_to_schema(favorites), created

    async def remove_property(
        self, device_id: str | None, property_id: str | None
    ) -> FavoritesList:
        _require(MISSING_DEVICE_AND_PROPERTY, device_id, property_id)
        device_id = _require_device_id(device_id)
        property_id = property_id.strip()

        favorites = await self._persistence.get_list(device_id)
        if favorites is None:
            return FavoritesList(device_id=device_id)
        current = list(favorites.property_ids or [])
        if property_id in current:
            current.remove(property_id)
            await self._persistence.save_property_ids(favorites, current)
        return self._presentation.list_to_schema(favorites)

    async def sync(
        self,
        device_id: str | None,
        property_ids: Sequence[str] | None,
        owner_name: str | None = None,
    ) -> FavoritesList:
        """Replace the stored ids with the browser's copy; keep a known owner name."""

        _require(MISSING_DEVICE, device_id)
        device_id = _require_device_id(device_id)
        cleaned: list[str] = []
        for pid in property_ids or []:
            pid = str(pid).strip()
            if pid and pid not in cleaned:
                cleaned.append(pid)

        favorites = await self._persistence.get_list(device_id)
        if favorites is None:
            favorites, created = await self._persistence.create_list(
                device_id, property_ids=cleaned, owner_name=owner_name or None
            )
            if created:
                return self._presentation.list_to_schema(favorites)

        await self._persistence.save_property_ids(favorites, cleaned)
        if owner_name:
            await self._persistence.save_owner(favorites, owner_name=owner_name)
        return self._presentation.list_to_schema(favorites)

    async def get_details(self, device_id: str | None) -> FavoritesDetails:
        _require(MISSING_DEVICE, device_id)
        device_id = _require_device_id(device_id)
        favorites = await self._persistence.get_list(device_id)
        if favorites is None or not favorites.property_ids:
            return FavoritesDetails(device_id=device_id)
        listings = await self._persistence.fetch_properties(favorites.property_ids)
        return self._presentation.details(device_id, listings)

    # ------------------------------------------------------------------
    # Ownership and recovery
    # ------------------------------------------------------------------
    async def link_email(
        self,
        device_id: str | None,
        email: str | None,
        owner_name: str | None = None,
    ) -> FavoritesList:
        _require(MISSING_EMAIL_FIELDS, device_id, email)
        device_id = _require_device_id(device_id)
        if not is_email(email):
            raise ValidationError(INVALID_EMAIL)
        email = normalize_email(email)

        favorites = await self._persistence.get_list(device_id)
        if favorites is None:
            raise NotFoundError(LIST_NOT_FOUND)

        bound = await self._persistence.find_by_email(email)
        if bound is not None and bound.device_id != device_id:
            raise ConflictError(EMAIL_ALREADY_LINKED)

        await self._persistence.save_owner(
            favorites, owner_email=email, owner_name=owner_name or None
        )
        logger.info("Linked favorites list %s to an owner email", favorites.id)
        return self._presentation.list_to_schema(favorites)

    async def find_by_email(self, email: str | None) -> FavoritesOverview:
        _require(INVALID_EMAIL, email)
        if not is_email(email):
            raise ValidationError(INVALID_EMAIL)
        favorites = await self._persistence.find_by_email(normalize_email(email))
        if favorites is None:
            raise NotFoundError(LIST_NOT_FOUND)
        return await self._build_overview(favorites)

    async def find_by_public_code(self, code: str | None) -> FavoritesOverview:
        _require("Código requerido", code)
        favorites = await self._persistence.find_by_public_code(code.strip().upper())
        if favorites is None:
            raise NotFoundError(LIST_NOT_FOUND)
        return await self._build_overview(favorites)

    async def transfer_favorites(
        self, from_device_id: str | None, to_device_id: str | None
    ) -> TransferResult:
        """Union the source ids into the destination; the source is left as is."""

        _require(MISSING_TRANSFER_FIELDS, from_device_id, to_device_id)
        from_device_id = _require_device_id(from_device_id, "from_device_id")
        to_device_id = _require_device_id(to_device_id, "to_device_id")

        source = await self._persistence.get_list(from_device_id)
        if source is None:
            raise NotFoundError(LIST_NOT_FOUND)
        destination, _ = await self._get_or_create(to_device_id)

        merged = list(destination.property_ids or [])
        added = [pid for pid in source.property_ids or [] if pid not in merged]
        merged.extend(added)
        await self._persistence.save_property_ids(destination, merged)

        # Destination owner fields win; only gaps are filled from the source.
        owner_email = source.owner_email if destination.owner_email is None else None
        owner_name = source.owner_name if destination.owner_name is None else None
        if owner_email is not None or owner_name is not None:
            await self._persistence.save_owner(
                destination, owner_email=owner_email, owner_name=owner_name
            )

        logger.info(
            "Transferred %d favorites from list %s to list %s",
            len(added),
            source.id,
            destination.id,
        )
        return TransferResult(
            source=self._presentation.list_to_schema(source),
            destination=self._presentation.list_to_schema(destination),
            added_property_ids=added,
        )

    # ------------------------------------------------------------------
    # Shared lists: visitors, reactions, comments
    # ------------------------------------------------------------------
    async def register_visitor(
        self,
        list_id: str | None,
        visitor_device_id: str | None,
        alias: str | None,
    ) -> Visitor:
        _require(MISSING_VISITOR_FIELDS, list_id, visitor_device_id, alias)
        list_id = _require_device_id(list_id, "list_id")
        visitor_device_id = _require_device_id(visitor_device_id, "visitor_device_id")
        visitor = await self._persistence.upsert_visitor(
            list_id, visitor_device_id, alias.strip()
        )
        return self._presentation.visitor_to_schema(visitor)

    async def get_visitors(self, list_id: str | None) -> list[Visitor]:
        _require("list_id requerido", list_id)
        list_id = _require_device_id(list_id, "list_id")
        visitors = await self._persistence.list_visitors(list_id)
        return [self._presentation.visitor_to_schema(visitor) for visitor in visitors]

    async def add_reaction(
        self,
        *,
        list_id: str | None,
        property_id: str | None,
        visitor_device_id: str | None,
        visitor_alias: str | None,
        reaction_type: str | None,
    ) -> Reaction:
        """Record a like or dislike, replacing the opposite one from the same visitor."""

        _require(
            MISSING_ALL_FIELDS,
            list_id,
            property_id,
            visitor_device_id,
            visitor_alias,
            reaction_type,
        )
        if reaction_type not in _OPPOSITE_REACTION:
            raise ValidationError(INVALID_REACTION_TYPE)
        list_id = _require_device_id(list_id, "list_id")
        visitor_device_id = _require_device_id(visitor_device_id, "visitor_device_id")

        reaction = await self._persistence.replace_reaction(
            list_id=list_id,
            property_id=property_id.strip(),
            visitor_device_id=visitor_device_id,
            visitor_alias=visitor_alias.strip(),
            reaction_type=reaction_type,
            opposite_type=_OPPOSITE_REACTION[reaction_type],
        )
        await self._commit_and_invalidate(list_id)
        return self._presentation.reaction_to_schema(reaction)

    async def remove_reaction(
        self,
        *,
        list_id: str | None,
        property_id: str | None,
        visitor_device_id: str | None,
        reaction_type: str | None,
    ) -> bool:
        _require(MISSING_ALL_FIELDS, list_id, property_id, visitor_device_id, reaction_type)
        if reaction_type not in _OPPOSITE_REACTION:
            raise ValidationError(INVALID_REACTION_TYPE)
        list_id = _require_device_id(list_id, "list_id")
        visitor_device_id = _require_device_id(visitor_device_id, "visitor_device_id")

        removed = await self._persistence.delete_reaction(
            list_id=list_id,
            property_id=property_id.strip(),
            visitor_device_id=visitor_device_id,
            reaction_type=reaction_type,
        )
        if removed:
            await self._commit_and_invalidate(list_id)
        return removed

    async def add_comment(
        self,
        *,
        list_id: str | None,
        property_id: str | None,
        visitor_device_id: str | None,
        visitor_alias: str | None,
        comment_text: str | None,
    ) -> Reaction:
        _require(
            MISSING_ALL_FIELDS,
            list_id,
            property_id,
            visitor_device_id,
            visitor_alias,
            comment_text,
        )
        list_id = _require_device_id(list_id, "list_id")
        visitor_device_id = _require_device_id(visitor_device_id, "visitor_device_id")

        comment = await self._persistence.add_comment(
            list_id=list_id,
            property_id=property_id.strip(),
            visitor_device_id=visitor_device_id,
            visitor_alias=visitor_alias.strip(),
            comment_text=truncate(comment_text.strip(), MAX_FREE_TEXT_LENGTH),
        )
        await self._commit_and_invalidate(list_id)
        return self._presentation.reaction_to_schema(comment)

    async def delete_comment(
        self, comment_id: int, visitor_device_id: str | None
    ) -> bool:
        """Delete ``comment_id`` when ``visitor_device_id`` is its author."""

        _require(MISSING_VISITOR_DEVICE, visitor_device_id)
        visitor_device_id = _require_device_id(visitor_device_id, "visitor_device_id")
        list_id = await self._persistence.delete_comment(comment_id, visitor_device_id)
        if list_id is None:
            return False
        await self._commit_and_invalidate(list_id)
        return True

    async def get_reactions(
        self, list_id: str | None, property_id: str | None = None
    ) -> list[Reaction] | GroupedReactions:
        """Flat reaction list, or grouped by kind when ``property_id`` is given."""

        _require("list_id requerido", list_id)
        list_id = _require_device_id(list_id, "list_id")
        property_id = property_id.strip() if property_id else None
        reactions = await self._persistence.list_reactions(
            list_id, property_id=property_id
        )
        if property_id is not None:
            return self._presentation.group_reactions(reactions)
        return [self._presentation.reaction_to_schema(item) for item in reactions]

    async def get_reactions_summary(
        self, list_id: str | None
    ) -> dict[str, PropertyReactionSummary]:
        _require("list_id requerido", list_id)
        return await self._summary_for(_require_device_id(list_id, "list_id"))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    async def _get_or_create(self, device_id: str) -> tuple[DeviceFavorites, bool]:
        favorites = await self._persistence.get_list(device_id)
        if favorites is not None:
            return favorites, False
        favorites, created = await self._persistence.create_list(device_id)
        if created:
            logger.info("Created favorites list %s", favorites.public_code)
        return favorites, created

    async def _commit_and_invalidate(self, list_id: str) -> None:
        # A summary read between the delete and the commit would re-cache the
        # old counts, so the write must be visible before the key is dropped.
        await self._persistence.commit()
        await self._cache.invalidate(list_id=list_id)

    async def _summary_for(self, list_id: str) -> dict[str, PropertyReactionSummary]:
        cached = await self._cache.read_summary(list_id=list_id)
        if cached is not None:
            return cached
        reactions = await self._persistence.list_reactions(list_id)
        summary = self._presentation.summarize_reactions(reactions)
        await self._cache.write_summary(list_id=list_id, summary=summary)
        return summary

    async def _build_overview(self, favorites: DeviceFavorites) -> FavoritesOverview:
        visitors = await self._persistence.list_visitors(favorites.device_id)
        summary = await self._summary_for(favorites.device_id)
        return self._presentation.overview(
            favorites, visitors=visitors, summary=summary
        )


async def get_favorites_service(
    session: AsyncSession = Depends(get_db),
    cache_client: CacheClient = Depends(get_cache_client),
) -> FavoritesService:
    """FastAPI dependency that wires the orchestrator together."""

    persistence = FavoritesPersistence(session)
    presentation = FavoritesPresentation()
    cache = FavoritesCache(cache_client)
    return FavoritesService(
        persistence=persistence,
        presentation=presentation,
        cache=cache,
    )

"""Unit tests for the favorites service list, sharing and reaction logic."""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Awaitable, Callable

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inmo_api.cache import favorites_summary_key
from inmo_api.db.models import Tenant
from inmo_api.errors import ConflictError, NotFoundError, ValidationError
from inmo_api.schemas.favorites import GroupedReactions
from inmo_api.services.favorites import (
    FavoritesCache,
    FavoritesPersistence,
    FavoritesPresentation,
)
from inmo_api.services.favorites_service import FavoritesService
from inmo_api.utils.dates import days_ago

from tests.backend.support.factories import make_property
from tests.backend.support.memory_cache import MemoryCache


def _device() -> str:
    return str(uuid.uuid4())


def _service(session: AsyncSession, cache: MemoryCache) -> FavoritesService:
    return FavoritesService(
        persistence=FavoritesPersistence(session),
        presentation=FavoritesPresentation(),
        cache=FavoritesCache(cache),
    )


@pytest.mark.asyncio
async def test_add_property_creates_list_with_public_code(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)
    device_id = _device()

    favorites, created = await service.add_property(device_id, "prop-1")

    assert created is True
    assert favorites.device_id == device_id
    assert favorites.property_ids == ["prop-1"]
    assert favorites.public_code == f"CLIC-{favorites.id:04d}"


@pytest.mark.asyncio
async def test_re_adding_a_property_moves_it_to_the_end(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)
    device_id = _device()
    for property_id in ("a", "b", "c"):
        await service.add_property(device_id, property_id)

    favorites, created = await service.add_property(device_id, "a")

    assert created is False
    assert favorites.property_ids == ["b", "c", "a"]


@pytest.mark.asyncio
async def test_remove_property_is_a_noop_for_unknown_lists(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)
    device_id = _device()

    favorites = await service.remove_property(device_id, "missing")

    assert favorites.device_id == device_id
    assert favorites.property_ids == []
    assert favorites.id is None


@pytest.mark.asyncio
async def test_sync_dedupes_and_keeps_owner_name(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)
    device_id = _device()
    await service.sync(device_id, ["x"], owner_name="Laura")

    favorites = await service.sync(device_id, ["y", "x", "y", " "], owner_name=None)

    assert favorites.property_ids == ["y", "x"]
    assert favorites.owner_name == "Laura"


@pytest.mark.asyncio
async def test_invalid_device_id_is_rejected(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)

    with pytest.raises(ValidationError, match="device_id requerido"):
        await service.get_overview("")
    with pytest.raises(ValidationError, match="inválido"):
        await service.get_overview("not-a-uuid")


@pytest.mark.asyncio
async def test_overview_for_unknown_device_is_empty(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)
    device_id = _device()

    overview = await service.get_overview(device_id)

    assert overview.device_id == device_id
    assert overview.property_ids == []
    assert overview.visitors == []
    assert overview.reactions == {}


@pytest.mark.asyncio
async def test_like_replaces_dislike_from_same_visitor(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)
    list_id = _device()
    visitor = _device()
    common = {
        "list_id": list_id,
        "property_id": "prop-1",
        "visitor_device_id": visitor,
        "visitor_alias": "Tía Carmen",
    }

    await service.add_reaction(**common, reaction_type="dislike")
    await service.add_reaction(**common, reaction_type="like")
    await service.add_reaction(**common, reaction_type="like")

    summary = await service.get_reactions_summary(list_id)
    assert summary["prop-1"].likes == 1
    assert summary["prop-1"].dislikes == 0
    assert summary["prop-1"].liked_by == ["Tía Carmen"]


@pytest.mark.asyncio
async def test_unknown_reaction_type_is_rejected(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)

    with pytest.raises(ValidationError, match="reaction_type debe ser like o dislike"):
        await service.add_reaction(
            list_id=_device(),
            property_id="prop-1",
            visitor_device_id=_device(),
            visitor_alias="Pedro",
            reaction_type="love",
        )


@pytest.mark.asyncio
async def test_summary_is_cached_and_invalidated_by_comments(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)
    list_id = _device()
    visitor = _device()
    key = favorites_summary_key(list_id)

    await service.get_reactions_summary(list_id)
    assert key in memory_cache.store

    await service.add_comment(
        list_id=list_id,
        property_id="prop-1",
        visitor_device_id=visitor,
        visitor_alias="Pedro",
        comment_text="  Me encanta la terraza  ",
    )

    assert key not in memory_cache.store
    assert key in memory_cache.deleted
    summary = await service.get_reactions_summary(list_id)
    assert summary["prop-1"].comments == 1


@pytest.mark.asyncio
async def test_only_the_author_can_delete_a_comment(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)
    list_id = _device()
    author = _device()
    comment = await service.add_comment(
        list_id=list_id,
        property_id="prop-1",
        visitor_device_id=author,
        visitor_alias="Pedro",
        comment_text="¿Tiene parqueo?",
    )
    assert comment.comment_text == "¿Tiene parqueo?"

    assert await service.delete_comment(comment.id, _device()) is False
    assert await service.delete_comment(comment.id, author) is True
    assert await service.get_reactions(list_id) == []


@pytest.mark.asyncio
async def test_get_reactions_groups_by_kind_for_one_property(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)
    list_id = _device()
    await service.add_reaction(
        list_id=list_id,
        property_id="prop-1",
        visitor_device_id=_device(),
        visitor_alias="Ana",
        reaction_type="like",
    )
    await service.add_comment(
        list_id=list_id,
        property_id="prop-1",
        visitor_device_id=_device(),
        visitor_alias="Luis",
        comment_text="Buen precio",
    )
    await service.add_reaction(
        list_id=list_id,
        property_id="prop-2",
        visitor_device_id=_device(),
        visitor_alias="Ana",
        reaction_type="dislike",
    )

    grouped = await service.get_reactions(list_id, "prop-1")
    flat = await service.get_reactions(list_id)

    assert isinstance(grouped, GroupedReactions)
    assert [item.visitor_alias for item in grouped.likes] == ["Ana"]
    assert [item.comment_text for item in grouped.comments] == ["Buen precio"]
    assert grouped.dislikes == []
    assert len(flat) == 3


@pytest.mark.asyncio
async def test_register_visitor_updates_alias_on_return(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)
    list_id = _device()
    visitor = _device()

    await service.register_visitor(list_id, visitor, "Primo")
    await service.register_visitor(list_id, visitor, "Primo Juan")

    visitors = await service.get_visitors(list_id)
    assert [item.visitor_alias for item in visitors] == ["Primo Juan"]


@pytest.mark.asyncio
async def test_link_email_conflicts_with_other_list(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)
    first = _device()
    second = _device()
    await service.get_or_create(first)
    await service.get_or_create(second)

    linked = await service.link_email(first, "Laura@Example.com", owner_name="Laura")
    assert linked.owner_email == "laura@example.com"

    with pytest.raises(ConflictError, match="ya está vinculado"):
        await service.link_email(second, "laura@example.com")

    recovered = await service.find_by_email("LAURA@example.com")
    assert recovered.device_id == first


@pytest.mark.asyncio
async def test_link_email_requires_existing_list(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)

    with pytest.raises(NotFoundError, match="Lista de favoritos no encontrada"):
        await service.link_email(_device(), "ana@example.com")
    with pytest.raises(ValidationError):
        await service.link_email(_device(), "no-es-un-email")


@pytest.mark.asyncio
async def test_find_by_public_code_is_case_insensitive(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)
    device_id = _device()
    favorites, _ = await service.add_property(device_id, "prop-1")

    overview = await service.find_by_public_code(favorites.public_code.lower())

    assert overview.device_id == device_id
    with pytest.raises(NotFoundError):
        await service.find_by_public_code("CLIC-9999")


@pytest.mark.asyncio
async def test_transfer_unions_ids_and_fills_owner_gaps(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)
    source = _device()
    destination = _device()
    await service.sync(source, ["a", "b"], owner_name="Laura")
    await service.link_email(source, "laura@example.com")
    await service.sync(destination, ["b", "c"])

    result = await service.transfer_favorites(source, destination)

    assert result.added_property_ids == ["a"]
    assert result.destination.property_ids == ["b", "c", "a"]
    assert result.destination.owner_name == "Laura"
    assert result.destination.owner_email == "laura@example.com"
    assert result.source.property_ids == ["a", "b"]


@pytest.mark.asyncio
async def test_transfer_requires_source_list(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)

    with pytest.raises(NotFoundError):
        await service.transfer_favorites(_device(), _device())


@pytest.mark.asyncio
async def test_details_hydrate_existing_properties_newest_first(
    session: AsyncSession, memory_cache: MemoryCache, tenant: Tenant
) -> None:
    first = await make_property(
        session, tenant, title="Casa en Arroyo Hondo", created_at=days_ago(3)
    )
    second = await make_property(
        session, tenant, title="Villa en Punta Cana", created_at=days_ago(1)
    )
    service = _service(session, memory_cache)
    device_id = _device()
    await service.sync(device_id, [second.id, "gone", first.id])

    details = await service.get_details(device_id)

    assert [card.id for card in details.properties] == [second.id, first.id]
    assert details.properties[0].title == "Villa en Punta Cana"


class LookupGatePersistence(FavoritesPersistence):
    """Holds the first lookup until every concurrent caller has missed it."""

    def __init__(self, session: AsyncSession, gate: asyncio.Barrier) -> None:
        super().__init__(session)
        self._gate = gate
        self._waited = False

    async def get_list(self, device_id: str):
        favorites = await super().get_list(device_id)
        if not self._waited:
            self._waited = True
            await self._gate.wait()
        return favorites


class HookedCommitPersistence(FavoritesPersistence):
    """Runs ``before_commit`` while the write is still uncommitted."""

    def __init__(
        self, session: AsyncSession, before_commit: Callable[[], Awaitable[None]]
    ) -> None:
        super().__init__(session)
        self._before_commit = before_commit

    async def commit(self) -> None:
        await self._before_commit()
        await super().commit()


@pytest.mark.asyncio
async def test_get_or_create_returns_the_same_list_twice(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)
    device_id = _device()

    first = await service.get_or_create(device_id)
    second = await service.get_or_create(device_id)

    assert first.id == second.id
    assert first.public_code == second.public_code
    assert second.public_code == f"CLIC-{first.id:04d}"


@pytest.mark.asyncio
async def test_re_adding_a_property_advances_updated_at(
    session: AsyncSession, memory_cache: MemoryCache
) -> None:
    service = _service(session, memory_cache)
    device_id = _device()
    await service.add_property(device_id, "prop-1")
    row = await FavoritesPersistence(session).get_list(device_id)
    stale = days_ago(2)
    row.updated_at = stale
    await session.flush()

    favorites, created = await service.add_property(device_id, "prop-1")

    assert created is False
    assert favorites.updated_at > stale


@pytest.mark.asyncio
async def test_concurrent_first_adds_share_one_list(
    session_factory: async_sessionmaker[AsyncSession], memory_cache: MemoryCache
) -> None:
    device_id = _device()
    gate = asyncio.Barrier(2)

    async def add(property_id: str):
        async with session_factory() as db_session:
            service = FavoritesService(
                persistence=LookupGatePersistence(db_session, gate),
                presentation=FavoritesPresentation(),
                cache=FavoritesCache(memory_cache),
            )
            result = await service.add_property(device_id, property_id)
            await db_session.commit()
            return result

    results = await asyncio.gather(add("prop-a"), add("prop-b"))

    assert sorted(created for _, created in results) == [False, True]
    assert len({favorites.id for favorites, _ in results}) == 1
    assert len({favorites.public_code for favorites, _ in results}) == 1
    async with session_factory() as db_session:
        stored = await FavoritesPersistence(db_session).get_list(device_id)
    assert sorted(stored.property_ids) == ["prop-a", "prop-b"]


@pytest.mark.asyncio
async def test_summary_read_during_a_write_is_not_left_stale(
    session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
    memory_cache: MemoryCache,
) -> None:
    list_id = _device()
    seen_while_writing = []

    async def read_summary() -> None:
        async with session_factory() as reader_session:
            reader = _service(reader_session, memory_cache)
            seen_while_writing.append(await reader.get_reactions_summary(list_id))

    writer = FavoritesService(
        persistence=HookedCommitPersistence(session, read_summary),
        presentation=FavoritesPresentation(),
        cache=FavoritesCache(memory_cache),
    )
    await writer.add_reaction(
        list_id=list_id,
        property_id="prop-1",
        visitor_device_id=_device(),
        visitor_alias="Tía Carmen",
        reaction_type="like",
    )

    assert seen_while_writing == [{}]
    async with session_factory() as reader_session:
        summary = await _service(reader_session, memory_cache).get_reactions_summary(
            list_id
        )
    assert summary["prop-1"].likes == 1

"""Tests for the video gallery, category pages, single videos and their soft 404s."""

from __future__ import annotations

import logging

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from inmo_api.db.models import Tenant
from inmo_api.db.models import Video as VideoRow
from inmo_api.db.repositories import VideoRepository
from inmo_api.schemas.common import (
    Found,
    NotFoundWithFallback,
    PageContext,
    render_page,
)
from inmo_api.services.video_service import (
    PLACEHOLDER_THUMBNAIL,
    VideoService,
    extract_video_id,
    format_duration,
    video_thumbnail,
)
from inmo_api.utils.dates import days_ago

from tests.backend.support.factories import make_category, make_video, settle
from tests.backend.support.failures import fail_updates_to


def _service(session: AsyncSession) -> VideoService:
    return VideoService(VideoRepository(session))


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(None, "0:00"), (0, "0:00"), (59, "0:59"), (125, "2:05"), (3600, "60:00")],
)
def test_format_duration(seconds: int | None, expected: str) -> None:
    assert format_duration(seconds) == expected


@pytest.mark.parametrize(
    ("url", "video_type", "expected"),
    [
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "youtube", "dQw4w9WgXcQ"),
        ("https://www.youtube.com/watch?t=3&v=dQw4w9WgXcQ", "youtube", "dQw4w9WgXcQ"),
        ("https://youtu.be/dQw4w9WgXcQ", "youtube", "dQw4w9WgXcQ"),
        ("https://www.youtube.com/embed/dQw4w9WgXcQ", "youtube", "dQw4w9WgXcQ"),
        ("dQw4w9WgXcQ", "youtube", "dQw4w9WgXcQ"),
        ("https://vimeo.com/76979871", "vimeo", "76979871"),
        ("https://example.com/clip.mp4", "youtube", ""),
        (None, "youtube", ""),
    ],
)
def test_extract_video_id(url: str | None, video_type: str, expected: str) -> None:
    assert extract_video_id(url, video_type) == expected


def test_thumbnail_prefers_custom_then_youtube_then_placeholder() -> None:
    assert video_thumbnail("abc", "youtube", "/img/custom.jpg") == "/img/custom.jpg"
    assert (
        video_thumbnail("dQw4w9WgXcQ", "youtube")
        == "https://img.youtube.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"
    )
    assert video_thumbnail("76979871", "vimeo") == PLACEHOLDER_THUMBNAIL


@pytest.mark.asyncio
async def test_main_page_splits_hero_featured_and_recent(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    tours = await make_category(session, tenant, "recorridos", tipo="video")
    await make_category(session, tenant, "vacia", tipo="video")
    await make_video(
        session,
        tenant,
        title="Tour A",
        category=tours,
        destacado=True,
        orden=0,
        vistas=10,
        published_at=days_ago(1),
    )
    await make_video(
        session,
        tenant,
        title="Tour B",
        category=tours,
        destacado=True,
        orden=1,
        published_at=days_ago(2),
    )
    await make_video(session, tenant, title="Charla", published_at=days_ago(10))
    await make_video(session, tenant, title="Oculto", publicado=False)
    await settle(session)

    page = await _service(session).get_main_page(context, page=1, limit=10)

    assert page.type == "videos-main"
    assert page.hero_video is not None
    assert page.hero_video.title == "Tour A"
    assert page.hero_video.url == "/videos/recorridos/tour-a"
    assert page.hero_video.duration_formatted == "2:05"
    assert page.hero_video.embed_url == "https://www.youtube.com/embed/dQw4w9WgXcQ"
    assert [video.title for video in page.featured_videos] == ["Tour B"]
    assert [video.title for video in page.recent_videos] == [
        "Tour A",
        "Tour B",
        "Charla",
    ]
    assert [category.slug for category in page.categories] == ["recorridos", "general"]
    assert page.stats.total_videos == 3
    assert page.stats.total_views == 10
    assert page.stats.featured_count == 2
    assert page.seo.structured_data["@type"] == "VideoGallery"


@pytest.mark.asyncio
async def test_article_categories_are_not_video_categories(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    await make_category(session, tenant, "guias")
    await settle(session)

    result = await _service(session).get_category_page(context, "guias")

    assert isinstance(result, NotFoundWithFallback)


@pytest.mark.asyncio
async def test_general_category_holds_uncategorized_videos(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    tours = await make_category(session, tenant, "recorridos", tipo="video")
    await make_video(session, tenant, title="Suelto")
    await make_video(session, tenant, title="Con categoria", category=tours)
    await settle(session)

    result = await _service(session).get_category_page(context, "general")

    assert isinstance(result, Found)
    assert result.page.category.slug == "general"
    assert result.page.category.video_count == 1
    assert [video.title for video in result.page.videos] == ["Suelto"]
    assert [video.url for video in result.page.videos] == ["/videos/general/suelto"]


@pytest.mark.asyncio
async def test_unknown_category_returns_fallback_with_suggestions(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    tours = await make_category(session, tenant, "recorridos", tipo="video")
    await make_video(session, tenant, title="Tour", category=tours)
    await settle(session)

    result = await _service(session).get_category_page(context, "inexistente")

    assert isinstance(result, NotFoundWithFallback)
    fallback = result.fallback
    assert fallback.not_found is True
    assert fallback.not_found_message == "Video no encontrado"
    assert [video.title for video in fallback.videos] == ["Tour"]
    assert [c.slug for c in fallback.suggested_categories] == ["recorridos"]
    body = render_page(result)
    assert body["notFound"] is True
    assert body["suggestedCategories"][0]["slug"] == "recorridos"


@pytest.mark.asyncio
async def test_video_page_counts_view_and_describes_the_video(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    tours = await make_category(session, tenant, "recorridos", tipo="video")
    row = await make_video(
        session, tenant, title="Tour Cap Cana", category=tours, vistas=7
    )
    await make_video(session, tenant, title="Otro", published_at=days_ago(1))
    await make_video(
        session, tenant, title="Tour Naco", category=tours, published_at=days_ago(3)
    )
    await settle(session)

    result = await _service(session).get_video_page(context, "recorridos", row.slug)

    assert isinstance(result, Found)
    page = result.page
    assert page.video.title == "Tour Cap Cana"
    assert page.category.slug == "recorridos"
    assert [video.title for video in page.related_videos] == ["Tour Naco", "Otro"]
    structured = page.seo.structured_data
    assert structured["@type"] == "VideoObject"
    assert structured["duration"] == "PT2M5S"
    assert structured["embedUrl"] == "https://www.youtube.com/embed/dQw4w9WgXcQ"
    assert [crumb.url for crumb in page.breadcrumbs][-1] == (
        "/videos/recorridos/tour-cap-cana"
    )

    await session.commit()
    refreshed = await session.get(VideoRow, row.id, populate_existing=True)
    assert refreshed is not None
    assert refreshed.vistas == 8


@pytest.mark.asyncio
async def test_missing_video_serves_recent_suggestions(
    session: AsyncSession, tenant: Tenant, context: PageContext
) -> None:
    await make_video(session, tenant, title="Reciente")
    english = context.model_copy(update={"language": "en", "tracking": "?ref=fb"})
    await settle(session)

    result = await _service(session).get_video_page(english, "recorridos", "no-existe")

    assert isinstance(result, NotFoundWithFallback)
    fallback = result.fallback
    assert fallback.not_found_message == "Video not found"
    assert fallback.video.slug == "no-existe"
    assert fallback.video.url == "/en/videos/recorridos/no-existe"
    assert [video.title for video in fallback.suggested_videos] == ["Reciente"]
    assert fallback.suggested_videos[0].url == "/en/videos/general/reciente?ref=fb"


@pytest.mark.asyncio
async def test_failed_view_count_does_not_break_the_video_page(
    session: AsyncSession,
    tenant: Tenant,
    context: PageContext,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    row = await make_video(session, tenant, title="Tour Piantini")
    await settle(session)
    fail_updates_to(monkeypatch, session, "videos")

    with caplog.at_level(logging.WARNING):
        result = await _service(session).get_video_page(context, "general", row.slug)

    assert isinstance(result, Found)
    assert result.page.video.title == "Tour Piantini"
    assert any(
        message.startswith(f"Failed to increment views for video {row.id}")
        for message in caplog.messages
    )

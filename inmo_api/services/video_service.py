"""Video library pages: main gallery, category listing and single video."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from inmo_api.db.models import ContentCategory
from inmo_api.db.models import Video as VideoRow
from inmo_api.db.repositories import VideoRepository
from inmo_api.schemas.common import (
    Found,
    NotFoundWithFallback,
    PageContext,
    SEOData,
)
from inmo_api.schemas.video import (
    Video,
    VideoCategory,
    VideoProperty,
    VideosCategoryPage,
    VideoSinglePage,
    VideosMainPage,
    VideoStats,
)
from inmo_api.utils.dates import as_utc
from inmo_api.utils.locale import build_url, pick, translated_attr
from inmo_api.utils.pagination import offset_for, paginate
from inmo_api.utils.seo import SCHEMA_CONTEXT, absolute_url, breadcrumbs, generate_seo

logger = logging.getLogger(__name__)

GENERAL_CATEGORY_SLUG = "general"
PLACEHOLDER_THUMBNAIL = "/images/placeholder-video.jpg"
FEATURED_LIMIT = 6
RELATED_LIMIT = 6
SUGGESTED_LIMIT = 6

_YOUTUBE_ID_RE = re.compile(
    r"(?:youtube\.com/(?:watch\?(?:.*&)?v=|embed/)|youtu\.be/)([\w-]{11})"
)
_BARE_YOUTUBE_ID_RE = re.compile(r"^[\w-]{11}$")
_VIMEO_ID_RE = re.compile(r"vimeo\.com/(?:video/)?(\d+)")


def format_duration(seconds: int | None) -> str:
    """``m:ss`` for a duration in seconds; ``0:00`` when unknown."""

    if not seconds or seconds < 0:
        return "0:00"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


def iso_duration(seconds: int | None) -> str:
    minutes, secs = divmod(int(seconds or 0), 60)
    return f"PT{minutes}M{secs}S"


def extract_video_id(url: str | None, video_type: str) -> str:
    if not url:
        return ""
    if video_type == "youtube":
        match = _YOUTUBE_ID_RE.search(url)
        if match:
            return match.group(1)
        return url if _BARE_YOUTUBE_ID_RE.match(url) else ""
    if video_type == "vimeo":
        match = _VIMEO_ID_RE.search(url)
        if match:
            return match.group(1)
        return url if url.isdigit() else ""
    return ""


def video_thumbnail(video_id: str, video_type: str, custom: str | None = None) -> str:
    if custom:
        return custom
    if video_id and video_type == "youtube":
        return f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"
    return PLACEHOLDER_THUMBNAIL


def embed_url(video_id: str, video_type: str) -> str | None:
    if not video_id:
        return None
    if video_type == "youtube":
        return f"https://www.youtube.com/embed/{video_id}"
    if video_type == "vimeo":
        return f"https://player.vimeo.com/video/{video_id}"
    return None


def video_not_found_text(language: str) -> str:
    return pick(
        language, "Video no encontrado", "Video not found", "Vidéo non trouvée"
    )


def videos_title(language: str) -> str:
    return pick(
        language, "Videos Inmobiliarios", "Real Estate Videos", "Vidéos Immobilières"
    )


def general_category(language: str, video_count: int | None = None) -> VideoCategory:
    return VideoCategory(
        id=GENERAL_CATEGORY_SLUG,
        name=pick(language, "General", "General", "Général"),
        slug=GENERAL_CATEGORY_SLUG,
        description=pick(
            language, "Videos generales", "General videos", "Vidéos générales"
        ),
        video_count=video_count,
        url=build_url(f"/videos/{GENERAL_CATEGORY_SLUG}", language),
    )


def category_to_schema(
    category: ContentCategory, language: str, video_count: int | None = None
) -> VideoCategory:
    return VideoCategory(
        id=category.id,
        name=translated_attr(category, "nombre", language) or category.slug,
        slug=category.slug,
        description=translated_attr(category, "descripcion", language),
        video_count=video_count,
        url=build_url(f"/videos/{category.slug}", language),
    )


def video_to_schema(row: VideoRow, context: PageContext) -> Video:
    language = context.language
    video_type = row.tipo_video or "youtube"
    video_id = row.video_id or extract_video_id(row.video_url, video_type)
    category = (
        category_to_schema(row.categoria, language)
        if row.categoria is not None
        else None
    )
    category_slug = category.slug if category else GENERAL_CATEGORY_SLUG
    tags = [str(tag) for tag in row.tags if tag] if row.tags else None
    return Video(
        id=row.id,
        slug=row.slug,
        title=translated_attr(row, "titulo", language) or "",
        description=translated_attr(row, "descripcion", language) or "",
        video_url=row.video_url or "",
        video_id=video_id,
        video_type=video_type,
        embed_code=row.embed_code,
        embed_url=embed_url(video_id, video_type),
        thumbnail=video_thumbnail(video_id, video_type, row.thumbnail),
        duration=row.duracion_segundos or 0,
        duration_formatted=format_duration(row.duracion_segundos),
        published_at=as_utc(row.fecha_publicacion or row.created_at),
        views=row.vistas or 0,
        featured=bool(row.destacado),
        url=build_url(
            f"/videos/{category_slug}/{row.slug}", language, context.tracking
        ),
        category=category,
        property=VideoProperty(id=row.propiedad_id) if row.propiedad_id else None,
        tags=tags,
    )


def videos_to_schemas(rows: Sequence[VideoRow], context: PageContext) -> list[Video]:
    return [video_to_schema(row, context) for row in rows]


class VideoService:
    def __init__(self, repository: VideoRepository) -> None:
        self._repository = repository

    async def get_main_page(
        self, context: PageContext, *, page: int = 1, limit: int = 12
    ) -> VideosMainPage:
        """Hero (first featured), up to six more featured, then paged recent videos."""

        tenant_id = context.tenant.id
        featured = await self._repository.list_featured(
            tenant_id, limit=FEATURED_LIMIT + 1
        )
        recent, total = await self._repository.list_recent(
            tenant_id, limit=limit, offset=offset_for(page, limit)
        )
        categories = await self._categories(context)
        totals = await self._repository.totals(tenant_id)

        hero = video_to_schema(featured[0], context) if featured else None
        return VideosMainPage(
            language=context.language,
            tenant=context.tenant,
            seo=self._main_seo(context, total),
            tracking_string=context.tracking,
            breadcrumbs=breadcrumbs(
                context.language, (videos_title(context.language), "/videos")
            ),
            hero_video=hero,
            featured_videos=videos_to_schemas(featured[1:], context),
            recent_videos=videos_to_schemas(recent, context),
            categories=categories,
            stats=VideoStats(
                total_videos=total,
                total_categories=len(categories),
                total_views=totals.total_views,
                featured_count=totals.featured_count,
            ),
            pagination=paginate(total, page, limit),
        )

    async def get_category_page(
        self,
        context: PageContext,
        category_slug: str,
        *,
        page: int = 1,
        limit: int = 12,
    ) -> Found[VideosCategoryPage] | NotFoundWithFallback[VideosCategoryPage]:
        tenant_id = context.tenant.id
        language = context.language
        offset = offset_for(page, limit)

        category: VideoCategory | None = None
        rows: list[VideoRow] = []
        total = 0
        if category_slug == GENERAL_CATEGORY_SLUG:
            rows, total = await self._repository.list_recent(
                tenant_id, limit=limit, offset=offset, uncategorized=True
            )
            category = general_category(language, total)
        else:
            row = await self._repository.get_category(tenant_id, category_slug)
            if row is not None:
                rows, total = await self._repository.list_recent(
                    tenant_id, limit=limit, offset=offset, category_id=row.id
                )
                category = category_to_schema(row, language, total)

        if category is None:
            return NotFoundWithFallback(
                await self._category_fallback(context, category_slug, limit)
            )

        title = pick(
            language,
            f"Videos de {category.name}",
            f"{category.name} Videos",
            f"Vidéos de {category.name}",
        )
        description = pick(
            language,
            f"Mira {total} videos sobre {category.name.lower()}. Contenido"
            f" multimedia de {context.tenant.name}.",
            f"Watch {total} videos about {category.name.lower()}. Multimedia"
            f" content from {context.tenant.name}.",
            f"Regardez {total} vidéos sur {category.name.lower()}. Contenu"
            f" multimédia de {context.tenant.name}.",
        )
        canonical = build_url(f"/videos/{category.slug}", language)
        return Found(
            VideosCategoryPage(
                language=language,
                tenant=context.tenant,
                seo=generate_seo(
                    f"{title} | {context.tenant.name}",
                    description,
                    canonical_url=canonical,
                    site_name=context.tenant.name,
                    structured_data={
                        "@context": SCHEMA_CONTEXT,
                        "@type": "CollectionPage",
                        "name": title,
                        "description": description,
                        "url": absolute_url(context.tenant.domain, canonical),
                    },
                ),
                tracking_string=context.tracking,
                breadcrumbs=breadcrumbs(
                    language,
                    (videos_title(language), "/videos"),
                    (category.name, f"/videos/{category.slug}"),
                ),
                category=category,
                videos=videos_to_schemas(rows, context),
                pagination=paginate(total, page, limit),
            )
        )

    async def get_video_page(
        self, context: PageContext, category_slug: str, slug: str
    ) -> Found[VideoSinglePage] | NotFoundWithFallback[VideoSinglePage]:
        language = context.language
        row = await self._repository.get_by_slug(context.tenant.id, slug)
        if row is None:
            return NotFoundWithFallback(
                await self._video_fallback(context, category_slug, slug)
            )

        video = video_to_schema(row, context)
        category = video.category or general_category(language)
        related = await self._repository.list_related(row, limit=RELATED_LIMIT)

        await self._repository.increment_views(row.id)

        return Found(
            VideoSinglePage(
                language=language,
                tenant=context.tenant,
                seo=self._single_seo(context, video, category),
                tracking_string=context.tracking,
                breadcrumbs=breadcrumbs(
                    language,
                    (videos_title(language), "/videos"),
                    (category.name, f"/videos/{category.slug}"),
                    (video.title, f"/videos/{category.slug}/{video.slug}"),
                ),
                video=video,
                category=category,
                related_videos=videos_to_schemas(related, context),
            )
        )

    async def _categories(self, context: PageContext) -> list[VideoCategory]:
        rows = await self._repository.list_categories(context.tenant.id)
        categories = [
            category_to_schema(category, context.language, count)
            for category, count in rows
            if count > 0
        ]
        uncategorized = await self._repository.count_uncategorized(context.tenant.id)
        if uncategorized > 0:
            categories.append(general_category(context.language, uncategorized))
        return categories

    async def _recent(self, context: PageContext, limit: int) -> list[Video]:
        rows, _ = await self._repository.list_recent(context.tenant.id, limit=limit)
        return videos_to_schemas(rows, context)

    async def _category_fallback(
        self, context: PageContext, category_slug: str, limit: int
    ) -> VideosCategoryPage:
        language = context.language
        logger.info("Video category %r not found; serving fallback", category_slug)
        return VideosCategoryPage(
            language=language,
            tenant=context.tenant,
            seo=SEOData(
                title=f"{category_slug} | {context.tenant.name}",
                description=pick(
                    language,
                    "Categoría no encontrada",
                    "Category not found",
                    "Catégorie non trouvée",
                ),
                canonical_url=build_url(f"/videos/{category_slug}", language),
            ),
            tracking_string=context.tracking,
            not_found=True,
            not_found_message=video_not_found_text(language),
            category=VideoCategory(
                id="", name=category_slug, slug=category_slug, video_count=0
            ),
            videos=await self._recent(context, limit),
            suggested_categories=await self._categories(context),
            pagination=paginate(0, 1, limit),
        )

    async def _video_fallback(
        self, context: PageContext, category_slug: str, slug: str
    ) -> VideoSinglePage:
        language = context.language
        logger.info("Video %r not found; serving fallback", slug)
        not_found = video_not_found_text(language)
        url = build_url(f"/videos/{category_slug}/{slug}", language)
        suggested = await self._recent(context, SUGGESTED_LIMIT)
        return VideoSinglePage(
            language=language,
            tenant=context.tenant,
            seo=SEOData(
                title=f"{slug} | {context.tenant.name}",
                description=not_found,
                canonical_url=url,
            ),
            tracking_string=context.tracking,
            not_found=True,
            not_found_message=not_found,
            video=Video(
                id="",
                slug=slug,
                title=not_found,
                thumbnail=PLACEHOLDER_THUMBNAIL,
                url=url,
            ),
            category=VideoCategory(id="", name=category_slug, slug=category_slug),
            related_videos=suggested,
            suggested_videos=suggested,
        )

    def _main_seo(self, context: PageContext, total: int) -> SEOData:
        language = context.language
        title = videos_title(language)
        description = pick(
            language,
            f"Descubre {total} videos sobre propiedades, tours virtuales y consejos"
            " inmobiliarios. Explora nuestro contenido multimedia.",
            f"Discover {total} videos about properties, virtual tours and real"
            " estate tips. Explore our multimedia content.",
            f"Découvrez {total} vidéos sur les propriétés, visites virtuelles et"
            " conseils immobiliers. Explorez notre contenu multimédia.",
        )
        canonical = build_url("/videos", language)
        return generate_seo(
            f"{title} | {context.tenant.name}",
            description,
            canonical_url=canonical,
            site_name=context.tenant.name,
            structured_data={
                "@context": SCHEMA_CONTEXT,
                "@type": "VideoGallery",
                "name": title,
                "description": description,
                "url": absolute_url(context.tenant.domain, canonical),
                "publisher": {"@type": "Organization", "name": context.tenant.name},
            },
        )

    def _single_seo(
        self, context: PageContext, video: Video, category: VideoCategory
    ) -> SEOData:
        tenant = context.tenant
        canonical = build_url(
            f"/videos/{category.slug}/{video.slug}", context.language
        )
        structured: dict[str, object] = {
            "@context": SCHEMA_CONTEXT,
            "@type": "VideoObject",
            "name": video.title,
            "description": video.description,
            "thumbnailUrl": video.thumbnail,
            "uploadDate": video.published_at.isoformat()
            if video.published_at
            else None,
            "duration": iso_duration(video.duration),
            "contentUrl": video.video_url or None,
            "interactionStatistic": {
                "@type": "InteractionCounter",
                "interactionType": {"@type": "WatchAction"},
                "userInteractionCount": video.views,
            },
        }
        if video.embed_url:
            structured["embedUrl"] = video.embed_url
        return generate_seo(
            f"{video.title} | {tenant.name}",
            video.description,
            canonical_url=canonical,
            og_image=video.thumbnail,
            page_type="video",
            site_name=tenant.name,
            structured_data=structured,
        )

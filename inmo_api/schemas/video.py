"""Schemas for the video library: video cards, categories and the three page kinds."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from inmo_api.schemas.common import CamelModel, ContentPage, Pagination


class VideoCategory(CamelModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    video_count: int | None = None
    url: str | None = None


class VideoProperty(CamelModel):
    id: str
    slug: str = ""
    title: str = ""


class Video(CamelModel):
    id: str
    slug: str
    title: str
    description: str = ""
    video_url: str = ""
    video_id: str = ""
    video_type: str = "youtube"
    embed_code: str | None = None
    embed_url: str | None = None
    thumbnail: str
    duration: int = 0
    duration_formatted: str = "0:00"
    published_at: datetime | None = None
    views: int = 0
    featured: bool = False
    url: str
    category: VideoCategory | None = None
    property: VideoProperty | None = None
    tags: list[str] | None = None


class VideoStats(CamelModel):
    total_videos: int = 0
    total_categories: int = 0
    total_views: int = 0
    featured_count: int = 0


class VideosMainPage(ContentPage):
    type: str = "videos-main"
    hero_video: Video | None = None
    featured_videos: list[Video] = Field(default_factory=list)
    recent_videos: list[Video] = Field(default_factory=list)
    categories: list[VideoCategory] = Field(default_factory=list)
    stats: VideoStats = Field(default_factory=VideoStats)
    pagination: Pagination


class VideosCategoryPage(ContentPage):
    type: str = "videos-category"
    category: VideoCategory
    videos: list[Video] = Field(default_factory=list)
    pagination: Pagination
    suggested_categories: list[VideoCategory] | None = None


class VideoSinglePage(ContentPage):
    type: str = "videos-single"
    video: Video
    category: VideoCategory
    related_videos: list[Video] = Field(default_factory=list)
    suggested_videos: list[Video] | None = None

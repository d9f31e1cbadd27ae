"""Schemas for the blog: article cards, categories and the three page kinds."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from inmo_api.schemas.common import CamelModel, ContentPage, Pagination


class ArticleAuthor(CamelModel):
    id: str = ""
    name: str = ""
    avatar: str = ""
    slug: str | None = None
    position: str | None = None
    bio: str | None = None
    email: str | None = None
    phone: str | None = None


class ArticleCategory(CamelModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    article_count: int | None = None
    url: str | None = None


class ArticleTag(CamelModel):
    id: str = ""
    name: str = ""
    slug: str = ""


class Article(CamelModel):
    id: str
    slug: str
    title: str
    excerpt: str = ""
    content: str | None = None
    featured_image: str
    published_at: datetime | None = None
    views: int = 0
    read_time: str
    read_time_minutes: int
    featured: bool = False
    url: str
    author: ArticleAuthor = Field(default_factory=ArticleAuthor)
    category: ArticleCategory | None = None
    tags: list[ArticleTag] | None = None


class ArticleStats(CamelModel):
    total_articles: int = 0
    total_categories: int = 0
    total_views: int = 0
    average_read_time: int = 5
    published_this_month: int = 0
    featured_count: int = 0


class ArticlesMainPage(ContentPage):
    type: str = "articles-main"
    featured_articles: list[Article] = Field(default_factory=list)
    recent_articles: list[Article] = Field(default_factory=list)
    categories: list[ArticleCategory] = Field(default_factory=list)
    stats: ArticleStats = Field(default_factory=ArticleStats)
    pagination: Pagination


class ArticlesCategoryPage(ContentPage):
    type: str = "articles-category"
    category: ArticleCategory
    articles: list[Article] = Field(default_factory=list)
    pagination: Pagination
    suggested_categories: list[ArticleCategory] | None = None


class ArticleSinglePage(ContentPage):
    type: str = "articles-single"
    article: Article
    category: ArticleCategory
    related_articles: list[Article] = Field(default_factory=list)
    suggested_articles: list[Article] | None = None

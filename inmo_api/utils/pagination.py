"""Pagination arithmetic shared by every listing page."""

from __future__ import annotations

import math

from inmo_api.schemas.common import Pagination


def total_pages(total: int, limit: int) -> int:
    """Number of pages for ``total`` items; an empty listing still has one page."""

    if limit <= 0:
        return 1
    return math.ceil(total / limit) or 1


def paginate(total: int, page: int, limit: int) -> Pagination:
    page = max(page, 1)
    limit = max(limit, 1)
    pages = total_pages(total, limit)
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=pages,
        has_next=page < pages,
        has_prev=page > 1,
    )


def offset_for(page: int, limit: int) -> int:
    return (max(page, 1) - 1) * max(limit, 1)

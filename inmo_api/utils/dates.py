"""Timezone helpers shared by models and services."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

NEW_LISTING_WINDOW_DAYS = 30


def utcnow() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on read)."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def days_ago(days: int, *, now: datetime | None = None) -> datetime:
    return (now or utcnow()) - timedelta(days=days)


def is_recent(value: datetime | None, *, days: int = NEW_LISTING_WINDOW_DAYS) -> bool:
    """Return ``True`` when ``value`` falls within the last ``days`` days."""

    moment = as_utc(value)
    if moment is None:
        return False
    return moment >= days_ago(days)


def start_of_month(now: datetime | None = None) -> datetime:
    current = now or utcnow()
    return current.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

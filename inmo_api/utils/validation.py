"""Shape checks for identifiers and contact data received from the public site."""

from __future__ import annotations

import re

UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_uuid(value: object) -> bool:
    return isinstance(value, str) and bool(UUID_RE.match(value.strip()))


def is_email(value: object) -> bool:
    return isinstance(value, str) and bool(EMAIL_RE.match(value.strip()))


def uuid_or_none(value: object) -> str | None:
    """Return ``value`` when it looks like a UUID, otherwise ``None``."""

    if is_uuid(value):
        return str(value).strip()
    return None


def normalize_email(value: str) -> str:
    return value.strip().lower()


__all__ = [
    "EMAIL_RE",
    "UUID_RE",
    "is_email",
    "is_uuid",
    "normalize_email",
    "uuid_or_none",
]

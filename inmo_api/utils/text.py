"""Text helpers: HTML stripping, read time, slugs and form sanitising."""

from __future__ import annotations

import math
import re
import unicodedata

WORDS_PER_MINUTE = 200
DEFAULT_READ_TIME_MINUTES = 5
MAX_FREE_TEXT_LENGTH = 2000

_TAG_RE = re.compile(r"<[^>]*>")
_BREAK_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_PARAGRAPH_RE = re.compile(r"</p>\s*<p>", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")

_ENTITIES = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)

# "&" is left untouched.
_ESCAPES = (
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)


def strip_html(html: str | None) -> str:
    """Drop tags, decode the common entities and collapse whitespace."""

    if not html:
        return ""
    text = _BREAK_RE.sub(" ", html)
    text = _PARAGRAPH_RE.sub(" ", text)
    text = _TAG_RE.sub("", text)
    for entity, replacement in _ENTITIES:
        text = text.replace(entity, replacement)
    return _WHITESPACE_RE.sub(" ", text).strip()


def calculate_read_time(content: str | None) -> int:
    """
    Estimate reading minutes for an article body.

    Words are counted on the tag-free text at 200 words per minute, rounded
    up, never below one minute. Empty or missing content reports the default
    of five minutes.
    """
    if not content:
        return DEFAULT_READ_TIME_MINUTES
    words = strip_html(content).split()
    if not words:
        return DEFAULT_READ_TIME_MINUTES
    return max(1, math.ceil(len(words) / WORDS_PER_MINUTE))


def slugify(text: str | None) -> str:
    if not text:
        return ""
    normalized = unicodedata.normalize("NFD", text.lower())
    without_accents = "".join(
        char for char in normalized if unicodedata.category(char) != "Mn"
    )
    return _NON_ALNUM_RE.sub("-", without_accents).strip("-")


def truncate(value: str | None, limit: int) -> str:
    if not value:
        return ""
    return value[:limit]


def sanitize_text(value: object, limit: int = MAX_FREE_TEXT_LENGTH) -> str:
    """HTML-escape, trim and cut free text coming from public forms."""

    if value is None or value == "":
        return ""
    text = str(value)
    for char, escaped in _ESCAPES:
        text = text.replace(char, escaped)
    return text.strip()[:limit]


def excerpt(text: str, limit: int = 150) -> str:
    """Cut ``text`` to ``limit`` characters, marking the cut with ``...``."""

    if len(text) > limit:
        return f"{text[:limit]}..."
    return text

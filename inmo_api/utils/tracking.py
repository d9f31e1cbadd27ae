"""Marketing attribution parameters carried across generated links."""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import quote, urlencode

TRACKING_PARAMS = (
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_content",
    "utm_term",
    "ref",
    "gclid",
    "fbclid",
)


def extract_tracking_string(params: Mapping[str, str]) -> str:
    """Return ``?utm_source=...&ref=...`` for the present params, or ``''``."""

    pairs = [(name, params[name]) for name in TRACKING_PARAMS if params.get(name)]
    if not pairs:
        return ""
    return "?" + urlencode(pairs, quote_via=quote)

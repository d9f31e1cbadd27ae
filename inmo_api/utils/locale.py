"""Language detection, localized field lookup and route translation.

Spanish is the base language: public paths are stored and built with Spanish
first segments (``/comprar``, ``/asesores``) and translated on the way out,
prefixed with ``/en`` or ``/fr`` for the other languages.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from inmo_api.schemas.common import SUPPORTED_LANGUAGES

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "es"

ROUTE_TRANSLATIONS: dict[str, dict[str, str]] = {
    "vender": {"es": "vender", "en": "sell", "fr": "vendre"},
    "comprar": {"es": "comprar", "en": "buy", "fr": "acheter"},
    "alquilar": {"es": "alquilar", "en": "rent", "fr": "louer"},
    "asesores": {"es": "asesores", "en": "advisors", "fr": "conseillers"},
    "favoritos": {"es": "favoritos", "en": "favorites", "fr": "favoris"},
    "propuestas": {"es": "propuestas", "en": "proposals", "fr": "propositions"},
    "testimonios": {"es": "testimonios", "en": "testimonials", "fr": "temoignages"},
    "articulos": {"es": "articulos", "en": "articles", "fr": "articles"},
    "videos": {"es": "videos", "en": "videos", "fr": "videos"},
    "contacto": {"es": "contacto", "en": "contact", "fr": "contact"},
    "rentas-vacacionales": {
        "es": "rentas-vacacionales",
        "en": "vacation-rentals",
        "fr": "locations-vacances",
    },
    "listados-de": {"es": "listados-de", "en": "listings-of", "fr": "listes-de"},
    "ubicaciones": {"es": "ubicaciones", "en": "locations", "fr": "emplacements"},
    "propiedades": {"es": "propiedades", "en": "properties", "fr": "proprietes"},
    "tipos-de-propiedad": {
        "es": "tipos-de-propiedad",
        "en": "property-types",
        "fr": "types-de-proprietes",
    },
    "terminos-y-condiciones": {"es": "terminos", "en": "terms", "fr": "termes"},
    "terminos": {"es": "terminos", "en": "terms", "fr": "termes"},
    "politicas-de-privacidad": {
        "es": "privacidad",
        "en": "privacy",
        "fr": "confidentialite",
    },
    "privacidad": {"es": "privacidad", "en": "privacy", "fr": "confidentialite"},
    "faqs": {"es": "faqs", "en": "faqs", "fr": "faqs"},
}

# Any translated slug (in any language) -> Spanish base slug.
ROUTE_SLUG_TO_BASE: dict[str, str] = {}
for _base, _translations in ROUTE_TRANSLATIONS.items():
    for _slug in _translations.values():
        ROUTE_SLUG_TO_BASE.setdefault(_slug, _base)
del _base, _translations, _slug

_LANGUAGE_PREFIX_RE = re.compile(r"^/(en|fr)(?=/|$)")
_MULTI_SLASH_RE = re.compile(r"/{2,}")


def pick(language: str, es: str, en: str, fr: str) -> str:
    """Return the literal matching ``language``; Spanish for anything else."""

    if language == "en":
        return en
    if language == "fr":
        return fr
    return es


def normalize_language(value: str | None) -> str | None:
    if value and value.lower() in SUPPORTED_LANGUAGES:
        return value.lower()
    return None


def detect_language(path: str | None) -> str:
    """Language from a front-end path prefix (``/en/...``, ``/fr``)."""

    if not path:
        return DEFAULT_LANGUAGE
    clean = path if path.startswith("/") else f"/{path}"
    match = _LANGUAGE_PREFIX_RE.match(clean)
    return match.group(1) if match else DEFAULT_LANGUAGE


def resolve_language(lang: str | None, path: str | None = None) -> str:
    """``?lang=`` when valid, else the ``?path=`` prefix, else Spanish."""

    return normalize_language(lang) or detect_language(path)


def get_localized_text(value: Any, language: str) -> str:
    if not value:
        return ""
    if isinstance(value, str):
        return value
    if not isinstance(value, Mapping):
        return str(value)
    if language == "en":
        return value.get("en") or value.get("es") or ""
    if language == "fr":
        return value.get("fr") or value.get("es") or ""
    return value.get("es") or ""


def get_translated_field(item: Mapping[str, Any], field: str, language: str) -> str:
    """``titulo_en`` / ``titulo_fr`` style columns, falling back to ``field``."""

    if language in ("en", "fr"):
        translated = item.get(f"{field}_{language}")
        if translated:
            return translated
    return item.get(field) or ""


def process_translations(item: Mapping[str, Any], language: str) -> dict[str, Any]:
    """Overlay ``traducciones[language]`` on ``item``.

    Spanish content is stored in the base columns, so Spanish (or a row with
    no translation for ``language``) comes back as a plain copy.
    """
    merged = dict(item)
    translations = item.get("traducciones")
    if not translations or not isinstance(translations, Mapping):
        return merged
    overlay = translations.get(language)
    if isinstance(overlay, Mapping):
        merged.update({key: value for key, value in overlay.items() if value})
    return merged


def translate_route_segment(segment: str, target_language: str) -> str:
    base = ROUTE_SLUG_TO_BASE.get(segment)
    if base is None:
        return segment
    return ROUTE_TRANSLATIONS[base].get(target_language, segment)


def remove_language_prefix(path: str | None) -> str:
    if not path:
        return "/"
    clean = path if path.startswith("/") else f"/{path}"
    clean = _LANGUAGE_PREFIX_RE.sub("", clean, count=1)
    return clean or "/"


def _root_for(language: str) -> str:
    return "/" if language == DEFAULT_LANGUAGE else f"/{language}"


def translate_path(path: str | None, target_language: str) -> str:
    """
    Translate a public path into ``target_language``.

    Only the first segment is translated; category, location and item slugs
    are kept as they are. Examples::

        translate_path("/en/sell", "es")          -> "/vender"
        translate_path("/vender", "en")           -> "/en/sell"
        translate_path("/fr/acheter/villa", "es") -> "/comprar/villa"
        translate_path("/", "en")                 -> "/en"
    """
    clean = remove_language_prefix(path)
    segments = [segment for segment in clean.split("/") if segment]
    if not segments:
        return _root_for(target_language)

    segments[0] = translate_route_segment(segments[0], target_language)
    translated = "/" + "/".join(segments)
    if target_language == DEFAULT_LANGUAGE:
        return translated
    return f"/{target_language}{translated}"


def generate_hreflang_urls(path: str | None) -> dict[str, str]:
    if not path or path == "/":
        return {"es": "/", "en": "/en", "fr": "/fr", "x-default": "/"}

    # Strip stacked prefixes such as /en/fr/...
    clean = path
    while _LANGUAGE_PREFIX_RE.match(remove_language_prefix(clean)) and clean != "/":
        logger.warning("Collapsing stacked language prefixes in %s", path)
        clean = remove_language_prefix(clean)

    es_url = translate_path(clean, "es")
    return {
        "es": es_url,
        "en": translate_path(clean, "en"),
        "fr": translate_path(clean, "fr"),
        "x-default": es_url,
    }


def build_url(path: str | None, language: str, tracking: str = "") -> str:
    if not path or path == "/":
        return _root_for(language) + tracking
    url = _MULTI_SLASH_RE.sub("/", translate_path(path, language))
    return url + tracking


def build_property_url(
    row: Mapping[str, Any], language: str, tracking: str = ""
) -> str:
    """Canonical listing URL: ``/{operation}/{category}/{location}/{slug}``."""

    operation = "comprar" if (row.get("precio_venta") or 0) > 0 else "alquilar"
    category = row.get("categoria_slug") or "propiedad"
    location = row.get("sector_slug") or row.get("ciudad_slug") or ""

    parts = [operation, category]
    if location:
        parts.append(location)
    parts.append(row.get("slug") or "")
    return build_url("/" + "/".join(parts), language, tracking)


def translated_attr(row: Any, field: str, language: str) -> Any:
    """Attribute of an ORM row with ``traducciones[language][field]`` overlaid."""

    if language != DEFAULT_LANGUAGE:
        translations = getattr(row, "traducciones", None) or {}
        overlay = translations.get(language) if isinstance(translations, Mapping) else None
        if isinstance(overlay, Mapping) and overlay.get(field):
            return overlay[field]
    return getattr(row, field, None)

"""Currency- and locale-aware price formatting for listings and proposals."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from inmo_api.utils.locale import pick

DEFAULT_CURRENCY = "USD"

PRICE_TYPE_SALE = "sale"
PRICE_TYPE_RENTAL = "rental"
PRICE_TYPE_TEMP_RENTAL = "temp_rental"
PRICE_TYPE_FURNISHED_RENTAL = "furnished_rental"

_PRICE_TYPE_ALIASES = {"venta": PRICE_TYPE_SALE, "alquiler": PRICE_TYPE_RENTAL}

_SUFFIXES = {
    PRICE_TYPE_RENTAL: {"es": "/mes", "en": "/mo", "fr": "/mois"},
    PRICE_TYPE_FURNISHED_RENTAL: {"es": "/mes", "en": "/mo", "fr": "/mois"},
    PRICE_TYPE_TEMP_RENTAL: {"es": "/día", "en": "/day", "fr": "/jour"},
}

# Symbols rendered before the amount (es, en) or after it (fr).
_PREFIX_SYMBOLS = {
    "es": {"USD": "US$", "DOP": "RD$", "EUR": "€"},
    "en": {"USD": "$", "DOP": "DOP ", "EUR": "€"},
}
_SUFFIX_SYMBOLS = {"fr": {"USD": "$US", "DOP": "DOP", "EUR": "€"}}

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


@dataclass(frozen=True)
class PriceDisplay:
    type: str
    amount: float
    currency: str
    display: str


def normalize_currency(value: Any) -> str:
    """Return a three-letter ISO code, falling back to USD for junk values."""

    if isinstance(value, str) and _CURRENCY_RE.match(value.strip().upper()):
        return value.strip().upper()
    return DEFAULT_CURRENCY


def normalize_price_type(price_type: str | None) -> str:
    if not price_type:
        return PRICE_TYPE_SALE
    return _PRICE_TYPE_ALIASES.get(price_type, price_type)


def _group(amount: float, separator: str) -> str:
    return f"{round(amount):,}".replace(",", separator)


def _format_amount(amount: float, currency: str, language: str) -> str:
    if language == "fr":
        symbol = _SUFFIX_SYMBOLS["fr"].get(currency, currency)
        return f"{_group(amount, ' ')} {symbol}"
    table = _PREFIX_SYMBOLS.get(language, _PREFIX_SYMBOLS["es"])
    symbol = table.get(currency, f"{currency} ")
    return f"{symbol}{_group(amount, ',')}"


def format_price(
    amount: float | None,
    currency: str | None = DEFAULT_CURRENCY,
    price_type: str | None = PRICE_TYPE_SALE,
    language: str = "es",
) -> str:
    """
    Render ``amount`` the way each locale's storefront shows it.

    ``es`` -> ``US$350,000`` / ``RD$350,000``; ``en`` -> ``$350,000`` /
    ``DOP 350,000``; ``fr`` -> ``350 000 $US`` / ``350 000 DOP``. Rentals get a
    ``/mes``-style suffix, short-term rentals a ``/día`` one. Zero or missing
    amounts render the localized "price on request" text.
    """
    if not amount or amount <= 0:
        return pick(language, "Consultar precio", "Price on request", "Prix sur demande")

    kind = normalize_price_type(price_type)
    formatted = _format_amount(amount, normalize_currency(currency), language)
    suffixes = _SUFFIXES.get(kind)
    if suffixes:
        formatted += suffixes.get(language, suffixes["es"])
    return formatted


_DISPLAY_PRIORITY = (
    ("precio_venta", PRICE_TYPE_SALE),
    ("precio_alquiler", PRICE_TYPE_RENTAL),
    ("precio_alquiler_temporal", PRICE_TYPE_TEMP_RENTAL),
    ("precio_alquiler_amueblado", PRICE_TYPE_FURNISHED_RENTAL),
)


def build_price_display(row: Mapping[str, Any], language: str) -> PriceDisplay:
    """Headline price: sale, then rental, short-term and furnished rental."""

    currency = normalize_currency(row.get("moneda"))
    for column, kind in _DISPLAY_PRIORITY:
        amount = row.get(column) or 0
        if amount > 0:
            return PriceDisplay(
                type=kind,
                amount=amount,
                currency=currency,
                display=format_price(amount, currency, kind, language),
            )
    return PriceDisplay(
        type=PRICE_TYPE_SALE,
        amount=0,
        currency=DEFAULT_CURRENCY,
        display=format_price(0, DEFAULT_CURRENCY, PRICE_TYPE_SALE, language),
    )


def format_proposal_price(amount: float | None, currency: str | None) -> str:
    """Proposal pages always print dollars or pesos with comma grouping."""

    if not amount or amount <= 0:
        return "Precio a consultar"
    symbol = "US$" if (currency or DEFAULT_CURRENCY) == "USD" else "RD$"
    return f"{symbol}{_group(amount, ',')}"

"""Tests for pagination, reading-time and price formatting helpers."""

from __future__ import annotations

import pytest

from inmo_api.utils.pagination import offset_for, paginate
from inmo_api.utils.pricing import (
    build_price_display,
    format_price,
    format_proposal_price,
    normalize_currency,
)
from inmo_api.utils.text import calculate_read_time, excerpt, sanitize_text, slugify


def test_paginate_reports_neighbours() -> None:
    pagination = paginate(total=65, page=2, limit=32)

    assert pagination.total_pages == 3
    assert pagination.has_next is True
    assert pagination.has_prev is True


def test_paginate_empty_listing_still_has_one_page() -> None:
    pagination = paginate(total=0, page=1, limit=32)

    assert pagination.total_pages == 1
    assert pagination.has_next is False
    assert pagination.has_prev is False


def test_paginate_serialises_camel_case() -> None:
    payload = paginate(total=10, page=1, limit=5).model_dump(by_alias=True)

    assert payload == {
        "page": 1,
        "limit": 5,
        "total": 10,
        "totalPages": 2,
        "hasNext": True,
        "hasPrev": False,
    }


def test_offset_clamps_page_to_one() -> None:
    assert offset_for(0, 20) == 0
    assert offset_for(3, 20) == 40


@pytest.mark.parametrize(
    ("content", "minutes"),
    [
        (None, 5),
        ("", 5),
        ("<p></p>", 5),
        ("una palabra", 1),
        (" ".join(["palabra"] * 200), 1),
        (" ".join(["palabra"] * 201), 2),
        ("<p>" + " ".join(["palabra"] * 450) + "</p>", 3),
    ],
)
def test_calculate_read_time(content: str | None, minutes: int) -> None:
    assert calculate_read_time(content) == minutes


def test_slugify_strips_accents() -> None:
    assert slugify("Apartamento en Serrallés, Santo Domingo") == (
        "apartamento-en-serralles-santo-domingo"
    )


def test_sanitize_text_escapes_and_truncates() -> None:
    assert sanitize_text("  <b>hola</b>  ") == "&lt;b&gt;hola&lt;/b&gt;"
    assert sanitize_text("x" * 50, limit=10) == "x" * 10
    assert sanitize_text(None) == ""


def test_excerpt_marks_cut() -> None:
    assert excerpt("corto") == "corto"
    assert excerpt("a" * 200, limit=10) == "a" * 10 + "..."


@pytest.mark.parametrize(
    ("language", "expected"),
    [("es", "US$350,000"), ("en", "$350,000"), ("fr", "350 000 $US")],
)
def test_format_sale_price_per_locale(language: str, expected: str) -> None:
    assert format_price(350000, "USD", "sale", language) == expected


@pytest.mark.parametrize(
    ("language", "expected"),
    [("es", "RD$45,000/mes"), ("en", "DOP 45,000/mo"), ("fr", "45 000 DOP/mois")],
)
def test_format_rental_price_adds_monthly_suffix(language: str, expected: str) -> None:
    assert format_price(45000, "DOP", "alquiler", language) == expected


@pytest.mark.parametrize(
    ("language", "expected"),
    [
        ("es", "Consultar precio"),
        ("en", "Price on request"),
        ("fr", "Prix sur demande"),
    ],
)
def test_format_price_on_request(language: str, expected: str) -> None:
    assert format_price(0, "USD", "sale", language) == expected
    assert format_price(None, "USD", "sale", language) == expected


def test_normalize_currency_falls_back_to_usd() -> None:
    assert normalize_currency(" dop ") == "DOP"
    assert normalize_currency("dollars") == "USD"
    assert normalize_currency(None) == "USD"


def test_price_display_prefers_sale_then_rental() -> None:
    sale = build_price_display(
        {"precio_venta": 200000, "precio_alquiler": 1500, "moneda": "USD"}, "es"
    )
    rental = build_price_display({"precio_alquiler": 1500, "moneda": "USD"}, "en")
    nothing = build_price_display({}, "es")

    assert (sale.type, sale.display) == ("sale", "US$200,000")
    assert (rental.type, rental.display) == ("rental", "$1,500/mo")
    assert nothing.display == "Consultar precio"


def test_format_proposal_price() -> None:
    assert format_proposal_price(125000, "USD") == "US$125,000"
    assert format_proposal_price(9500000, "DOP") == "RD$9,500,000"
    assert format_proposal_price(0, "USD") == "Precio a consultar"

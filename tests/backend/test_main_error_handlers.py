"""Tests asserting ``inmo_api.main`` exception handlers shape their payloads."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as SQLAlchemyTimeoutError
from starlette.datastructures import Headers

import inmo_api.main as inmo_main
from inmo_api.errors import GoneError, InternalError, ValidationError
from inmo_api.schemas.error import ErrorResponse, ErrorType, ValidationErrorResponse
from inmo_api.utils.request_context import clear_request_id, set_request_id


def _build_request(path: str = "/resource") -> Request:
    """Create a minimal ``Request`` suitable for invoking handlers."""

    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "headers": Headers().raw,
    }
    return Request(scope)


@pytest.mark.asyncio
async def test_domain_errors_render_the_envelope() -> None:
    response = await inmo_main.domain_exception_handler(
        _build_request("/proposals/abc"), GoneError("Esta propuesta ha expirado")
    )

    assert response.status_code == status.HTTP_410_GONE
    assert json.loads(response.body.decode()) == {
        "success": False,
        "error": "Esta propuesta ha expirado",
    }


@pytest.mark.asyncio
async def test_internal_errors_hide_their_cause() -> None:
    response = await inmo_main.domain_exception_handler(
        _build_request("/leads"), InternalError()
    )

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert json.loads(response.body.decode())["error"] == "Error interno del servidor"


@pytest.mark.asyncio
async def test_validation_error_maps_to_400() -> None:
    response = await inmo_main.domain_exception_handler(
        _build_request("/favorites/sync"), ValidationError("device_id requerido")
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.asyncio
async def test_validation_exception_handler_uses_builder(monkeypatch):
    """Ensure request validation handler delegates to the helper utility."""

    token = set_request_id("req-1")
    request = _build_request("/content/articles")
    exc = RequestValidationError(
        [
            {
                "loc": ["query", "page"],
                "msg": "Input should be greater than or equal to 1",
                "input": "0",
            }
        ]
    )

    called: dict[str, object] = {}

    def fake_builder(**kwargs):
        called["kwargs"] = kwargs
        return ValidationErrorResponse(
            error_type=ErrorType.VALIDATION_ERROR,
            message="Request validation failed",
            detail="1 validation error(s)",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            timestamp=datetime(2026, 1, 1, tzinfo=UTC),
            request_id="req-1",
            path="/content/articles",
            errors=[],
        )

    monkeypatch.setattr(inmo_main, "build_validation_error_response", fake_builder)

    try:
        response = await inmo_main.validation_exception_handler(request, exc)
    finally:
        clear_request_id(token)

    assert called["kwargs"]["path"] == "/content/articles"
    assert called["kwargs"]["errors"][0].field == "query.page"
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    json_content = json.loads(response.body.decode())
    assert json_content["message"] == "Request validation failed"


@pytest.mark.asyncio
async def test_database_exception_handler_uses_builder(monkeypatch):
    """Ensure database connection handler delegates to the helper utility."""

    token = set_request_id("req-2")
    request = _build_request("/content/homepage")
    exc = DBAPIError("statement", {}, Exception("boom"))

    called: dict[str, object] = {}

    def fake_builder(**kwargs):
        called["kwargs"] = kwargs
        return ErrorResponse(
            error_type=ErrorType.DATABASE_ERROR,
            message="Database connection failed",
            detail="Unable to connect",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            timestamp=datetime(2026, 1, 1, tzinfo=UTC),
            request_id="req-2",
            path="/content/homepage",
            retry_after=5,
        )

    monkeypatch.setattr(inmo_main, "build_error_response", fake_builder)

    try:
        response = await inmo_main.database_exception_handler(request, exc)
    finally:
        clear_request_id(token)

    assert called["kwargs"]["retry_after"] == 5
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    json_content = json.loads(response.body.decode())
    assert json_content["request_id"] == "req-2"


@pytest.mark.asyncio
async def test_generic_exception_handler_reports_type_name() -> None:
    token = set_request_id("req-3")
    try:
        response = await inmo_main.generic_exception_handler(
            _build_request("/content/contact"), KeyError("boom")
        )
    finally:
        clear_request_id(token)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    body = json.loads(response.body.decode())
    assert body["error_type"] == "internal_error"
    assert body["detail"] == "An unexpected error occurred: KeyError"
    assert body["request_id"] == "req-3"


def test_sanitize_database_url_masks_password() -> None:
    sanitize = inmo_main._sanitize_database_url

    assert (
        sanitize("postgresql+psycopg://inmo:secret@db:5432/inmo")
        == "postgresql+psycopg://inmo:***@db:5432/inmo"
    )
    assert sanitize("sqlite+aiosqlite:///./inmo.db") == "sqlite+aiosqlite:///./inmo.db"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("exc", "expected_status", "expected_type"),
    [
        (
            OperationalError("SELECT 1", {}, Exception("refused")),
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "database_error",
        ),
        (
            IntegrityError("INSERT", {}, Exception("duplicate key")),
            status.HTTP_409_CONFLICT,
            "conflict",
        ),
        (
            SQLAlchemyTimeoutError("QueuePool limit reached"),
            status.HTTP_504_GATEWAY_TIMEOUT,
            "timeout_error",
        ),
    ],
)
async def test_database_failures_resolve_along_the_mro(
    exc: Exception, expected_status: int, expected_type: str
) -> None:
    response = await inmo_main.database_exception_handler(
        _build_request("/content/properties"), exc
    )

    assert response.status_code == expected_status
    assert json.loads(response.body.decode())["error_type"] == expected_type


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path", ["/favorites/sync", "/proposals/abc/respond", "/leads"]
)
@pytest.mark.parametrize(
    "exc",
    [
        OperationalError("SELECT 1", {}, Exception("refused")),
        IntegrityError("INSERT", {}, Exception("duplicate key")),
    ],
)
async def test_database_failures_on_envelope_routes_render_the_envelope(
    path: str, exc: Exception
) -> None:
    response = await inmo_main.database_exception_handler(_build_request(path), exc)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert json.loads(response.body.decode()) == {
        "success": False,
        "error": "Error interno del servidor",
    }


@pytest.mark.asyncio
async def test_unexpected_errors_on_envelope_routes_render_the_envelope() -> None:
    response = await inmo_main.generic_exception_handler(
        _build_request("/favorites/abc"), KeyError("boom")
    )

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert json.loads(response.body.decode()) == {
        "success": False,
        "error": "Error interno del servidor",
    }


@pytest.mark.asyncio
async def test_similar_prefixes_keep_the_structured_error() -> None:
    response = await inmo_main.database_exception_handler(
        _build_request("/favoritesx"),
        OperationalError("SELECT 1", {}, Exception("refused")),
    )

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert json.loads(response.body.decode())["error_type"] == "database_error"

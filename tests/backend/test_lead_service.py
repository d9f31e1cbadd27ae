"""Tests for contact-form lead validation and storage."""

from __future__ import annotations

import uuid

from typing import Any

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from inmo_api.db.models import Lead, Tenant
from inmo_api.db.repositories import LeadRepository
from inmo_api.errors import InternalError, ValidationError
from inmo_api.schemas.leads import LeadSubmission
from inmo_api.services.lead_service import (
    INVALID_REFERENCE,
    SAVE_FAILED,
    LeadService,
    accepts_terms,
    build_lead_values,
    validate_submission,
)


def _submission(**overrides: object) -> LeadSubmission:
    values: dict[str, object] = {
        "cliente_nombre": "Laura Méndez",
        "cliente_email": " Laura@Example.com ",
        "cliente_telefono": "809-555-0199",
        "mensaje": "Quiero visitar el apartamento",
    }
    values.update(overrides)
    return LeadSubmission(**values)


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"cliente_nombre": " L "}, "nombre es requerido"),
        ({"cliente_email": "laura-at-example"}, "email válido"),
        ({"cliente_telefono": "123", "cliente_celular": None}, "teléfono"),
    ],
)
def test_validate_submission_rejects_bad_fields(
    overrides: dict[str, object], message: str
) -> None:
    with pytest.raises(ValidationError, match=message):
        validate_submission(_submission(**overrides))


def test_mobile_number_satisfies_phone_requirement() -> None:
    submission = _submission(cliente_telefono=None, cliente_celular="8095550199")

    validate_submission(submission)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(True, True), ("true", True), ("on", True), ("yes", False), (None, False)],
)
def test_accepts_terms(value: bool | str | None, expected: bool) -> None:
    assert accepts_terms(value) is expected


def test_build_values_applies_defaults_and_sanitises() -> None:
    values = build_lead_values(
        _submission(
            mensaje="<script>alert(1)</script>",
            propiedad_id="not-a-uuid",
            acepta_terminos="on",
        ),
        client_ip="10.0.0.1",
        user_agent="pytest",
    )

    assert values["cliente_email"] == "laura@example.com"
    assert values["mensaje"] == "&lt;script&gt;alert(1)&lt;/script&gt;"
    assert values["propiedad_id"] is None
    assert values["acepta_terminos"] is True
    assert values["estado"] == "new"
    assert values["origen"] == "web_formulario"
    assert values["language"] == "es"
    assert values["ip_origen"] == "10.0.0.1"
    assert values["user_agent"] == "pytest"


def test_body_user_agent_wins_and_ip_falls_back_to_body() -> None:
    values = build_lead_values(
        _submission(user_agent="from-form", ip_origen="192.168.1.9"),
        client_ip=None,
        user_agent="from-header",
    )

    assert values["user_agent"] == "from-form"
    assert values["ip_origen"] == "192.168.1.9"


@pytest.mark.asyncio
async def test_submit_persists_lead(session: AsyncSession, tenant: Tenant) -> None:
    property_id = str(uuid.uuid4())
    service = LeadService(LeadRepository(session))

    created = await service.submit(
        tenant.id,
        _submission(origen="landing_piantini", propiedad_id=property_id),
        client_ip="203.0.113.7",
    )

    lead = await session.get(Lead, created.lead_id)
    assert lead is not None
    assert lead.tenant_id == tenant.id
    assert lead.cliente_nombre == "Laura Méndez"
    assert lead.origen == "landing_piantini"
    assert lead.propiedad_id == property_id
    assert lead.ip_origen == "203.0.113.7"
    assert lead.estado == "new"


@pytest.mark.asyncio
async def test_submit_rejects_invalid_payload_without_writing(
    session: AsyncSession, tenant: Tenant
) -> None:
    service = LeadService(LeadRepository(session))

    with pytest.raises(ValidationError):
        await service.submit(tenant.id, _submission(cliente_email=None))

    assert not session.new


class FailingLeadRepository:
    def __init__(self, error: Exception) -> None:
        self._error = error

    async def create(self, tenant_id: str, values: dict[str, Any]) -> Lead:
        raise self._error


class PgForeignKeyViolation(Exception):
    pgcode = "23503"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "orig",
    [
        Exception("FOREIGN KEY constraint failed"),
        PgForeignKeyViolation('insert on table "leads" violates a constraint'),
    ],
)
async def test_foreign_key_violation_becomes_invalid_reference(
    orig: Exception,
) -> None:
    service = LeadService(FailingLeadRepository(IntegrityError("INSERT", {}, orig)))

    with pytest.raises(ValidationError) as excinfo:
        await service.submit("tenant-1", _submission(propiedad_id="missing"))

    assert excinfo.value.message == INVALID_REFERENCE


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: leads.id")),
        OperationalError("INSERT", {}, Exception("database is locked")),
    ],
)
async def test_other_storage_failures_become_save_failed(error: Exception) -> None:
    service = LeadService(FailingLeadRepository(error))

    with pytest.raises(InternalError) as excinfo:
        await service.submit("tenant-1", _submission())

    assert excinfo.value.message == SAVE_FAILED

"""Validation, sanitising and storage of contact-form leads."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from inmo_api.db.models.leads import LEAD_STATUS_NEW
from inmo_api.db.repositories import LeadRepository
from inmo_api.errors import InternalError, ValidationError
from inmo_api.schemas.leads import LeadCreated, LeadSubmission
from inmo_api.utils.locale import DEFAULT_LANGUAGE
from inmo_api.utils.text import MAX_FREE_TEXT_LENGTH, sanitize_text
from inmo_api.utils.validation import is_email, normalize_email, uuid_or_none

logger = logging.getLogger(__name__)

DEFAULT_ORIGIN = "web_formulario"
MIN_NAME_LENGTH = 2
MIN_PHONE_LENGTH = 7

INVALID_NAME = "El nombre es requerido (mínimo 2 caracteres)"
INVALID_EMAIL = "Por favor ingresa un email válido"
INVALID_PHONE = "El teléfono es requerido"
INVALID_REFERENCE = "Referencia inválida a propiedad o asesor"
SAVE_FAILED = "Error al guardar la solicitud. Por favor intenta nuevamente."

# Column limits for optional free-text fields.
FIELD_LIMITS: dict[str, int] = {
    "cliente_telefono": 50,
    "cliente_celular": 50,
    "mensaje": MAX_FREE_TEXT_LENGTH,
    "property_title": 500,
    "origen": 100,
    "referidor_lead": 500,
    "utm_source": 255,
    "utm_medium": 255,
    "utm_campaign": 255,
    "ip_origen": 45,
    "user_agent": 1000,
    "language": 10,
}

_TRUTHY = {"true", "on"}


def accepts_terms(value: bool | str | None) -> bool:
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.strip().lower() in _TRUTHY


def _is_foreign_key_violation(exc: IntegrityError) -> bool:
    pgcode = getattr(exc.orig, "pgcode", None) or getattr(exc.orig, "sqlstate", None)
    if pgcode == "23503":
        return True
    return "foreign key" in str(exc.orig).lower()


def validate_submission(submission: LeadSubmission) -> None:
    """Raise :class:`ValidationError` for the first invalid required field."""

    name = (submission.cliente_nombre or "").strip()
    if len(name) < MIN_NAME_LENGTH:
        raise ValidationError(INVALID_NAME)
    if not is_email(submission.cliente_email):
        raise ValidationError(INVALID_EMAIL)
    phone = (submission.cliente_telefono or submission.cliente_celular or "").strip()
    if len(phone) < MIN_PHONE_LENGTH:
        raise ValidationError(INVALID_PHONE)


def build_lead_values(
    submission: LeadSubmission,
    *,
    client_ip: str | None = None,
    user_agent: str | None = None,
) -> dict[str, Any]:
    """Column values for a validated submission, sanitised and truncated."""

    values: dict[str, Any] = {
        "cliente_nombre": sanitize_text(submission.cliente_nombre, 255),
        "cliente_email": normalize_email(submission.cliente_email or ""),
        "acepta_terminos": accepts_terms(submission.acepta_terminos),
        "propiedad_id": uuid_or_none(submission.propiedad_id),
        "asignado": uuid_or_none(submission.asignado),
        "estado": LEAD_STATUS_NEW,
    }
    raw = submission.model_dump()
    raw["ip_origen"] = client_ip or submission.ip_origen
    raw["user_agent"] = submission.user_agent or user_agent
    for field, limit in FIELD_LIMITS.items():
        values[field] = sanitize_text(raw.get(field), limit) or None

    values["origen"] = values["origen"] or DEFAULT_ORIGIN
    values["language"] = values["language"] or DEFAULT_LANGUAGE
    return values


class LeadService:
    def __init__(self, repository: LeadRepository) -> None:
        self._repository = repository

    async def submit(
        self,
        tenant_id: str,
        submission: LeadSubmission,
        *,
        client_ip: str | None = None,
        user_agent: str | None = None,
    ) -> LeadCreated:
        validate_submission(submission)
        values = build_lead_values(
            submission, client_ip=client_ip, user_agent=user_agent
        )
        try:
            lead = await self._repository.create(tenant_id, values)
        except IntegrityError as exc:
            if _is_foreign_key_violation(exc):
                logger.warning("Lead rejected with invalid reference: %s", exc.orig)
                raise ValidationError(INVALID_REFERENCE) from exc
            logger.error("Lead insert violated a constraint: %s", exc.orig)
            raise InternalError(SAVE_FAILED) from exc
        except SQLAlchemyError as exc:
            logger.error("Lead insert failed: %s", exc)
            raise InternalError(SAVE_FAILED) from exc

        logger.info("Stored lead %s from origin %s", lead.id, lead.origen)
        return LeadCreated(lead_id=lead.id)

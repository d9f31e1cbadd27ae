"""Contact-form lead submission payloads."""

from __future__ import annotations

from pydantic import BaseModel


class LeadSubmission(BaseModel):
    """Raw form body; validation and sanitising happen in ``LeadService``."""

    cliente_nombre: str | None = None
    cliente_email: str | None = None
    cliente_telefono: str | None = None
    cliente_celular: str | None = None
    mensaje: str | None = None
    acepta_terminos: bool | str | None = None

    propiedad_id: str | None = None
    property_title: str | None = None
    asignado: str | None = None

    origen: str | None = None
    referidor_lead: str | None = None
    utm_source: str | None = None
    utm_medium: str | None = None
    utm_campaign: str | None = None
    ip_origen: str | None = None
    user_agent: str | None = None
    language: str | None = None


class LeadCreated(BaseModel):
    lead_id: str

"""Contact-form submissions captured from the public site."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from inmo_api.utils.dates import utcnow

from . import Base, new_uuid

LEAD_STATUS_NEW = "new"


class Lead(Base):
    __tablename__ = "leads"
    __table_args__ = (
        Index("idx_leads_estado", "tenant_id", "estado"),
        Index("idx_leads_created", "tenant_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    tenant_id: Mapped[str] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    propiedad_id: Mapped[str | None] = mapped_column(
        ForeignKey("propiedades.id", ondelete="SET NULL"), index=True
    )
    property_title: Mapped[str | None] = mapped_column(String(500))
    asignado: Mapped[str | None] = mapped_column(
        ForeignKey("usuarios.id", ondelete="SET NULL"),
        index=True,
        doc="Advisor the lead is routed to.",
    )
    cliente_nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    cliente_telefono: Mapped[str | None] = mapped_column(String(50))
    cliente_celular: Mapped[str | None] = mapped_column(String(50))
    cliente_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    mensaje: Mapped[str | None] = mapped_column(Text)
    acepta_terminos: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    origen: Mapped[str] = mapped_column(
        String(100), nullable=False, default="web_formulario"
    )
    referidor_lead: Mapped[str | None] = mapped_column(String(500))
    utm_source: Mapped[str | None] = mapped_column(String(255))
    utm_medium: Mapped[str | None] = mapped_column(String(255))
    utm_campaign: Mapped[str | None] = mapped_column(String(255))
    ip_origen: Mapped[str | None] = mapped_column(String(45))
    user_agent: Mapped[str | None] = mapped_column(Text)
    language: Mapped[str] = mapped_column(String(10), nullable=False, default="es")
    estado: Mapped[str] = mapped_column(
        String(50), nullable=False, default=LEAD_STATUS_NEW
    )
    fecha_contacto: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    notas: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

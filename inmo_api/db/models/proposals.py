"""Agent-curated property proposals shared with a client through a public URL."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inmo_api.utils.dates import utcnow

from . import Base, new_uuid
from .content import Property

PROPOSAL_REACTION_TYPES = ("like", "dislike", "maybe")


class Contact(Base):
    """CRM contact (the client a proposal is addressed to)."""

    __tablename__ = "contactos"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    tenant_id: Mapped[str] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    nombre: Mapped[str | None] = mapped_column(String(120))
    apellido: Mapped[str | None] = mapped_column(String(120))
    email: Mapped[str | None] = mapped_column(String(255))
    telefono: Mapped[str | None] = mapped_column(String(50))
    whatsapp: Mapped[str | None] = mapped_column(String(50))
    tipo_contacto: Mapped[str | None] = mapped_column(String(50))
    fuente: Mapped[str | None] = mapped_column(String(100))
    datos_extra: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class Proposal(Base):
    __tablename__ = "propuestas"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    tenant_id: Mapped[str] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    titulo: Mapped[str] = mapped_column(String(255), nullable=False)
    descripcion: Mapped[str | None] = mapped_column(Text)
    estado: Mapped[str] = mapped_column(String(30), nullable=False, default="enviada")
    contacto_id: Mapped[str | None] = mapped_column(
        ForeignKey("contactos.id", ondelete="SET NULL")
    )
    usuario_creador_id: Mapped[str | None] = mapped_column(
        ForeignKey("usuarios.id", ondelete="SET NULL")
    )
    url_publica: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        doc="Opaque slug embedded in the link sent to the client.",
    )
    fecha_expiracion: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    fecha_enviada: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    fecha_vista: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), doc="First time the client opened the proposal."
    )
    veces_vista: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    datos_extra: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )
    activo: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


class ProposalProperty(Base):
    """Association row placing a listing inside a proposal."""

    __tablename__ = "propuestas_propiedades"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    propuesta_id: Mapped[str] = mapped_column(
        ForeignKey("propuestas.id", ondelete="CASCADE"), nullable=False, index=True
    )
    propiedad_id: Mapped[str] = mapped_column(
        ForeignKey("propiedades.id", ondelete="CASCADE"), nullable=False
    )
    orden: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    notas: Mapped[str | None] = mapped_column(Text)
    precio_especial: Mapped[float | None] = mapped_column(
        Float, doc="Negotiated price shown instead of the listing price."
    )

    propiedad: Mapped[Property] = relationship("Property", lazy="joined")


class ProposalReaction(Base):
    __tablename__ = "propuesta_reacciones"
    __table_args__ = (
        Index(
            "propuesta_reacciones_unique_reaction",
            "propuesta_id",
            "propiedad_id",
            "tipo_reaccion",
            unique=True,
            postgresql_where=text("tipo_reaccion <> 'comment'"),
            sqlite_where=text("tipo_reaccion <> 'comment'"),
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    propuesta_id: Mapped[str] = mapped_column(
        ForeignKey("propuestas.id", ondelete="CASCADE"), nullable=False, index=True
    )
    propiedad_id: Mapped[str] = mapped_column(
        ForeignKey("propiedades.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tipo_reaccion: Mapped[str] = mapped_column(
        String(20), nullable=False, doc="like, dislike, maybe or comment."
    )
    comentario: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

from __future__ import annotations

import uuid
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
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from inmo_api.utils.dates import utcnow


def new_uuid() -> str:
    """Return a random UUID rendered as text for portable primary keys."""
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class Tenant(Base):
    """An isolated customer account; every content row is scoped by tenant."""

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    dominio_personalizado: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        index=True,
        doc="Public hostname served for this tenant, without scheme or port.",
    )
    activo: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    configuracion: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        doc=(
            "Branding, contact and business details. Recognised keys:"
            " ``branding``, ``contact``, ``info_negocio``."
        ),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


class User(Base):
    __tablename__ = "usuarios"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    nombre: Mapped[str | None] = mapped_column(String(120))
    apellido: Mapped[str | None] = mapped_column(String(120))
    email: Mapped[str | None] = mapped_column(String(255), index=True)
    telefono: Mapped[str | None] = mapped_column(String(50))
    avatar_url: Mapped[str | None] = mapped_column(String(500))
    activo: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class AdvisorProfile(Base):
    """Public-facing advisor profile of a user within one tenant."""

    __tablename__ = "perfiles_asesor"
    __table_args__ = (
        Index("ix_perfiles_asesor_tenant_slug", "tenant_id", "slug"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    tenant_id: Mapped[str] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    usuario_id: Mapped[str] = mapped_column(
        ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False, index=True
    )
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    codigo: Mapped[str | None] = mapped_column(
        String(20),
        unique=True,
        nullable=True,
        doc="Public advisor code used for referral tracking (e.g. JUA-123).",
    )
    foto_url: Mapped[str | None] = mapped_column(String(500))
    titulo_profesional: Mapped[str | None] = mapped_column(String(255))
    biografia: Mapped[str | None] = mapped_column(Text)
    whatsapp: Mapped[str | None] = mapped_column(String(50))
    telefono_directo: Mapped[str | None] = mapped_column(String(50))
    idiomas: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    especialidades: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    redes_sociales: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )
    experiencia_anos: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    ventas_totales: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    satisfaccion_cliente: Mapped[float | None] = mapped_column(Float, nullable=True)
    destacado: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    orden: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    visible_en_web: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    activo: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    traducciones: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    usuario: Mapped[User] = relationship("User", lazy="joined")


# Imported late so the modules below can reference ``Base`` and the core tables.
from .content import (  # noqa: E402
    FAQ,
    Article,
    ContentCategory,
    Property,
    Testimonial,
    Video,
)
from .favorites import DeviceFavorites, FavoriteReaction, FavoriteVisitor  # noqa: E402
from .leads import Lead  # noqa: E402
from .proposals import (  # noqa: E402
    Contact,
    Proposal,
    ProposalProperty,
    ProposalReaction,
)

__all__ = [
    "Article",
    "AdvisorProfile",
    "Base",
    "Contact",
    "ContentCategory",
    "DeviceFavorites",
    "FAQ",
    "FavoriteReaction",
    "FavoriteVisitor",
    "Lead",
    "Property",
    "Proposal",
    "ProposalProperty",
    "ProposalReaction",
    "Tenant",
    "Testimonial",
    "User",
    "Video",
    "new_uuid",
]

"""Read-mostly catalogue tables: listings, articles, videos, testimonials, FAQs.

Column names follow the Spanish vocabulary of the shared production schema so
the API can be pointed at the existing database without a translation layer.
"""

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
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inmo_api.utils.dates import utcnow

from . import AdvisorProfile, Base, User, new_uuid


class Property(Base):
    """A real-estate listing published by a tenant."""

    __tablename__ = "propiedades"
    __table_args__ = (
        Index("ix_propiedades_tenant_slug", "tenant_id", "slug"),
        Index(
            "ix_propiedades_listing",
            "tenant_id",
            "activo",
            "estado_propiedad",
            "destacada",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    tenant_id: Mapped[str] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    codigo: Mapped[str | None] = mapped_column(String(50))
    codigo_publico: Mapped[str | None] = mapped_column(String(50))
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    titulo: Mapped[str] = mapped_column(String(255), nullable=False)
    descripcion: Mapped[str | None] = mapped_column(Text)
    short_description: Mapped[str | None] = mapped_column(String(500))
    tipo: Mapped[str | None] = mapped_column(String(50), index=True)
    operacion: Mapped[str | None] = mapped_column(
        String(20), doc="``venta`` or ``alquiler``."
    )
    precio: Mapped[float | None] = mapped_column(Float)
    precio_venta: Mapped[float | None] = mapped_column(Float)
    precio_alquiler: Mapped[float | None] = mapped_column(Float)
    precio_alquiler_temporal: Mapped[float | None] = mapped_column(Float)
    precio_alquiler_amueblado: Mapped[float | None] = mapped_column(Float)
    moneda: Mapped[str | None] = mapped_column(String(3), default="USD")
    moneda_venta: Mapped[str | None] = mapped_column(String(3))
    moneda_alquiler: Mapped[str | None] = mapped_column(String(3))
    pais: Mapped[str | None] = mapped_column(String(100))
    provincia: Mapped[str | None] = mapped_column(String(100))
    ciudad: Mapped[str | None] = mapped_column(String(100))
    sector: Mapped[str | None] = mapped_column(String(100))
    direccion: Mapped[str | None] = mapped_column(String(255))
    latitud: Mapped[float | None] = mapped_column(Float)
    longitud: Mapped[float | None] = mapped_column(Float)
    categoria_slug: Mapped[str | None] = mapped_column(String(100))
    ciudad_slug: Mapped[str | None] = mapped_column(String(100))
    sector_slug: Mapped[str | None] = mapped_column(String(100))
    habitaciones: Mapped[int | None] = mapped_column(Integer)
    banos: Mapped[int | None] = mapped_column(Integer)
    medios_banos: Mapped[int | None] = mapped_column(Integer)
    estacionamientos: Mapped[int | None] = mapped_column(Integer)
    m2_construccion: Mapped[float | None] = mapped_column(Float)
    m2_terreno: Mapped[float | None] = mapped_column(Float)
    imagen_principal: Mapped[str | None] = mapped_column(String(500))
    imagenes: Mapped[list[Any]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Gallery entries, either plain URLs or ``{url|src}`` objects.",
    )
    amenidades: Mapped[list[Any]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Amenity names or ``{nombre, icono, categoria}`` objects.",
    )
    destacada: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    exclusiva: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_project: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_furnished: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    activo: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    estado_propiedad: Mapped[str] = mapped_column(
        String(30), nullable=False, default="disponible"
    )
    perfil_asesor_id: Mapped[str | None] = mapped_column(
        ForeignKey("perfiles_asesor.id", ondelete="SET NULL"), index=True
    )
    captador_id: Mapped[str | None] = mapped_column(
        ForeignKey("usuarios.id", ondelete="SET NULL"), index=True
    )
    agente_id: Mapped[str | None] = mapped_column(
        ForeignKey("usuarios.id", ondelete="SET NULL"), index=True
    )
    traducciones: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    agente: Mapped[User | None] = relationship("User", foreign_keys=[agente_id])


class ContentCategory(Base):
    """Editorial category shared by articles and videos (``tipo`` tells them apart)."""

    __tablename__ = "categorias_contenido"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    tenant_id: Mapped[str] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    descripcion: Mapped[str | None] = mapped_column(Text)
    tipo: Mapped[str] = mapped_column(String(30), nullable=False, default="articulo")
    activa: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    orden: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    traducciones: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )


class Article(Base):
    __tablename__ = "articulos"
    __table_args__ = (Index("ix_articulos_tenant_slug", "tenant_id", "slug"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    tenant_id: Mapped[str] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    titulo: Mapped[str] = mapped_column(String(255), nullable=False)
    extracto: Mapped[str | None] = mapped_column(Text)
    contenido: Mapped[str | None] = mapped_column(Text)
    imagen_principal: Mapped[str | None] = mapped_column(String(500))
    categoria_id: Mapped[str | None] = mapped_column(
        ForeignKey("categorias_contenido.id", ondelete="SET NULL"), index=True
    )
    autor_id: Mapped[str | None] = mapped_column(
        ForeignKey("usuarios.id", ondelete="SET NULL")
    )
    publicado: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    estado: Mapped[str | None] = mapped_column(
        String(30),
        default="publicado",
        doc="Editorial workflow state; ``NULL`` is treated as published.",
    )
    destacado: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    fecha_publicacion: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    vistas: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tiempo_lectura: Mapped[int | None] = mapped_column(Integer)
    meta_titulo: Mapped[str | None] = mapped_column(String(255))
    meta_descripcion: Mapped[str | None] = mapped_column(String(500))
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    traducciones: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    categoria: Mapped[ContentCategory | None] = relationship(
        "ContentCategory", lazy="joined"
    )
    autor: Mapped[User | None] = relationship("User", lazy="joined")


class Video(Base):
    """Embedded video (YouTube, Vimeo or raw embed code) in the editorial library."""

    __tablename__ = "videos"
    __table_args__ = (Index("ix_videos_tenant_slug", "tenant_id", "slug"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    tenant_id: Mapped[str] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    titulo: Mapped[str] = mapped_column(String(255), nullable=False)
    descripcion: Mapped[str | None] = mapped_column(Text)
    tipo_video: Mapped[str] = mapped_column(
        String(20), nullable=False, default="youtube", doc="youtube, vimeo or embed."
    )
    video_url: Mapped[str | None] = mapped_column(String(500))
    video_id: Mapped[str | None] = mapped_column(String(100))
    embed_code: Mapped[str | None] = mapped_column(Text)
    thumbnail: Mapped[str | None] = mapped_column(String(500))
    duracion_segundos: Mapped[int | None] = mapped_column(Integer)
    categoria_id: Mapped[str | None] = mapped_column(
        ForeignKey("categorias_contenido.id", ondelete="SET NULL"), index=True
    )
    propiedad_id: Mapped[str | None] = mapped_column(
        ForeignKey("propiedades.id", ondelete="SET NULL")
    )
    publicado: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    destacado: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    orden: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    fecha_publicacion: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    vistas: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    traducciones: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    categoria: Mapped[ContentCategory | None] = relationship(
        "ContentCategory", lazy="joined"
    )


class Testimonial(Base):
    __tablename__ = "testimonios"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    tenant_id: Mapped[str] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    slug: Mapped[str | None] = mapped_column(String(255))
    categoria: Mapped[str | None] = mapped_column(
        String(50), doc="compradores, vendedores, inversionistas or inquilinos."
    )
    cliente_nombre: Mapped[str | None] = mapped_column(String(255))
    cliente_ubicacion: Mapped[str | None] = mapped_column(String(255))
    cliente_foto: Mapped[str | None] = mapped_column(String(500))
    titulo: Mapped[str | None] = mapped_column(String(255))
    contenido: Mapped[Any] = mapped_column(
        JSON,
        nullable=True,
        doc="Plain text or a ``{es, en, fr}`` mapping of localized bodies.",
    )
    rating: Mapped[float | None] = mapped_column(Float)
    destacado: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    publicado: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    fecha: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    propiedad_id: Mapped[str | None] = mapped_column(
        ForeignKey("propiedades.id", ondelete="SET NULL")
    )
    perfil_asesor_id: Mapped[str | None] = mapped_column(
        ForeignKey(AdvisorProfile.id, ondelete="SET NULL")
    )
    traducciones: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )


class FAQ(Base):
    __tablename__ = "faqs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    tenant_id: Mapped[str] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    slug: Mapped[str | None] = mapped_column(String(255))
    pregunta: Mapped[str] = mapped_column(Text, nullable=False)
    respuesta: Mapped[str] = mapped_column(Text, nullable=False)
    contexto: Mapped[str | None] = mapped_column(
        String(50), doc="Grouping key rendered as the FAQ category."
    )
    orden: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    destacada: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    publicado: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    traducciones: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )

"""Schemas for publicly shared property proposals."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ProposalReactionRequest(BaseModel):
    proposal_id: str | None = None
    property_id: str | None = None
    reaction_type: str | None = None
    remove: bool = False


class ProposalCommentRequest(BaseModel):
    proposal_id: str | None = None
    property_id: str | None = None
    comment_text: str | None = None


class PriceAmount(BaseModel):
    valor: float
    formateado: str


class ProposalPrices(BaseModel):
    venta: PriceAmount | None = None
    alquiler: PriceAmount | None = None
    especial: PriceAmount | None = None


class ProposalPropertyItem(BaseModel):
    """A property as presented inside a proposal (Spanish keys)."""

    id: str
    slug: str
    code: str | None = None
    titulo: str
    name: str
    descripcion: str | None = None
    short_description: str | None = None
    tipo: str | None = None
    operacion: str | None = None
    sector: str | None = None
    ciudad: str | None = None
    provincia: str | None = None
    precio: str
    precio_valor: float = 0
    precios: ProposalPrices = Field(default_factory=ProposalPrices)
    habitaciones: int = 0
    banos: int = 0
    estacionamientos: int = 0
    metros: float = 0
    metros_terreno: float = 0
    imagen: str | None = None
    imagenes: list[Any] = Field(default_factory=list)
    is_project: bool = False
    url: str
    orden: int | None = None
    notas_propuesta: str | None = None
    tiene_precio_especial: bool = False


class ProposalComment(BaseModel):
    id: str
    text: str | None = None
    created_at: datetime


class PropertyReactionState(BaseModel):
    like: bool = False
    dislike: bool = False
    maybe: bool = False
    comments: list[ProposalComment] = Field(default_factory=list)


class ProposalAdvisor(BaseModel):
    id: str
    codigo: str | None = None
    slug: str | None = None
    nombre: str = ""
    apellido: str = ""
    nombre_completo: str = ""
    email: str = ""
    telefono: str = ""
    whatsapp: str = ""
    foto: str = ""
    cargo: str = "Asesor Inmobiliario"
    bio: str | None = None
    redes_sociales: dict[str, Any] | None = None


class ProposalContact(BaseModel):
    id: str
    nombre: str | None = None
    apellido: str | None = None
    nombre_completo: str = ""
    email: str | None = None
    telefono: str | None = None


class ProposalDetail(BaseModel):
    id: str
    titulo: str
    descripcion: str | None = None
    estado: str
    url_publica: str
    fecha_expiracion: datetime | None = None
    fecha_enviada: datetime | None = None
    veces_vista: int
    datos_extra: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    properties: list[ProposalPropertyItem] = Field(default_factory=list)
    reactions: dict[str, PropertyReactionState] = Field(default_factory=dict)
    advisor: ProposalAdvisor | None = None
    contact: ProposalContact | None = None


class ProposalCommentRecord(BaseModel):
    """Raw ``propuesta_reacciones`` row returned after adding a comment."""

    id: str
    propuesta_id: str
    propiedad_id: str
    tipo_reaccion: str
    comentario: str | None = None
    created_at: datetime

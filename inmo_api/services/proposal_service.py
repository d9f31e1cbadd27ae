"""Publicly shared proposals: lookup, view tracking and client reactions."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.exc import IntegrityError

from inmo_api.db.models import (
    AdvisorProfile,
    Contact,
    Property,
    Proposal,
    ProposalProperty,
    User,
)
from inmo_api.db.models.proposals import PROPOSAL_REACTION_TYPES, ProposalReaction
from inmo_api.db.repositories import ProposalRepository
from inmo_api.errors import GoneError, NotFoundError, ValidationError
from inmo_api.schemas.proposals import (
    PriceAmount,
    ProposalAdvisor,
    ProposalComment,
    ProposalCommentRecord,
    ProposalContact,
    ProposalDetail,
    ProposalPrices,
    ProposalPropertyItem,
    PropertyReactionState,
)
from inmo_api.utils.dates import as_utc, utcnow
from inmo_api.utils.pricing import DEFAULT_CURRENCY, format_proposal_price
from inmo_api.utils.text import MAX_FREE_TEXT_LENGTH, truncate

logger = logging.getLogger(__name__)

DEFAULT_ADVISOR_TITLE = "Asesor Inmobiliario"

PROPOSAL_NOT_FOUND = "Propuesta no encontrada o ha expirado"
PROPOSAL_EXPIRED = "Esta propuesta ha expirado"
MISSING_REACTION_FIELDS = "proposal_id, property_id y reaction_type son requeridos"
INVALID_REACTION_TYPE = "reaction_type debe ser like, dislike o maybe"
MISSING_COMMENT_FIELDS = "proposal_id, property_id y comment_text son requeridos"
INVALID_REFERENCE = "La propuesta o la propiedad no existen"


def _full_name(first: str | None, last: str | None) -> str:
    return f"{first or ''} {last or ''}".strip()


def _amount(value: float | None, currency: str) -> PriceAmount | None:
    if not value:
        return None
    return PriceAmount(valor=value, formateado=format_proposal_price(value, currency))


def group_reactions(
    reactions: Iterable[ProposalReaction],
) -> dict[str, PropertyReactionState]:
    """Fold reaction rows into one state object per property."""

    grouped: dict[str, PropertyReactionState] = {}
    for reaction in reactions:
        state = grouped.setdefault(reaction.propiedad_id, PropertyReactionState())
        if reaction.tipo_reaccion in PROPOSAL_REACTION_TYPES:
            setattr(state, reaction.tipo_reaccion, True)
        else:
            state.comments.append(
                ProposalComment(
                    id=reaction.id,
                    text=reaction.comentario,
                    created_at=as_utc(reaction.created_at),
                )
            )
    return grouped


def format_property(item: ProposalProperty) -> ProposalPropertyItem:
    listing: Property = item.propiedad
    currency = listing.moneda or DEFAULT_CURRENCY
    price = (
        item.precio_especial
        or listing.precio_venta
        or listing.precio_alquiler
        or listing.precio
        or 0
    )
    operation_slug = "alquilar" if listing.operacion == "alquiler" else "comprar"
    return ProposalPropertyItem(
        id=listing.id,
        slug=listing.slug,
        code=listing.codigo_publico,
        titulo=listing.titulo,
        name=listing.titulo,
        descripcion=listing.descripcion,
        short_description=listing.short_description,
        tipo=listing.tipo,
        operacion=listing.operacion,
        sector=listing.sector,
        ciudad=listing.ciudad,
        provincia=listing.provincia,
        precio=format_proposal_price(price, currency),
        precio_valor=price,
        precios=ProposalPrices(
            venta=_amount(listing.precio_venta, listing.moneda_venta or currency),
            alquiler=_amount(
                listing.precio_alquiler, listing.moneda_alquiler or currency
            ),
            especial=_amount(item.precio_especial, currency),
        ),
        habitaciones=listing.habitaciones or 0,
        banos=listing.banos or 0,
        estacionamientos=listing.estacionamientos or 0,
        metros=listing.m2_construccion or 0,
        metros_terreno=listing.m2_terreno or 0,
        imagen=listing.imagen_principal,
        imagenes=list(listing.imagenes or []),
        is_project=bool(listing.is_project),
        url=f"/{operation_slug}/{listing.slug}",
        orden=item.orden,
        notas_propuesta=item.notas,
        tiene_precio_especial=bool(item.precio_especial),
    )


def format_advisor(user: User, profile: AdvisorProfile | None) -> ProposalAdvisor:
    direct_phone = profile.telefono_directo if profile else None
    return ProposalAdvisor(
        id=profile.id if profile else user.id,
        codigo=profile.codigo if profile else None,
        slug=profile.slug if profile else None,
        nombre=user.nombre or "",
        apellido=user.apellido or "",
        nombre_completo=_full_name(user.nombre, user.apellido),
        email=user.email or "",
        telefono=direct_phone or user.telefono or "",
        whatsapp=(profile.whatsapp if profile else None)
        or direct_phone
        or user.telefono
        or "",
        foto=(profile.foto_url if profile else None) or user.avatar_url or "",
        cargo=(profile.titulo_profesional if profile else None)
        or DEFAULT_ADVISOR_TITLE,
        bio=profile.biografia if profile else None,
        redes_sociales=profile.redes_sociales if profile else None,
    )


def format_contact(contact: Contact) -> ProposalContact:
    return ProposalContact(
        id=contact.id,
        nombre=contact.nombre,
        apellido=contact.apellido,
        nombre_completo=_full_name(contact.nombre, contact.apellido),
        email=contact.email,
        telefono=contact.telefono,
    )


class ProposalService:
    """Serve a proposal by its public URL and record the client's feedback."""

    def __init__(self, repository: ProposalRepository) -> None:
        self._repository = repository

    async def get_proposal(self, url_publica: str) -> ProposalDetail:
        proposal = await self._repository.get_by_public_url(url_publica)
        if proposal is None:
            raise NotFoundError(PROPOSAL_NOT_FOUND)
        expires_at = as_utc(proposal.fecha_expiracion)
        if expires_at is not None and expires_at < utcnow():
            raise GoneError(PROPOSAL_EXPIRED)

        await self._repository.record_view(proposal.id)

        items = await self._repository.list_properties(proposal.id)
        reactions = await self._repository.list_reactions(proposal.id)
        advisor = await self._load_advisor(proposal)
        contact = None
        if proposal.contacto_id:
            contact_row = await self._repository.get_contact(proposal.contacto_id)
            if contact_row is not None:
                contact = format_contact(contact_row)

        return ProposalDetail(
            id=proposal.id,
            titulo=proposal.titulo,
            descripcion=proposal.descripcion,
            estado=proposal.estado,
            url_publica=proposal.url_publica,
            fecha_expiracion=expires_at,
            fecha_enviada=as_utc(proposal.fecha_enviada),
            # The stored counter predates this request's increment.
            veces_vista=(proposal.veces_vista or 0) + 1,
            datos_extra=proposal.datos_extra or {},
            created_at=as_utc(proposal.created_at),
            properties=[
                format_property(item) for item in items if item.propiedad is not None
            ],
            reactions=group_reactions(reactions),
            advisor=advisor,
            contact=contact,
        )

    async def get_reactions(self, proposal_id: str) -> dict[str, PropertyReactionState]:
        return group_reactions(await self._repository.list_reactions(proposal_id))

    async def react(
        self,
        *,
        proposal_id: str | None,
        property_id: str | None,
        reaction_type: str | None,
        remove: bool = False,
    ) -> dict[str, PropertyReactionState]:
        """Set or clear one of like/dislike/maybe and return the refreshed state."""

        if not (proposal_id and property_id and reaction_type):
            raise ValidationError(MISSING_REACTION_FIELDS)
        if reaction_type not in PROPOSAL_REACTION_TYPES:
            raise ValidationError(INVALID_REACTION_TYPE)

        try:
            if remove:
                await self._repository.remove_reaction(
                    proposal_id, property_id, reaction_type
                )
            else:
                await self._repository.set_reaction(
                    proposal_id, property_id, reaction_type
                )
        except IntegrityError as exc:
            logger.warning(
                "Rejected reaction for proposal %s property %s: %s",
                proposal_id,
                property_id,
                exc.orig,
            )
            raise ValidationError(INVALID_REFERENCE) from exc
        return await self.get_reactions(proposal_id)

    async def add_comment(
        self,
        *,
        proposal_id: str | None,
        property_id: str | None,
        comment_text: str | None,
    ) -> tuple[ProposalCommentRecord, dict[str, PropertyReactionState]]:
        text = (comment_text or "").strip()
        if not (proposal_id and property_id and text):
            raise ValidationError(MISSING_COMMENT_FIELDS)

        try:
            comment = await self._repository.add_comment(
                proposal_id, property_id, truncate(text, MAX_FREE_TEXT_LENGTH)
            )
        except IntegrityError as exc:
            logger.warning("Rejected comment for proposal %s: %s", proposal_id, exc.orig)
            raise ValidationError(INVALID_REFERENCE) from exc

        record = ProposalCommentRecord(
            id=comment.id,
            propuesta_id=comment.propuesta_id,
            propiedad_id=comment.propiedad_id,
            tipo_reaccion=comment.tipo_reaccion,
            comentario=comment.comentario,
            created_at=as_utc(comment.created_at),
        )
        return record, await self.get_reactions(proposal_id)

    async def delete_comment(self, comment_id: str) -> bool:
        return await self._repository.delete_comment(comment_id)

    async def _load_advisor(self, proposal: Proposal) -> ProposalAdvisor | None:
        if not proposal.usuario_creador_id:
            return None
        row = await self._repository.get_advisor(
            proposal.usuario_creador_id, proposal.tenant_id
        )
        if row is None:
            return None
        user, profile = row
        return format_advisor(user, profile)

"""Persistence for publicly shared proposals and the client's reactions."""

from __future__ import annotations

import logging

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import aliased

from inmo_api.db.models import AdvisorProfile, Contact, Proposal, ProposalProperty, User
from inmo_api.db.models.proposals import PROPOSAL_REACTION_TYPES, ProposalReaction
from inmo_api.utils.dates import utcnow

from .base import BaseRepository

logger = logging.getLogger(__name__)

COMMENT_TYPE = "comment"


class ProposalRepository(BaseRepository):
    async def get_by_public_url(self, url_publica: str) -> Proposal | None:
        query = select(Proposal).where(
            Proposal.url_publica == url_publica, Proposal.activo.is_(True)
        )
        return await self._first(query)

    async def record_view(self, proposal_id: str) -> None:
        """Count one view and stamp the first-view date; failures are only logged."""

        now = utcnow()
        try:
            async with self._session.begin_nested():
                await self._session.execute(
                    update(Proposal)
                    .where(Proposal.id == proposal_id)
                    .values(
                        veces_vista=func.coalesce(Proposal.veces_vista, 0) + 1,
                        fecha_vista=func.coalesce(Proposal.fecha_vista, now),
                        updated_at=now,
                    )
                    .execution_options(synchronize_session=False)
                )
        except SQLAlchemyError as exc:
            logger.warning(
                "Failed to record view for proposal %s: %s", proposal_id, exc
            )

    async def list_properties(self, proposal_id: str) -> list[ProposalProperty]:
        """Proposal items (with their listing) in the agent's chosen order."""

        query = (
            select(ProposalProperty)
            .where(ProposalProperty.propuesta_id == proposal_id)
            .order_by(ProposalProperty.orden.asc())
        )
        return await self._all(query)

    async def list_reactions(self, proposal_id: str) -> list[ProposalReaction]:
        query = (
            select(ProposalReaction)
            .where(ProposalReaction.propuesta_id == proposal_id)
            .order_by(ProposalReaction.created_at.desc())
        )
        return await self._all(query)

    async def get_advisor(
        self, user_id: str, tenant_id: str
    ) -> tuple[User, AdvisorProfile | None] | None:
        """The creator's user row plus their profile in the proposal's tenant."""

        profile = aliased(AdvisorProfile)
        query = (
            select(User, profile)
            .outerjoin(
                profile,
                (profile.usuario_id == User.id) & (profile.tenant_id == tenant_id),
            )
            .where(User.id == user_id)
            .limit(1)
        )
        row = (await self._session.execute(query)).first()
        if row is None:
            return None
        return row[0], row[1]

    async def get_contact(self, contact_id: str) -> Contact | None:
        return await self._session.get(Contact, contact_id)

    async def set_reaction(
        self, proposal_id: str, property_id: str, reaction_type: str
    ) -> None:
        """Keep at most one of like/dislike/maybe per proposal property."""

        others = [kind for kind in PROPOSAL_REACTION_TYPES if kind != reaction_type]
        await self._session.execute(
            delete(ProposalReaction).where(
                ProposalReaction.propuesta_id == proposal_id,
                ProposalReaction.propiedad_id == property_id,
                ProposalReaction.tipo_reaccion.in_(others),
            )
        )
        existing = await self._first(
            select(ProposalReaction).where(
                ProposalReaction.propuesta_id == proposal_id,
                ProposalReaction.propiedad_id == property_id,
                ProposalReaction.tipo_reaccion == reaction_type,
            )
        )
        if existing is not None:
            existing.updated_at = utcnow()
        else:
            self._session.add(
                ProposalReaction(
                    propuesta_id=proposal_id,
                    propiedad_id=property_id,
                    tipo_reaccion=reaction_type,
                )
            )
        await self._session.flush()

    async def remove_reaction(
        self, proposal_id: str, property_id: str, reaction_type: str
    ) -> None:
        await self._session.execute(
            delete(ProposalReaction).where(
                ProposalReaction.propuesta_id == proposal_id,
                ProposalReaction.propiedad_id == property_id,
                ProposalReaction.tipo_reaccion == reaction_type,
            )
        )

    async def add_comment(
        self, proposal_id: str, property_id: str, text: str
    ) -> ProposalReaction:
        comment = ProposalReaction(
            propuesta_id=proposal_id,
            propiedad_id=property_id,
            tipo_reaccion=COMMENT_TYPE,
            comentario=text,
        )
        self._session.add(comment)
        await self._session.flush()
        return comment

    async def delete_comment(self, comment_id: str) -> bool:
        result = await self._session.execute(
            delete(ProposalReaction).where(
                ProposalReaction.id == comment_id,
                ProposalReaction.tipo_reaccion == COMMENT_TYPE,
            )
        )
        return bool(result.rowcount)

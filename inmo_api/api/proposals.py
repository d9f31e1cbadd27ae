"""FastAPI router for publicly shared property proposals."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from inmo_api.api.envelope import success
from inmo_api.schemas.proposals import ProposalCommentRequest, ProposalReactionRequest
from inmo_api.services.dependencies import get_proposal_service
from inmo_api.services.proposal_service import ProposalService

router = APIRouter()


@router.post("/reaction")
async def react(
    payload: ProposalReactionRequest,
    service: ProposalService = Depends(get_proposal_service),
) -> dict[str, Any]:
    """Set (or clear with ``remove``) a like/dislike/maybe on one property."""

    reactions = await service.react(
        proposal_id=payload.proposal_id,
        property_id=payload.property_id,
        reaction_type=payload.reaction_type,
        remove=payload.remove,
    )
    return success({"reactions": reactions})


@router.post("/comment")
async def add_comment(
    payload: ProposalCommentRequest,
    service: ProposalService = Depends(get_proposal_service),
) -> dict[str, Any]:
    comment, reactions = await service.add_comment(
        proposal_id=payload.proposal_id,
        property_id=payload.property_id,
        comment_text=payload.comment_text,
    )
    return success({"comment": comment, "reactions": reactions})


@router.delete("/comment/{comment_id}")
async def delete_comment(
    comment_id: str,
    service: ProposalService = Depends(get_proposal_service),
) -> dict[str, Any]:
    return success(deleted=await service.delete_comment(comment_id))


@router.get("/reactions/{proposal_id}")
async def get_reactions(
    proposal_id: str,
    service: ProposalService = Depends(get_proposal_service),
) -> dict[str, Any]:
    return success(await service.get_reactions(proposal_id))


@router.get("/{url_publica}")
async def get_proposal(
    url_publica: str,
    service: ProposalService = Depends(get_proposal_service),
) -> dict[str, Any]:
    """Active proposal by public URL; 404 when missing, 410 once expired."""

    return success(await service.get_proposal(url_publica))

"""Voter API endpoints for listing, detail and vote marking."""

import math

from fastapi import APIRouter, Depends, HTTPException, Query, status

from voter_registry.core.dependencies import get_vote_mirror, get_voter_store
from voter_registry.lib.sheets.mirror import VoteMirror
from voter_registry.lib.store import VoterStore
from voter_registry.schemas.common import ApiResponse, MessageResponse, PaginatedResponse, PaginationMeta
from voter_registry.schemas.voter import VoterResponse
from voter_registry.services.voter_service import build_filters, get_voter, mark_voted, search_voters, unmark_voted

voters_router = APIRouter(prefix="/voters", tags=["voters"])


@voters_router.get("", response_model=PaginatedResponse[list[VoterResponse]])
async def list_voters(
    search: str | None = Query(None, description="Partial match on full, family or father name"),
    religion: str | None = Query(None, description="Exact religion, or 'all'"),
    voted: str | None = Query(None, description="'true' or 'false'"),
    register_number: str | None = Query(None, description="Partial match on register number"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1),
    store: VoterStore = Depends(get_voter_store),
) -> PaginatedResponse[list[VoterResponse]]:
    """Search and list voters ordered by original id."""
    filters = build_filters(search=search, religion=religion, voted=voted, register_number=register_number)
    voters, total = await search_voters(store, filters, page=page, limit=limit)
    return PaginatedResponse[list[VoterResponse]](
        data=[VoterResponse.model_validate(v) for v in voters],
        pagination=PaginationMeta(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        ),
    )


@voters_router.get("/{voter_id}", response_model=ApiResponse[VoterResponse])
async def get_voter_endpoint(
    voter_id: int,
    store: VoterStore = Depends(get_voter_store),
) -> ApiResponse[VoterResponse]:
    """Get one voter by internal id."""
    voter = await get_voter(store, voter_id)
    if voter is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Voter not found")
    return ApiResponse[VoterResponse](data=VoterResponse.model_validate(voter))


@voters_router.post("/{voter_id}/vote", response_model=MessageResponse[VoterResponse])
async def vote(
    voter_id: int,
    store: VoterStore = Depends(get_voter_store),
    mirror: VoteMirror = Depends(get_vote_mirror),
) -> MessageResponse[VoterResponse]:
    """Mark a voter as having voted."""
    voter = await mark_voted(store, mirror, voter_id)
    if voter is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Voter not found")
    return MessageResponse[VoterResponse](
        data=VoterResponse.model_validate(voter),
        message="Vote recorded successfully",
    )


@voters_router.post("/{voter_id}/unvote", response_model=MessageResponse[VoterResponse])
async def unvote(
    voter_id: int,
    store: VoterStore = Depends(get_voter_store),
    mirror: VoteMirror = Depends(get_vote_mirror),
) -> MessageResponse[VoterResponse]:
    """Undo a recorded vote."""
    voter = await unmark_voted(store, mirror, voter_id)
    if voter is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Voter not found")
    return MessageResponse[VoterResponse](
        data=VoterResponse.model_validate(voter),
        message="Vote removed successfully",
    )

"""Aggregate statistics and filter option endpoints."""

from fastapi import APIRouter, Depends

from voter_registry.core.dependencies import get_voter_store
from voter_registry.lib.store import VoterStore
from voter_registry.schemas.common import ApiResponse
from voter_registry.schemas.voter import VoterStats
from voter_registry.services.voter_service import get_stats, list_religions

stats_router = APIRouter(tags=["stats"])


@stats_router.get("/stats", response_model=ApiResponse[VoterStats])
async def stats(store: VoterStore = Depends(get_voter_store)) -> ApiResponse[VoterStats]:
    """Totals, voted share and per-religion breakdown."""
    return ApiResponse[VoterStats](data=await get_stats(store))


@stats_router.get("/religions", response_model=ApiResponse[list[str]])
async def religions(store: VoterStore = Depends(get_voter_store)) -> ApiResponse[list[str]]:
    """Distinct religions for the filter dropdown."""
    return ApiResponse[list[str]](data=await list_religions(store))

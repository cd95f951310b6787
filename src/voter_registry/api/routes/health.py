"""Health check endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter

from voter_registry.schemas.common import HealthResponse

health_router = APIRouter(tags=["health"])


@health_router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse(timestamp=datetime.now(UTC).isoformat())

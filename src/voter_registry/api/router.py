"""Root API router and middleware registration."""

from fastapi import APIRouter, FastAPI

from voter_registry.api.middleware import SecurityHeadersMiddleware, setup_cors
from voter_registry.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    Args:
        settings: Application settings.

    Returns:
        Router mounted under ``settings.api_prefix``.
    """
    from voter_registry.api.routes.health import health_router
    from voter_registry.api.routes.stats import stats_router
    from voter_registry.api.routes.voters import voters_router

    root_router = APIRouter(prefix=settings.api_prefix)
    root_router.include_router(health_router)
    root_router.include_router(voters_router)
    root_router.include_router(stats_router)
    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI app."""
    setup_cors(app, settings)
    app.add_middleware(SecurityHeadersMiddleware)

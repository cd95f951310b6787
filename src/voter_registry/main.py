"""FastAPI application factory.

Creates the FastAPI app with lifespan management and exception handlers
that render every error in the ``{success: false, error}`` envelope.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from voter_registry.core.config import get_settings
from voter_registry.core.database import Database
from voter_registry.core.logging import setup_logging
from voter_registry.lib.sheets.mirror import build_vote_mirror
from voter_registry.lib.store import StoreError, VoterStore


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Build the store and vote mirror on startup, dispose the engine on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)
    database = Database.from_url(settings.database_url, schema=settings.database_schema)
    app.state.store = VoterStore(database)
    app.state.vote_mirror = build_vote_mirror(settings)

    yield

    await database.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Voter Registry API",
        description="Voter lookup, vote marking and turnout statistics",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(422, "; ".join(f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors()))

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error(f"{request.method} {request.url.path} failed in {exc.operation}: {exc.message}")
        return _error(500, exc.message)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"{request.method} {request.url.path} failed")
        return _error(500, str(exc))

    from voter_registry.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app

"""Fixtures for API tests: the real app wired to the in-memory store."""

from collections.abc import AsyncGenerator
from unittest.mock import patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from voter_registry.core.config import Settings
from voter_registry.core.dependencies import get_vote_mirror, get_voter_store
from voter_registry.lib.sheets.mirror import NullVoteMirror, VoteMirror
from voter_registry.lib.store import VoterStore
from voter_registry.main import create_app


@pytest.fixture
def mirror() -> VoteMirror:
    return NullVoteMirror()


@pytest.fixture
def app(settings: Settings, store: VoterStore, mirror: VoteMirror) -> FastAPI:
    with patch("voter_registry.main.get_settings", return_value=settings):
        application = create_app()
    application.dependency_overrides[get_voter_store] = lambda: store
    application.dependency_overrides[get_vote_mirror] = lambda: mirror
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

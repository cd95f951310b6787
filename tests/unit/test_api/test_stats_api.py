"""Tests for the stats, religions and health endpoints."""

from collections.abc import Awaitable, Callable
from unittest.mock import AsyncMock, MagicMock

from fastapi import FastAPI
from httpx import AsyncClient

from voter_registry.core.dependencies import get_voter_store
from voter_registry.lib.store import StoreError
from voter_registry.models.voter import Voter
from voter_registry.services.voter_service import UNSPECIFIED_RELIGION

Seed = Callable[..., Awaitable[list[Voter]]]


async def test_stats(client: AsyncClient, seed: Seed, voter_factory) -> None:
    await seed(
        voter_factory(religion="Maronite", has_voted=True),
        voter_factory(religion="Maronite"),
        voter_factory(religion=None),
        voter_factory(religion="Sunni", has_voted=True),
    )

    response = await client.get("/api/stats")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 4
    assert data["voted"] == 2
    assert data["notVoted"] == 2
    assert data["percentage"] == "50.00"
    assert data["byReligion"] == {
        "Maronite": {"total": 2, "voted": 1},
        UNSPECIFIED_RELIGION: {"total": 1, "voted": 0},
        "Sunni": {"total": 1, "voted": 1},
    }


async def test_stats_empty(client: AsyncClient) -> None:
    response = await client.get("/api/stats")

    data = response.json()["data"]
    assert data["percentage"] == 0
    assert data["byReligion"] == {}


async def test_religions(client: AsyncClient, seed: Seed, voter_factory) -> None:
    await seed(voter_factory(religion="Sunni"), voter_factory(religion="--"), voter_factory(religion="Maronite"))

    response = await client.get("/api/religions")

    assert response.json() == {"success": True, "data": ["Maronite", "Sunni"]}


async def test_health(client: AsyncClient) -> None:
    response = await client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["timestamp"]


async def test_security_headers(client: AsyncClient) -> None:
    response = await client.get("/api/health")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


async def test_store_failure_is_a_500_envelope(app: FastAPI, client: AsyncClient) -> None:
    broken = MagicMock()
    broken.count = AsyncMock(side_effect=StoreError("count", "connection refused"))
    app.dependency_overrides[get_voter_store] = lambda: broken

    response = await client.get("/api/stats")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "connection refused"}

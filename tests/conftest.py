"""Shared test fixtures for the async database, voter store and settings."""

from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from voter_registry.core.config import Settings
from voter_registry.core.database import Database
from voter_registry.lib.store import VoterStore
from voter_registry.models.base import Base
from voter_registry.models.voter import Voter


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(database_url="sqlite+aiosqlite:///:memory:", _env_file=None)  # type: ignore[call-arg]


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an in-memory async SQLite engine with the schema applied."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def database(async_engine: AsyncEngine) -> Database:
    """Database wrapper around the test engine."""
    return Database(async_engine)


@pytest.fixture
def store(database: Database) -> VoterStore:
    """Voter store backed by the in-memory database."""
    return VoterStore(database)


async def add_voters(database: Database, *voters: Voter) -> list[Voter]:
    """Insert voters and return them with ids assigned."""
    async with database.session() as session:
        session.add_all(voters)
        await session.commit()
        for voter in voters:
            await session.refresh(voter)
    return list(voters)


@pytest.fixture
def seed(database: Database) -> Callable[..., Awaitable[list[Voter]]]:
    """Return a coroutine function that inserts voters into the test database."""

    async def _seed(*voters: Voter) -> list[Voter]:
        return await add_voters(database, *voters)

    return _seed


def make_voter(**overrides: object) -> Voter:
    """Build a transient voter with sensible defaults."""
    values: dict[str, object] = {
        "full_name": "Georges Haddad",
        "father_name": "Elias",
        "has_voted": False,
    }
    values.update(overrides)
    return Voter(**values)


@pytest.fixture
def voter_factory() -> Callable[..., Voter]:
    """Expose make_voter to tests."""
    return make_voter

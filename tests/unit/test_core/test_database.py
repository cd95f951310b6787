"""Tests for the Database engine wrapper."""

from unittest.mock import patch

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from voter_registry.core.database import Database


class TestDatabase:
    """Tests for Database construction and lifecycle."""

    async def test_session_runs_queries(self) -> None:
        database = Database.from_url("sqlite+aiosqlite:///:memory:")
        try:
            async with database.session() as session:
                assert isinstance(session, AsyncSession)
                assert (await session.execute(text("SELECT 1"))).scalar_one() == 1
        finally:
            await database.dispose()

    def test_pool_sizing_for_server_databases(self) -> None:
        with patch("voter_registry.core.database.create_async_engine") as mock_create:
            Database.from_url("postgresql+asyncpg://localhost/db")

        kwargs = mock_create.call_args.kwargs
        assert kwargs["pool_size"] == 5
        assert kwargs["max_overflow"] == 5

    def test_schema_sets_search_path(self) -> None:
        with patch("voter_registry.core.database.create_async_engine") as mock_create:
            Database.from_url("postgresql+asyncpg://localhost/db", schema="pr_42")

        connect_args = mock_create.call_args.kwargs["connect_args"]
        assert connect_args["server_settings"] == {"search_path": "pr_42,public"}

    def test_sqlite_skips_pool_sizing(self) -> None:
        with patch("voter_registry.core.database.create_async_engine") as mock_create:
            Database.from_url("sqlite+aiosqlite:///:memory:")

        assert "pool_size" not in mock_create.call_args.kwargs

    def test_connect_args_must_be_dict(self) -> None:
        with pytest.raises(TypeError, match="connect_args must be a dict"):
            Database.from_url("postgresql+asyncpg://localhost/db", schema="s", connect_args="bad")

    def test_explicit_poolclass_skips_pool_sizing(self) -> None:
        from sqlalchemy.pool import NullPool

        with patch("voter_registry.core.database.create_async_engine") as mock_create:
            Database.from_url("postgresql+asyncpg://localhost/db", poolclass=NullPool)

        assert "pool_size" not in mock_create.call_args.kwargs

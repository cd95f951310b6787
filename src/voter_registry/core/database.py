"""Async database engine and session management.

``Database`` owns one SQLAlchemy 2.x async engine plus its session factory.
It is constructed once at startup (API lifespan or CLI command), handed to
whatever needs sessions, and disposed on shutdown.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine


class Database:
    """Async engine and session factory with an explicit lifecycle."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, database_url: str, *, schema: str | None = None, **kwargs: object) -> "Database":
        """Create the engine for ``database_url``.

        Args:
            database_url: Async connection string (asyncpg or aiosqlite).
            schema: Optional PostgreSQL schema placed first on the search path.
            **kwargs: Additional arguments passed to create_async_engine.

        Returns:
            A ready-to-use Database.
        """
        if schema is not None:
            connect_args = kwargs.pop("connect_args", {})
            if not isinstance(connect_args, dict):
                msg = "connect_args must be a dict"
                raise TypeError(msg)
            connect_args["server_settings"] = {"search_path": f"{schema},public"}
            kwargs["connect_args"] = connect_args
        # Pool sizing only applies to the default QueuePool
        if "poolclass" not in kwargs and "sqlite" not in database_url:
            kwargs.setdefault("pool_size", 5)
            kwargs.setdefault("max_overflow", 5)
        return cls(create_async_engine(database_url, **kwargs))

    def session(self) -> AsyncSession:
        """Open a new session; use as ``async with database.session() as session``."""
        return self.session_factory()

    async def dispose(self) -> None:
        """Release pooled connections."""
        await self.engine.dispose()

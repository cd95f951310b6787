"""Alembic environment for the voters schema.

Online migrations run through ``Database`` so they connect exactly like the
API and CLI do, including the optional PostgreSQL schema search path.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool, text
from sqlalchemy.engine import Connection

from voter_registry.core.config import get_settings
from voter_registry.core.database import Database
from voter_registry.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
settings = get_settings()


def _configure(**kwargs: object) -> None:
    if settings.database_schema is not None:
        kwargs["version_table_schema"] = settings.database_schema
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)


def run_migrations_offline() -> None:
    """Emit SQL for the migrations without connecting."""
    _configure(url=settings.database_url, literal_binds=True, dialect_opts={"paramstyle": "named"})

    with context.begin_transaction():
        context.run_migrations()


def _run_sync_migrations(connection: Connection) -> None:
    _configure(connection=connection)

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Apply migrations over a single unpooled connection."""
    database = Database.from_url(settings.database_url, schema=settings.database_schema, poolclass=pool.NullPool)
    try:
        async with database.engine.connect() as connection:
            if settings.database_schema is not None:
                await connection.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{settings.database_schema}"'))
                await connection.commit()
            await connection.run_sync(_run_sync_migrations)
    finally:
        await database.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())

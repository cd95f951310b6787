"""Voter store client — thin facade over the voters table.

Every call opens its own session and commits its own writes, so callers
never share a transaction. Driver and SQL failures surface as StoreError.
"""

from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from loguru import logger
from sqlalchemy import delete, distinct, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from voter_registry.core.database import Database
from voter_registry.models.voter import Voter

_UPDATABLE_COLUMNS = frozenset(c.key for c in Voter.__table__.columns) - {"id", "created_at", "updated_at"}


class StoreError(Exception):
    """Raised when a store operation fails at the database layer.

    Args:
        operation: Name of the failing store operation.
        message: Underlying error description.
    """

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        self.message = message
        super().__init__(message)


@dataclass
class VoterFilters:
    """Optional filters for a voter listing; ``None`` disables a filter."""

    search: str | None = None
    religion: str | None = None
    has_voted: bool | None = None
    register_number: str | None = None


def _apply_filters(stmt: Any, filters: VoterFilters) -> Any:
    """Add WHERE clauses for each active filter."""
    if filters.register_number:
        pattern = f"%{filters.register_number}%"
        stmt = stmt.where(
            or_(
                Voter.register_number.ilike(pattern),
                Voter.register_number_clean.ilike(pattern),
            )
        )

    if filters.search:
        pattern = f"%{filters.search}%"
        stmt = stmt.where(
            or_(
                Voter.full_name.ilike(pattern),
                Voter.family_name.ilike(pattern),
                Voter.father_name.ilike(pattern),
            )
        )

    if filters.religion:
        stmt = stmt.where(Voter.religion == filters.religion)

    if filters.has_voted is not None:
        stmt = stmt.where(Voter.has_voted.is_(filters.has_voted))

    return stmt


class VoterStore:
    """Query, update and delete operations on the voters table."""

    def __init__(self, database: Database) -> None:
        self._database = database

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._database.session() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(f"Store operation '{operation}' failed: {e}")
            raise StoreError(operation, str(e)) from e

    async def fetch_page(self, offset: int, limit: int) -> list[Voter]:
        """Return one window of voters ordered by ascending id.

        Args:
            offset: Number of rows to skip.
            limit: Maximum number of rows to return.

        Returns:
            Up to ``limit`` voters.
        """
        async with self._session("fetch_page") as session:
            result = await session.execute(select(Voter).order_by(Voter.id).offset(offset).limit(limit))
            return list(result.scalars().all())

    async def search(self, filters: VoterFilters, *, page: int = 1, limit: int = 50) -> tuple[list[Voter], int]:
        """Filtered, paginated listing ordered by original id.

        Args:
            filters: Active filters, combined with AND.
            page: 1-based page number.
            limit: Page size.

        Returns:
            Tuple of (voters on the page, total matching count).
        """
        query = _apply_filters(select(Voter), filters)
        count_query = _apply_filters(select(func.count(Voter.id)), filters)
        offset = (page - 1) * limit

        async with self._session("search") as session:
            total = (await session.execute(count_query)).scalar_one()
            result = await session.execute(
                query.order_by(Voter.original_id.asc(), Voter.id.asc()).offset(offset).limit(limit)
            )
            return list(result.scalars().all()), total

    async def get(self, voter_id: int) -> Voter | None:
        """Return a single voter by internal id, or None."""
        async with self._session("get") as session:
            return await session.get(Voter, voter_id)

    async def update(self, voter_id: int, values: dict[str, Any]) -> Voter | None:
        """Set column values on one voter.

        Args:
            voter_id: Internal id of the voter to update.
            values: Mapping of column name to new value.

        Returns:
            The refreshed voter, or None if no voter has this id.

        Raises:
            ValueError: If ``values`` names a column that cannot be updated.
            StoreError: If the database rejects the update.
        """
        unknown = set(values) - _UPDATABLE_COLUMNS
        if unknown:
            msg = f"Cannot update voter columns: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        async with self._session("update") as session:
            voter = await session.get(Voter, voter_id)
            if voter is None:
                return None
            for key, value in values.items():
                setattr(voter, key, value)
            await session.commit()
            await session.refresh(voter)
            return voter

    async def delete_many(self, voter_ids: Iterable[int]) -> int:
        """Delete every voter whose id is in ``voter_ids``.

        Returns:
            Number of rows deleted.
        """
        ids = list(voter_ids)
        if not ids:
            return 0
        async with self._session("delete_many") as session:
            result = await session.execute(delete(Voter).where(Voter.id.in_(ids)))
            await session.commit()
            return result.rowcount or 0

    async def count(self, *, has_voted: bool | None = None) -> int:
        """Exact row count, optionally restricted to a voted status."""
        stmt = select(func.count(Voter.id))
        if has_voted is not None:
            stmt = stmt.where(Voter.has_voted.is_(has_voted))
        async with self._session("count") as session:
            return (await session.execute(stmt)).scalar_one()

    async def religion_vote_pairs(self) -> list[tuple[str | None, bool]]:
        """Return ``(religion, has_voted)`` for every voter."""
        async with self._session("religion_vote_pairs") as session:
            result = await session.execute(select(Voter.religion, Voter.has_voted))
            return [(religion, has_voted) for religion, has_voted in result.all()]

    async def distinct_religions(self) -> list[str]:
        """Return distinct non-null religion values."""
        async with self._session("distinct_religions") as session:
            result = await session.execute(select(distinct(Voter.religion)).where(Voter.religion.isnot(None)))
            return [row for (row,) in result.all()]

    async def register_numbers(self) -> list[str | None]:
        """Return the register number of every voter, nulls included."""
        async with self._session("register_numbers") as session:
            result = await session.execute(select(Voter.register_number))
            return list(result.scalars().all())

    async def sample_classified(self, limit: int = 5) -> list[Voter]:
        """Return a few voters that carry a family value."""
        async with self._session("sample_classified") as session:
            result = await session.execute(
                select(Voter).where(Voter.family.isnot(None)).order_by(Voter.id).limit(limit)
            )
            return list(result.scalars().all())

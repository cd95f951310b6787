"""ORM models; importing this package registers every table for Alembic autogenerate."""

from voter_registry.models.base import Base
from voter_registry.models.voter import Voter

__all__ = [
    "Base",
    "Voter",
]

"""Voter model for the voters table."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, false
from sqlalchemy.orm import Mapped, mapped_column

from voter_registry.models.base import Base, TimestampMixin


class Voter(Base, TimestampMixin):
    """Voter record loaded from the registration list and enriched by imports."""

    __tablename__ = "voters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Identifier from the source list, used to correlate spreadsheet rows
    original_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)

    # Identity
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    father_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    mother_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    family_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    # Registration
    register_number: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    register_number_clean: Mapped[str | None] = mapped_column(String(50), nullable=True)
    religion: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)

    # Enrichment from the family/classification import
    family: Mapped[str | None] = mapped_column(String(200), nullable=True)
    classification: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Voting state
    has_voted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    voted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_voters_name_pair", "full_name", "father_name"),
        Index("ix_voters_has_voted", "has_voted"),
    )

    def __repr__(self) -> str:
        return f"<Voter id={self.id} original_id={self.original_id} register_number={self.register_number!r}>"

"""Voter Pydantic v2 response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class VoterResponse(BaseModel):
    """Full voter record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    original_id: int | None = None
    full_name: str
    father_name: str | None = None
    mother_name: str | None = None
    family_name: str | None = None
    register_number: str | None = None
    register_number_clean: str | None = None
    religion: str | None = None
    family: str | None = None
    classification: str | None = None
    has_voted: bool
    voted_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReligionCount(BaseModel):
    """Voter totals for one religion."""

    total: int = 0
    voted: int = 0


class VoterStats(BaseModel):
    """Aggregate voting statistics."""

    model_config = ConfigDict(populate_by_name=True)

    total: int
    voted: int
    not_voted: int = Field(alias="notVoted")
    percentage: str | int = Field(description="Voted share with two decimals, or 0 when the table is empty")
    by_religion: dict[str, ReligionCount] = Field(alias="byReligion")

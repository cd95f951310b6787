"""Plan and result types shared by the reconciliation procedures."""

from dataclasses import dataclass, field
from typing import Any, Protocol


class VoterLike(Protocol):
    """Attributes the planners read from a voter record."""

    id: int
    original_id: Any
    full_name: str
    father_name: str | None
    register_number: str | None


@dataclass(frozen=True)
class SheetRow:
    """One data row of the family/classification spreadsheet."""

    original_id: int | str | None
    family: str | None = None
    classification: str | None = None


@dataclass(frozen=True)
class ClassificationUpdate:
    """New family/classification values for one voter."""

    voter_id: int
    family: str | None
    classification: str | None


@dataclass
class ImportPlan:
    """Updates computed from a spreadsheet, plus match counts."""

    updates: list[ClassificationUpdate] = field(default_factory=list)
    matched: int = 0
    unmatched: int = 0


@dataclass
class DuplicateGroup:
    """Voters sharing one duplicate key; ``members[0]`` is canonical."""

    key: str
    members: list[Any]

    @property
    def canonical(self) -> Any:
        return self.members[0]

    @property
    def redundant(self) -> list[Any]:
        return self.members[1:]


@dataclass
class DedupPlan:
    """Duplicate groups and the ids to delete to resolve them."""

    groups: list[DuplicateGroup] = field(default_factory=list)
    ids_to_delete: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class RegisterNumberUpdate:
    """Replacement register number for one colliding voter."""

    voter_id: int
    old_register_number: str
    new_register_number: str


@dataclass
class RepairPlan:
    """Register-number collisions and the renames that resolve them."""

    groups: dict[str, list[Any]] = field(default_factory=dict)
    updates: list[RegisterNumberUpdate] = field(default_factory=list)


@dataclass
class ApplyResult:
    """Outcome of applying a plan item by item or batch by batch."""

    succeeded: int = 0
    failed: int = 0
    failed_ids: list[int] = field(default_factory=list)
    skipped: int = 0
    skipped_ids: list[int] = field(default_factory=list)

    def record_failure(self, *voter_ids: int) -> None:
        self.failed += len(voter_ids)
        self.failed_ids.extend(voter_ids)

    def record_skip(self, voter_id: int) -> None:
        """Count a voter that no longer exists when its update is applied."""
        self.skipped += 1
        self.skipped_ids.append(voter_id)

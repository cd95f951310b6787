"""Register-number collision repair."""

from collections.abc import Iterable

from voter_registry.lib.reconciler.types import RegisterNumberUpdate, RepairPlan, VoterLike


def plan_register_repairs(voters: Iterable[VoterLike]) -> RepairPlan:
    """Suffix every colliding register number except the first.

    Voters without a register number are never considered colliding. In a
    group of n voters sharing a value, the first keeps it and the i-th
    (0-based, i >= 1) becomes ``"<value>-<i>"``.

    Args:
        voters: Full snapshot ordered by ascending id.

    Returns:
        RepairPlan with the colliding groups and their renames.
    """
    by_number: dict[str, list[VoterLike]] = {}
    for voter in voters:
        if voter.register_number:
            by_number.setdefault(voter.register_number, []).append(voter)

    plan = RepairPlan(groups={number: members for number, members in by_number.items() if len(members) > 1})
    for number, members in plan.groups.items():
        for index, voter in enumerate(members[1:], start=1):
            plan.updates.append(
                RegisterNumberUpdate(
                    voter_id=voter.id,
                    old_register_number=number,
                    new_register_number=f"{number}-{index}",
                )
            )
    return plan


def count_residual_duplicates(register_numbers: Iterable[str | None]) -> int:
    """Number of rows beyond the first for each repeated value.

    Every value is counted, nulls included, so the result is
    ``total - distinct``.
    """
    values = list(register_numbers)
    return len(values) - len(set(values))

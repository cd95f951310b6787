"""Duplicate detection by the (full name, father name) pair."""

from collections.abc import Iterable

from voter_registry.lib.reconciler.types import DedupPlan, DuplicateGroup, VoterLike


def duplicate_key(voter: VoterLike) -> str:
    """Grouping key: lowercased, trimmed ``"<full_name>_<father_name>"``."""
    return f"{voter.full_name}_{voter.father_name}".lower().strip()


def group_duplicates(voters: Iterable[VoterLike]) -> list[DuplicateGroup]:
    """Partition voters by duplicate key and keep groups with 2+ members.

    Member order within a group follows the input order, so with an
    id-ordered snapshot the first member has the lowest id. Groups are
    returned in order of first appearance.
    """
    grouped: dict[str, list[VoterLike]] = {}
    for voter in voters:
        grouped.setdefault(duplicate_key(voter), []).append(voter)

    return [DuplicateGroup(key=key, members=members) for key, members in grouped.items() if len(members) > 1]


def plan_deletions(voters: Iterable[VoterLike]) -> DedupPlan:
    """Keep the first voter of each duplicate group and mark the rest for deletion.

    Args:
        voters: Full snapshot ordered by ascending id.

    Returns:
        DedupPlan listing the duplicate groups and ids to delete.
    """
    groups = group_duplicates(voters)
    ids_to_delete = [voter.id for group in groups for voter in group.redundant]
    return DedupPlan(groups=groups, ids_to_delete=ids_to_delete)

"""Unit tests for duplicate grouping."""

from unittest.mock import MagicMock

from voter_registry.lib.reconciler.dedup import duplicate_key, group_duplicates, plan_deletions


def _mock_voter(voter_id: int, full_name: str, father_name: str | None) -> MagicMock:
    voter = MagicMock()
    voter.id = voter_id
    voter.full_name = full_name
    voter.father_name = father_name
    return voter


class TestDuplicateKey:
    """Tests for the grouping key."""

    def test_lowercased_and_joined(self) -> None:
        assert duplicate_key(_mock_voter(1, "Georges Haddad", "Elias")) == "georges haddad_elias"

    def test_outer_whitespace_trimmed(self) -> None:
        assert duplicate_key(_mock_voter(1, "  Georges", "Elias  ")) == "georges_elias"

    def test_missing_father_name_is_stable(self) -> None:
        assert duplicate_key(_mock_voter(1, "Rita", None)) == duplicate_key(_mock_voter(2, "RITA", None))


class TestGroupDuplicates:
    """Tests for group_duplicates."""

    def test_only_groups_with_multiple_members(self) -> None:
        voters = [
            _mock_voter(1, "Georges", "Elias"),
            _mock_voter(2, "Maya", "Tony"),
            _mock_voter(3, "GEORGES", "elias"),
        ]
        groups = group_duplicates(voters)
        assert len(groups) == 1
        assert [v.id for v in groups[0].members] == [1, 3]
        assert groups[0].canonical.id == 1
        assert [v.id for v in groups[0].redundant] == [3]

    def test_no_duplicates(self) -> None:
        assert group_duplicates([_mock_voter(1, "A", "B"), _mock_voter(2, "A", "C")]) == []


class TestPlanDeletions:
    """Tests for plan_deletions."""

    def test_keeps_lowest_id_of_each_group(self) -> None:
        voters = [
            _mock_voter(1, "Georges", "Elias"),
            _mock_voter(2, "Maya", "Tony"),
            _mock_voter(3, "Georges", "Elias"),
            _mock_voter(4, "Maya", "Tony"),
            _mock_voter(5, "Georges", "Elias"),
        ]
        plan = plan_deletions(voters)
        assert plan.ids_to_delete == [3, 5, 4]
        assert len(plan.groups) == 2

    def test_deterministic(self) -> None:
        voters = [_mock_voter(i, "Same", "Name") for i in range(1, 6)]
        assert plan_deletions(voters).ids_to_delete == plan_deletions(voters).ids_to_delete

    def test_idempotent(self) -> None:
        voters = [
            _mock_voter(1, "Georges", "Elias"),
            _mock_voter(2, "Georges", "Elias"),
            _mock_voter(3, "Maya", "Tony"),
        ]
        first = plan_deletions(voters)
        remaining = [v for v in voters if v.id not in set(first.ids_to_delete)]
        second = plan_deletions(remaining)
        assert first.ids_to_delete == [2]
        assert second.ids_to_delete == []
        assert second.groups == []

    def test_scenario_duplicate_of_second_record(self) -> None:
        """Two records plus a copy of the second: only the copy is deleted."""
        voters = [
            _mock_voter(1, "Georges Haddad", "Elias"),
            _mock_voter(2, "Maya Khoury", "Tony"),
            _mock_voter(3, "Maya Khoury", "Tony"),
        ]
        plan = plan_deletions(voters)
        assert plan.ids_to_delete == [3]

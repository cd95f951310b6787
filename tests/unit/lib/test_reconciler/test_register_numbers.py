"""Unit tests for register-number repair planning."""

from collections import Counter
from unittest.mock import MagicMock

from voter_registry.lib.reconciler.register_numbers import count_residual_duplicates, plan_register_repairs


def _mock_voter(voter_id: int, register_number: str | None) -> MagicMock:
    voter = MagicMock()
    voter.id = voter_id
    voter.full_name = f"Voter {voter_id}"
    voter.register_number = register_number
    return voter


class TestPlanRegisterRepairs:
    """Tests for plan_register_repairs."""

    def test_suffixes_all_but_first(self) -> None:
        voters = [_mock_voter(1, "120"), _mock_voter(2, "120"), _mock_voter(3, "120"), _mock_voter(4, "121")]
        plan = plan_register_repairs(voters)

        assert list(plan.groups) == ["120"]
        assert [(u.voter_id, u.old_register_number, u.new_register_number) for u in plan.updates] == [
            (2, "120", "120-1"),
            (3, "120", "120-2"),
        ]

    def test_null_and_empty_never_collide(self) -> None:
        voters = [_mock_voter(1, None), _mock_voter(2, None), _mock_voter(3, ""), _mock_voter(4, "")]
        plan = plan_register_repairs(voters)
        assert plan.groups == {}
        assert plan.updates == []

    def test_result_has_no_duplicates_and_keeps_one_original(self) -> None:
        voters = [
            _mock_voter(1, "5"),
            _mock_voter(2, "7"),
            _mock_voter(3, "5"),
            _mock_voter(4, "7"),
            _mock_voter(5, "9"),
        ]
        plan = plan_register_repairs(voters)
        renamed = {u.voter_id: u.new_register_number for u in plan.updates}
        final = [renamed.get(v.id, v.register_number) for v in voters]

        assert max(Counter(final).values()) == 1
        assert final.count("5") == 1
        assert final.count("7") == 1
        assert renamed == {3: "5-1", 4: "7-1"}


class TestCountResidualDuplicates:
    """Tests for count_residual_duplicates."""

    def test_unique(self) -> None:
        assert count_residual_duplicates(["1", "2", "3"]) == 0

    def test_counts_extra_rows(self) -> None:
        assert count_residual_duplicates(["1", "1", "1", "2", "2"]) == 3

    def test_empty(self) -> None:
        assert count_residual_duplicates([]) == 0

"""Unit tests for the spreadsheet-to-store matcher."""

import math
from unittest.mock import MagicMock

from voter_registry.lib.reconciler.matcher import (
    build_voter_lookup,
    cell_text,
    normalize_original_id,
    plan_classification_updates,
)
from voter_registry.lib.reconciler.types import ClassificationUpdate, SheetRow


def _mock_voter(voter_id: int, original_id: int | None) -> MagicMock:
    voter = MagicMock()
    voter.id = voter_id
    voter.original_id = original_id
    return voter


class TestNormalizeOriginalId:
    """Tests for spreadsheet id coercion."""

    def test_integer_forms_are_equal(self) -> None:
        assert normalize_original_id(10) == 10
        assert normalize_original_id(10.0) == 10
        assert normalize_original_id("10") == 10
        assert normalize_original_id(" 10 ") == 10

    def test_blank_values(self) -> None:
        assert normalize_original_id(None) is None
        assert normalize_original_id("") is None
        assert normalize_original_id("   ") is None
        assert normalize_original_id(math.nan) is None

    def test_non_numeric_kept_as_text(self) -> None:
        assert normalize_original_id(" A-12 ") == "A-12"
        assert normalize_original_id(10.5) == "10.5"


class TestCellText:
    """Tests for enrichment cell conversion."""

    def test_empty_cells_map_to_none(self) -> None:
        assert cell_text(None) is None
        assert cell_text("") is None
        assert cell_text("  ") is None
        assert cell_text(math.nan) is None

    def test_text_is_stripped(self) -> None:
        assert cell_text(" Haddad ") == "Haddad"


class TestBuildVoterLookup:
    """Tests for the original id lookup."""

    def test_later_voter_wins(self) -> None:
        first = _mock_voter(1, 10)
        second = _mock_voter(2, 10)
        lookup = build_voter_lookup([first, second])
        assert lookup[10] is second

    def test_voters_without_original_id_are_skipped(self) -> None:
        lookup = build_voter_lookup([_mock_voter(1, None)])
        assert lookup == {}


class TestPlanClassificationUpdates:
    """Tests for plan_classification_updates."""

    def test_matched_row_produces_update(self) -> None:
        voters = [_mock_voter(1, 10), _mock_voter(2, 11)]
        rows = [SheetRow(original_id=11, family="Haddad", classification="A")]

        plan = plan_classification_updates(rows, voters)

        assert plan.updates == [ClassificationUpdate(voter_id=2, family="Haddad", classification="A")]
        assert plan.matched == 1
        assert plan.unmatched == 0

    def test_unmatched_row_counted_without_update(self) -> None:
        voters = [_mock_voter(1, 10)]
        rows = [SheetRow(original_id=99, family="Haddad", classification="A")]

        plan = plan_classification_updates(rows, voters)

        assert plan.updates == []
        assert plan.matched == 0
        assert plan.unmatched == 1

    def test_empty_cells_become_none_not_empty_string(self) -> None:
        voters = [_mock_voter(1, 10)]
        rows = [SheetRow(original_id=10, family="", classification=None)]

        plan = plan_classification_updates(rows, voters)

        assert plan.updates[0].family is None
        assert plan.updates[0].classification is None

    def test_rows_without_id_are_ignored(self) -> None:
        voters = [_mock_voter(1, 10)]
        rows = [SheetRow(original_id=None, family="X"), SheetRow(original_id="", family="Y")]

        plan = plan_classification_updates(rows, voters)

        assert plan.updates == []
        assert plan.matched == 0
        assert plan.unmatched == 0

    def test_float_spreadsheet_id_matches_integer_original_id(self) -> None:
        voters = [_mock_voter(7, 10)]
        rows = [SheetRow(original_id=10.0, family="Khoury", classification="B")]

        plan = plan_classification_updates(rows, voters)

        assert plan.matched == 1
        assert plan.updates[0].voter_id == 7

    def test_counts_over_mixed_rows(self) -> None:
        voters = [_mock_voter(1, 10), _mock_voter(2, 11)]
        rows = [
            SheetRow(original_id=10, family="A"),
            SheetRow(original_id=12, family="B"),
            SheetRow(original_id=11, family="C"),
            SheetRow(original_id=13),
        ]

        plan = plan_classification_updates(rows, voters)

        assert plan.matched == 2
        assert plan.unmatched == 2
        assert [u.voter_id for u in plan.updates] == [1, 2]

"""Spreadsheet-to-store matching for the family/classification import."""

import math
from collections.abc import Iterable
from typing import Any

from voter_registry.lib.reconciler.types import ClassificationUpdate, ImportPlan, SheetRow, VoterLike


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def normalize_original_id(value: Any) -> int | str | None:
    """Coerce a spreadsheet id cell to the form stored in ``original_id``.

    Workbook readers hand back ``10``, ``10.0`` or ``"10"`` for the same
    cell depending on its formatting; all three become ``10``. Other
    non-blank values are kept as stripped strings so they can still be
    reported as unmatched.
    """
    if _is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else str(value)
    text = str(value).strip()
    if text.lstrip("-").isdigit():
        return int(text)
    return text


def cell_text(value: Any) -> str | None:
    """Return a cell as text, mapping empty cells to None."""
    if _is_blank(value):
        return None
    return str(value).strip()


def build_voter_lookup(voters: Iterable[VoterLike]) -> dict[Any, VoterLike]:
    """Map ``original_id`` to voter; a later voter with the same id wins."""
    return {voter.original_id: voter for voter in voters if voter.original_id is not None}


def plan_classification_updates(rows: Iterable[SheetRow], voters: Iterable[VoterLike]) -> ImportPlan:
    """Match spreadsheet rows to voters by original id.

    Rows without an id are skipped. Rows whose id is not in the store are
    counted as unmatched and produce no update. Matched rows overwrite both
    enrichment fields, so an empty cell clears the stored value.

    Args:
        rows: Parsed spreadsheet rows.
        voters: Full snapshot of the voters table.

    Returns:
        ImportPlan with one update per matched row.
    """
    lookup = build_voter_lookup(voters)
    plan = ImportPlan()

    for row in rows:
        original_id = normalize_original_id(row.original_id)
        if original_id is None:
            continue

        voter = lookup.get(original_id)
        if voter is None:
            plan.unmatched += 1
            continue

        plan.updates.append(
            ClassificationUpdate(
                voter_id=voter.id,
                family=cell_text(row.family),
                classification=cell_text(row.classification),
            )
        )
        plan.matched += 1

    return plan

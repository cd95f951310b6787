"""Reconciliation library public API.

Pure planning functions for the maintenance commands: matching spreadsheet
rows to voters, grouping duplicates, and repairing register numbers.
"""

from voter_registry.lib.reconciler.dedup import duplicate_key, group_duplicates, plan_deletions
from voter_registry.lib.reconciler.matcher import (
    cell_text,
    normalize_original_id,
    plan_classification_updates,
)
from voter_registry.lib.reconciler.register_numbers import count_residual_duplicates, plan_register_repairs
from voter_registry.lib.reconciler.types import (
    ApplyResult,
    ClassificationUpdate,
    DedupPlan,
    DuplicateGroup,
    ImportPlan,
    RegisterNumberUpdate,
    RepairPlan,
    SheetRow,
)

__all__ = [
    "ApplyResult",
    "ClassificationUpdate",
    "DedupPlan",
    "DuplicateGroup",
    "ImportPlan",
    "RegisterNumberUpdate",
    "RepairPlan",
    "SheetRow",
    "cell_text",
    "count_residual_duplicates",
    "duplicate_key",
    "group_duplicates",
    "normalize_original_id",
    "plan_classification_updates",
    "plan_deletions",
    "plan_register_repairs",
]

"""Reconciliation service — load, plan, confirm, apply and verify.

Each maintenance procedure takes a full snapshot of the voters table, builds
a plan with the pure functions in ``voter_registry.lib.reconciler``, asks the
injected ``confirm`` callback whether to proceed, applies the plan, and
verifies the result. Snapshot failures propagate to the caller. Failures
while applying are counted per item, and a failed verification is recorded
on the report; neither stops the run.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from voter_registry.lib.reconciler import (
    ApplyResult,
    DedupPlan,
    ImportPlan,
    RepairPlan,
    SheetRow,
    count_residual_duplicates,
    plan_classification_updates,
    plan_deletions,
    plan_register_repairs,
)
from voter_registry.lib.store import DEFAULT_PAGE_SIZE, StoreError, VoterStore, fetch_all

DEFAULT_DELETE_BATCH_SIZE = 100
_IMPORT_PROGRESS_EVERY = 100
_REPAIR_PROGRESS_EVERY = 50


@dataclass
class RegisterCheck:
    """Register-number uniqueness after a repair."""

    total: int
    unique: int

    @property
    def residual_duplicates(self) -> int:
        return self.total - self.unique

    @property
    def is_clean(self) -> bool:
        return self.total == self.unique


@dataclass
class ImportReport:
    plan: ImportPlan
    applied: ApplyResult | None = None
    sample: list[Any] = field(default_factory=list)
    verification_error: str | None = None

    @property
    def cancelled(self) -> bool:
        return self.applied is None


@dataclass
class DedupReport:
    plan: DedupPlan
    count_before: int
    applied: ApplyResult | None = None
    removed: int | None = None
    count_after: int | None = None
    verification_error: str | None = None

    @property
    def cancelled(self) -> bool:
        return self.applied is None and bool(self.plan.ids_to_delete)


@dataclass
class RepairReport:
    plan: RepairPlan
    applied: ApplyResult | None = None
    check: RegisterCheck | None = None
    verification_error: str | None = None

    @property
    def cancelled(self) -> bool:
        return self.applied is None and bool(self.plan.updates)


Confirm = Callable[[Any], bool]


async def apply_classification_updates(store: VoterStore, plan: ImportPlan) -> ApplyResult:
    """Write family/classification one voter at a time.

    Args:
        store: Voter store.
        plan: Import plan from ``plan_classification_updates``.

    Returns:
        Per-item success, skip and failure counts.
    """
    result = ApplyResult()
    total = len(plan.updates)

    for position, update in enumerate(plan.updates, start=1):
        try:
            voter = await store.update(
                update.voter_id,
                {"family": update.family, "classification": update.classification},
            )
        except StoreError as e:
            logger.error(f"Error updating ID {update.voter_id}: {e.message}")
            result.record_failure(update.voter_id)
        else:
            if voter is None:
                logger.warning(f"Skipped ID {update.voter_id}: voter no longer exists")
                result.record_skip(update.voter_id)
            else:
                result.succeeded += 1

        if position % _IMPORT_PROGRESS_EVERY == 0 or position == total:
            logger.info(f"Progress: {position}/{total} updated...")

    return result


async def apply_deletions(
    store: VoterStore,
    voter_ids: Iterable[int],
    batch_size: int = DEFAULT_DELETE_BATCH_SIZE,
) -> ApplyResult:
    """Delete voters in fixed-size batches; a failed batch does not stop the rest.

    Args:
        store: Voter store.
        voter_ids: Ids to delete.
        batch_size: Ids per delete statement.

    Returns:
        Counts of deleted and failed ids.
    """
    ids = list(voter_ids)
    result = ApplyResult()

    for start in range(0, len(ids), batch_size):
        batch = ids[start : start + batch_size]
        batch_number = start // batch_size + 1
        try:
            await store.delete_many(batch)
        except StoreError as e:
            logger.error(f"Error deleting batch {batch_number}: {e.message}")
            result.record_failure(*batch)
            continue
        result.succeeded += len(batch)
        logger.info(f"Deleted batch {batch_number}: {len(batch)} records")

    return result


async def apply_register_repairs(store: VoterStore, plan: RepairPlan) -> ApplyResult:
    """Rename colliding register numbers one voter at a time."""
    result = ApplyResult()
    total = len(plan.updates)

    for update in plan.updates:
        try:
            voter = await store.update(update.voter_id, {"register_number": update.new_register_number})
        except StoreError as e:
            logger.error(f"Error updating ID {update.voter_id}: {e.message}")
            result.record_failure(update.voter_id)
            continue
        if voter is None:
            logger.warning(f"Skipped ID {update.voter_id}: voter no longer exists")
            result.record_skip(update.voter_id)
            continue
        result.succeeded += 1
        if result.succeeded % _REPAIR_PROGRESS_EVERY == 0:
            logger.info(f"Progress: {result.succeeded}/{total} updated...")

    return result


async def verify_deduplication(store: VoterStore, count_before: int) -> tuple[int, int]:
    """Re-count the table after deletion.

    Returns:
        Tuple of (final record count, records removed).
    """
    count_after = await store.count()
    return count_after, count_before - count_after


async def verify_register_numbers(store: VoterStore) -> RegisterCheck:
    """Check that every register number is unique after a repair."""
    numbers = await store.register_numbers()
    check = RegisterCheck(total=len(numbers), unique=len(numbers) - count_residual_duplicates(numbers))
    if check.is_clean:
        logger.info("All register numbers are unique")
    else:
        logger.warning(f"Still {check.residual_duplicates} duplicate register numbers remaining")
    return check


async def run_import(
    store: VoterStore,
    rows: Iterable[SheetRow],
    confirm: Confirm,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> ImportReport:
    """Match spreadsheet rows to voters and write family/classification.

    Args:
        store: Voter store.
        rows: Parsed spreadsheet rows.
        confirm: Called with the plan; the plan is applied only if it returns True.
        page_size: Window size for the snapshot fetch.

    Returns:
        ImportReport; ``applied`` is None when the operator declined.
    """
    logger.info("Fetching all voters from database...")
    voters = await fetch_all(store, page_size)
    logger.info(f"Total voters in database: {len(voters)}")

    plan = plan_classification_updates(rows, voters)
    logger.info(f"Matched: {plan.matched}, unmatched: {plan.unmatched}, updates: {len(plan.updates)}")

    report = ImportReport(plan=plan)
    if not confirm(plan):
        logger.info("Import cancelled")
        return report

    applied = await apply_classification_updates(store, plan)
    report.applied = applied
    logger.info(f"Import complete: {applied.succeeded} updated, {applied.skipped} skipped, {applied.failed} errors")
    try:
        report.sample = await store.sample_classified()
    except StoreError as e:
        logger.error(f"Error fetching updated sample: {e.message}")
        report.verification_error = e.message
    return report


async def run_deduplication(
    store: VoterStore,
    confirm: Confirm,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    batch_size: int = DEFAULT_DELETE_BATCH_SIZE,
) -> DedupReport:
    """Delete every voter that repeats an earlier voter's name pair.

    Args:
        store: Voter store.
        confirm: Called with the plan when there is something to delete.
        page_size: Window size for the snapshot fetch.
        batch_size: Ids per delete statement.

    Returns:
        DedupReport with the plan and, when applied, the verified counts.
    """
    logger.info("Fetching all records from database...")
    voters = await fetch_all(store, page_size)
    logger.info(f"Total records found: {len(voters)}")

    plan = plan_deletions(voters)
    report = DedupReport(plan=plan, count_before=len(voters))
    logger.info(f"Found {len(plan.groups)} groups with duplicates")

    if not plan.ids_to_delete:
        logger.info("No duplicates found")
        return report
    if not confirm(plan):
        logger.info("Deduplication cancelled")
        return report

    report.applied = await apply_deletions(store, plan.ids_to_delete, batch_size)
    try:
        report.count_after, report.removed = await verify_deduplication(store, report.count_before)
    except StoreError as e:
        logger.error(f"Error getting final count: {e.message}")
        report.verification_error = e.message
        return report
    logger.info(f"Deduplication complete: {report.removed} records removed, {report.count_after} remain")
    return report


async def run_register_repair(
    store: VoterStore,
    confirm: Confirm,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> RepairReport:
    """Suffix colliding register numbers so every value is unique.

    Args:
        store: Voter store.
        confirm: Called with the plan when there is something to rename.
        page_size: Window size for the snapshot fetch.

    Returns:
        RepairReport with the plan and, when applied, the uniqueness check.
    """
    voters = await fetch_all(store, page_size)
    logger.info(f"Total records: {len(voters)}")

    plan = plan_register_repairs(voters)
    report = RepairReport(plan=plan)
    logger.info(f"Found {len(plan.groups)} register numbers with multiple voters")

    if not plan.updates:
        logger.info("No duplicate register numbers found")
        return report
    if not confirm(plan):
        logger.info("Register number repair cancelled")
        return report

    applied = await apply_register_repairs(store, plan)
    report.applied = applied
    logger.info(f"Update complete: {applied.succeeded} updated, {applied.skipped} skipped, {applied.failed} errors")
    try:
        report.check = await verify_register_numbers(store)
    except StoreError as e:
        logger.error(f"Error verifying register numbers: {e.message}")
        report.verification_error = e.message
    return report

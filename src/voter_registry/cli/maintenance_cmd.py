"""Maintenance commands that reconcile the voters table.

Each command loads the full table, prints the computed plan, asks for
confirmation (unless ``--yes``), applies the plan and prints a summary.
A failure while loading data exits with code 1.
"""

import asyncio
import zipfile
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

import typer
from loguru import logger

from voter_registry.core.config import Settings, get_settings
from voter_registry.core.database import Database
from voter_registry.lib.reconciler import DedupPlan, ImportPlan, RepairPlan
from voter_registry.lib.store import StoreError, VoterStore

T = TypeVar("T")

_RULE = "=" * 60


def _confirmation(question: str, assume_yes: bool) -> Callable[[object], bool]:
    """Build the confirm callback handed to the reconciliation service."""

    def confirm(_plan: object) -> bool:
        if assume_yes:
            return True
        return typer.confirm(question, default=False)

    return confirm


async def _run_with_store(settings: Settings, action: Callable[[VoterStore], Awaitable[T]]) -> T:
    """Run ``action`` against a store whose engine lives for this command only."""
    database = Database.from_url(settings.database_url, schema=settings.database_schema)
    try:
        return await action(VoterStore(database))
    finally:
        await database.dispose()


def _fatal(context: str, exc: Exception) -> typer.Exit:
    logger.error(f"{context}: {exc}")
    typer.echo(f"Error {context.lower()}: {exc}", err=True)
    return typer.Exit(code=1)


def _print_import_plan(plan: ImportPlan) -> None:
    typer.echo(f"\nMatched: {plan.matched}")
    typer.echo(f"Unmatched: {plan.unmatched}")
    typer.echo(f"Total updates to perform: {len(plan.updates)}\n")


def _print_dedup_plan(plan: DedupPlan) -> None:
    for group in plan.groups:
        typer.echo(f'\nGroup with key "{group.key}" has {len(group.members)} records:')
        for index, voter in enumerate(group.members, start=1):
            typer.echo(f"  {index}. ID: {voter.id}, Name: {voter.full_name}, Voted: {voter.has_voted}")
        typer.echo(f"  -> Keeping ID: {group.canonical.id}")
        typer.echo(f"  -> Deleting {len(group.redundant)} duplicate(s): {', '.join(str(v.id) for v in group.redundant)}")
    typer.echo(f"\n{_RULE}\nTotal duplicates to remove: {len(plan.ids_to_delete)}\n{_RULE}\n")


def _print_repair_plan(plan: RepairPlan) -> None:
    renames = {update.voter_id: update.new_register_number for update in plan.updates}
    for number, members in plan.groups.items():
        typer.echo(f'Register "{number}" has {len(members)} voters:')
        for index, voter in enumerate(members, start=1):
            if voter.id in renames:
                typer.echo(f'  {index}. ID {voter.id}: "{voter.full_name}" - UPDATING to {renames[voter.id]}')
            else:
                typer.echo(f'  {index}. ID {voter.id}: "{voter.full_name}" - KEEPING as {number}')
        typer.echo("")
    typer.echo(f"\n{_RULE}\nTotal updates needed: {len(plan.updates)}\n{_RULE}\n")


def import_classification(
    file: Path = typer.Argument(..., help="Path to the family/classification .xlsx workbook", exists=True),  # noqa: B008
    yes: bool = typer.Option(False, "--yes", "-y", help="Apply without asking for confirmation"),
) -> None:
    """Import family and classification values matched by original id."""
    asyncio.run(_import_classification(file, yes))


async def _import_classification(file_path: Path, assume_yes: bool) -> None:
    from voter_registry.lib.sheets.workbook import read_classification_rows
    from voter_registry.services.reconcile_service import run_import

    settings = get_settings()
    typer.echo("Starting import of family and classification data...\n")

    try:
        rows = read_classification_rows(file_path)
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        raise _fatal("Reading workbook", e) from e
    typer.echo(f"Total rows in workbook: {len(rows)}\n")

    question = "Do you want to proceed with updating the database?"

    def confirm(plan: ImportPlan) -> bool:
        _print_import_plan(plan)
        return _confirmation(question, assume_yes)(plan)

    try:
        report = await _run_with_store(
            settings,
            lambda store: run_import(store, rows, confirm, page_size=settings.fetch_page_size),
        )
    except StoreError as e:
        raise _fatal("During import", e) from e

    if report.applied is None:
        typer.echo("\nOperation cancelled.")
        return

    typer.echo(f"\n{_RULE}\nImport complete!")
    typer.echo(f"Successfully updated: {report.applied.succeeded}")
    if report.applied.skipped:
        typer.echo(f"Skipped (no longer in database): {report.applied.skipped}")
    typer.echo(f"Errors: {report.applied.failed}\n{_RULE}")
    if report.verification_error is not None:
        typer.echo(f"\nVerification failed: {report.verification_error}")
        return
    typer.echo("\nSample of updated records:")
    for voter in report.sample:
        typer.echo(f"  {voter.id}: {voter.full_name} | {voter.family} | {voter.classification}")


def remove_duplicates(
    yes: bool = typer.Option(False, "--yes", "-y", help="Delete without asking for confirmation"),
) -> None:
    """Delete voters that repeat an earlier voter's full name and father name."""
    asyncio.run(_remove_duplicates(yes))


async def _remove_duplicates(assume_yes: bool) -> None:
    from voter_registry.services.reconcile_service import run_deduplication

    settings = get_settings()
    typer.echo("Starting deduplication process...\n")
    question = "Do you want to proceed with deletion?"

    def confirm(plan: DedupPlan) -> bool:
        _print_dedup_plan(plan)
        return _confirmation(question, assume_yes)(plan)

    try:
        report = await _run_with_store(
            settings,
            lambda store: run_deduplication(
                store,
                confirm,
                page_size=settings.fetch_page_size,
                batch_size=settings.delete_batch_size,
            ),
        )
    except StoreError as e:
        raise _fatal("During deduplication", e) from e

    typer.echo(f"Total records found: {report.count_before}")
    if not report.plan.ids_to_delete:
        typer.echo("No duplicates found. Database is clean!")
        return
    if report.applied is None:
        typer.echo("\nOperation cancelled.")
        return

    typer.echo("\nDeduplication complete!")
    if report.applied.failed:
        typer.echo(f"Failed to delete: {report.applied.failed}")
    if report.verification_error is not None:
        typer.echo(f"\nVerification failed: {report.verification_error}")
        return
    typer.echo(f"\nFinal record count: {report.count_after}")
    typer.echo(f"Records removed: {report.removed}")


def fix_register_numbers(
    yes: bool = typer.Option(False, "--yes", "-y", help="Update without asking for confirmation"),
) -> None:
    """Make register numbers unique by suffixing later duplicates."""
    asyncio.run(_fix_register_numbers(yes))


async def _fix_register_numbers(assume_yes: bool) -> None:
    from voter_registry.services.reconcile_service import run_register_repair

    settings = get_settings()
    typer.echo("Fixing duplicate register numbers...\n")
    question = "Do you want to proceed with updating register numbers?"

    def confirm(plan: RepairPlan) -> bool:
        _print_repair_plan(plan)
        return _confirmation(question, assume_yes)(plan)

    try:
        report = await _run_with_store(
            settings,
            lambda store: run_register_repair(store, confirm, page_size=settings.fetch_page_size),
        )
    except StoreError as e:
        raise _fatal("Fixing register numbers", e) from e

    if not report.plan.updates:
        typer.echo("No duplicates found!")
        return
    if report.applied is None:
        typer.echo("\nOperation cancelled.")
        return

    typer.echo(f"\n{_RULE}\nUpdate complete!")
    typer.echo(f"Successfully updated: {report.applied.succeeded}")
    if report.applied.skipped:
        typer.echo(f"Skipped (no longer in database): {report.applied.skipped}")
    typer.echo(f"Errors: {report.applied.failed}\n{_RULE}")

    if report.verification_error is not None:
        typer.echo(f"\nVerification failed: {report.verification_error}")
    if report.check is not None:
        typer.echo(f"\nTotal records: {report.check.total}")
        typer.echo(f"Unique register numbers: {report.check.unique}")
        if report.check.is_clean:
            typer.echo("All register numbers are now unique!")
        else:
            typer.echo(f"Still {report.check.residual_duplicates} duplicates remaining")

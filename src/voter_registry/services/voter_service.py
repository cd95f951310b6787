"""Voter service — listing, detail, vote marking and statistics."""

from datetime import UTC, datetime

from loguru import logger

from voter_registry.lib.sheets.mirror import SheetsMirrorError, VoteMirror
from voter_registry.lib.store import VoterFilters, VoterStore
from voter_registry.models.voter import Voter
from voter_registry.schemas.voter import ReligionCount, VoterStats

UNSPECIFIED_RELIGION = "غير محدد"
RELIGION_PLACEHOLDER = "--"


def parse_voted_filter(voted: str | None) -> bool | None:
    """Map the ``voted`` query value to a filter; anything but true/false disables it."""
    if voted == "true":
        return True
    if voted == "false":
        return False
    return None


def build_filters(
    *,
    search: str | None = None,
    religion: str | None = None,
    voted: str | None = None,
    register_number: str | None = None,
) -> VoterFilters:
    """Translate raw query parameters into store filters."""
    return VoterFilters(
        search=search or None,
        religion=religion if religion and religion != "all" else None,
        has_voted=parse_voted_filter(voted),
        register_number=register_number or None,
    )


async def search_voters(
    store: VoterStore,
    filters: VoterFilters,
    *,
    page: int = 1,
    limit: int = 50,
) -> tuple[list[Voter], int]:
    """Return one page of matching voters and the total match count."""
    return await store.search(filters, page=page, limit=limit)


async def get_voter(store: VoterStore, voter_id: int) -> Voter | None:
    """Return a voter by internal id, or None."""
    return await store.get(voter_id)


async def _mirror_vote(mirror: VoteMirror, voter: Voter, voted: bool) -> None:
    try:
        await mirror.record_vote(voter, voted)
    except SheetsMirrorError as e:
        logger.error(f"Error updating Google Sheets: {e.message}")
    except Exception:
        logger.exception("Unexpected error updating Google Sheets")


async def mark_voted(store: VoterStore, mirror: VoteMirror, voter_id: int) -> Voter | None:
    """Record that a voter has voted and mirror it to the sheet.

    Args:
        store: Voter store.
        mirror: Best-effort vote mirror; its failures never propagate.
        voter_id: Internal voter id.

    Returns:
        The updated voter, or None if it does not exist.
    """
    voter = await store.update(voter_id, {"has_voted": True, "voted_at": datetime.now(UTC)})
    if voter is None:
        return None
    await _mirror_vote(mirror, voter, True)
    return voter


async def unmark_voted(store: VoterStore, mirror: VoteMirror, voter_id: int) -> Voter | None:
    """Clear a voter's vote and mirror it to the sheet."""
    voter = await store.update(voter_id, {"has_voted": False, "voted_at": None})
    if voter is None:
        return None
    await _mirror_vote(mirror, voter, False)
    return voter


async def get_stats(store: VoterStore) -> VoterStats:
    """Aggregate voted counts overall and per religion.

    Voters without a religion are reported under ``UNSPECIFIED_RELIGION``.
    """
    total = await store.count()
    voted = await store.count(has_voted=True)

    by_religion: dict[str, ReligionCount] = {}
    for religion, has_voted in await store.religion_vote_pairs():
        bucket = by_religion.setdefault(religion or UNSPECIFIED_RELIGION, ReligionCount())
        bucket.total += 1
        if has_voted:
            bucket.voted += 1

    percentage: str | int = f"{voted / total * 100:.2f}" if total > 0 else 0
    return VoterStats(
        total=total,
        voted=voted,
        not_voted=total - voted,
        percentage=percentage,
        by_religion=by_religion,
    )


async def list_religions(store: VoterStore) -> list[str]:
    """Sorted distinct religions, without blanks and the ``--`` placeholder."""
    religions = await store.distinct_religions()
    return sorted({r for r in religions if r and r != RELIGION_PLACEHOLDER})

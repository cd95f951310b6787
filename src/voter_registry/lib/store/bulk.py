"""Read the whole voters table in fixed-size windows."""

from collections.abc import Sequence
from typing import Protocol, TypeVar

from loguru import logger

DEFAULT_PAGE_SIZE = 1000

T_co = TypeVar("T_co", covariant=True)


class PageSource(Protocol[T_co]):
    """Anything that can return an id-ordered window of records."""

    async def fetch_page(self, offset: int, limit: int) -> Sequence[T_co]: ...


async def fetch_all(source: PageSource[T_co], page_size: int = DEFAULT_PAGE_SIZE) -> list[T_co]:
    """Page through ``source`` until a short page signals the end.

    The store may cap rows per call, so windows are requested one after
    another starting at offset 0. A page with fewer than ``page_size`` rows
    (possibly empty) ends the scan. Errors are not caught; a failed page
    aborts the whole fetch.

    Args:
        source: Record source, usually a VoterStore.
        page_size: Rows requested per window.

    Returns:
        All records in the order the source returned them.
    """
    if page_size <= 0:
        msg = f"page_size must be positive, got {page_size}"
        raise ValueError(msg)

    records: list[T_co] = []
    offset = 0
    while True:
        page = await source.fetch_page(offset, page_size)
        records.extend(page)
        logger.info(f"Fetched {len(records)} records...")
        if len(page) < page_size:
            break
        offset += page_size

    return records

"""Voter store library public API.

Provides the voters table facade and the paged full-table fetch.
"""

from voter_registry.lib.store.bulk import DEFAULT_PAGE_SIZE, PageSource, fetch_all
from voter_registry.lib.store.client import StoreError, VoterFilters, VoterStore

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "PageSource",
    "StoreError",
    "VoterFilters",
    "VoterStore",
    "fetch_all",
]

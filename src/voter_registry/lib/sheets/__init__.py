"""Spreadsheet library public API.

Provides the workbook reader used by the import command and the Google
Sheets vote mirror used by the vote endpoints.
"""

from voter_registry.lib.sheets.mirror import (
    GoogleSheetsMirror,
    NullVoteMirror,
    SheetsMirrorError,
    VoteMirror,
    build_vote_mirror,
)
from voter_registry.lib.sheets.workbook import read_classification_rows, rows_from_values

__all__ = [
    "GoogleSheetsMirror",
    "NullVoteMirror",
    "SheetsMirrorError",
    "VoteMirror",
    "build_vote_mirror",
    "read_classification_rows",
    "rows_from_values",
]

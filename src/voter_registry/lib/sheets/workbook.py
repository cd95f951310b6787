"""Read the family/classification workbook into SheetRow records.

The workbook layout is fixed: the first row is a header, column J holds the
family, column L the voter's original id, and column U the classification.
"""

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import pandas as pd
from loguru import logger

from voter_registry.lib.reconciler.matcher import cell_text, normalize_original_id
from voter_registry.lib.reconciler.types import SheetRow

FAMILY_COLUMN = 9  # J
ORIGINAL_ID_COLUMN = 11  # L
CLASSIFICATION_COLUMN = 20  # U


def _cell(values: Sequence[Any], index: int) -> Any:
    return values[index] if index < len(values) else None


def rows_from_values(rows: Iterable[Sequence[Any]]) -> list[SheetRow]:
    """Build SheetRows from positional cell values (header already removed)."""
    return [
        SheetRow(
            original_id=normalize_original_id(_cell(values, ORIGINAL_ID_COLUMN)),
            family=cell_text(_cell(values, FAMILY_COLUMN)),
            classification=cell_text(_cell(values, CLASSIFICATION_COLUMN)),
        )
        for values in rows
    ]


def read_classification_rows(path: Path, sheet: int | str = 0) -> list[SheetRow]:
    """Read the data rows of a family/classification workbook.

    Args:
        path: Path to the ``.xlsx`` file.
        sheet: Worksheet index or name; defaults to the first sheet.

    Returns:
        One SheetRow per data row, in sheet order.
    """
    frame = pd.read_excel(path, sheet_name=sheet, header=None, dtype=object, engine="openpyxl")
    data = frame.iloc[1:]
    logger.info(f"Read {len(data)} data rows from {path.name}")
    return rows_from_values(data.itertuples(index=False, name=None))

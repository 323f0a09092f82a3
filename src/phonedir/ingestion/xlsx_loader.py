"""Spreadsheet decoding for the directory workbook.

Uses openpyxl in read-only mode and only reads the first worksheet. Rows and
columns past the directory bounds are never materialized: source files carry
trailing noise and merged-cell artifacts beyond column H.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from io import BytesIO
from typing import List, Union

import openpyxl

from phonedir.errors import SourceMalformedError

LOGGER = logging.getLogger(__name__)

DIRECTORY_MAX_ROWS = 800
DIRECTORY_MAX_COLUMNS = 8  # A-H

CellValue = Union[str, int, float, bool, datetime, date, time, None]


def _is_blank(value: CellValue) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def clamp_rows(
    rows: List[List[CellValue]],
    *,
    max_rows: int = DIRECTORY_MAX_ROWS,
    max_columns: int = DIRECTORY_MAX_COLUMNS,
) -> List[List[CellValue]]:
    return [list(row[:max_columns]) for row in rows[:max_rows]]


def read_rows(
    data: bytes,
    *,
    max_rows: int = DIRECTORY_MAX_ROWS,
    max_columns: int = DIRECTORY_MAX_COLUMNS,
) -> List[List[CellValue]]:
    """Decode the first worksheet of ``data`` into rows of raw cell values.

    Only the first ``max_rows`` sheet rows and ``max_columns`` columns are read.
    Fully blank rows are dropped.
    """
    try:
        workbook = openpyxl.load_workbook(BytesIO(data), read_only=True, data_only=True)
    except Exception as exc:
        LOGGER.error("Failed to open workbook: %s", exc)
        raise SourceMalformedError(f"Workbook could not be decoded: {exc}") from exc

    try:
        if not workbook.sheetnames:
            raise SourceMalformedError("Workbook has no worksheets")

        worksheet = workbook.worksheets[0]
        LOGGER.debug("Reading worksheet %r", worksheet.title)
        rows: List[List[CellValue]] = []
        for row in worksheet.iter_rows(
            min_row=1, max_row=max_rows, max_col=max_columns, values_only=True
        ):
            values = list(row)
            if all(_is_blank(value) for value in values):
                continue
            rows.append(values)
    finally:
        workbook.close()

    return clamp_rows(rows, max_rows=max_rows, max_columns=max_columns)

"""Turn decoded spreadsheet rows into personnel records."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from phonedir.directory.headers import DEFAULT_COLUMNS, detect_header, looks_like_header
from phonedir.errors import EmptyDirectoryError
from phonedir.ingestion.source import DirectorySource
from phonedir.ingestion.xlsx_loader import CellValue, read_rows
from phonedir.models import HeaderMapping, PersonnelRecord
from phonedir.utils.text import (
    cell_text,
    is_numeric_extension,
    normalize_text,
    searchable_extension,
    split_names,
    strip_decimal_suffix,
)

LOGGER = logging.getLogger(__name__)

MISSING_NAME = "Sin Nombre"
MISSING_EXTENSION = "N/A"
MISSING_DEPARTMENT = "Sector sin identificar"

# The usable directory ends at the reserved-lines block.
STOP_TOKENS = tuple(normalize_text(token) for token in ("telefonos internos reserva", "reserva 6000"))

# Stray content that leaks into the name column of the source sheet.
EXCLUDED_NAME_FRAGMENTS = ("acalandra@servicoop.com", "sector comunicaciones al interno")


@dataclass(slots=True)
class ColumnChains:
    """Ordered candidate columns for each field; the first non-empty cell wins."""

    extension: List[int]
    name: List[int]
    department: List[int]


def unique_indices(indices: Sequence[int]) -> List[int]:
    result: List[int] = []
    for idx in indices:
        if idx < 0 or idx in result:
            continue
        result.append(idx)
    return result


def column_chains(mapping: HeaderMapping) -> ColumnChains:
    return ColumnChains(
        extension=unique_indices([mapping.extension_index, DEFAULT_COLUMNS["extension"], 0]),
        name=unique_indices([mapping.name_index, DEFAULT_COLUMNS["name"], DEFAULT_COLUMNS["title"]]),
        department=unique_indices(
            [mapping.department_index, DEFAULT_COLUMNS["department"], DEFAULT_COLUMNS["title"]]
        ),
    )


def pick_cell_text(row: Sequence[CellValue], indices: Sequence[int]) -> str:
    for idx in indices:
        if idx >= len(row):
            continue
        value = cell_text(row[idx])
        if value:
            return value
    return ""


def is_empty_row(row: Optional[Sequence[CellValue]]) -> bool:
    return not row or all(not cell for cell in row)


def should_stop(values: Sequence[str], has_name: bool, has_numeric_extension: bool) -> bool:
    """True for the sentinel row that closes the directory block."""
    if has_name or has_numeric_extension:
        return False
    for value in values:
        normalized = normalize_text(value) if value else ""
        if normalized and any(token in normalized for token in STOP_TOKENS):
            return True
    return False


def is_excluded_name(name: str) -> bool:
    lowered = name.lower()
    if any(fragment in lowered for fragment in EXCLUDED_NAME_FRAGMENTS):
        return True
    return not normalize_text(name)


def build_records(
    rows: Sequence[Sequence[CellValue]], mapping: Optional[HeaderMapping] = None
) -> List[PersonnelRecord]:
    """Walk the data rows and emit one record per person.

    Rows after a stop sentinel are discarded even when they look valid.
    """
    if mapping is None:
        mapping = detect_header(rows)
    chains = column_chains(mapping)
    start = mapping.header_row_index + 1 if mapping.found else 0

    records: List[PersonnelRecord] = []
    next_id = 1
    for index in range(start, len(rows)):
        row = rows[index]
        if is_empty_row(row):
            continue

        values = [cell_text(cell) for cell in row]
        if looks_like_header([normalize_text(value) for value in values]):
            LOGGER.debug("Skipping repeated header at row %d", index)
            continue

        extension_raw = pick_cell_text(row, chains.extension)
        name_raw = pick_cell_text(row, chains.name)
        department_raw = pick_cell_text(row, chains.department)

        extension = strip_decimal_suffix(extension_raw) if extension_raw else ""
        has_name = bool(name_raw)
        has_numeric_extension = bool(extension_raw) and is_numeric_extension(extension_raw)

        if should_stop(values, has_name, has_numeric_extension):
            LOGGER.info("Stop sentinel found at row %d, discarding the remaining rows", index)
            break

        if not has_name and not extension:
            continue

        names = split_names(name_raw) if has_name else [MISSING_NAME]
        names = [name for name in names if not is_excluded_name(name)]
        if not names:
            LOGGER.debug("Row %d only held excluded names", index)
            continue

        department = department_raw or MISSING_DEPARTMENT
        for name in names:
            records.append(
                PersonnelRecord(
                    id=str(next_id),
                    name=name,
                    department=department,
                    extension=extension or MISSING_EXTENSION,
                    searchable_name=normalize_text(name),
                    searchable_extension=searchable_extension(extension),
                )
            )
            next_id += 1

    return records


def parse_rows(rows: Sequence[Sequence[CellValue]]) -> List[PersonnelRecord]:
    if not rows:
        raise EmptyDirectoryError("No rows found in the spreadsheet")

    mapping = detect_header(rows)
    records = build_records(rows, mapping)
    if not records:
        LOGGER.info("Spreadsheet has %d rows but no usable personnel records", len(rows))
    LOGGER.info(
        "Parsed %d records from %d rows (header row: %s)",
        len(records),
        len(rows),
        mapping.header_row_index if mapping.found else "none",
    )
    return records


def parse_directory(data: bytes) -> List[PersonnelRecord]:
    """Decode spreadsheet bytes and extract the personnel records."""
    return parse_rows(read_rows(data))


def load_directory(source: DirectorySource) -> List[PersonnelRecord]:
    """Read a source and parse it. Runs unchanged from the CLI, a worker thread or startup."""
    LOGGER.info("Loading directory from %s", source.describe())
    return parse_directory(source.read_bytes())

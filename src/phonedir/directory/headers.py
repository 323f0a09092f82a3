"""Header row detection for irregular directory spreadsheets."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Sequence, Tuple

from phonedir.ingestion.xlsx_loader import CellValue
from phonedir.models import HeaderMapping
from phonedir.utils.text import cell_text, normalize_text

LOGGER = logging.getLogger(__name__)

HEADER_SCAN_ROWS = 20

HEADER_TOKENS: Dict[str, Tuple[str, ...]] = {
    "extension": ("interno", "internos", "extension", "ext", "anexo", "telefono", "telefonos", "int"),
    "department": ("sector", "departamento", "area", "unidad", "seccion"),
    "title": ("titulo", "cargo", "puesto", "funcion"),
    "name": ("apellido y nombre", "apellidos y nombres", "apellido", "nombre", "responsable", "contacto"),
}

# Layout of the source spreadsheets when no header row is present.
DEFAULT_COLUMNS: Dict[str, int] = {
    "extension": 1,
    "department": 2,
    "title": 3,
    "name": 4,
}

FIELDS = ("extension", "department", "title", "name")


def matches_header_token(normalized: str, tokens: Iterable[str]) -> bool:
    return any(normalized == token or token in normalized for token in tokens)


def looks_like_header(normalized_cells: Sequence[str]) -> bool:
    """True when a row labels a name column plus an extension or department column."""

    def has(field: str) -> bool:
        return any(matches_header_token(value, HEADER_TOKENS[field]) for value in normalized_cells)

    return has("name") and (has("extension") or has("department"))


def default_mapping() -> HeaderMapping:
    return HeaderMapping(
        header_row_index=-1,
        extension_index=DEFAULT_COLUMNS["extension"],
        department_index=DEFAULT_COLUMNS["department"],
        title_index=DEFAULT_COLUMNS["title"],
        name_index=DEFAULT_COLUMNS["name"],
    )


def _map_row(row: Sequence[CellValue]) -> Dict[str, int]:
    found = {field: -1 for field in FIELDS}
    for idx, cell in enumerate(row):
        normalized = normalize_text(cell_text(cell))
        if not normalized:
            continue
        for field in FIELDS:
            if found[field] < 0 and matches_header_token(normalized, HEADER_TOKENS[field]):
                found[field] = idx
    return found


def detect_header(rows: Sequence[Sequence[CellValue]]) -> HeaderMapping:
    """Locate the header row within the first ``HEADER_SCAN_ROWS`` rows.

    A row qualifies when it names a person column and at least one of the
    extension or department columns. The first qualifying row wins. Without
    one, the fixed default column layout is returned with
    ``header_row_index = -1``.
    """
    for index, row in enumerate(rows[:HEADER_SCAN_ROWS]):
        found = _map_row(row or [])
        if found["name"] >= 0 and (found["extension"] >= 0 or found["department"] >= 0):
            LOGGER.debug("Header row detected at index %d: %s", index, found)
            return HeaderMapping(
                header_row_index=index,
                extension_index=found["extension"],
                department_index=found["department"],
                title_index=found["title"],
                name_index=found["name"],
            )

    LOGGER.info("No header row found in the first %d rows, using default columns", HEADER_SCAN_ROWS)
    return default_mapping()

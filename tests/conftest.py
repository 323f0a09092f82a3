"""Shared fixtures for phonedir tests."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Callable, List, Sequence

import openpyxl
import pytest

from phonedir.models import PersonnelRecord
from phonedir.utils.text import normalize_text, searchable_extension


def workbook_bytes(rows: Sequence[Sequence[object]]) -> bytes:
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.title = "Internos"
    for row in rows:
        sheet.append(list(row))
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def make_record(id: str, name: str, extension: str = "N/A", department: str = "Sistemas") -> PersonnelRecord:
    return PersonnelRecord(
        id=id,
        name=name,
        department=department,
        extension=extension,
        searchable_name=normalize_text(name),
        searchable_extension=searchable_extension("" if extension == "N/A" else extension),
    )


SAMPLE_ROWS: List[List[object]] = [
    ["TELEFONOS INTERNOS", None, None, None, None],
    [None, "INTERNO", "SECTOR", "CARGO", "APELLIDO Y NOMBRE"],
    [None, 101, "Sistemas", "Jefe", "Perez, Juan / Gomez, Ana"],
    [None, 102, "Compras", None, "Martínez, José"],
    [None, "103.0", "Tesorería", None, "Lopez, Maria"],
    [None, 104, "Guardia", None, None],
    [None, None, "Sistemas", None, "Diaz, Carla"],
    ["TELÉFONOS INTERNOS RESERVA 6000", None, None, None, None],
    [None, 200, "Reserva", None, "Fantasma, Pedro"],
]


@pytest.fixture
def sample_rows() -> List[List[object]]:
    return [list(row) for row in SAMPLE_ROWS]


@pytest.fixture
def sample_workbook() -> bytes:
    return workbook_bytes(SAMPLE_ROWS)


@pytest.fixture
def sample_file(tmp_path: Path, sample_workbook: bytes) -> Path:
    path = tmp_path / "internos.xlsx"
    path.write_bytes(sample_workbook)
    return path


@pytest.fixture
def record_factory() -> Callable[..., PersonnelRecord]:
    return make_record

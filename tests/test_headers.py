"""Tests for header row detection."""

from __future__ import annotations

from typing import List

from phonedir.directory.headers import (
    DEFAULT_COLUMNS,
    HEADER_SCAN_ROWS,
    HEADER_TOKENS,
    default_mapping,
    detect_header,
    looks_like_header,
    matches_header_token,
)


def _filler(count: int) -> List[List[object]]:
    return [[None, 100 + i, "Sistemas", None, f"Persona {i}"] for i in range(count)]


class TestTokenConfiguration:
    """The token dictionaries and default layout are plain data."""

    def test_default_columns(self) -> None:
        assert DEFAULT_COLUMNS == {"extension": 1, "department": 2, "title": 3, "name": 4}

    def test_scan_window(self) -> None:
        assert HEADER_SCAN_ROWS == 20

    def test_token_fields(self) -> None:
        assert set(HEADER_TOKENS) == {"extension", "department", "title", "name"}
        assert "apellido y nombre" in HEADER_TOKENS["name"]

    def test_matches_equality_or_containment(self) -> None:
        assert matches_header_token("sector", HEADER_TOKENS["department"])
        assert matches_header_token("nro de interno", HEADER_TOKENS["extension"])
        assert not matches_header_token("", HEADER_TOKENS["name"])
        assert not matches_header_token("sistemas", HEADER_TOKENS["name"])


class TestDetectHeader:
    """Test detect_header function."""

    def test_detects_header_row_three(self) -> None:
        """A labelled row after a few title rows is found with its columns."""
        rows: List[List[object]] = [
            ["COOPERATIVA"],
            [],
            ["Guia telefonica 2024"],
            ["APELLIDO Y NOMBRE", "SECTOR", "INTERNO"],
            ["Perez, Juan", "Sistemas", 101],
        ]

        mapping = detect_header(rows)

        assert mapping.header_row_index == 3
        assert mapping.name_index == 0
        assert mapping.department_index == 1
        assert mapping.extension_index == 2
        assert mapping.title_index == -1
        assert mapping.found

    def test_no_header_uses_defaults(self) -> None:
        """Without header tokens in the scan window, default indices apply."""
        mapping = detect_header(_filler(30))

        assert mapping.header_row_index == -1
        assert (
            mapping.extension_index,
            mapping.department_index,
            mapping.title_index,
            mapping.name_index,
        ) == (1, 2, 3, 4)
        assert not mapping.found
        assert mapping == default_mapping()

    def test_header_beyond_scan_window_ignored(self) -> None:
        rows = _filler(HEADER_SCAN_ROWS) + [["NOMBRE", "INTERNO"]]
        assert detect_header(rows).header_row_index == -1

    def test_requires_name_and_extension_or_department(self) -> None:
        """A row naming only extension and department does not qualify."""
        rows: List[List[object]] = [
            ["INTERNO", "SECTOR"],
            ["CONTACTO", "SECTOR", "CARGO"],
        ]

        mapping = detect_header(rows)

        assert mapping.header_row_index == 1
        assert mapping.name_index == 0
        assert mapping.department_index == 1
        assert mapping.title_index == 2
        assert mapping.extension_index == -1

    def test_first_matching_column_wins(self) -> None:
        rows: List[List[object]] = [["Nombre", "Interno", "Apellido", "Interno 2"]]

        mapping = detect_header(rows)

        assert mapping.name_index == 0
        assert mapping.extension_index == 1

    def test_accents_and_case_ignored(self) -> None:
        rows: List[List[object]] = [["Teléfono", "ÁREA", "Función", "Responsable"]]

        mapping = detect_header(rows)

        assert mapping.header_row_index == 0
        assert (mapping.extension_index, mapping.department_index, mapping.title_index, mapping.name_index) == (
            0,
            1,
            2,
            3,
        )

    def test_empty_grid(self) -> None:
        assert detect_header([]).header_row_index == -1


class TestLooksLikeHeader:
    """Test the repeated header check."""

    def test_repeated_header(self) -> None:
        assert looks_like_header(["", "interno", "sector", "apellido y nombre"])

    def test_data_row(self) -> None:
        assert not looks_like_header(["", "101", "sistemas", "perez juan"])

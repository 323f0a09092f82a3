"""Core phonedir data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(slots=True)
class PersonnelRecord:
    """One directory entry extracted from the source spreadsheet.

    ``searchable_name`` and ``searchable_extension`` are matching keys and are
    never shown to end users. ``search_score`` and ``search_terms`` are only set
    on the copies returned by a search.
    """

    id: str
    name: str
    department: str
    extension: str
    searchable_name: str
    searchable_extension: str
    search_score: Optional[int] = None
    search_terms: List[str] = field(default_factory=list)

    def public_fields(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "id": self.id,
            "name": self.name,
            "department": self.department,
            "extension": self.extension,
        }
        if self.search_score is not None:
            data["search_score"] = self.search_score
            data["search_terms"] = list(self.search_terms)
        return data


@dataclass(slots=True)
class HeaderMapping:
    """Header row position and the column holding each field (-1 if undetected)."""

    header_row_index: int
    extension_index: int
    department_index: int
    title_index: int
    name_index: int

    @property
    def found(self) -> bool:
        return self.header_row_index >= 0


@dataclass(slots=True)
class DepartmentGroup:
    department: str
    personnel: List[PersonnelRecord]

    @property
    def max_score(self) -> int:
        return max((person.search_score or 0 for person in self.personnel), default=0)


@dataclass(slots=True)
class SearchOutcome:
    """Ranked matches for one query, flat and grouped by department."""

    query: str
    results: List[PersonnelRecord] = field(default_factory=list)
    groups: List[DepartmentGroup] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

"""Typo- and accent-tolerant search over personnel records."""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Dict, Iterable, List, Sequence, Set

from phonedir.models import DepartmentGroup, PersonnelRecord, SearchOutcome
from phonedir.utils.text import normalize_text, surname_of

MIN_QUERY_LENGTH = 2

SCORE_SURNAME = 3
SCORE_PREFIX = 2
SCORE_SUBSTRING = 1
SCORE_RELATED = 0

_WHITESPACE = re.compile(r"\s+")
_ALL_DIGITS = re.compile(r"[0-9]+")


def _name_words(person: PersonnelRecord) -> List[str]:
    return person.searchable_name.split()


def _prefix_match(person: PersonnelRecord, terms: Sequence[str]) -> bool:
    words = _name_words(person)
    return all(any(word.startswith(term) for word in words) for term in terms)


def _substring_match(person: PersonnelRecord, terms: Sequence[str]) -> bool:
    return all(term in person.searchable_name for term in terms)


def compute_score(person: PersonnelRecord, normalized_query: str, terms: Sequence[str]) -> int:
    surname = surname_of(person.name)
    if surname and normalized_query == surname:
        return SCORE_SURNAME
    if _prefix_match(person, terms):
        return SCORE_PREFIX
    if _substring_match(person, terms):
        return SCORE_SUBSTRING
    return SCORE_RELATED


def _dedupe(groups: Iterable[Iterable[PersonnelRecord]]) -> List[PersonnelRecord]:
    seen: Set[str] = set()
    result: List[PersonnelRecord] = []
    for items in groups:
        for person in items:
            if person.id in seen:
                continue
            seen.add(person.id)
            result.append(person)
    return result


def _match(normalized_query: str, terms: List[str], records: Sequence[PersonnelRecord]) -> List[PersonnelRecord]:
    numeric_query = _WHITESPACE.sub("", normalized_query)
    if _ALL_DIGITS.fullmatch(numeric_query):
        return [person for person in records if numeric_query in person.searchable_extension]

    department_matches = [
        person for person in records if normalized_query in normalize_text(person.department)
    ]
    exact_matches = [person for person in records if _prefix_match(person, terms)]

    found: List[List[PersonnelRecord]] = []
    if exact_matches:
        # Everyone sharing a matched extension sits at the same phone.
        extensions = {person.extension for person in exact_matches}
        found.append([person for person in records if person.extension in extensions])
    else:
        found.append([person for person in records if _substring_match(person, terms)])

    if department_matches and len(terms) == 1:
        found.append(department_matches)

    return _dedupe(found)


def _sort_key(text: str) -> tuple:
    return (normalize_text(text), text)


def group_by_department(results: Sequence[PersonnelRecord]) -> List[DepartmentGroup]:
    """Group results by department, best groups first."""
    grouped: Dict[str, List[PersonnelRecord]] = {}
    for person in results:
        grouped.setdefault(person.department, []).append(person)

    groups = [
        DepartmentGroup(
            department=department,
            personnel=sorted(
                personnel, key=lambda p: (-(p.search_score or 0), *_sort_key(p.name))
            ),
        )
        for department, personnel in grouped.items()
    ]
    groups.sort(key=lambda group: (-group.max_score, *_sort_key(group.department)))
    return groups


def search_directory(query: str, records: Sequence[PersonnelRecord]) -> SearchOutcome:
    """Rank and group the records matching ``query``.

    Numeric queries match extensions. Other queries match names by prefix,
    pull in everyone sharing a matched extension, and fall back to substring
    matching. Single-word queries also match department names. Never raises.
    """
    trimmed = (query or "").strip()
    if len(trimmed) < MIN_QUERY_LENGTH:
        return SearchOutcome(query=trimmed)

    normalized_query = normalize_text(trimmed)
    terms = normalized_query.split()
    if not terms:
        return SearchOutcome(query=trimmed)

    results = [
        replace(
            person,
            search_terms=list(terms),
            search_score=compute_score(person, normalized_query, terms),
        )
        for person in _match(normalized_query, terms, records)
    ]
    return SearchOutcome(query=trimmed, results=results, groups=group_by_department(results))


class Searcher:
    """High-level API to query a directory snapshot."""

    def __init__(self, records: Sequence[PersonnelRecord]) -> None:
        self.records = list(records)

    def search(self, query: str) -> SearchOutcome:
        return search_directory(query, self.records)

"""Text helpers for normalizing directory cells and queries."""

from __future__ import annotations

import re
import unicodedata
from typing import Any, Dict, List

NORMALIZE_CACHE_SIZE = 1000

_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")
_SEPARATORS = re.compile(r"[,\s\-]+")
_NON_WORD = re.compile(r"[^\w\s]", re.ASCII)
_DECIMAL_SUFFIX = re.compile(r"\.0+$")
_NON_DIGITS = re.compile(r"[^0-9]")
_DIGITS = re.compile(r"[0-9]+")
_NAME_SEPARATORS = re.compile(r"\s*/\s*|\s*;\s*|\s*\|\s*|\r?\n|\s+-\s+")

# Insertion ordered, so the first key is always the oldest one.
_normalize_cache: Dict[str, str] = {}


def _normalize(text: str) -> str:
    lowered = unicodedata.normalize("NFD", text.lower())
    stripped = _COMBINING_MARKS.sub("", lowered)
    collapsed = _SEPARATORS.sub(" ", stripped)
    return _NON_WORD.sub("", collapsed).strip()


def normalize_text(value: Any) -> str:
    """Return the canonical comparison form of ``value``.

    Lowercases, removes accents, collapses commas, hyphens and whitespace to
    single spaces and drops punctuation. Results are memoized in a FIFO cache
    of ``NORMALIZE_CACHE_SIZE`` entries keyed by the raw string.
    """
    if value is None:
        return ""
    text = value if isinstance(value, str) else str(value)

    cached = _normalize_cache.get(text)
    if cached is not None:
        return cached

    normalized = _normalize(text)
    if len(_normalize_cache) >= NORMALIZE_CACHE_SIZE:
        del _normalize_cache[next(iter(_normalize_cache))]
    _normalize_cache[text] = normalized
    return normalized


def clear_normalize_cache() -> None:
    _normalize_cache.clear()


def normalize_cache_size() -> int:
    return len(_normalize_cache)


def cell_text(value: Any) -> str:
    """Render a decoded cell as trimmed display text."""
    if value is None:
        return ""
    return str(value).strip()


def strip_decimal_suffix(value: str) -> str:
    """Drop the ``.0`` a spreadsheet adds when it coerces an extension to float."""
    return _DECIMAL_SUFFIX.sub("", value)


def is_numeric_extension(value: str) -> bool:
    cleaned = re.sub(r"\s+", "", value).replace(".", "")
    return bool(cleaned) and _DIGITS.fullmatch(cleaned) is not None


def searchable_extension(value: str) -> str:
    """Digits-only form of an extension, or the lowercase raw text if it has none."""
    digits = _NON_DIGITS.sub("", value)
    return digits or value.lower()


def split_names(value: str) -> List[str]:
    """Split a cell listing several people into individual names."""
    return [name.strip() for name in _NAME_SEPARATORS.split(value) if name.strip()]


def surname_of(name: str) -> str:
    """Normalized surname: text before the first comma, else the first word."""
    if not name:
        return ""
    if "," in name:
        base = name[: name.index(",")]
    else:
        base = name.split(" ")[0]
    return normalize_text(base or name)

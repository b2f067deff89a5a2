# core/keywords.py

"""
Keyword sets used by the header heuristics.

Matching is always a case-insensitive substring test on the header name,
so these are plain string collections rather than patterns.
"""

from __future__ import annotations

from typing import Iterable, Sequence


# Unit-of-measure / logistics headers (forced to SKU level)
UOM_BASE_KEYWORDS = (
    "uom",
    "unit",
    "measure",
    "measurement",
    "dimension",
    "weight",
    "height",
    "width",
    "depth",
    "length",
    "size",
)

# Headers that should hold unique identifiers
IDENTIFIER_KEYWORDS = (
    "sku",
    "id",
    "ean",
    "upc",
    "gtin",
    "code",
    "reference",
    "case",
    "pallet",
    "zuc",
    "zun",
    "barcode",
    "article",
)

# Measurements, dates and free text: never checked for duplicates
VALIDATION_EXCLUDE_KEYWORDS = (
    "unit",
    "uom",
    "measure",
    "weight",
    "height",
    "width",
    "depth",
    "length",
    "size",
    "date",
    "time",
    "created",
    "modified",
    "updated",
    "valid",
    "expiry",
    "description",
    "desc",
    "text",
    "comment",
    "note",
    "material",
)

RECORD_NAME_KEYWORDS = ("name", "title", "description", "label")

PLACEHOLDER_VALUES = frozenset({"unknown", "n/a", "null", "undefined", "none"})


def header_matches(header: str, keywords: Iterable[str]) -> bool:
    name = str(header).lower()
    return any(kw in name for kw in keywords)


def merge_keywords(base: Sequence[str], custom: Iterable[str] | None) -> tuple:
    """
    Append caller keywords to a base set: lower-cased, trimmed,
    blanks and duplicates dropped, order preserved.
    """
    merged = list(base)
    seen = set(merged)
    for kw in custom or ():
        k = str(kw).strip().lower()
        if k and k not in seen:
            merged.append(k)
            seen.add(k)
    return tuple(merged)

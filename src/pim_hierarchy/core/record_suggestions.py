# core/record_suggestions.py

"""
Record ID / record name suggestions.

    suggest_record_id(...)   -> header | None
        A header that is 100% complete and 100% unique. Identifier-like
        names (sku, code, id, ...) win; ties go to the left-most column.

    suggest_record_name(...) -> header | None
        A mostly-textual, well-populated header with readable value
        lengths that does not look like an identifier.

"None" is a normal outcome; callers surface it as a recommendation.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

from ..preprocessing.numeric_units import is_numeric_value
from .dataset import ProductTable
from .keywords import IDENTIFIER_KEYWORDS, RECORD_NAME_KEYWORDS, header_matches
from .models import CardinalityScore

logger = logging.getLogger(__name__)

_MIN_NAME_COMPLETENESS = 0.8
_MAX_NUMERIC_SHARE = 0.5


def suggest_record_id(scores: Sequence[CardinalityScore]) -> Optional[str]:
    candidates = [
        s.header for s in scores
        if s.total_count > 0 and s.completeness == 1.0 and s.cardinality == 1.0
    ]
    if not candidates:
        return None

    for header in candidates:
        if header_matches(header, IDENTIFIER_KEYWORDS):
            return header
    return candidates[0]


def _length_score(avg_len: float) -> float:
    """Peak for 3..60 characters, tapering off for codes and long prose."""
    if avg_len < 3:
        return 5.0
    if avg_len <= 60:
        return 30.0
    if avg_len <= 150:
        return 15.0
    return 0.0


def suggest_record_name(
    table: ProductTable,
    scores: Sequence[CardinalityScore],
) -> Optional[str]:
    best_header: Optional[str] = None
    best_score = float("-inf")

    for position, score in enumerate(scores):
        header = score.header
        if score.completeness < _MIN_NAME_COMPLETENESS:
            continue
        if header_matches(header, IDENTIFIER_KEYWORDS):
            continue

        values = table.text_column(position)
        values = values[values != ""]
        if values.empty:
            continue

        numeric_share = values.map(is_numeric_value).mean()
        if numeric_share > _MAX_NUMERIC_SHARE:
            continue

        avg_len = float(values.str.len().mean())
        total = score.completeness * 50.0 + _length_score(avg_len)
        if header_matches(header, RECORD_NAME_KEYWORDS):
            total += 20.0

        # strict '>' keeps the left-most header on ties
        if total > best_score:
            best_header, best_score = header, total

    return best_header


def record_suggestions(
    table: ProductTable,
    scores: Sequence[CardinalityScore],
) -> Tuple[Optional[str], Optional[str]]:
    """(record_id, record_name) for the whole dataset."""
    record_id = suggest_record_id(scores)
    record_name = suggest_record_name(table, scores)
    logger.debug("Record suggestions: id=%r name=%r", record_id, record_name)
    return record_id, record_name

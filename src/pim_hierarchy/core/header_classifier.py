# core/header_classifier.py

"""
Per-column cardinality statistics and level classification.

For every header we measure how much its values repeat:

    cardinality  = distinct non-empty values / total rows
    completeness = non-empty values          / total rows

Low-cardinality columns (few values shared by many rows) are parent /
taxonomy candidates, medium ones variant candidates, near-unique ones
belong on the SKU level.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from .config import CardinalityThresholds
from .dataset import ProductTable
from .models import CardinalityScore, HeaderLevel

logger = logging.getLogger(__name__)

# hierarchy_score weights; low cardinality matters more than completeness
_CARDINALITY_WEIGHT = 0.6
_COMPLETENESS_WEIGHT = 0.4


def classify_cardinality(cardinality: float, thresholds: CardinalityThresholds) -> HeaderLevel:
    """Lower bounds are inclusive: cardinality == low is level2."""
    if cardinality >= thresholds.medium:
        return HeaderLevel.LEVEL3
    if cardinality >= thresholds.low:
        return HeaderLevel.LEVEL2
    return HeaderLevel.LEVEL1


def _hierarchy_score(cardinality: float, completeness: float) -> float:
    score = _CARDINALITY_WEIGHT * (1.0 - cardinality) + _COMPLETENESS_WEIGHT * completeness
    return round(score, 4)


def _score_column(
    table: ProductTable,
    position: int,
    header: str,
    thresholds: CardinalityThresholds,
) -> CardinalityScore:
    total = table.n_rows
    values = table.text_column(position)
    values = values[values != ""]

    unique_count = int(values.nunique())
    non_empty = int(len(values))

    cardinality = unique_count / total if total else 0.0
    completeness = non_empty / total if total else 0.0

    return CardinalityScore(
        header=header,
        unique_count=unique_count,
        total_count=total,
        cardinality=cardinality,
        completeness=completeness,
        hierarchy_score=_hierarchy_score(cardinality, completeness),
        classification=classify_cardinality(cardinality, thresholds),
    )


def _empty_score(header: str, total: int, thresholds: CardinalityThresholds) -> CardinalityScore:
    return CardinalityScore(
        header=header,
        unique_count=0,
        total_count=total,
        cardinality=0.0,
        completeness=0.0,
        hierarchy_score=_hierarchy_score(0.0, 0.0),
        classification=classify_cardinality(0.0, thresholds),
    )


def calculate_cardinality_scores(
    headers: Sequence[Any],
    rows: Sequence[Any],
    thresholds: Optional[CardinalityThresholds] = None,
    *,
    table: Optional[ProductTable] = None,
) -> List[CardinalityScore]:
    """
    Score and classify every header.

    Parameters
    ----------
    headers, rows :
        The dataset. Ignored when a prepared `table` is passed.
    thresholds :
        Cardinality cut-offs; defaults to (0.1, 0.5).
    table :
        Optional pre-built snapshot, so the pipeline copies the rows once.

    Returns
    -------
    List[CardinalityScore]
        One score per header, in header order. Empty when there are no headers.

    Raises
    ------
    ThresholdConfigError
        If the thresholds are out of order or out of range.
    """
    thresholds = thresholds or CardinalityThresholds()
    thresholds.validate()

    if table is None:
        table = ProductTable(headers, rows)

    scores: List[CardinalityScore] = []
    for position, header in enumerate(table.headers):
        try:
            scores.append(_score_column(table, position, header, thresholds))
        except Exception:
            # one bad column must not abort the others
            logger.exception("Cardinality scoring failed for header %r", header)
            scores.append(_empty_score(header, table.n_rows, thresholds))

    logger.debug(
        "Classified %d headers over %d rows (low=%s, medium=%s)",
        len(scores), table.n_rows, thresholds.low, thresholds.medium,
    )
    return scores

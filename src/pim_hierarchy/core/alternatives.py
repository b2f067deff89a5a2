# core/alternatives.py

"""
Alternative hierarchy presets.

Besides the default Parent → Variant → SKU proposal, offer up to three
simpler or more detailed structures built from the repeating headers
(level1 + level2, UOM headers excluded), ordered by cardinality:

    Two-Level Structure       needs >= 3 repeating headers
    Flat Model with Grouping  needs >= 1
    Three-Level Detailed      needs >= 4

Each level holds one header, which is also its record ID. Every other
header with data becomes a property.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Tuple

from .models import CardinalityScore, HeaderLevel, HierarchyAlternative, HierarchyLevel

logger = logging.getLogger(__name__)

MAX_ALTERNATIVES = 3

# (name, level names, minimum repeating headers, confidence, reasoning)
_PRESETS: Tuple[tuple, ...] = (
    (
        "Two-Level Structure",
        ("Parent Category", "Child Category"),
        3,
        0.7,
        "Simpler structure with two levels, treating remaining fields as properties.",
    ),
    (
        "Flat Model with Grouping",
        ("Primary Category",),
        1,
        0.6,
        "Single level grouping, all other fields as product attributes.",
    ),
    (
        "Three-Level Detailed",
        ("Parent Category", "Child Category", "Subcategory"),
        4,
        0.75,
        "Detailed three-level taxonomy for complex categorization.",
    ),
)


def repeating_headers(
    scores: Sequence[CardinalityScore],
    uom_headers: Iterable[str] = (),
) -> List[str]:
    """level1/level2 headers with data, lowest cardinality first (stable)."""
    uom = set(uom_headers)
    candidates = [
        s for s in scores
        if s.completeness > 0
        and s.header not in uom
        and s.classification in (HeaderLevel.LEVEL1, HeaderLevel.LEVEL2)
    ]
    return [s.header for s in sorted(candidates, key=lambda s: s.cardinality)]


def suggest_alternative_hierarchies(
    scores: Sequence[CardinalityScore],
    uom_headers: Iterable[str] = (),
) -> List[HierarchyAlternative]:
    """
    Parameters
    ----------
    scores :
        Classifier output, in header order.
    uom_headers :
        Headers that may never form a level.

    Returns
    -------
    List[HierarchyAlternative]
        At most three presets; empty when no header repeats.
    """
    repeating = repeating_headers(scores, uom_headers)
    with_data = [s.header for s in scores if s.completeness > 0]

    alternatives: List[HierarchyAlternative] = []
    for name, level_names, minimum, confidence, reasoning in _PRESETS:
        if len(repeating) < minimum:
            continue
        placed = repeating[: len(level_names)]
        levels = [
            HierarchyLevel(level=i, name=level_name, headers=[header], record_id=header)
            for i, (level_name, header) in enumerate(zip(level_names, placed), start=1)
        ]
        # leftover repeating headers first, then the rest in column order
        leftover = repeating[len(placed):]
        properties = leftover + [h for h in with_data if h not in placed and h not in leftover]
        alternatives.append(
            HierarchyAlternative(
                name=name,
                levels=levels,
                properties=properties,
                confidence=confidence,
                reasoning=reasoning,
            )
        )

    logger.debug("Alternative hierarchies: %s", [a.name for a in alternatives])
    return alternatives[:MAX_ALTERNATIVES]

# core/mixed_model.py

"""
Hierarchical vs. standalone vs. mixed modeling advice.

Rows that fit the taxonomy can be imported as Parent → Variant structures;
orphaned rows only make sense as standalone (flat) products. When both
groups are significant the catalog should use a mixed model.
"""

from __future__ import annotations

import logging

from .config import DEFAULT_MIXED_MODEL_FLOOR
from .models import MixedModelSuggestion, ModelStrategy

logger = logging.getLogger(__name__)


def suggest_mixed_model(
    total_rows: int,
    orphan_count: int,
    floor: float = DEFAULT_MIXED_MODEL_FLOOR,
) -> MixedModelSuggestion:
    """
    Parameters
    ----------
    total_rows :
        Rows in the dataset.
    orphan_count :
        Rows the taxonomy could not place.
    floor :
        Percentage both groups must exceed for a mixed model.

    Returns
    -------
    MixedModelSuggestion
        Percentages, the chosen strategy and a readable reasoning line.
    """
    if total_rows < 0 or orphan_count < 0:
        raise ValueError("Row counts cannot be negative.")
    if orphan_count > total_rows:
        raise ValueError(
            f"Orphan count ({orphan_count}) exceeds total rows ({total_rows})."
        )

    if total_rows == 0:
        return MixedModelSuggestion(
            should_use_mixed=False,
            strategy=ModelStrategy.STANDALONE,
            hierarchical_percentage=0.0,
            standalone_percentage=0.0,
            reasoning="Dataset is empty; there are no products to model.",
        )

    hierarchical = (total_rows - orphan_count) / total_rows * 100.0
    standalone = 100.0 - hierarchical

    if hierarchical > floor and standalone > floor:
        strategy = ModelStrategy.MIXED
        reasoning = (
            f"{hierarchical:.1f}% of products fit the hierarchy and "
            f"{standalone:.1f}% are missing hierarchy values. Use a Parent-Variant "
            f"structure for the first group and keep the second as standalone products."
        )
    elif standalone <= floor:
        strategy = ModelStrategy.HIERARCHICAL
        reasoning = (
            f"{hierarchical:.1f}% of products fit the hierarchy; the "
            f"{standalone:.1f}% without hierarchy values is below the "
            f"{floor:g}% significance floor. Use a hierarchical model."
        )
    else:
        strategy = ModelStrategy.STANDALONE
        reasoning = (
            f"Only {hierarchical:.1f}% of products fit the hierarchy, below the "
            f"{floor:g}% significance floor. Import them as a flat, standalone model."
        )

    logger.debug(
        "Mixed model: %.1f%% hierarchical / %.1f%% standalone -> %s",
        hierarchical, standalone, strategy.value,
    )
    return MixedModelSuggestion(
        should_use_mixed=strategy is ModelStrategy.MIXED,
        strategy=strategy,
        hierarchical_percentage=hierarchical,
        standalone_percentage=standalone,
        reasoning=reasoning,
    )

# core/config.py

"""
Configuration objects for an analysis run.

Everything is passed explicitly into each call; there is no module-level
mutable state, so two analyses with different thresholds never interfere.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


DEFAULT_LOW_THRESHOLD = 0.1     # below: high repetition (parent / taxonomy)
DEFAULT_MEDIUM_THRESHOLD = 0.5  # at or above: near-unique (SKU level)

DEFAULT_UOM_SAMPLE_SIZE = 20
DEFAULT_MIXED_MODEL_FLOOR = 10.0


class ThresholdConfigError(ValueError):
    """Raised when cardinality thresholds are out of range or out of order."""


@dataclass(frozen=True)
class CardinalityThresholds:
    """
    Cardinality cut-offs used by the header classifier.

        cardinality <  low              -> level1
        low <= cardinality < medium     -> level2
        cardinality >= medium           -> level3

    Both values must lie strictly inside (0, 1) and `low < medium`.
    Invalid values are rejected, never clamped.
    """
    low: float = DEFAULT_LOW_THRESHOLD
    medium: float = DEFAULT_MEDIUM_THRESHOLD

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        for name, value in (("low", self.low), ("medium", self.medium)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ThresholdConfigError(
                    f"Threshold '{name}' must be a number, got {value!r}."
                )
            if not 0.0 < float(value) < 1.0:
                raise ThresholdConfigError(
                    f"Threshold '{name}' must be in (0, 1), got {value}."
                )
        if self.medium <= self.low:
            raise ThresholdConfigError(
                f"Medium threshold ({self.medium}) must be greater than "
                f"low threshold ({self.low})."
            )


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Per-invocation settings for `analyze_product_data`.

    thresholds :
        Cardinality cut-offs for header classification.
    custom_uom_keywords :
        Extra substrings that mark a header as unit-of-measure / logistics.
    uom_sample_size :
        Number of non-empty values inspected per UOM header.
    taxonomy_level_count :
        How many leading hierarchy levels build the taxonomy tree.
    mixed_model_floor :
        Minimum percentage both row groups need before a mixed model is advised.
    treat_placeholders_as_missing :
        Treat literal 'unknown', 'n/a', 'null', ... as missing taxonomy values.
    """
    thresholds: CardinalityThresholds = field(default_factory=CardinalityThresholds)
    custom_uom_keywords: Tuple[str, ...] = ()
    uom_sample_size: int = DEFAULT_UOM_SAMPLE_SIZE
    taxonomy_level_count: int = 1
    mixed_model_floor: float = DEFAULT_MIXED_MODEL_FLOOR
    treat_placeholders_as_missing: bool = False

    def __post_init__(self) -> None:
        # accept any iterable of keywords but store a hashable tuple
        object.__setattr__(
            self, "custom_uom_keywords", tuple(self.custom_uom_keywords or ())
        )
        if self.uom_sample_size < 1:
            raise ValueError("uom_sample_size must be at least 1.")
        if self.taxonomy_level_count < 0:
            raise ValueError("taxonomy_level_count cannot be negative.")
        if not 0.0 <= self.mixed_model_floor < 50.0:
            raise ValueError("mixed_model_floor must be in [0, 50).")

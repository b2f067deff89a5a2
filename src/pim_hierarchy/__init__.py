"""
Product hierarchy analyzer.

Infers a Parent → Variant → SKU hierarchy, a taxonomy tree and data-quality
warnings from a tabular product dataset, ahead of a PIM catalog import.
The caller's data is only ever read.
"""

from .analysis import ValidationResult, validate_data
from .core import (
    AnalysisConfig,
    AnalysisResult,
    CardinalityThresholds,
    HierarchyBuilder,
    ThresholdConfigError,
    analyze_product_data,
)

__version__ = "0.1.0"

__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "CardinalityThresholds",
    "HierarchyBuilder",
    "ThresholdConfigError",
    "ValidationResult",
    "analyze_product_data",
    "validate_data",
]

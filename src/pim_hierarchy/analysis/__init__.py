# analysis/__init__.py

"""
Data-quality analysis over a raw product dataset.

The validator only reports; it never corrects values. Run it next to
`analyze_product_data`, passing the headers of the chosen hierarchy.
"""

from .data_validation import (
    DataValidationWarning,
    Severity,
    ValidationResult,
    WarningType,
    detect_duplicates,
    detect_inconsistencies,
    detect_missing_hierarchy_values,
    detect_outliers,
    validate_data,
)

__all__ = [
    "DataValidationWarning",
    "Severity",
    "ValidationResult",
    "WarningType",
    "detect_duplicates",
    "detect_inconsistencies",
    "detect_missing_hierarchy_values",
    "detect_outliers",
    "validate_data",
]

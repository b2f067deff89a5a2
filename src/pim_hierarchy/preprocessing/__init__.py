# preprocessing/__init__.py

"""
Read-only value parsing helpers shared by the classifiers and validators.
Nothing here changes the caller's data.
"""

from .numeric_units import (
    conversion_targets,
    format_number,
    is_numeric_value,
    normalize_unit,
    parse_inline_value_unit,
    safe_to_float,
)

__all__ = [
    "conversion_targets",
    "format_number",
    "is_numeric_value",
    "normalize_unit",
    "parse_inline_value_unit",
    "safe_to_float",
]

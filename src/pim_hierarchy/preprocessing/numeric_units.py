# preprocessing/numeric_units.py

"""
Numeric and inline-unit parsing helpers.

These helpers never modify a dataset. They only *read* single cell values
and answer two questions used throughout the engine:

    safe_to_float(x)            -> float | nan
        Best-effort numeric coercion (plain decimals, thousands-style
        strings, native numbers).

    parse_inline_value_unit(x)  -> (value, unit) | (None, None)
        Recognizes 'number unit' strings such as '132 mm', '45mm', '3.5 kg'.

Unit conversion suggestions are advisory only: `conversion_targets` returns
the units a value *could* be expressed in, it never converts anything.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import regex as re


# =========================
# 1. Numeric coercion
# =========================

# Pure integer/float: no commas, optional decimal point
_DECIMAL_PATTERN = re.compile(r'^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$')

# Thousands pattern: 1–3 digits, then one or more ",ddd" groups, optional .decimals
# Examples: "1,234", "12,345,678", "-1,234.56"
_THOUSANDS_PATTERN = re.compile(r'^[+-]?\d{1,3}(?:,\d{3})+(?:\.\d+)?$')


def safe_to_float(x: Any) -> float:
    """
    Best-effort conversion to float for comparison purposes.
    Handles ints/floats, decimal strings, and thousands-style strings.
    Returns np.nan if not convertible (booleans and non-finite values included).
    """
    if isinstance(x, bool):
        return np.nan

    if isinstance(x, (int, float, np.number)):
        value = float(x)
        return value if math.isfinite(value) else np.nan

    if isinstance(x, str):
        s = x.strip()
        if not s:
            return np.nan

        if _THOUSANDS_PATTERN.match(s):
            s = s.replace(',', '')
        elif not _DECIMAL_PATTERN.match(s):
            return np.nan

        try:
            value = float(s)
        except ValueError:
            return np.nan
        return value if math.isfinite(value) else np.nan

    return np.nan


def is_numeric_value(x: Any) -> bool:
    return not np.isnan(safe_to_float(x))


def format_number(value: float) -> str:
    """Render 100.0 as '100' and 2.5 as '2.5'."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


# =========================
# 2. Inline "value unit" parser
# =========================

_NUM_DECIMAL = re.compile(r'^[+-]?\d+(?:[.,]\d+)?$')
_NUM_THOUSANDS = re.compile(r'^[+-]?\d{1,3}(?:,\d{3})+(?:[.,]\d+)?$')

# Unit must start with a letter, to avoid ".5" / "0" etc.
_INLINE_VALUE_UNIT_PATTERN = re.compile(
    r'^\s*([-+]?\d+(?:[.,]\d+)?)\s*([A-Za-z][^\s,;]*)\s*$'
)


def parse_inline_value_unit(x: Any) -> Tuple[Optional[float], Optional[str]]:
    """
    If x looks like 'number unit' (e.g. '132 mm', '45mm', '84 in'),
    return (value: float, unit: str). Otherwise return (None, None).

    - Skips pure numeric strings and thousands-style numeric strings.
    """
    if not isinstance(x, str):
        return None, None

    s = x.strip()
    if not s:
        return None, None

    if _NUM_DECIMAL.match(s) or _NUM_THOUSANDS.match(s):
        return None, None

    m = _INLINE_VALUE_UNIT_PATTERN.match(s)
    if not m:
        return None, None

    raw_val, unit = m.groups()
    raw_val = raw_val.replace(',', '.')  # decimal comma -> dot
    try:
        value = float(raw_val)
    except ValueError:
        return None, None

    return value, unit


# =========================
# 3. Known unit families
# =========================

# Spelling variants -> canonical unit symbol
_UNIT_ALIASES: Dict[str, str] = {
    "g": "g", "gr": "g", "gram": "g", "grams": "g",
    "mg": "mg", "milligram": "mg", "milligrams": "mg",
    "kg": "kg", "kgs": "kg", "kilo": "kg", "kilogram": "kg", "kilograms": "kg",
    "lb": "lb", "lbs": "lb", "pound": "lb", "pounds": "lb",
    "oz": "oz", "ounce": "oz", "ounces": "oz",
    "mm": "mm", "millimeter": "mm", "millimeters": "mm", "millimetre": "mm",
    "cm": "cm", "centimeter": "cm", "centimeters": "cm", "centimetre": "cm",
    "m": "m", "meter": "m", "meters": "m", "metre": "m",
    "in": "inch", "inch": "inch", "inches": "inch",
    "ft": "ft", "foot": "ft", "feet": "ft",
    "ml": "ml", "milliliter": "ml", "millilitre": "ml",
    "l": "l", "lt": "l", "liter": "l", "litre": "l", "liters": "l", "litres": "l",
}

# Advisory conversion table: canonical unit -> units it can be expressed in
_CONVERSIONS: Dict[str, List[str]] = {
    "mg": ["g"],
    "g": ["kg", "oz"],
    "kg": ["g", "lb"],
    "lb": ["kg"],
    "oz": ["g"],
    "mm": ["cm", "inch"],
    "cm": ["mm", "inch"],
    "m": ["cm", "ft"],
    "inch": ["cm", "mm"],
    "ft": ["m"],
    "ml": ["l"],
    "l": ["ml"],
}


def normalize_unit(unit: Any) -> str:
    """Lower-case a unit token and map known spellings to one symbol."""
    u = str(unit).strip().lower().rstrip(".")
    return _UNIT_ALIASES.get(u, u)


def conversion_targets(unit: Any) -> List[str]:
    """Units that `unit` is commonly converted to. Empty for unknown units."""
    return list(_CONVERSIONS.get(normalize_unit(unit), []))

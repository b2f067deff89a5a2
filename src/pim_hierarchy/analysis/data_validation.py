# analysis/data_validation.py

"""
Data-quality warnings for a product dataset.

Warnings only: nothing here modifies the data. Four independent passes:

    detect_duplicates               identifier columns with repeated values
    detect_inconsistencies          same value spelled with different casing
    detect_missing_hierarchy_values blank cells in hierarchy columns
    detect_outliers                 IQR outliers in mostly-numeric columns

A failure on one header (or in a whole pass) is logged and skipped; the
remaining headers and passes still run.

Row numbering:
    duplicate warnings use spreadsheet row numbers (row_index + 2, after
    the header line); every other warning uses 0-based row indices.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..core.dataset import ProductTable
from ..core.keywords import IDENTIFIER_KEYWORDS, VALIDATION_EXCLUDE_KEYWORDS, header_matches
from ..preprocessing.numeric_units import format_number, safe_to_float

logger = logging.getLogger(__name__)


class WarningType(str, Enum):
    DUPLICATE = "duplicate"
    INCONSISTENCY = "inconsistency"
    NORMALIZATION = "normalization"
    OUTLIER = "outlier"
    MISSING_HIERARCHY = "missing_hierarchy"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class DataValidationWarning:
    type: WarningType
    severity: Severity
    header: str
    title: str
    message: str
    affected_rows: List[int]
    suggestion: str
    examples: List[str] = field(default_factory=list)
    percentage: Optional[float] = None

    @property
    def affected_count(self) -> int:
        return len(self.affected_rows)


@dataclass
class ValidationResult:
    warnings: List[DataValidationWarning]

    @property
    def total_issues(self) -> int:
        return len(self.warnings)

    @property
    def critical_issues(self) -> int:
        return sum(1 for w in self.warnings if w.severity is Severity.HIGH)

    def by_type(self, warning_type: WarningType) -> List[DataValidationWarning]:
        return [w for w in self.warnings if w.type is warning_type]


# ------------------------------------------------------------
# Pass parameters
# ------------------------------------------------------------
MAX_DUPLICATE_EXAMPLES = 3
MAX_INCONSISTENCY_EXAMPLES = 3
MAX_OUTLIER_EXAMPLES = 5

# categorical range for inconsistency checks
_MIN_DISTINCT = 2
_MAX_DISTINCT = 50

MISSING_HIGH_SHARE = 0.1

OUTLIER_MIN_NUMERIC_SHARE = 0.8
OUTLIER_MIN_SAMPLES = 10
OUTLIER_MAX_SHARE = 0.1
_IQR_FACTOR = 1.5

# Excel-style row number: 1-based, plus the header line
_SPREADSHEET_OFFSET = 2


def _per_header(
    table: ProductTable,
    check: Callable[[ProductTable, int, str], Optional[DataValidationWarning]],
    positions: Optional[Sequence[int]] = None,
) -> List[DataValidationWarning]:
    """Run `check` on each column; a failing column is logged and skipped."""
    warnings: List[DataValidationWarning] = []
    headers = table.headers
    for position in (range(len(headers)) if positions is None else positions):
        header = headers[position]
        try:
            warning = check(table, position, header)
        except Exception:
            logger.exception("%s failed for header %r", check.__name__, header)
            continue
        if warning is not None:
            warnings.append(warning)
    return warnings


# ------------------------------------------------------------
# 1. Duplicates
# ------------------------------------------------------------
def is_identifier_header(header: str) -> bool:
    """Identifier-like name that is not a measurement, date or free text."""
    return (
        header_matches(header, IDENTIFIER_KEYWORDS)
        and not header_matches(header, VALIDATION_EXCLUDE_KEYWORDS)
    )


def _duplicate_warning(table: ProductTable, position: int, header: str) -> Optional[DataValidationWarning]:
    values = table.text_column(position)
    values = values[values != ""]

    # value -> spreadsheet rows, groups in first-seen order
    groups: Dict[str, List[int]] = {}
    for row_index, v in values.items():
        groups.setdefault(v, []).append(int(row_index) + _SPREADSHEET_OFFSET)
    duplicates = [rows for rows in groups.values() if len(rows) > 1]
    if not duplicates:
        return None

    affected = [row for group in duplicates for row in group]
    return DataValidationWarning(
        type=WarningType.DUPLICATE,
        severity=Severity.HIGH,
        header=header,
        title=f"Duplicate {header} Values Detected",
        message=(
            f'Found {len(duplicates)} duplicate values in "{header}" '
            f"affecting {len(affected)} products"
        ),
        affected_rows=affected,
        suggestion=(
            f"Review and ensure each product has a unique {header}. "
            f"Consider adding a suffix or correcting data entry errors."
        ),
        examples=[str(r) for r in duplicates[0][:MAX_DUPLICATE_EXAMPLES]],
    )


def detect_duplicates(table: ProductTable) -> List[DataValidationWarning]:
    positions = [i for i, h in enumerate(table.headers) if is_identifier_header(h)]
    return _per_header(table, _duplicate_warning, positions)


# ------------------------------------------------------------
# 2. Inconsistent spellings
# ------------------------------------------------------------
def _inconsistency_warning(table: ProductTable, position: int, header: str) -> Optional[DataValidationWarning]:
    values = table.text_column(position)
    distinct = list(pd.unique(values[values != ""]))
    if not _MIN_DISTINCT <= len(distinct) <= _MAX_DISTINCT:
        return None

    # lower-cased form -> spellings, first-seen first
    spellings: Dict[str, List[str]] = {}
    for v in distinct:
        spellings.setdefault(v.lower(), []).append(v)
    clusters = [group for group in spellings.values() if len(group) > 1]
    if not clusters:
        return None

    rows_by_value: Dict[str, List[int]] = {}
    for row_index, v in enumerate(values.tolist()):
        if v:
            rows_by_value.setdefault(v, []).append(row_index)

    # rows accumulate per cluster and are not de-duplicated across clusters
    affected: List[int] = []
    examples: List[str] = []
    for group in clusters:
        for spelling in group:
            affected.extend(rows_by_value.get(spelling, []))
        if len(examples) < MAX_INCONSISTENCY_EXAMPLES:
            quoted = ", ".join(f'"{s}"' for s in group)
            examples.append(f'{quoted} → suggest "{group[0]}"')

    return DataValidationWarning(
        type=WarningType.NORMALIZATION,
        severity=Severity.MEDIUM,
        header=header,
        title=f'Inconsistent Values in "{header}"',
        message=(
            f"Found {len(clusters)} groups of values with inconsistent "
            f"capitalization or spacing"
        ),
        affected_rows=affected,
        suggestion=(
            "Consider normalizing these values for consistency. This will "
            "improve data quality and hierarchy detection."
        ),
        examples=examples,
    )


def detect_inconsistencies(table: ProductTable) -> List[DataValidationWarning]:
    return _per_header(table, _inconsistency_warning)


# ------------------------------------------------------------
# 3. Missing hierarchy values
# ------------------------------------------------------------
def _missing_warning(table: ProductTable, position: int, header: str) -> Optional[DataValidationWarning]:
    total = table.n_rows
    mask = ~table.non_empty_mask(position)
    missing = [int(i) for i in mask[mask].index]
    if not missing or not total:
        return None

    share = len(missing) / total
    percentage = share * 100.0
    return DataValidationWarning(
        type=WarningType.MISSING_HIERARCHY,
        severity=Severity.HIGH if share > MISSING_HIGH_SHARE else Severity.MEDIUM,
        header=header,
        title=f'Missing Values in Hierarchy Field "{header}"',
        message=f'{len(missing)} products ({percentage:.1f}%) are missing values in "{header}"',
        affected_rows=missing,
        suggestion=(
            "These products cannot be properly categorized in the hierarchy. "
            "Consider treating them as standalone products or filling in the missing values."
        ),
        percentage=percentage,
    )


def detect_missing_hierarchy_values(
    table: ProductTable,
    hierarchy_headers: Sequence[str],
) -> List[DataValidationWarning]:
    """Headers not present in the dataset are ignored."""
    positions = []
    for h in dict.fromkeys(hierarchy_headers):
        position = table.index_of(h)
        if position >= 0:
            positions.append(position)
    return _per_header(table, _missing_warning, positions)


# ------------------------------------------------------------
# 4. Numeric outliers
# ------------------------------------------------------------
def iqr_bounds(sorted_values: np.ndarray) -> tuple:
    """
    Rank-indexed quartiles (no interpolation):

        Q1 = v[floor(n * 0.25)],  Q3 = v[floor(n * 0.75)]
        bounds = [Q1 - 1.5 * IQR, Q3 + 1.5 * IQR]
    """
    n = len(sorted_values)
    q1 = float(sorted_values[math.floor(n * 0.25)])
    q3 = float(sorted_values[math.floor(n * 0.75)])
    iqr = q3 - q1
    return q1 - _IQR_FACTOR * iqr, q3 + _IQR_FACTOR * iqr


def _outlier_warning(table: ProductTable, position: int, header: str) -> Optional[DataValidationWarning]:
    values = table.text_column(position)
    values = values[values != ""]
    if values.empty:
        return None

    numeric = values.map(safe_to_float).astype(float).dropna()
    if len(numeric) < OUTLIER_MIN_SAMPLES or len(numeric) < OUTLIER_MIN_NUMERIC_SHARE * len(values):
        return None

    low, high = iqr_bounds(np.sort(numeric.to_numpy()))
    outliers = numeric[(numeric < low) | (numeric > high)]

    if not 0 < len(outliers) < OUTLIER_MAX_SHARE * table.n_rows:
        return None

    return DataValidationWarning(
        type=WarningType.OUTLIER,
        severity=Severity.LOW,
        header=header,
        title=f'Potential Outliers in "{header}"',
        message=(
            f"Found {len(outliers)} values that are significantly different "
            f"from the typical range"
        ),
        affected_rows=[int(i) for i in outliers.index],
        suggestion=(
            "Review these values to ensure they are correct. Outliers might "
            "indicate data entry errors or exceptional products."
        ),
        examples=[format_number(v) for v in outliers.tolist()[:MAX_OUTLIER_EXAMPLES]],
    )


def detect_outliers(table: ProductTable) -> List[DataValidationWarning]:
    return _per_header(table, _outlier_warning)


# ------------------------------------------------------------
# Entry point
# ------------------------------------------------------------
def validate_data(
    headers: Sequence[Any],
    rows: Sequence[Any],
    hierarchy_headers: Sequence[str] = (),
) -> ValidationResult:
    """
    Run every validation pass. Warnings are ordered by pass (duplicates,
    inconsistencies, missing hierarchy values, outliers), then by column.
    """
    table = ProductTable(headers, rows)

    passes = [
        ("duplicates", lambda: detect_duplicates(table)),
        ("inconsistencies", lambda: detect_inconsistencies(table)),
        ("missing hierarchy values", lambda: detect_missing_hierarchy_values(table, hierarchy_headers)),
        ("outliers", lambda: detect_outliers(table)),
    ]

    warnings: List[DataValidationWarning] = []
    for name, run in passes:
        try:
            warnings.extend(run())
        except Exception:
            logger.exception("Validation pass '%s' failed", name)

    result = ValidationResult(warnings)
    logger.debug(
        "Validation: %d issues (%d critical) over %d rows",
        result.total_issues, result.critical_issues, table.n_rows,
    )
    return result

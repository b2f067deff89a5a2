# core/dataset.py

"""
Read-only snapshot of a tabular product dataset.

The caller owns `headers` and `rows`. `ProductTable` copies them into an
object-dtype DataFrame so that every pass works on its own snapshot, and
normalizes ragged input:

    - rows shorter than the header list are padded with empty cells
    - rows longer than the header list are truncated
    - anything that is not a row sequence becomes an all-empty row

Columns are addressed by position, so the table keeps working even if a
loader hands over duplicate header names.
"""

from __future__ import annotations

from typing import Any, List, Sequence

import numpy as np
import pandas as pd

from ..preprocessing.numeric_units import format_number


def is_empty(value: Any) -> bool:
    """None, NaN/NA, or a string that is blank after trimming."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # array-like cells: not a scalar missing marker
        return False


def cell_text(value: Any) -> str:
    """
    Trimmed string form of a cell, '' for empty cells.
    Integral floats render like ints, so 1 and 1.0 are one value.
    """
    if is_empty(value):
        return ""
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return format_number(value)
    return str(value).strip()


def _normalize_row(row: Any, width: int) -> List[Any]:
    if row is None or isinstance(row, (str, bytes, dict)):
        return [None] * width
    try:
        cells = list(row)[:width]
    except TypeError:
        return [None] * width
    if len(cells) < width:
        cells.extend([None] * (width - len(cells)))
    return cells


class ProductTable:
    """
    Immutable view over (headers, rows).

    Parameters
    ----------
    headers :
        Ordered header names.
    rows :
        Ordered records aligned positionally to `headers`.
    """

    def __init__(self, headers: Sequence[Any], rows: Sequence[Any]):
        self._headers: List[str] = [str(h) for h in (headers or [])]
        width = len(self._headers)
        data = [_normalize_row(r, width) for r in (rows or [])]
        self._n_rows = len(data)
        self._df = pd.DataFrame(data, columns=range(width), dtype=object)

    # ------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------

    @property
    def headers(self) -> List[str]:
        return list(self._headers)

    @property
    def n_rows(self) -> int:
        return self._n_rows

    def __len__(self) -> int:
        return self._n_rows

    def index_of(self, header: str) -> int:
        """Position of `header`, -1 when absent."""
        try:
            return self._headers.index(header)
        except ValueError:
            return -1

    # ------------------------------------------------------------
    # Column access
    # ------------------------------------------------------------

    def raw_column(self, position: int) -> pd.Series:
        """Original cell values of one column (a copy)."""
        return self._df.iloc[:, position].copy()

    def text_column(self, position: int) -> pd.Series:
        """Trimmed string values, '' for empty cells."""
        return self._df.iloc[:, position].map(cell_text).astype(object)

    def non_empty_mask(self, position: int) -> pd.Series:
        return self.text_column(position) != ""

    def text_rows(self) -> List[List[str]]:
        """Every row as trimmed strings; convenient for row-wise passes."""
        columns = [self.text_column(i).tolist() for i in range(len(self._headers))]
        if not columns:
            return [[] for _ in range(self._n_rows)]
        return [list(r) for r in zip(*columns)]

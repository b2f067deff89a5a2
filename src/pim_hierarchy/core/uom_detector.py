# core/uom_detector.py

"""
Unit-of-measure / logistics header detection.

A header is a UOM header when its lower-cased name contains one of the
base keywords (or a caller keyword). UOM headers never become hierarchy
levels; they are forced onto the SKU level.

For each UOM header we also look at a sample of its values. When most of
them embed the unit in the value ('12g', '3.5 kg') we suggest splitting
the column into value + unit, and list advisory conversions for the
detected unit. Nothing is converted here.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Iterable, List, Optional, Sequence

from ..preprocessing.numeric_units import (
    conversion_targets,
    format_number,
    normalize_unit,
    parse_inline_value_unit,
)
from .config import DEFAULT_UOM_SAMPLE_SIZE
from .dataset import ProductTable
from .keywords import UOM_BASE_KEYWORDS, header_matches, merge_keywords
from .models import UnitConversion, UomSuggestion

logger = logging.getLogger(__name__)

# Headers that name a separate unit column ("Weight UOM", "Unit")
_COMPANION_UNIT_KEYWORDS = ("uom", "unit")


class UomDetector:
    """
    Keyword-driven UOM header detection.

    Parameters
    ----------
    custom_keywords :
        Extra substrings appended to the base keyword set.
    sample_size :
        Number of non-empty values inspected per matched header.
    """

    def __init__(
        self,
        custom_keywords: Optional[Iterable[str]] = None,
        sample_size: int = DEFAULT_UOM_SAMPLE_SIZE,
    ):
        self.keywords = merge_keywords(UOM_BASE_KEYWORDS, custom_keywords)
        self.sample_size = max(1, int(sample_size))

    # ------------------------------------------------------------
    # Header matching
    # ------------------------------------------------------------

    def is_uom_header(self, header: str) -> bool:
        return header_matches(header, self.keywords)

    def matching_headers(self, headers: Sequence[Any]) -> List[str]:
        """UOM headers in column order."""
        return [str(h) for h in headers if self.is_uom_header(str(h))]

    # ------------------------------------------------------------
    # Value inspection
    # ------------------------------------------------------------

    def _companion_unit_value(self, table: ProductTable, header: str) -> Optional[str]:
        """First value of a separate unit column, if the dataset has one."""
        for position, other in enumerate(table.headers):
            if other == header or not header_matches(other, _COMPANION_UNIT_KEYWORDS):
                continue
            values = table.text_column(position)
            values = values[values != ""]
            if len(values):
                return str(values.iloc[0]).lower()
        return None

    def _suggest(self, table: ProductTable, position: int, header: str) -> UomSuggestion:
        values = table.text_column(position)
        sample = values[values != ""].head(self.sample_size).tolist()

        parsed = [(v, *parse_inline_value_unit(v)) for v in sample]
        matched = [(raw, val, unit) for raw, val, unit in parsed if unit is not None]

        # split only when the majority of sampled values embed a unit
        if sample and len(matched) * 2 > len(sample):
            unit_counts = Counter(normalize_unit(u) for _, _, u in matched)
            detected = unit_counts.most_common(1)[0][0]
            raw, val, unit = next(m for m in matched if normalize_unit(m[2]) == detected)
            return UomSuggestion(
                header=header,
                detected_uom=detected,
                suggested_split=True,
                example=f"{format_number(val)} {unit} (from '{raw}')",
                conversions=self._conversions(header, detected),
            )

        companion = None
        if not header_matches(header, _COMPANION_UNIT_KEYWORDS):
            companion = self._companion_unit_value(table, header)
        if companion:
            detected = normalize_unit(companion)
            return UomSuggestion(
                header=header,
                detected_uom=detected,
                suggested_split=False,
                conversions=self._conversions(header, detected),
            )

        return UomSuggestion(header=header, detected_uom=None, suggested_split=False)

    @staticmethod
    def _conversions(header: str, unit: str) -> tuple:
        return tuple(
            UnitConversion(target_uom=t, new_property_name=f"{header}_{t}")
            for t in conversion_targets(unit)
        )

    def detect(
        self,
        headers: Sequence[Any],
        rows: Sequence[Any],
        *,
        table: Optional[ProductTable] = None,
    ) -> List[UomSuggestion]:
        """
        One suggestion per UOM header, in column order.

        A header whose values cannot be inspected still gets a plain
        (non-split) suggestion; the failure is logged.
        """
        if table is None:
            table = ProductTable(headers, rows)

        suggestions: List[UomSuggestion] = []
        for position, header in enumerate(table.headers):
            if not self.is_uom_header(header):
                continue
            try:
                suggestions.append(self._suggest(table, position, header))
            except Exception:
                logger.exception("UOM inspection failed for header %r", header)
                suggestions.append(
                    UomSuggestion(header=header, detected_uom=None, suggested_split=False)
                )

        logger.debug(
            "UOM detection: %d of %d headers matched", len(suggestions), len(table.headers)
        )
        return suggestions

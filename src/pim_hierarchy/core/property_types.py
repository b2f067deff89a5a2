# core/property_types.py

"""
Property data-type recommendations and product-domain detection.

Both are advisory: they label columns and the catalog, they never change
a value.

    analyze_property_types(...)  -> one PropertyRecommendation per header
    detect_product_domain(...)   -> ProductDomain ('General' when unsure)
    hierarchy_confidence(...)    -> rough confidence for the proposed hierarchy
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

import pandas as pd
import regex as re

from ..preprocessing.numeric_units import is_numeric_value
from .dataset import ProductTable
from .models import (
    CardinalityScore,
    PropertyDataType,
    PropertyRecommendation,
    ProductDomain,
)

logger = logging.getLogger(__name__)


# ============================================================
# Data types
# ============================================================

PICKLIST_MAX_VALUES = 20
_PICKLIST_MAX_CARDINALITY = 0.3
_YES_NO_MAX_VALUES = 5
_YES_NO_TOKENS = frozenset({"yes", "no", "true", "false", "y", "n", "1", "0"})

_URL_SHARE = 0.7
_HTML_SHARE = 0.5

_URL_PREFIX = re.compile(r"^(?:https?://|www\.)", re.IGNORECASE)
_IMAGE_SUFFIX = re.compile(r"\.(?:jpg|jpeg|png|gif|webp|svg)$", re.IGNORECASE)
_MARKUP = re.compile(r"<[^<>]+>")


def _recommend(values: pd.Series, score: CardinalityScore) -> PropertyRecommendation:
    header = score.header

    if 0 < score.unique_count <= PICKLIST_MAX_VALUES and score.cardinality < _PICKLIST_MAX_CARDINALITY:
        picklist = tuple(pd.unique(values))[:PICKLIST_MAX_VALUES]
        return PropertyRecommendation(
            header=header,
            data_type=PropertyDataType.PICKLIST,
            is_picklist=True,
            confidence=0.9,
            picklist_values=picklist,
        )

    if values.empty:
        return PropertyRecommendation(header, PropertyDataType.STRING, False, 0.5)

    lowered = set(values.str.lower())
    if len(lowered) <= _YES_NO_MAX_VALUES and lowered <= _YES_NO_TOKENS:
        return PropertyRecommendation(header, PropertyDataType.YES_NO, False, 0.95)

    if values.map(is_numeric_value).all():
        return PropertyRecommendation(header, PropertyDataType.NUMBER, False, 0.9)

    urls = values[values.map(lambda v: bool(_URL_PREFIX.match(v)))]
    if len(urls) / len(values) > _URL_SHARE:
        if urls.map(lambda v: bool(_IMAGE_SUFFIX.search(v))).any():
            return PropertyRecommendation(header, PropertyDataType.DIGITAL_ASSET, False, 0.85)
        return PropertyRecommendation(header, PropertyDataType.URL, False, 0.85)

    html_share = values.map(lambda v: bool(_MARKUP.search(v))).mean()
    if html_share > _HTML_SHARE:
        return PropertyRecommendation(header, PropertyDataType.HTML, False, 0.8)

    return PropertyRecommendation(header, PropertyDataType.STRING, False, 0.5)


def analyze_property_types(
    table: ProductTable,
    scores: Sequence[CardinalityScore],
) -> List[PropertyRecommendation]:
    """
    First matching rule wins:

        picklist       <= 20 distinct values and cardinality < 0.3
        yes_no         <= 5 distinct values, all yes/no/true/false/y/n/1/0
        number         every non-empty value is numeric
        digital_asset  > 70% URLs, some ending in an image extension
        url            > 70% URLs
        html           > 50% of values contain markup
        string         everything else
    """
    recommendations: List[PropertyRecommendation] = []
    for position, score in enumerate(scores):
        try:
            values = table.text_column(position)
            recommendations.append(_recommend(values[values != ""], score))
        except Exception:
            logger.exception("Property type analysis failed for header %r", score.header)
            recommendations.append(
                PropertyRecommendation(score.header, PropertyDataType.STRING, False, 0.5)
            )
    return recommendations


# ============================================================
# Product domain
# ============================================================

DOMAIN_KEYWORDS: Dict[str, tuple] = {
    "Electronics": (
        "processor", "ram", "gb", "cpu", "gpu", "screen", "battery", "wifi",
        "bluetooth", "voltage", "watt", "mhz", "ghz", "storage", "ssd", "hdd",
    ),
    "Apparel": (
        "size", "color", "fabric", "material", "sleeve", "collar", "fit", "waist",
        "inseam", "cotton", "polyester", "xl", "small", "medium", "large",
    ),
    "Food": (
        "flavor", "ingredients", "nutrition", "calories", "protein", "carbs",
        "serving", "allergen", "organic", "vegan", "gluten", "dairy", "expiry",
        "shelf life",
    ),
    "Furniture": (
        "wood", "upholstery", "assembly", "seat", "drawer", "shelf", "table",
        "chair", "sofa", "cabinet", "desk", "finish", "veneer",
    ),
}

GENERAL_DOMAIN = "General"
_DOMAIN_SAMPLE_ROWS = 20
_DOMAIN_MIN_HITS = 3
_MAX_INDICATORS = 5


def detect_product_domain(table: ProductTable) -> ProductDomain:
    """
    Keyword hits over the header names and the first 20 rows.

    The winner needs at least three hits; ties go to the domain listed
    first. Confidence is hits / 5 capped at 0.95, or 0.3 without any hit.
    """
    sample = [v for row in table.text_rows()[:_DOMAIN_SAMPLE_ROWS] for v in row if v]
    text = " ".join(table.headers + sample).lower()

    best_type: Optional[str] = None
    best_found: List[str] = []
    for domain, keywords in DOMAIN_KEYWORDS.items():
        found = [kw for kw in keywords if kw in text]
        if best_type is None or len(found) > len(best_found):
            best_type, best_found = domain, found

    hits = len(best_found)
    confidence = min(hits / 5.0, 0.95) if hits else 0.3
    domain = best_type if hits >= _DOMAIN_MIN_HITS else GENERAL_DOMAIN

    logger.debug("Product domain: %s (%d keyword hits)", domain, hits)
    return ProductDomain(
        type=domain,
        confidence=confidence,
        indicators=tuple(best_found[:_MAX_INDICATORS]),
    )


# ============================================================
# Hierarchy confidence
# ============================================================

# number of repeating (level1/level2) headers -> confidence
_CONFIDENCE_BY_STRUCTURE = {0: 0.3, 1: 0.6, 2: 0.75, 3: 0.85}
_CONFIDENCE_MANY_LEVELS = 0.8


def hierarchy_confidence(structural_header_count: int) -> float:
    """
    Rough confidence in the proposal, from how many repeating headers
    could form parent / variant levels. Past three, the extra headers are
    more likely properties than categories, so confidence dips slightly.
    """
    if structural_header_count < 0:
        raise ValueError("Header count cannot be negative.")
    return _CONFIDENCE_BY_STRUCTURE.get(structural_header_count, _CONFIDENCE_MANY_LEVELS)

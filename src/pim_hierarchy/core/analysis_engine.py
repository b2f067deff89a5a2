# core/analysis_engine.py

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .alternatives import repeating_headers, suggest_alternative_hierarchies
from .config import AnalysisConfig
from .dataset import ProductTable
from .header_classifier import calculate_cardinality_scores
from .hierarchy_builder import SKU_LEVEL_NAME, HierarchyBuilder
from .mixed_model import suggest_mixed_model
from .models import AnalysisResult, CardinalityScore, HeaderLevel, HierarchyLevel
from .property_types import analyze_property_types, detect_product_domain, hierarchy_confidence
from .record_suggestions import record_suggestions
from .taxonomy import TaxonomyResolver
from .uom_detector import UomDetector

logger = logging.getLogger(__name__)

_CATEGORIZING = (HeaderLevel.LEVEL1, HeaderLevel.LEVEL2)


def taxonomy_levels(
    levels: Sequence[HierarchyLevel],
    scores: Sequence[CardinalityScore],
    uom_headers: Iterable[str],
    count: int,
) -> List[HierarchyLevel]:
    """
    Levels of the first `count` that can categorize products.

    UOM headers are removed from every level. The SKU level, and any level
    left without a level1/level2 header, is skipped: near-unique columns
    would give every row its own path. An empty result means every row
    ends at the taxonomy root.
    """
    uom = set(uom_headers)
    classification: Dict[str, HeaderLevel] = {s.header: s.classification for s in scores}

    selected: List[HierarchyLevel] = []
    for lvl in levels[:count]:
        if lvl.name == SKU_LEVEL_NAME:
            continue
        headers = [h for h in lvl.headers if h not in uom]
        if not any(classification.get(h) in _CATEGORIZING for h in headers):
            logger.debug("Level %d (%s) skipped for taxonomy", lvl.level, lvl.name)
            continue
        kept = lvl.copy()
        kept.headers = headers
        selected.append(kept)
    return selected


def analyze_product_data(
    headers: Sequence[Any],
    rows: Sequence[Any],
    config: Optional[AnalysisConfig] = None,
    hierarchy: Optional[Iterable[HierarchyLevel]] = None,
) -> AnalysisResult:
    """
    Full read-only analysis of one dataset.

    Pipeline:
        1. Cardinality scores + level classification
        2. UOM headers and split suggestions
        3. Record ID / record name suggestions
        4. Default hierarchy, or the caller's edited `hierarchy`
        5. Property types, product domain, hierarchy confidence,
           alternative structures
        6. Taxonomy tree over the categorizing levels among the first
           `taxonomy_level_count` (never the SKU level, never UOM headers)
        7. Mixed-model advice from the orphan count

    Parameters
    ----------
    headers, rows :
        The dataset. Never modified.
    config :
        Thresholds and heuristics settings; defaults to AnalysisConfig().
    hierarchy :
        A previously returned (and possibly edited) hierarchy. Headers not
        on any of its levels are reported as unassigned.

    Returns
    -------
    AnalysisResult

    Raises
    ------
    ThresholdConfigError
        If the configured thresholds are invalid.
    ValueError
        If `hierarchy` references headers the dataset does not have.
    HierarchyInvariantError
        If `hierarchy` is not numbered 1..N, shares a header between
        levels, or names a record ID that is not one of its level's headers.
    """
    config = config or AnalysisConfig()
    config.thresholds.validate()

    # one snapshot shared by every pass
    table = ProductTable(headers, rows)

    scores = calculate_cardinality_scores(headers, rows, config.thresholds, table=table)

    detector = UomDetector(config.custom_uom_keywords, config.uom_sample_size)
    uom_suggestions = detector.detect(headers, rows, table=table)
    uom_headers = [s.header for s in uom_suggestions]

    record_id, record_name = record_suggestions(table, scores)

    if hierarchy is None:
        builder = HierarchyBuilder.from_scores(scores, uom_headers, record_id, record_name)
    else:
        builder = HierarchyBuilder.from_levels(hierarchy, table.headers)
    levels = builder.levels

    repeating = repeating_headers(scores, uom_headers)

    if config.treat_placeholders_as_missing:
        resolver = TaxonomyResolver.with_placeholders(uom_headers)
    else:
        resolver = TaxonomyResolver(uom_headers)
    taxonomy = resolver.resolve(
        taxonomy_levels(levels, scores, uom_headers, config.taxonomy_level_count),
        headers, rows, table=table,
    )

    mixed = suggest_mixed_model(
        taxonomy.total_rows, taxonomy.orphan_count, config.mixed_model_floor
    )

    logger.info(
        "Analyzed %d rows x %d headers: %d levels, %d orphaned, strategy=%s",
        table.n_rows, len(table.headers), len(levels),
        taxonomy.orphan_count, mixed.strategy.value,
    )

    return AnalysisResult(
        cardinality_scores=scores,
        hierarchy=levels,
        unassigned_properties=builder.unassigned,
        hierarchy_warnings=builder.incomplete_level_warnings(),
        uom_suggestions=uom_suggestions,
        record_id_suggestion=record_id,
        record_name_suggestion=record_name,
        property_recommendations=analyze_property_types(table, scores),
        product_domain=detect_product_domain(table),
        hierarchy_confidence=hierarchy_confidence(len(repeating)),
        alternative_hierarchies=suggest_alternative_hierarchies(scores, uom_headers),
        taxonomy_tree=taxonomy.tree,
        taxonomy_paths=taxonomy.paths,
        orphaned_records=taxonomy.orphaned_records,
        mixed_model_suggestion=mixed,
        thresholds=config.thresholds,
    )

# core/__init__.py

"""
Core heuristics of the product hierarchy analyzer.

This package contains:

    - analysis_engine      → analyze_product_data pipeline
    - header_classifier    → cardinality scores + level classification
    - uom_detector         → unit-of-measure headers and split suggestions
    - record_suggestions   → record ID / record name candidates
    - hierarchy_builder    → editable Parent → Variant → SKU hierarchy
    - alternatives         → alternative hierarchy presets
    - taxonomy             → taxonomy tree, paths and orphaned rows
    - mixed_model          → hierarchical / standalone / mixed advice
    - property_types       → property data types + product domain
    - config, keywords, models, dataset → shared configuration and types
"""

from .alternatives import suggest_alternative_hierarchies
from .analysis_engine import analyze_product_data, taxonomy_levels
from .config import (
    AnalysisConfig,
    CardinalityThresholds,
    ThresholdConfigError,
)
from .dataset import ProductTable, is_empty
from .header_classifier import calculate_cardinality_scores, classify_cardinality
from .hierarchy_builder import HierarchyBuilder, HierarchyInvariantError
from .mixed_model import suggest_mixed_model
from .models import (
    AnalysisResult,
    CardinalityScore,
    HeaderLevel,
    HierarchyAlternative,
    HierarchyLevel,
    MixedModelSuggestion,
    ModelStrategy,
    OrphanedRecord,
    ProductDomain,
    PropertyDataType,
    PropertyRecommendation,
    TaxonomyPath,
    TaxonomyTreeNode,
    UnitConversion,
    UomSuggestion,
)
from .property_types import analyze_property_types, detect_product_domain
from .record_suggestions import suggest_record_id, suggest_record_name
from .taxonomy import TaxonomyResolver, TaxonomyResult
from .uom_detector import UomDetector

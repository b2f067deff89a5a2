# core/models.py

"""
Result types produced by the analysis engine.

All "type"/"classification" fields are closed enumerations; consumers can
switch on them exhaustively.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from .config import CardinalityThresholds


# ============================================================
# Enumerations
# ============================================================

class HeaderLevel(str, Enum):
    """Cardinality classification of a single header."""
    LEVEL1 = "level1"  # low variety: parent / taxonomy candidate
    LEVEL2 = "level2"  # child / variant candidate
    LEVEL3 = "level3"  # near-unique: SKU level


class PropertyDataType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    HTML = "html"
    PICKLIST = "picklist"
    DIGITAL_ASSET = "digital_asset"
    URL = "url"
    YES_NO = "yes_no"


class ModelStrategy(str, Enum):
    HIERARCHICAL = "hierarchical"
    STANDALONE = "standalone"
    MIXED = "mixed"


# ============================================================
# Header statistics
# ============================================================

@dataclass(frozen=True)
class CardinalityScore:
    header: str
    unique_count: int
    total_count: int
    cardinality: float
    completeness: float
    hierarchy_score: float
    classification: HeaderLevel


# ============================================================
# Hierarchy
# ============================================================

@dataclass
class HierarchyLevel:
    """
    One tier of the product model.

    `headers` keeps insertion order but behaves as a set: a header appears
    at most once, and never on two levels. `record_id` must be one of the
    level's headers; None marks the level as incomplete.
    """
    level: int
    name: str
    headers: List[str] = field(default_factory=list)
    record_id: Optional[str] = None
    record_name: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.record_id is not None and self.record_id in self.headers

    def copy(self) -> "HierarchyLevel":
        return HierarchyLevel(
            level=self.level,
            name=self.name,
            headers=list(self.headers),
            record_id=self.record_id,
            record_name=self.record_name,
        )


# ============================================================
# Taxonomy
# ============================================================

@dataclass
class TaxonomyTreeNode:
    """
    Node of the taxonomy tree. A node owns its children; there are no
    parent references, traversal is always top-down.
    """
    name: str
    level: int
    product_count: int = 0
    terminal_count: int = 0
    properties: List[str] = field(default_factory=list)
    children: List["TaxonomyTreeNode"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def child(self, name: str) -> Optional["TaxonomyTreeNode"]:
        for c in self.children:
            if c.name == name:
                return c
        return None

    def walk(self) -> Iterator["TaxonomyTreeNode"]:
        """Pre-order traversal, iterative so deep trees cannot overflow."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass(frozen=True)
class TaxonomyPath:
    path: Tuple[str, ...]
    product_count: int
    properties: Tuple[str, ...]


@dataclass(frozen=True)
class OrphanedRecord:
    row_index: int
    issues: Tuple[str, ...]


# ============================================================
# Suggestions
# ============================================================

@dataclass(frozen=True)
class UnitConversion:
    target_uom: str
    new_property_name: str


@dataclass(frozen=True)
class UomSuggestion:
    header: str
    detected_uom: Optional[str]
    suggested_split: bool
    example: Optional[str] = None
    conversions: Tuple[UnitConversion, ...] = ()


@dataclass(frozen=True)
class PropertyRecommendation:
    header: str
    data_type: PropertyDataType
    is_picklist: bool
    confidence: float
    picklist_values: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class ProductDomain:
    type: str
    confidence: float
    indicators: Tuple[str, ...]


@dataclass
class HierarchyAlternative:
    """A preset structure the caller may adopt instead of the default proposal."""
    name: str
    levels: List[HierarchyLevel]
    properties: List[str]
    confidence: float
    reasoning: str


@dataclass(frozen=True)
class MixedModelSuggestion:
    should_use_mixed: bool
    strategy: ModelStrategy
    hierarchical_percentage: float
    standalone_percentage: float
    reasoning: str


# ============================================================
# Full analysis result
# ============================================================

@dataclass
class AnalysisResult:
    cardinality_scores: List[CardinalityScore]
    hierarchy: List[HierarchyLevel]
    unassigned_properties: List[str]
    hierarchy_warnings: List[str]
    uom_suggestions: List[UomSuggestion]
    record_id_suggestion: Optional[str]
    record_name_suggestion: Optional[str]
    property_recommendations: List[PropertyRecommendation]
    product_domain: ProductDomain
    hierarchy_confidence: float
    alternative_hierarchies: List[HierarchyAlternative]
    taxonomy_tree: TaxonomyTreeNode
    taxonomy_paths: List[TaxonomyPath]
    orphaned_records: List[OrphanedRecord]
    mixed_model_suggestion: MixedModelSuggestion
    thresholds: CardinalityThresholds

    def score_for(self, header: str) -> Optional[CardinalityScore]:
        for s in self.cardinality_scores:
            if s.header == header:
                return s
        return None

    def hierarchy_headers(self) -> List[str]:
        return [h for lvl in self.hierarchy for h in lvl.headers]

    def level_map(self) -> Dict[str, int]:
        """header -> level number, for every assigned header."""
        return {h: lvl.level for lvl in self.hierarchy for h in lvl.headers}

# core/taxonomy.py

"""
Taxonomy tree construction from a finalized hierarchy.

The taxonomy levels (usually just Level 1) define an ordered list of
headers. Every row walks down from a synthetic Root node, one child per
header value, incrementing product counts along its path:

    Root (n)
      └── Beverages (k)
            └── Soft Drinks (j)      ← leaf, carries the property names
                                       populated by its rows

A row with an empty value at any taxonomy header is not placed in the
tree; it becomes an OrphanedRecord naming every empty header.

Counts are conserved:

    node.product_count == sum(child.product_count) + node.terminal_count
    sum(path.product_count) + len(orphans) == total rows
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

from .dataset import ProductTable
from .keywords import PLACEHOLDER_VALUES
from .models import HierarchyLevel, OrphanedRecord, TaxonomyPath, TaxonomyTreeNode

logger = logging.getLogger(__name__)

ROOT_NAME = "Root"


@dataclass
class TaxonomyResult:
    tree: TaxonomyTreeNode
    paths: List[TaxonomyPath]
    orphaned_records: List[OrphanedRecord]
    taxonomy_headers: List[str]
    total_rows: int

    @property
    def orphan_count(self) -> int:
        return len(self.orphaned_records)


class TaxonomyResolver:
    """
    Parameters
    ----------
    uom_headers :
        Headers never reported as leaf properties.
    placeholder_values :
        Lower-cased literals treated like empty cells ('unknown', 'n/a', ...).
        Empty by default: only blank cells orphan a row.
    """

    def __init__(
        self,
        uom_headers: Iterable[str] = (),
        placeholder_values: Iterable[str] = (),
    ):
        self.uom_headers: FrozenSet[str] = frozenset(uom_headers)
        self.placeholder_values: FrozenSet[str] = frozenset(
            str(v).strip().lower() for v in placeholder_values
        )

    @classmethod
    def with_placeholders(cls, uom_headers: Iterable[str] = ()) -> "TaxonomyResolver":
        return cls(uom_headers, PLACEHOLDER_VALUES)

    # ------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------

    @staticmethod
    def taxonomy_headers(levels: Sequence[HierarchyLevel]) -> List[str]:
        """Headers of the taxonomy levels, flattened in level order."""
        ordered = sorted(levels, key=lambda lvl: lvl.level)
        return [h for lvl in ordered for h in lvl.headers]

    def _is_missing(self, value: str) -> bool:
        return value == "" or value.lower() in self.placeholder_values

    # ------------------------------------------------------------
    # Build
    # ------------------------------------------------------------

    def resolve(
        self,
        taxonomy_levels: Sequence[HierarchyLevel],
        headers: Sequence[Any],
        rows: Sequence[Any],
        *,
        table: Optional[ProductTable] = None,
    ) -> TaxonomyResult:
        if table is None:
            table = ProductTable(headers, rows)

        requested = self.taxonomy_headers(taxonomy_levels)
        # units describe a product, they never categorize it
        uom_cols = [h for h in requested if h in self.uom_headers]
        if uom_cols:
            logger.debug("UOM headers dropped from taxonomy: %s", uom_cols)
        requested = [h for h in requested if h not in self.uom_headers]

        tax_headers = [h for h in requested if table.index_of(h) >= 0]
        missing_cols = [h for h in requested if table.index_of(h) < 0]
        if missing_cols:
            logger.warning("Taxonomy headers not in dataset, ignored: %s", missing_cols)

        tax_positions = [table.index_of(h) for h in tax_headers]
        tax_set = set(tax_headers)
        property_positions = [
            i for i, h in enumerate(table.headers)
            if h not in tax_set and h not in self.uom_headers
        ]

        root = TaxonomyTreeNode(name=ROOT_NAME, level=0)
        orphans: List[OrphanedRecord] = []
        # (id(parent), value) -> child, so lookups stay O(1) per level
        index: Dict[Tuple[int, str], TaxonomyTreeNode] = {}
        # first-seen order of every node, for stable sorting
        seen_order: Dict[int, int] = {}
        # id(node) -> property positions populated by rows ending there
        populated: Dict[int, Set[int]] = {}
        terminal_nodes: Dict[int, TaxonomyTreeNode] = {}

        for row_index, row in enumerate(table.text_rows()):
            values = [row[p] for p in tax_positions]
            empty = [h for h, v in zip(tax_headers, values) if self._is_missing(v)]
            if empty:
                orphans.append(
                    OrphanedRecord(
                        row_index=row_index,
                        issues=tuple(f"Missing value for hierarchy field: {h}" for h in empty),
                    )
                )
                continue

            node = root
            node.product_count += 1
            for depth, value in enumerate(values, start=1):
                key = (id(node), value)
                child = index.get(key)
                if child is None:
                    child = index[key] = TaxonomyTreeNode(name=value, level=depth)
                    node.children.append(child)
                    seen_order[id(child)] = len(seen_order)
                child.product_count += 1
                node = child

            node.terminal_count += 1
            terminal_nodes[id(node)] = node
            populated.setdefault(id(node), set()).update(
                p for p in property_positions if row[p] != ""
            )

        headers_list = table.headers
        for key, node in terminal_nodes.items():
            node.properties = [headers_list[p] for p in sorted(populated[key])]

        _sort_tree(root, seen_order)
        paths = _collect_paths(root)

        logger.debug(
            "Taxonomy: %d headers, %d paths, %d orphaned of %d rows",
            len(tax_headers), len(paths), len(orphans), table.n_rows,
        )
        return TaxonomyResult(
            tree=root,
            paths=paths,
            orphaned_records=orphans,
            taxonomy_headers=tax_headers,
            total_rows=table.n_rows,
        )


# ------------------------------------------------------------
# Tree utilities
# ------------------------------------------------------------

def _sort_tree(root: TaxonomyTreeNode, seen_order: Dict[int, int]) -> None:
    """Children by product count, descending; ties keep first appearance."""
    for node in root.walk():
        node.children.sort(key=lambda c: (-c.product_count, seen_order.get(id(c), 0)))


def _collect_paths(root: TaxonomyTreeNode) -> List[TaxonomyPath]:
    """One path per node where rows terminate, ordered like a sorted tree walk."""
    paths: List[TaxonomyPath] = []
    stack = [(root, ())]
    while stack:
        node, prefix = stack.pop()
        if node.terminal_count:
            paths.append(
                TaxonomyPath(
                    path=prefix,
                    product_count=node.terminal_count,
                    properties=tuple(node.properties),
                )
            )
        for child in reversed(node.children):
            stack.append((child, prefix + (child.name,)))
    # stable: equal counts keep tree order
    paths.sort(key=lambda p: -p.product_count)
    return paths


def check_conservation(root: TaxonomyTreeNode) -> List[str]:
    """Nodes whose count differs from children + terminating rows."""
    problems = []
    for node in root.walk():
        expected = sum(c.product_count for c in node.children) + node.terminal_count
        if node.product_count != expected:
            problems.append(
                f"{node.name} (level {node.level}): {node.product_count} != {expected}"
            )
    return problems

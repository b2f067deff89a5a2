"""
Tests for taxonomy tree construction and orphan detection.
"""

import pytest

from pim_hierarchy.core import HierarchyLevel, TaxonomyResolver
from pim_hierarchy.core.taxonomy import check_conservation


def _level(number, *headers):
    return HierarchyLevel(level=number, name=f"Level {number}", headers=list(headers))


def test_single_level_catalog_tree(catalog):
    """Test the Category tree of the catalog."""
    headers, rows = catalog
    result = TaxonomyResolver(uom_headers=["Weight"]).resolve([_level(1, "Category")], headers, rows)

    root = result.tree
    assert root.name == "Root"
    assert root.product_count == 40
    assert [(c.name, c.product_count) for c in root.children] == [("Beverages", 24), ("Snacks", 16)]

    assert [(p.path, p.product_count) for p in result.paths] == [
        (("Beverages",), 24),
        (("Snacks",), 16),
    ]
    # taxonomy and UOM headers are not leaf properties
    assert result.paths[0].properties == ("SKU", "Subcategory", "Product Name", "Price")
    assert result.orphaned_records == []


def test_conservation_holds_for_every_node(catalog):
    """Test that counts add up at every node and across paths + orphans."""
    headers, rows = catalog
    rows[3][1] = ""
    rows[30][2] = None
    levels = [_level(1, "Category"), _level(2, "Subcategory")]
    result = TaxonomyResolver().resolve(levels, headers, rows)

    assert check_conservation(result.tree) == []
    assert sum(p.product_count for p in result.paths) + result.orphan_count == len(rows)


def test_two_level_tree_ordering(catalog):
    """Test children sorted by count, with ties in first-seen order."""
    headers, rows = catalog
    levels = [_level(1, "Category"), _level(2, "Subcategory")]
    result = TaxonomyResolver().resolve(levels, headers, rows)

    beverages = result.tree.child("Beverages")
    assert [c.name for c in beverages.children] == ["Soft Drinks", "Juice", "Water"]
    assert all(c.product_count == 8 for c in beverages.children)
    assert all(c.level == 2 for c in beverages.children)

    snacks = result.tree.child("Snacks")
    assert [(c.name, c.product_count) for c in snacks.children] == [("Chips", 8), ("Nuts", 8)]
    assert [p.path for p in result.paths][:3] == [
        ("Beverages", "Soft Drinks"),
        ("Beverages", "Juice"),
        ("Beverages", "Water"),
    ]


def test_orphans_name_every_empty_header():
    """Test that rows with blank taxonomy values are orphaned, not placed."""
    headers = ["Category", "Brand", "SKU"]
    rows = [
        ["Tools", "Acme", "1"],
        ["", "Acme", "2"],
        [None, "  ", "3"],
        ["Tools", "Bolt", "4"],
    ]
    result = TaxonomyResolver().resolve([_level(1, "Category", "Brand")], headers, rows)

    assert [o.row_index for o in result.orphaned_records] == [1, 2]
    assert result.orphaned_records[1].issues == (
        "Missing value for hierarchy field: Category",
        "Missing value for hierarchy field: Brand",
    )
    assert result.tree.product_count == 2


def test_values_are_trimmed_before_grouping():
    """Test that ' Tools' and 'Tools' share a node."""
    rows = [[" Tools"], ["Tools "], ["Garden"]]
    result = TaxonomyResolver().resolve([_level(1, "Category")], ["Category"], rows)
    assert result.tree.child("Tools").product_count == 2


def test_leaf_properties_only_list_populated_headers():
    """Test leaf properties are the headers populated by rows ending there."""
    headers = ["Category", "Voltage", "Fabric"]
    rows = [["Lamps", "230V", None], ["Rugs", None, "Wool"], ["Lamps", "110V", ""]]
    result = TaxonomyResolver().resolve([_level(1, "Category")], headers, rows)

    assert result.tree.child("Lamps").properties == ["Voltage"]
    assert result.tree.child("Rugs").properties == ["Fabric"]
    assert result.tree.properties == []


def test_no_taxonomy_headers_keeps_all_rows_at_root():
    """Test that an empty taxonomy terminates every row at the root."""
    rows = [["a"], ["b"]]
    result = TaxonomyResolver().resolve([], ["SKU"], rows)

    assert result.tree.product_count == 2
    assert result.tree.terminal_count == 2
    assert [(p.path, p.product_count) for p in result.paths] == [((), 2)]


def test_headers_missing_from_dataset_are_ignored():
    """Test that unknown taxonomy headers do not orphan every row."""
    rows = [["Tools"], ["Tools"]]
    result = TaxonomyResolver().resolve([_level(1, "Category", "Ghost")], ["Category"], rows)

    assert result.taxonomy_headers == ["Category"]
    assert result.orphan_count == 0


@pytest.mark.parametrize("placeholder", ["unknown", "N/A", "null", "None", "undefined"])
def test_placeholders_optionally_count_as_missing(placeholder):
    """Test placeholder literals orphan rows only when enabled."""
    rows = [["Tools"], [placeholder]]

    plain = TaxonomyResolver().resolve([_level(1, "Category")], ["Category"], rows)
    strict = TaxonomyResolver.with_placeholders().resolve([_level(1, "Category")], ["Category"], rows)

    assert plain.orphan_count == 0
    assert strict.orphan_count == 1


def test_empty_dataset_has_bare_root():
    """Test that no rows produce a root without children or paths."""
    result = TaxonomyResolver().resolve([_level(1, "Category")], ["Category"], [])

    assert result.tree.product_count == 0
    assert result.tree.children == []
    assert result.paths == []
    assert result.orphaned_records == []


def test_uom_headers_never_categorize():
    """Test that a UOM header on a taxonomy level is dropped, not grouped on."""
    rows = [["Tools", "10 kg"], ["Tools", ""], ["Garden", "5 kg"]]
    result = TaxonomyResolver(uom_headers=["Pack Size"]).resolve(
        [_level(1, "Category", "Pack Size")], ["Category", "Pack Size"], rows
    )

    assert result.taxonomy_headers == ["Category"]
    assert result.orphan_count == 0
    assert [(p.path, p.product_count) for p in result.paths] == [
        (("Tools",), 2),
        (("Garden",), 1),
    ]

"""
Tests for the editable hierarchy and its invariants.
"""

import random

import pytest

from pim_hierarchy.core import (
    HierarchyBuilder,
    HierarchyInvariantError,
    HierarchyLevel,
    calculate_cardinality_scores,
)


@pytest.fixture
def builder(catalog_scores) -> HierarchyBuilder:
    return HierarchyBuilder.from_scores(
        catalog_scores,
        uom_headers=["Weight"],
        record_id_suggestion="SKU",
        record_name_suggestion="Product Name",
    )


def _assert_structure(builder: HierarchyBuilder, all_headers):
    levels = builder.levels
    assert [lvl.level for lvl in levels] == list(range(1, len(levels) + 1))

    placed = [h for lvl in levels for h in lvl.headers] + builder.unassigned
    assert len(placed) == len(set(placed))
    assert sorted(placed) == sorted(all_headers)

    for lvl in levels:
        assert lvl.record_id is None or lvl.record_id in lvl.headers


def test_default_proposal(builder):
    """Test the Parent -> Variant -> SKU proposal for the catalog."""
    levels = builder.levels

    assert [lvl.name for lvl in levels] == ["Parent", "Variant", "SKU"]
    assert levels[0].headers == ["Category"]
    assert levels[1].headers == ["Subcategory"]
    assert levels[2].headers == ["SKU", "Product Name", "Weight", "Price"]

    assert levels[0].record_id == "Category"
    assert levels[1].record_id == "Subcategory"
    assert levels[2].record_id == "SKU"
    assert levels[2].record_name == "Product Name"
    assert builder.unassigned == []
    assert builder.incomplete_level_warnings() == []


def test_uom_headers_are_forced_to_sku_level(catalog_scores):
    """Test that a low-cardinality UOM header never becomes a parent level."""
    builder = HierarchyBuilder.from_scores(catalog_scores, uom_headers=["Weight", "Category"])
    levels = builder.levels

    assert [lvl.name for lvl in levels] == ["Variant", "SKU"]
    assert levels[0].level == 1
    assert "Category" in levels[-1].headers
    assert "Weight" in levels[-1].headers


def test_empty_columns_are_unassigned():
    """Test that headers without data go to the unassigned pool."""
    headers = ["SKU", "Legacy Field"]
    rows = [[f"S{i}", None] for i in range(5)]
    scores = calculate_cardinality_scores(headers, rows)
    builder = HierarchyBuilder.from_scores(scores, record_id_suggestion="SKU")

    assert builder.unassigned == ["Legacy Field"]
    assert [lvl.headers for lvl in builder.levels] == [["SKU"]]


def test_sku_level_without_record_id_is_reported(catalog_scores):
    """Test that a missing record ID suggestion leaves the SKU level incomplete."""
    builder = HierarchyBuilder.from_scores(catalog_scores, uom_headers=["Weight"])
    assert builder.incomplete_level_warnings() == ["Level 3 (SKU) has no record ID."]


def test_moving_record_id_leaves_level_incomplete(builder):
    """Test that the move completes and the level is flagged, not repaired."""
    warnings = builder.move_header("SKU", from_level=3, to_level=None)

    assert "SKU" in builder.unassigned
    assert builder.get_level(3).record_id is None
    assert warnings == ["Level 3 (SKU) has no record ID."]


def test_move_header_between_levels(builder):
    """Test that a moved header belongs to exactly one location."""
    builder.move_header("Price", from_level=3, to_level=2)

    assert "Price" in builder.get_level(2).headers
    assert "Price" not in builder.get_level(3).headers
    assert builder.location_of("Price") == 2


def test_move_header_from_wrong_source_raises(builder):
    """Test that the header must be at from_level."""
    with pytest.raises(ValueError):
        builder.move_header("Category", from_level=2, to_level=3)
    with pytest.raises(ValueError):
        builder.move_header("Category", from_level=None, to_level=3)
    with pytest.raises(ValueError):
        builder.move_header("Category", from_level=1, to_level=9)
    # failed edits leave state untouched
    assert builder.get_level(1).headers == ["Category"]


def test_move_to_same_level_is_a_no_op(builder):
    """Test that re-placing a header keeps its record ID."""
    builder.move_header("SKU", from_level=3, to_level=3)
    assert builder.get_level(3).record_id == "SKU"


def test_remove_level_returns_headers_and_renumbers(builder):
    """Test remove_level: headers to the pool, later levels renumbered."""
    builder.add_level()
    assert builder.get_level(4).name == "Level 4"

    builder.remove_level(1)
    levels = builder.levels

    assert [lvl.level for lvl in levels] == [1, 2, 3]
    assert [lvl.name for lvl in levels] == ["Variant", "SKU", "Level 3"]
    assert builder.unassigned == ["Category"]


def test_remove_unknown_level_raises(builder):
    """Test that an out-of-range level is rejected."""
    with pytest.raises(ValueError):
        builder.remove_level(0)
    with pytest.raises(ValueError):
        builder.remove_level(4)


def test_reorder_levels(builder):
    """Test that reordering renumbers and preserves membership."""
    builder.reorder_levels([2, 1, 3])
    levels = builder.levels

    assert [lvl.name for lvl in levels] == ["Variant", "Parent", "SKU"]
    assert [lvl.level for lvl in levels] == [1, 2, 3]
    assert levels[0].headers == ["Subcategory"]


@pytest.mark.parametrize("order", [[1, 2], [1, 1, 3], [1, 2, 4], [0, 1, 2]])
def test_reorder_requires_permutation(builder, order):
    """Test that a non-permutation order is rejected."""
    with pytest.raises(ValueError):
        builder.reorder_levels(order)


def test_set_record_id_repairs_level(builder):
    """Test explicit repair of an incomplete level."""
    builder.move_header("SKU", 3, None)
    assert builder.set_record_id(3, "Price") == []

    with pytest.raises(ValueError):
        builder.set_record_id(3, "Category")


def test_exposed_state_is_a_copy(builder):
    """Test that callers cannot corrupt the builder through returned levels."""
    levels = builder.levels
    levels[0].headers.append("SKU")
    snapshot = builder.snapshot()
    snapshot["unassigned"].append("Ghost")

    assert builder.get_level(1).headers == ["Category"]
    assert builder.unassigned == []


def test_shared_header_is_an_invariant_breach():
    """Test that a header on two levels is rejected."""
    levels = [
        HierarchyLevel(level=1, name="A", headers=["x"], record_id="x"),
        HierarchyLevel(level=2, name="B", headers=["x", "y"], record_id="y"),
    ]
    with pytest.raises(HierarchyInvariantError):
        HierarchyBuilder(levels)


def test_numbering_gap_is_an_invariant_breach():
    """Test that non-contiguous level numbers are rejected."""
    levels = [
        HierarchyLevel(level=1, name="A", headers=["x"], record_id="x"),
        HierarchyLevel(level=3, name="B", headers=["y"], record_id="y"),
    ]
    with pytest.raises(HierarchyInvariantError):
        HierarchyBuilder(levels)


def test_from_levels_rejects_unknown_headers():
    """Test that an edited hierarchy must only use dataset headers."""
    levels = [HierarchyLevel(level=1, name="A", headers=["Ghost"])]
    with pytest.raises(ValueError):
        HierarchyBuilder.from_levels(levels, ["SKU"])


def test_from_levels_pools_unplaced_headers():
    """Test that headers missing from every level become unassigned."""
    levels = [HierarchyLevel(level=1, name="A", headers=["SKU"], record_id="SKU")]
    builder = HierarchyBuilder.from_levels(levels, ["SKU", "Brand", "Color"])
    assert builder.unassigned == ["Brand", "Color"]


def test_invariants_hold_after_random_edits(builder, catalog):
    """Test disjoint headers and contiguous numbering after many edits."""
    headers, _ = catalog
    rng = random.Random(7)

    for _ in range(300):
        n = len(builder.levels)
        op = rng.choice(["add", "remove", "move", "reorder"])
        try:
            if op == "add":
                builder.add_level()
            elif op == "remove" and n:
                builder.remove_level(rng.randint(1, n))
            elif op == "move":
                header = rng.choice(headers)
                source = builder.location_of(header)
                target = rng.choice([None] + list(range(1, n + 1)))
                builder.move_header(header, source, target)
            elif op == "reorder" and n:
                order = list(range(1, n + 1))
                rng.shuffle(order)
                builder.reorder_levels(order)
        except ValueError:
            pytest.fail(f"valid {op} edit was rejected")

        _assert_structure(builder, headers)

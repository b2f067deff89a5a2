"""
Tests for unit-of-measure header detection.
"""

from pim_hierarchy.core import UomDetector


def test_base_keywords_match_case_insensitively():
    """Test substring matching of the base keyword set."""
    detector = UomDetector()
    headers = ["SKU", "Net WEIGHT", "Pack Size", "Dimensions", "Colour", "Unit of Sale"]
    assert detector.matching_headers(headers) == [
        "Net WEIGHT", "Pack Size", "Dimensions", "Unit of Sale",
    ]


def test_custom_keywords_are_normalized_and_merged():
    """Test that custom keywords are lower-cased, trimmed and de-duplicated."""
    detector = UomDetector(custom_keywords=["  Volume ", "WEIGHT", "", "volume"])
    assert detector.keywords.count("volume") == 1
    assert detector.keywords.count("weight") == 1
    assert "" not in detector.keywords
    assert detector.is_uom_header("Bottle Volume")


def test_inline_units_suggest_split(catalog):
    """Test that values like '100g' produce a split with conversions."""
    headers, rows = catalog
    suggestions = UomDetector().detect(headers, rows)

    assert [s.header for s in suggestions] == ["Weight"]
    weight = suggestions[0]
    assert weight.suggested_split is True
    assert weight.detected_uom == "g"
    assert weight.example == "100 g (from '100g')"
    assert [c.target_uom for c in weight.conversions] == ["kg", "oz"]
    assert weight.conversions[0].new_property_name == "Weight_kg"


def test_most_common_unit_wins():
    """Test that the dominant unit becomes detected_uom."""
    rows = [["1.5 kg"], ["2 kg"], ["500g"], ["3kg"]]
    suggestion = UomDetector().detect(["Weight"], rows)[0]

    assert suggestion.suggested_split is True
    assert suggestion.detected_uom == "kg"
    assert suggestion.example == "1.5 kg (from '1.5 kg')"


def test_minority_of_inline_units_does_not_split():
    """Test that a split needs more than half of the sampled values."""
    rows = [["100"], ["200"], ["300g"], ["400g"]]
    suggestion = UomDetector().detect(["Weight"], rows)[0]

    assert suggestion.suggested_split is False
    assert suggestion.detected_uom is None
    assert suggestion.conversions == ()


def test_companion_unit_column_supplies_uom():
    """Test that a separate unit column provides detected_uom."""
    headers = ["Weight", "Weight UOM"]
    rows = [["100", "KG"], ["250", "kg"], [None, "kg"]]
    suggestions = {s.header: s for s in UomDetector().detect(headers, rows)}

    weight = suggestions["Weight"]
    assert weight.suggested_split is False
    assert weight.detected_uom == "kg"
    assert [c.target_uom for c in weight.conversions] == ["g", "lb"]

    assert suggestions["Weight UOM"].detected_uom is None


def test_sample_size_limits_inspection():
    """Test that only the first sample_size non-empty values are inspected."""
    rows = [["10"], [""], ["20"], ["5cm"], ["6cm"], ["7cm"], ["8cm"]]
    assert UomDetector(sample_size=3).detect(["Height"], rows)[0].suggested_split is False
    assert UomDetector(sample_size=20).detect(["Height"], rows)[0].suggested_split is True


def test_non_uom_headers_produce_no_suggestion():
    """Test that ordinary headers are ignored."""
    assert UomDetector().detect(["SKU", "Brand"], [["A", "B"]]) == []

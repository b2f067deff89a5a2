"""
Shared pytest fixtures for the product hierarchy test suite.
"""

from typing import Any, List, Tuple

import pytest

from pim_hierarchy.core import ProductTable, calculate_cardinality_scores


CATALOG_HEADERS = ["SKU", "Category", "Subcategory", "Product Name", "Weight", "Price"]

_BEVERAGE_TYPES = ["Soft Drinks", "Juice", "Water"]
_SNACK_TYPES = ["Chips", "Nuts"]


def build_catalog_rows(n_rows: int = 40) -> List[List[Any]]:
    """
    Beverages for the first 60% of rows, Snacks after that:

        SKU           unique            -> level3, record ID
        Category      2 values          -> level1
        Subcategory   5 values          -> level2
        Product Name  unique text       -> record name
        Weight        '100g' .. '250g'  -> UOM, split suggested
        Price         unique numbers    -> level3
    """
    rows = []
    beverages = int(n_rows * 0.6)
    for i in range(n_rows):
        if i < beverages:
            category, sub = "Beverages", _BEVERAGE_TYPES[i % 3]
        else:
            category, sub = "Snacks", _SNACK_TYPES[i % 2]
        rows.append([
            f"SKU-{i:03d}",
            category,
            sub,
            f"Product {i}",
            f"{100 + (i % 4) * 50}g",
            f"{1.5 + i * 0.25:.2f}",
        ])
    return rows


@pytest.fixture
def catalog() -> Tuple[List[str], List[List[Any]]]:
    """Provide a 40-row grocery catalog (headers, rows)."""
    return list(CATALOG_HEADERS), build_catalog_rows()


@pytest.fixture
def catalog_table(catalog) -> ProductTable:
    headers, rows = catalog
    return ProductTable(headers, rows)


@pytest.fixture
def catalog_scores(catalog_table: ProductTable):
    return calculate_cardinality_scores([], [], table=catalog_table)

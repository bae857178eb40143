"""Hypothesis strategies for csvlocalization property-based testing.

Usage:
    from tests.strategies import localization_tables, csv_documents
    from tests.strategies.localization import CULTURE_POOL, culture_sets
"""

from .localization import (
    CULTURE_POOL,
    cell_values,
    csv_documents,
    culture_sets,
    localization_keys,
    localization_tables,
)

__all__ = [
    "CULTURE_POOL",
    "cell_values",
    "csv_documents",
    "culture_sets",
    "localization_keys",
    "localization_tables",
]

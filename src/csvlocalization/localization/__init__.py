"""CSV localization: table model, ingestion, reload coordination and facade.

Submodules:
    types        - PEP 695 type aliases (LocalizationKey, CultureCode, ...)
    table        - LocalizationTable (immutable key -> culture -> value)
    ingestion    - CsvIngestionPipeline (snapshot -> table)
    coordinator  - ReloadCoordinator, ReloadResult
    orchestrator - CsvLocalization (the facade)

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from csvlocalization.localization.table import (
    CaseInsensitiveMapping,
    LocalizationTable,
    Translations,
)
from csvlocalization.localization.types import (
    CultureCode,
    LocalizationKey,
    ResourceName,
    Template,
)
from csvlocalization.localization.ingestion import CsvIngestionPipeline
from csvlocalization.localization.coordinator import ReloadCoordinator, ReloadResult
from csvlocalization.localization.orchestrator import CsvLocalization

__all__ = [
    # Facade
    "CsvLocalization",
    # Pipeline
    "CsvIngestionPipeline",
    "ReloadCoordinator",
    "ReloadResult",
    # Table model
    "CaseInsensitiveMapping",
    "LocalizationTable",
    "Translations",
    # Type aliases for user code type annotations
    "CultureCode",
    "LocalizationKey",
    "ResourceName",
    "Template",
]

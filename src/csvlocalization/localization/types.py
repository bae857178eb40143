"""Type aliases for the localization domain.

Provides semantic type aliases used throughout the package and by user code
when annotating call sites.

Python 3.13+. Zero external dependencies.
"""

__all__ = [
    "CultureCode",
    "LocalizationKey",
    "ResourceName",
    "Template",
]

type LocalizationKey = str
"""Case-insensitive localization key (e.g., 'greeting', 'errors.not_found')."""

type CultureCode = str
"""BCP-47 culture code (e.g., 'en-US', 'fr', 'zh-Hant-TW')."""

type ResourceName = str
"""Resource file name relative to the resource root (e.g., 'i18n/fr-FR.csv')."""

type Template = str
"""Translated string, possibly with positional placeholders ('Hi {0}')."""

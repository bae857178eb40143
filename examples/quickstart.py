"""Quickstart example for csvlocalization.

This example demonstrates basic usage of csvlocalization: loading a CSV
table from a directory, culture fallback, formatting and "$L." arguments.
"""

import tempfile
from pathlib import Path

from csvlocalization import (
    CsvLocalization,
    LocalizationConfig,
    MissingKeyHandling,
    MissingLocalizationKeyError,
    use_culture,
)

TABLE = """\
key,en-US,fr-FR,fr
greeting,Hello,Bonjour,Salut
farewell,Goodbye,Au revoir,
welcome,"Welcome, {0}! You have {1} new messages.","Bienvenue, {0} ! Vous avez {1} nouveaux messages.",
guest,guest,invité,
"""

with tempfile.TemporaryDirectory() as tmpdir:
    i18n = Path(tmpdir)
    (i18n / "localization.csv").write_text(TABLE, encoding="utf-8")

    config = LocalizationConfig(
        default_culture="en-US",
        supported_cultures=("en-US", "fr-FR", "fr"),
        missing_key_handling=MissingKeyHandling.RETURN_KEY,
    )

    with CsvLocalization.from_directory(config, i18n) as l10n:
        # Example 1: Simple lookups
        print("=" * 50)
        print("Example 1: Simple Lookups")
        print("=" * 50)

        print(l10n.get_string("greeting"))
        # Output: Hello
        print(l10n.get_string("greeting", culture="fr-FR"))
        # Output: Bonjour
        print(l10n["farewell", "fr-FR"])
        # Output: Au revoir

        # Example 2: Culture fallback
        print("\n" + "=" * 50)
        print("Example 2: Culture Fallback")
        print("=" * 50)

        print(l10n.get_string("greeting", culture="fr-CA"))
        # Output: Salut (parent culture "fr")
        print(l10n.get_string("greeting", culture="de-DE"))
        # Output: Hello (default culture)
        print(l10n.get_string("no-such-key"))
        # Output: no-such-key (RETURN_KEY policy)

        # Example 3: Positional arguments and "$L." references
        print("\n" + "=" * 50)
        print("Example 3: Formatting")
        print("=" * 50)

        print(l10n.get_string("welcome", "Alice", 3))
        # Output: Welcome, Alice! You have 3 new messages.
        print(l10n.get_string("welcome", "$L.guest", 1, culture="fr-FR"))
        # Output: Bienvenue, invité ! Vous avez 1 nouveaux messages.

        # Example 4: Ambient culture
        print("\n" + "=" * 50)
        print("Example 4: Ambient Culture")
        print("=" * 50)

        with use_culture("fr-FR"):
            print(l10n.get_string("farewell"))
            # Output: Au revoir

    # Example 5: Strict mode
    print("\n" + "=" * 50)
    print("Example 5: THROW_EXCEPTION Policy")
    print("=" * 50)

    strict = LocalizationConfig(
        default_culture="en-US",
        supported_cultures=("en-US",),
        missing_key_handling=MissingKeyHandling.THROW_EXCEPTION,
    )
    with CsvLocalization.from_directory(strict, i18n) as l10n:
        try:
            l10n.get_string("no-such-key")
        except MissingLocalizationKeyError as e:
            print(f"Caught: {e}")
            # Output: Caught: The localization key 'no-such-key' was not found in the culture 'en-US'.

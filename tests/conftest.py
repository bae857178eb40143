"""Pytest configuration for the csvlocalization test suite.

Hypothesis profiles:
- dev: local runs, 200 examples
- ci: 50 derandomized examples, selected when CI=true
- verbose: 100 examples with progress output

HYPOTHESIS_PROFILE overrides the automatic choice:
    HYPOTHESIS_PROFILE=verbose pytest tests/
"""

import os
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from csvlocalization.config import LocalizationConfig
from csvlocalization.enums import MissingKeyHandling
from tests.helpers.resources import SAMPLE_CSV

_PHASES = [Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink]

settings.register_profile("dev", max_examples=200, phases=_PHASES)
settings.register_profile(
    "ci", max_examples=50, phases=_PHASES, derandomize=True, print_blob=True
)
settings.register_profile(
    "verbose", max_examples=100, phases=_PHASES, verbosity=Verbosity.verbose
)


def _detect_profile() -> str:
    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit
    if os.environ.get("CI") == "true":
        return "ci"
    return "dev"


settings.load_profile(_detect_profile())


# =============================================================================
# SHARED FIXTURES
# =============================================================================


@pytest.fixture
def config() -> LocalizationConfig:
    """en-US default, en-US and fr-FR supported, ReturnKey policy."""
    return LocalizationConfig(
        default_culture="en-US",
        supported_cultures=("en-US", "fr-FR"),
        missing_key_handling=MissingKeyHandling.RETURN_KEY,
        reload_debounce=0.0,
    )


@pytest.fixture
def i18n_dir(tmp_path: Path) -> Path:
    """Directory holding the sample localization.csv."""
    directory = tmp_path / "i18n"
    directory.mkdir()
    (directory / "localization.csv").write_text(SAMPLE_CSV, encoding="utf-8")
    return directory

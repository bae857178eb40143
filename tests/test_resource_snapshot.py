"""Tests for ResourceFile and ResourceSnapshot."""

import pytest

from csvlocalization.errors import ResourceAccessError
from csvlocalization.resources.types import ResourceSnapshot
from tests.helpers.resources import MemoryResourceFile, snapshot_of


class TestResourceFile:
    """Test the ResourceFile helpers built on open()."""

    def test_name_parts(self) -> None:
        """extension and name_without_extension come from the name."""
        resource = MemoryResourceFile("i18n/fr-FR.csv", "")

        assert resource.extension == ".csv"
        assert resource.name_without_extension == "fr-FR"

    def test_no_extension(self) -> None:
        """A name without a dot has no extension."""
        assert MemoryResourceFile("README", "").extension == ""

    def test_read_lines_trims_and_drops_blank(self) -> None:
        """read_lines() returns trimmed, non-empty lines."""
        resource = MemoryResourceFile("a.csv", "  key,en-US \r\n\n greeting,Hello\n   \n")

        assert resource.read_lines() == ["key,en-US", "greeting,Hello"]

    def test_read_text_encoding(self) -> None:
        """read_text() decodes with the given encoding."""
        resource = MemoryResourceFile("a.csv", "Café".encode("latin-1"))

        assert resource.read_text("latin-1") == "Café"

    def test_read_failure_propagates(self) -> None:
        """A failing open() surfaces ResourceAccessError."""
        with pytest.raises(ResourceAccessError):
            MemoryResourceFile("a.csv", "", fail=True).read_bytes()

    def test_equality_by_uri(self) -> None:
        """Files of the same type and URI are equal and hash alike."""
        first = MemoryResourceFile("a.csv", "one")
        second = MemoryResourceFile("a.csv", "two")

        assert first == second
        assert hash(first) == hash(second)
        assert first != MemoryResourceFile("b.csv", "one")


class TestResourceSnapshot:
    """Test snapshot construction and lookups."""

    def test_sorted_by_name_case_insensitively(self) -> None:
        """Files are ordered by case-insensitive name."""
        snapshot = snapshot_of({"b.csv": "x", "A.csv": "x", "c/a.csv": "x"})

        assert snapshot.names == ("A.csv", "b.csv", "c/a.csv")

    def test_deduplicated_by_uri(self) -> None:
        """Duplicate URIs keep a single entry."""
        snapshot = ResourceSnapshot.from_files(
            [MemoryResourceFile("a.csv", "1"), MemoryResourceFile("a.csv", "2")]
        )

        assert len(snapshot) == 1
        assert snapshot.files[0].read_text() == "1"

    def test_get_case_insensitive(self) -> None:
        """get() ignores case and accepts backslashes."""
        snapshot = snapshot_of({"i18n/Localization.csv": "x"})

        assert snapshot.get("I18N\\localization.CSV") is not None
        assert snapshot.get("missing.csv") is None
        assert "i18n/localization.csv" in snapshot
        assert 42 not in snapshot

    def test_match_glob(self) -> None:
        """match() applies a case-insensitive glob to the names."""
        snapshot = snapshot_of({"a.csv": "x", "B.CSV": "x", "notes.txt": "x"})

        assert [f.name for f in snapshot.match("*.csv")] == ["a.csv", "B.CSV"]

    def test_search(self) -> None:
        """search() matches substrings, optionally ignoring case."""
        snapshot = snapshot_of({"Legacy/fr-FR.csv": "x", "en-US.csv": "x"})

        assert [f.name for f in snapshot.search("legacy")] == []
        assert [f.name for f in snapshot.search("legacy", case_sensitive=False)] == [
            "Legacy/fr-FR.csv"
        ]

    def test_empty(self) -> None:
        """An empty snapshot keeps its source."""
        snapshot = ResourceSnapshot.empty("/srv/i18n")

        assert len(snapshot) == 0
        assert list(snapshot) == []
        assert snapshot.source == "/srv/i18n"

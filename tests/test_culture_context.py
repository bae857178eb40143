"""Tests for the ambient culture context."""

import threading

import pytest

from csvlocalization.runtime.culture_context import current_culture, use_culture


class TestUseCulture:
    """Test use_culture() scoping."""

    def test_unset_by_default(self) -> None:
        """No ambient culture outside a block."""
        assert current_culture() is None

    def test_sets_and_restores(self) -> None:
        """The culture is visible inside the block only."""
        with use_culture("fr-FR") as culture:
            assert culture == "fr-FR"
            assert current_culture() == "fr-FR"

        assert current_culture() is None

    def test_nesting(self) -> None:
        """Inner blocks override and then restore the outer culture."""
        with use_culture("fr-FR"):
            with use_culture("de-DE"):
                assert current_culture() == "de-DE"
            assert current_culture() == "fr-FR"

    def test_restored_on_exception(self) -> None:
        """An exception inside the block still restores the culture."""
        with pytest.raises(RuntimeError), use_culture("fr-FR"):
            raise RuntimeError

        assert current_culture() is None

    def test_thread_isolation(self) -> None:
        """Other threads do not see this thread's culture."""
        seen: list[str | None] = []

        with use_culture("fr-FR"):
            thread = threading.Thread(target=lambda: seen.append(current_culture()))
            thread.start()
            thread.join()

        assert seen == [None]

    @pytest.mark.parametrize("culture", ["", "   "])
    def test_blank_rejected(self, culture: str) -> None:
        """A blank culture code is rejected."""
        with pytest.raises(ValueError):
            use_culture(culture)

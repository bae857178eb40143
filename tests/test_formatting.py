"""Tests for positional placeholder formatting.

Tests verify:
- Placeholder counting (explicit, automatic, nested, escaped)
- Argument count mismatches raise FormatMismatchError
- Named fields and invalid templates are rejected
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from csvlocalization.errors import FormatMismatchError
from csvlocalization.runtime.formatting import count_placeholders, format_positional


class TestCountPlaceholders:
    """Test the number of arguments a template needs."""

    @pytest.mark.parametrize(
        ("template", "expected"),
        [
            ("plain text", 0),
            ("Hello {0}", 1),
            ("{1} before {0}", 2),
            ("{0} and {0}", 1),
            ("{0} and {2}", 3),
            ("{} and {}", 2),
            ("{0:>10}", 1),
            ("{0:{1}}", 2),
            ("{{0}} is literal", 0),
            ("{0.real}", 1),
            ("{0[0]}", 1),
        ],
    )
    def test_counts(self, template: str, expected: int) -> None:
        """Highest positional index plus one."""
        assert count_placeholders(template) == expected

    def test_named_field_rejected(self) -> None:
        """Named fields cannot be filled by positional arguments."""
        with pytest.raises(ValueError, match="Named placeholder"):
            count_placeholders("Hello {name}")

    def test_unbalanced_brace_rejected(self) -> None:
        """Invalid format strings raise ValueError."""
        with pytest.raises(ValueError):
            count_placeholders("Hello {0")


class TestFormatPositional:
    """Test argument substitution."""

    def test_formats(self) -> None:
        """Arguments replace placeholders in order."""
        assert format_positional("{0} has {1} messages", ["Ana", 3]) == "Ana has 3 messages"

    def test_too_few_arguments(self) -> None:
        """Fewer arguments than placeholders is a mismatch."""
        with pytest.raises(FormatMismatchError) as exc_info:
            format_positional("{0} {1}", ["a"])

        assert exc_info.value.expected == 2
        assert exc_info.value.actual == 1

    def test_too_many_arguments(self) -> None:
        """More arguments than placeholders is a mismatch too."""
        with pytest.raises(FormatMismatchError):
            format_positional("{0}", ["a", "b"])

    def test_invalid_template(self) -> None:
        """An unparsable template reports expected=None."""
        with pytest.raises(FormatMismatchError) as exc_info:
            format_positional("{0", ["a"])

        assert exc_info.value.expected is None

    def test_mixed_numbering(self) -> None:
        """Mixing automatic and manual numbering fails at format time."""
        with pytest.raises(FormatMismatchError):
            format_positional("{} {1}", ["a", "b"])

    @given(args=st.lists(st.integers(), min_size=1, max_size=8))
    def test_generated_templates(self, args: list[int]) -> None:
        """Property: a template with one placeholder per argument formats them all."""
        template = " ".join(f"{{{i}}}" for i in range(len(args)))

        assert format_positional(template, args) == " ".join(str(a) for a in args)

"""Positional placeholder formatting.

Translations use str.format positional placeholders ("Hello {0}, you have
{1} messages"). A template needs as many arguments as its highest placeholder
index plus one; automatic numbering ("{}") counts one index per field.
Supplying a different number of arguments is a FormatMismatchError rather
than a silent partial substitution.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import string
from collections.abc import Sequence

from csvlocalization.errors import FormatMismatchError

__all__ = ["count_placeholders", "format_positional"]

_FORMATTER = string.Formatter()


def count_placeholders(template: str) -> int:
    """Return the number of positional arguments a template needs.

    Raises:
        ValueError: If the template is not a valid format string, or uses a
            named (non-positional) field

    Example:
        >>> count_placeholders("{0} and {2}")
        3
        >>> count_placeholders("{} and {}")
        2
        >>> count_placeholders("no placeholders")
        0
    """
    needed = 0
    auto = 0
    for _literal, field_name, format_spec, _conversion in _FORMATTER.parse(template):
        if field_name is None:
            continue
        head = field_name.partition(".")[0].partition("[")[0]
        if head == "":
            auto += 1
            needed = max(needed, auto)
        elif head.isdigit():
            needed = max(needed, int(head) + 1)
        else:
            msg = f"Named placeholder {{{field_name}}} is not supported"
            raise ValueError(msg)
        # Nested fields in the format spec ("{0:{1}}") also consume arguments.
        if format_spec and "{" in format_spec:
            needed = max(needed, count_placeholders(format_spec))
    return needed


def format_positional(template: str, args: Sequence[object]) -> str:
    """Substitute positional arguments into a template.

    Args:
        template: Template with positional placeholders
        args: Argument values, in placeholder order

    Returns:
        Formatted string

    Raises:
        FormatMismatchError: If the template is invalid or the argument count
            differs from what the template needs

    Example:
        >>> format_positional("Hello {0}", ["John"])
        'Hello John'
    """
    try:
        expected = count_placeholders(template)
    except ValueError as e:
        raise FormatMismatchError(template, None, len(args)) from e
    if expected != len(args):
        raise FormatMismatchError(template, expected, len(args))
    try:
        return template.format(*args)
    except (ValueError, IndexError, KeyError, AttributeError, TypeError) as e:
        raise FormatMismatchError(template, None, len(args)) from e

"""Ambient "current culture" of the calling thread or task.

When get_string() is called without an explicit culture, the resolver uses
the culture set here, falling back to the configured default culture. The
value lives in a ContextVar, so every thread and asyncio task sees its own.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from contextvars import ContextVar, Token

__all__ = ["current_culture", "use_culture"]

_current_culture: ContextVar[str | None] = ContextVar(
    "csvlocalization_current_culture", default=None
)


def current_culture() -> str | None:
    """Return the ambient culture code, or None when none was set."""
    return _current_culture.get()


class use_culture:  # noqa: N801 - used like a function: ``with use_culture("fr"):``
    """Set the ambient culture for the duration of a with block.

    Blocks nest; leaving a block restores the culture that was active before.

    Example:
        >>> with use_culture("fr-FR"):
        ...     current_culture()
        'fr-FR'
        >>> current_culture() is None
        True
    """

    __slots__ = ("_culture", "_token")

    def __init__(self, culture: str) -> None:
        if not isinstance(culture, str) or not culture.strip():
            msg = f"Culture code must be a non-empty string, got {culture!r}"
            raise ValueError(msg)
        self._culture = culture.strip()
        self._token: Token[str | None] | None = None

    def __enter__(self) -> str:
        self._token = _current_culture.set(self._culture)
        return self._culture

    def __exit__(self, *exc_info: object) -> None:
        if self._token is not None:
            _current_culture.reset(self._token)
            self._token = None

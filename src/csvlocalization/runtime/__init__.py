"""Runtime: live table store, locking and string resolution.

Python 3.13+.
"""

from .culture_context import current_culture, use_culture
from .formatting import format_positional
from .resolver import ResolutionEngine
from .rwlock import RWLock
from .store import LocalizationStore

__all__ = [
    "LocalizationStore",
    "RWLock",
    "ResolutionEngine",
    "current_culture",
    "format_positional",
    "use_culture",
]

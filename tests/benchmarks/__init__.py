"""Performance benchmarks for csvlocalization.

Benchmarks use pytest-benchmark to measure and track performance of critical operations.
Prevents performance regressions in string resolution and CSV ingestion.

Python 3.13+.
"""

from __future__ import annotations

__all__: list[str] = []

"""pytest-benchmark hooks for csvlocalization benchmarks.

Run with: pytest tests/benchmarks --benchmark-only

Python 3.13+.
"""

from __future__ import annotations


def pytest_benchmark_update_json(config, benchmarks, output_json):  # noqa: ARG001
    """Tag saved benchmark results with the project name."""
    output_json["project"] = "csvlocalization"
    output_json["python_version"] = "3.13+"

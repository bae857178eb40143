"""Hot reload example - editing the CSV while lookups keep running.

Demonstrates:
1. reload_on_change: the directory is watched and re-ingested on change
2. Lookups from several threads while a reload swaps the table
3. A broken edit is rejected and the previous data stays live
4. Manual reload() for sources that cannot be watched

Python 3.13+.
"""

from __future__ import annotations

import logging
import tempfile
import threading
import time
from collections.abc import Callable
from pathlib import Path

from csvlocalization import CsvLocalization, LocalizationConfig

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


def wait_for(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.05)
    return False


def main() -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        i18n = Path(tmpdir)
        table = i18n / "localization.csv"
        table.write_text("key,en-US\nstatus,Version one\n", encoding="utf-8")

        config = LocalizationConfig(
            default_culture="en-US",
            supported_cultures=("en-US",),
            reload_on_change=True,
        )

        with CsvLocalization.from_directory(config, i18n) as l10n:
            print("=" * 60)
            print("Example 1: Watched directory")
            print("=" * 60)
            print(l10n.get_string("status"))
            # Output: Version one

            stop = threading.Event()
            seen: set[str] = set()

            def reader() -> None:
                while not stop.is_set():
                    seen.add(l10n.get_string("status"))

            threads = [threading.Thread(target=reader) for _ in range(4)]
            for thread in threads:
                thread.start()

            table.write_text("key,en-US\nstatus,Version two\n", encoding="utf-8")
            wait_for(lambda: l10n.get_string("status") == "Version two")
            stop.set()
            for thread in threads:
                thread.join()

            print(l10n.get_string("status"))
            # Output: Version two
            print(f"Readers observed: {sorted(seen)}")

            print("\n" + "=" * 60)
            print("Example 2: Broken edit keeps previous data")
            print("=" * 60)
            table.write_text("id,en-US\nstatus,Broken\n", encoding="utf-8")
            wait_for(lambda: l10n.last_reload is not None and not l10n.last_reload.success)
            print(l10n.get_string("status"))
            # Output: Version two

            print("\n" + "=" * 60)
            print("Example 3: Manual reload")
            print("=" * 60)
            table.write_text("key,en-US\nstatus,Version three\n", encoding="utf-8")
            result = l10n.reload()
            if result is not None:
                print(f"success={result.success} duration={result.duration:.3f}s")
            wait_for(lambda: l10n.get_string("status") == "Version three")
            print(l10n.get_string("status"))
            # Output: Version three


if __name__ == "__main__":
    main()

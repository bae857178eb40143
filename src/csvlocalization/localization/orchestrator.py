"""CSV localization facade.

CsvLocalization wires the pieces together for one configuration:

    ResourceFileManager -> CsvIngestionPipeline -> LocalizationStore
                                                        |
                                              ResolutionEngine.get_string()

The initial load runs in the constructor as the "startup" reload. Like every
later reload (watcher-driven or manual) it goes through the
ReloadCoordinator and never raises: a failed startup leaves an empty table
(lookups follow the missing-key policy) and a failed reload leaves the
previous data in place. last_reload reports the outcome.

Each instance owns its store; there is no process-wide state. Several
instances with different configurations can coexist.

Python 3.13+.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Self

from csvlocalization.config import FileSystemResourceConfig
from csvlocalization.localization.coordinator import ReloadCoordinator
from csvlocalization.localization.ingestion import CsvIngestionPipeline
from csvlocalization.resources.filesystem import (
    FileSystemResourceProvider,
    FileSystemResourceWatcher,
)
from csvlocalization.resources.manager import ResourceFileManager
from csvlocalization.runtime.resolver import ResolutionEngine
from csvlocalization.runtime.store import LocalizationStore

if TYPE_CHECKING:
    from csvlocalization.config import FtpResourceConfig, LocalizationConfig
    from csvlocalization.enums import ReloadState
    from csvlocalization.localization.coordinator import ReloadResult
    from csvlocalization.localization.table import LocalizationTable
    from csvlocalization.localization.types import CultureCode, LocalizationKey
    from csvlocalization.resources.ftp import FtpClientFactory
    from csvlocalization.resources.types import ResourceFileWatcher

__all__ = ["CsvLocalization"]

logger = logging.getLogger(__name__)


class CsvLocalization:
    """Localized strings from CSV resources, hot-reloaded on change.

    Thread Safety:
        get_string() and the other lookups may be called from any number of
        threads, also while a reload runs. close() must not race lookups.

    Args:
        config: Localization options
        manager: Holder of the resource snapshot (already loaded)
        watcher: Change notifier for the resource source; subscribed only
            when config.reload_on_change is set

    A failed initial load is logged, not raised; check last_reload.

    Example:
        >>> config = LocalizationConfig(
        ...     default_culture="en-US",
        ...     supported_cultures=("en-US", "fr-FR"),
        ... )
        >>> with CsvLocalization.from_directory(config, "i18n") as l10n:
        ...     l10n.get_string("greeting", culture="fr-FR")
        'Bonjour'
    """

    __slots__ = (
        "_closed",
        "_config",
        "_coordinator",
        "_engine",
        "_manager",
        "_store",
        "_watcher",
    )

    def __init__(
        self,
        config: LocalizationConfig,
        manager: ResourceFileManager,
        *,
        watcher: ResourceFileWatcher | None = None,
    ) -> None:
        self._config = config
        self._manager = manager
        self._store = LocalizationStore()
        self._engine = ResolutionEngine(self._store, config)
        ingestion = CsvIngestionPipeline(config)
        self._coordinator = ReloadCoordinator(
            manager, ingestion, self._store, debounce=config.reload_debounce
        )
        self._watcher: ResourceFileWatcher | None = None
        self._closed = False

        self._coordinator.reload("startup", allow_empty=True)

        if not config.reload_on_change:
            return
        if watcher is None:
            logger.warning(
                "reload_on_change is set but '%s' cannot be watched; reload() manually",
                manager.source,
            )
            return
        self._watcher = watcher
        watcher.subscribe(self._coordinator.notify)
        self._coordinator.start()
        watcher.start()

    @classmethod
    def from_directory(
        cls,
        config: LocalizationConfig,
        resources: FileSystemResourceConfig | str | Path,
    ) -> Self:
        """Load the CSV resources below a local directory.

        Args:
            config: Localization options
            resources: Directory, or its full transport configuration
        """
        if not isinstance(resources, FileSystemResourceConfig):
            resources = FileSystemResourceConfig(
                resources,
                missing_file_handling=config.missing_file_handling,
                reload_on_change=config.reload_on_change,
            )
        manager = ResourceFileManager(
            FileSystemResourceProvider(),
            resources.source,
            missing_file_handling=resources.missing_file_handling,
        )
        watcher = FileSystemResourceWatcher(resources.root) if resources.reload_on_change else None
        return cls(config, manager, watcher=watcher)

    @classmethod
    def from_ftp(
        cls,
        config: LocalizationConfig,
        resources: FtpResourceConfig,
        *,
        client_factory: FtpClientFactory | None = None,
    ) -> Self:
        """Load the CSV resources below a directory on an FTP server.

        FTP sources are not watched; call reload() to pick up changes.
        """
        return cls(config, ResourceFileManager.for_ftp(resources, client_factory))

    @property
    def config(self) -> LocalizationConfig:
        return self._config

    @property
    def manager(self) -> ResourceFileManager:
        return self._manager

    @property
    def store(self) -> LocalizationStore:
        return self._store

    @property
    def engine(self) -> ResolutionEngine:
        return self._engine

    @property
    def reload_state(self) -> ReloadState:
        return self._coordinator.state

    @property
    def last_reload(self) -> ReloadResult | None:
        """Outcome of the latest reload, starting with the startup load."""
        return self._coordinator.last_result

    def get_string(
        self,
        key: LocalizationKey | Enum,
        *args: object,
        culture: CultureCode | None = None,
    ) -> str:
        """Resolve key for culture and format it with args.

        See ResolutionEngine.get_string().
        """
        return self._engine.get_string(key, *args, culture=culture)

    def __getitem__(
        self, item: LocalizationKey | Enum | tuple[LocalizationKey | Enum, CultureCode]
    ) -> str:
        """``l10n["greeting"]`` or ``l10n["greeting", "fr-FR"]``."""
        if isinstance(item, tuple):
            key, culture = item
            return self._engine.get_string(key, culture=culture)
        return self._engine.get_string(item)

    def has_key(
        self, key: LocalizationKey | Enum, culture: CultureCode | None = None
    ) -> bool:
        return self._engine.has_key(key, culture)

    def get_localization_data(self) -> LocalizationTable:
        """Return the current table (an immutable snapshot)."""
        return self._store.get()

    def reload(self) -> ReloadResult | None:
        """Reload now. Returns None if a reload was already running."""
        return self._coordinator.reload("manual")

    def close(self) -> None:
        """Stop watching and reloading. Idempotent."""
        if self._closed:
            return
        self._closed = True
        if self._watcher is not None:
            self._watcher.stop()
        self._coordinator.close()
        self._manager.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        table = self._store.get()
        return (
            f"CsvLocalization(default_culture={self._config.default_culture!r}, "
            f"cultures={self._config.supported_cultures!r}, keys={len(table)})"
        )

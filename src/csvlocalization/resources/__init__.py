"""Resource transports and the resource file manager.

Submodules:
    types      - ResourceFile, ResourceSnapshot, WatchEvent and the
                 provider/watcher protocols
    filesystem - Local directory provider and watchdog-based watcher
    ftp        - FTP provider
    manager    - ResourceFileManager (snapshot holder)

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from csvlocalization.resources.filesystem import (
    FileSystemResourceFile,
    FileSystemResourceProvider,
    FileSystemResourceWatcher,
)
from csvlocalization.resources.ftp import FtpResourceFile, FtpResourceProvider
from csvlocalization.resources.manager import ResourceFileManager
from csvlocalization.resources.types import (
    ResourceFile,
    ResourceFileProvider,
    ResourceFileWatcher,
    ResourceSnapshot,
    WatchEvent,
)

__all__ = [
    # Manager
    "ResourceFileManager",
    # Abstractions
    "ResourceFile",
    "ResourceSnapshot",
    "ResourceFileProvider",
    "ResourceFileWatcher",
    "WatchEvent",
    # Filesystem transport
    "FileSystemResourceFile",
    "FileSystemResourceProvider",
    "FileSystemResourceWatcher",
    # FTP transport
    "FtpResourceFile",
    "FtpResourceProvider",
]

"""FTP transport.

FtpResourceProvider enumerates a directory tree on an FTP server; a
resource's name is its path relative to the configured root. Listing uses
MLSD and falls back to NLST plus a CWD probe for servers without MLSD.

Content is never cached: every FtpResourceFile.open() opens a fresh
connection, downloads the file into memory and closes the connection.
Authentication, TLS, timeout and transfer failures all surface as
ResourceAccessError chained to the ftplib or socket exception.

There is no FTP watcher; reloads happen at startup or on demand.

Python 3.13+.
"""

from __future__ import annotations

import ftplib
import io
import logging
import ssl
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import PurePosixPath
from typing import IO

from csvlocalization.config import FtpResourceConfig
from csvlocalization.errors import ResourceAccessError
from csvlocalization.resources.types import ResourceFile, ResourceSnapshot

__all__ = ["FtpClientFactory", "FtpResourceFile", "FtpResourceProvider", "FtpSession"]

logger = logging.getLogger(__name__)

type FtpClientFactory = Callable[[FtpResourceConfig], ftplib.FTP]
"""Builds an unconnected ftplib client for a configuration."""


def _default_client(config: FtpResourceConfig) -> ftplib.FTP:
    if config.use_tls:
        return ftplib.FTP_TLS(timeout=config.timeout)
    return ftplib.FTP(timeout=config.timeout)


def _describe_failure(error: BaseException) -> str:
    if isinstance(error, ftplib.error_perm) and str(error).startswith("530"):
        return "authentication failed"
    if isinstance(error, ssl.SSLError):
        return "TLS negotiation failed"
    if isinstance(error, TimeoutError):
        return "connection timed out"
    return "transfer failed"


class FtpSession:
    """Opens authenticated connections for one FTP configuration."""

    __slots__ = ("_client_factory", "_config")

    def __init__(
        self, config: FtpResourceConfig, client_factory: FtpClientFactory | None = None
    ) -> None:
        self._config = config
        self._client_factory = client_factory or _default_client

    @property
    def config(self) -> FtpResourceConfig:
        return self._config

    def uri(self, path: str) -> str:
        scheme = "ftps" if self._config.use_tls else "ftp"
        return f"{scheme}://{self._config.host}:{self._config.port}{path}"

    @contextmanager
    def connect(self, path: str) -> Iterator[ftplib.FTP]:
        """Yield a logged-in client; map every failure to ResourceAccessError."""
        config = self._config
        client = self._client_factory(config)
        connected = False
        try:
            client.connect(config.host, config.port, timeout=config.timeout)
            connected = True
            client.login(config.username, config.password)
            if isinstance(client, ftplib.FTP_TLS):
                client.prot_p()
            yield client
        except ResourceAccessError:
            raise
        except ftplib.all_errors as e:
            reason = _describe_failure(e)
            msg = f"FTP {reason} for '{self.uri(path)}': {e}"
            raise ResourceAccessError(msg, uri=self.uri(path)) from e
        finally:
            if connected:
                try:
                    client.quit()
                except ftplib.all_errors:
                    client.close()

    def download(self, path: str) -> bytes:
        logger.debug("Downloading '%s'", self.uri(path))
        buffer = io.BytesIO()
        with self.connect(path) as client:
            client.retrbinary(f"RETR {path}", buffer.write)
        return buffer.getvalue()


class FtpResourceFile(ResourceFile):
    """A file on an FTP server, downloaded on every open()."""

    __slots__ = ("_path", "_session")

    def __init__(self, session: FtpSession, path: str, name: str) -> None:
        super().__init__(session.uri(path), name)
        self._session = session
        self._path = path

    @property
    def path(self) -> str:
        """Absolute path on the server."""
        return self._path

    def open(self) -> IO[bytes]:
        return io.BytesIO(self._session.download(self._path))


class FtpResourceProvider:
    """Enumerates the files below a directory on an FTP server.

    Args:
        config: Server, credentials and root directory
        client_factory: Builds the ftplib client (tests inject mocks)

    Example:
        >>> provider = FtpResourceProvider(FtpResourceConfig(host="ftp.example.com"))
        >>> snapshot = provider.load_files("/i18n")
    """

    __slots__ = ("_session",)

    def __init__(
        self, config: FtpResourceConfig, client_factory: FtpClientFactory | None = None
    ) -> None:
        self._session = FtpSession(config, client_factory)

    @property
    def config(self) -> FtpResourceConfig:
        return self._session.config

    def load_files(self, source: str) -> ResourceSnapshot:
        """Enumerate source recursively.

        Raises:
            ResourceAccessError: If the server cannot be reached or listed
        """
        root = "/" + source.replace("\\", "/").strip("/")
        with self._session.connect(root) as client:
            paths = list(self._walk(client, root))

        files: list[ResourceFile] = []
        for path in paths:
            name = PurePosixPath(path).relative_to(root).as_posix()
            files.append(FtpResourceFile(self._session, path, name))
        logger.info("Loaded %d resource file(s) from '%s'", len(files), self._session.uri(root))
        return ResourceSnapshot.from_files(files, root)

    def _walk(self, client: ftplib.FTP, directory: str) -> Iterator[str]:
        try:
            entries = list(client.mlsd(directory, facts=["type", "size"]))
        except ftplib.error_perm as e:
            # 500/502: MLSD not implemented; anything else is a real refusal.
            if not str(e).startswith(("500", "502")):
                raise
            yield from self._walk_nlst(client, directory)
            return

        for name, facts in entries:
            kind = facts.get("type", "").lower()
            path = f"{directory.rstrip('/')}/{name}"
            if kind == "dir":
                yield from self._walk(client, path)
            elif kind == "file" and facts.get("size") != "0":
                yield path

    def _walk_nlst(self, client: ftplib.FTP, directory: str) -> Iterator[str]:
        for entry in client.nlst(directory):
            name = PurePosixPath(entry).name
            if name in ("", ".", ".."):
                continue
            path = f"{directory.rstrip('/')}/{name}"
            if self._is_directory(client, path):
                yield from self._walk_nlst(client, path)
            else:
                yield path

    @staticmethod
    def _is_directory(client: ftplib.FTP, path: str) -> bool:
        try:
            client.cwd(path)
        except ftplib.error_perm:
            return False
        client.cwd("/")
        return True

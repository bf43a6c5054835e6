# src/retainer/transport/ftp.py
"""FTP / FTPS backup store.

Wraps ftplib. Every ftplib failure (protocol replies, socket errors, EOF on
a dropped control connection) is re-raised as a TransportError subclass with
the original exception chained.
"""

from __future__ import annotations

import ftplib
import io
from collections.abc import Callable
from types import TracebackType
from typing import Self

from retainer.contracts.errors import StoreConnectionError, StoreOperationError
from retainer.core.logging import get_logger

logger = get_logger(__name__)

# Reply text servers use for NLST on an empty directory
_EMPTY_LISTING_MARKERS = ("no files found", "no such file or directory", "file not found")

# Replies meaning the server does not implement a command
_UNSUPPORTED_COMMAND_CODES = ("500", "501", "502", "504")


class FTPStore:
    """Backup directory on an FTP server, optionally secured with explicit TLS."""

    def __init__(
        self,
        host: str,
        *,
        port: int = 21,
        username: str = "anonymous",
        password: str = "",
        directory: str = ".",
        timeout: float = 30.0,
        passive: bool = True,
        use_tls: bool = False,
        ftp_factory: Callable[[], ftplib.FTP] | None = None,
    ) -> None:
        """Connect, authenticate and change into the backup directory.

        Args:
            host: Server hostname
            port: Server port
            username: Login name
            password: Login password
            directory: Directory holding the backups
            timeout: Socket timeout in seconds
            passive: Use passive data connections
            use_tls: Secure control and data channels (FTPS, AUTH TLS)
            ftp_factory: Builds the ftplib client (tests inject fakes here)

        Raises:
            StoreConnectionError: If connecting, logging in or changing
                directory fails.
        """
        self.host = host
        self.directory = directory
        if ftp_factory is None:
            client_class = ftplib.FTP_TLS if use_tls else ftplib.FTP
            self._ftp = client_class(timeout=timeout)
        else:
            self._ftp = ftp_factory()
        self._closed = False

        try:
            self._ftp.connect(host, port)
            self._ftp.login(username, password)
            if use_tls:
                self._ftp.prot_p()  # type: ignore[attr-defined]
            self._ftp.set_pasv(passive)
            # SIZE is refused in ASCII mode by many servers
            self._ftp.voidcmd("TYPE I")
            if directory not in ("", "."):
                self._ftp.cwd(directory)
        except ftplib.all_errors as e:
            self._ftp.close()
            raise StoreConnectionError(f"Cannot open ftp{'s' if use_tls else ''}://{host}:{port}/{directory}: {e}") from e

        logger.debug("ftp_connected", host=host, port=port, directory=directory, tls=use_tls)

    def list_names(self) -> list[str]:
        try:
            entries = self._ftp.nlst()
        except ftplib.error_perm as e:
            if any(marker in str(e).lower() for marker in _EMPTY_LISTING_MARKERS):
                return []
            raise StoreOperationError(f"Cannot list {self.directory} on {self.host}: {e}") from e
        except ftplib.all_errors as e:
            raise StoreOperationError(f"Cannot list {self.directory} on {self.host}: {e}") from e

        # Some servers prefix NLST entries with the directory
        names = (entry.rsplit("/", 1)[-1] for entry in entries)
        return sorted(name for name in names if name not in ("", ".", ".."))

    def exists(self, name: str) -> bool:
        """Check for ``name`` with SIZE, falling back to a listing.

        Only a 550 reply means the file is absent. Servers without SIZE
        answer 500/502 and are asked for a directory listing instead.
        """
        try:
            self._ftp.size(name)
        except ftplib.error_perm as e:
            code = str(e)[:3]
            if code == "550":
                return False
            if code in _UNSUPPORTED_COMMAND_CODES:
                logger.debug("ftp_size_unsupported", name=name, reply=str(e))
                return name in self.list_names()
            raise StoreOperationError(f"Cannot stat {name!r}: {e}", name=name) from e
        except ftplib.all_errors as e:
            raise StoreOperationError(f"Cannot stat {name!r}: {e}", name=name) from e
        return True

    def truncate(self, name: str) -> None:
        try:
            self._ftp.storbinary(f"STOR {name}", io.BytesIO(b""))
        except ftplib.all_errors as e:
            raise StoreOperationError(f"Cannot truncate {name!r}: {e}", name=name) from e

    def delete(self, name: str) -> None:
        try:
            self._ftp.delete(name)
        except ftplib.all_errors as e:
            raise StoreOperationError(f"Cannot delete {name!r}: {e}", name=name) from e

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._ftp.quit()
        except ftplib.all_errors:
            # Server already dropped the control connection
            self._ftp.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

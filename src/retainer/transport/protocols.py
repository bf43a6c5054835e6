"""RemoteStore protocol: the boundary between the core and the network.

Implemented by:
- transport/ftp.py (FTPStore)
- transport/local.py (LocalDirectoryStore)

Consumed by cli.py (listing) and core/retention/purge.py (deletion).
"""

from types import TracebackType
from typing import Protocol, Self, runtime_checkable


@runtime_checkable
class RemoteStore(Protocol):
    """A flat directory of backup files.

    Implementations raise TransportError subclasses for every failure and
    never swallow them.
    """

    def list_names(self) -> list[str]:
        """Return the filenames in the backup directory.

        The "." and ".." markers are never included.

        Raises:
            StoreOperationError: If the listing cannot be retrieved.
        """
        ...

    def exists(self, name: str) -> bool:
        """Check whether a file is present."""
        ...

    def truncate(self, name: str) -> None:
        """Replace a file's content with zero bytes.

        Raises:
            StoreOperationError: If the file cannot be truncated.
        """
        ...

    def delete(self, name: str) -> None:
        """Delete a file.

        Raises:
            StoreOperationError: If the file cannot be deleted.
        """
        ...

    def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        ...

    def __enter__(self) -> Self: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

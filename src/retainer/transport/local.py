# src/retainer/transport/local.py
"""Local directory store: the RemoteStore contract over a filesystem path.

Used for mounted remote filesystems, local mirrors, and tests.
"""

from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import Self

from retainer.contracts.errors import StoreConnectionError, StoreOperationError


class LocalDirectoryStore:
    """Backup directory on a locally mounted filesystem.

    Only regular files directly inside the directory are listed;
    subdirectories are ignored.
    """

    def __init__(self, directory: Path) -> None:
        """Open a local backup directory.

        Raises:
            StoreConnectionError: If the directory does not exist.
        """
        self.directory = Path(directory).expanduser()
        if not self.directory.is_dir():
            raise StoreConnectionError(f"Backup directory not found: {self.directory}")

    def _path_for(self, name: str) -> Path:
        """Resolve a filename inside the directory.

        Raises:
            StoreOperationError: If the name escapes the directory.
        """
        path = self.directory / name
        if path.resolve().parent != self.directory.resolve():
            raise StoreOperationError(f"Refusing to touch {name!r}: not directly inside {self.directory}", name=name)
        return path

    def list_names(self) -> list[str]:
        try:
            return sorted(entry.name for entry in self.directory.iterdir() if entry.is_file())
        except OSError as e:
            raise StoreOperationError(f"Cannot list {self.directory}: {e}") from e

    def exists(self, name: str) -> bool:
        return self._path_for(name).is_file()

    def truncate(self, name: str) -> None:
        path = self._path_for(name)
        try:
            with path.open("r+b") as handle:
                handle.truncate(0)
        except OSError as e:
            raise StoreOperationError(f"Cannot truncate {name!r}: {e}", name=name) from e

    def delete(self, name: str) -> None:
        path = self._path_for(name)
        try:
            path.unlink()
        except OSError as e:
            raise StoreOperationError(f"Cannot delete {name!r}: {e}", name=name) from e

    def close(self) -> None:
        return None

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

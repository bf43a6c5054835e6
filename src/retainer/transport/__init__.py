"""Remote store collaborators: listing and deleting backup files."""

from retainer.transport.factory import open_store
from retainer.transport.ftp import FTPStore
from retainer.transport.local import LocalDirectoryStore
from retainer.transport.protocols import RemoteStore

__all__ = [
    "FTPStore",
    "LocalDirectoryStore",
    "RemoteStore",
    "open_store",
]

"""Store construction from RemoteSettings."""

from __future__ import annotations

from pathlib import Path

from retainer.contracts.enums import StoreProtocol
from retainer.contracts.errors import ConfigurationError
from retainer.core.config import RemoteSettings
from retainer.transport.ftp import FTPStore
from retainer.transport.local import LocalDirectoryStore
from retainer.transport.protocols import RemoteStore


def open_store(remote: RemoteSettings, *, password: str | None = None) -> RemoteStore:
    """Open the store described by ``remote``.

    Args:
        remote: Validated remote settings
        password: Password acquired by the caller; overrides remote.password

    Raises:
        ConfigurationError: If a network protocol has no host.
        StoreConnectionError: If the store cannot be opened.
    """
    if remote.protocol == StoreProtocol.LOCAL:
        return LocalDirectoryStore(Path(remote.directory))

    if not remote.host:
        raise ConfigurationError(f"remote.host is required for protocol {remote.protocol.value!r}")

    port = remote.effective_port
    assert port is not None  # network protocols always have a default port
    return FTPStore(
        remote.host,
        port=port,
        username=remote.username,
        password=password if password is not None else (remote.password or ""),
        directory=remote.directory,
        timeout=remote.timeout_seconds,
        passive=remote.passive,
        use_tls=remote.protocol == StoreProtocol.FTPS,
    )

"""Kinds and verdict reasons used across subsystem boundaries."""

from enum import StrEnum


class BackupKind(StrEnum):
    """Whether an archive starts a dependency chain or extends one."""

    FULL = "full"
    INCREMENTAL = "incremental"


class VerdictReason(StrEnum):
    """Why an archive was (or was not) selected for deletion.

    Only EXPIRED verdicts are deletable. Every other reason means the file
    stays on the store.
    """

    EXPIRED = "expired"
    PROTECTED_BY_DEPENDENT = "protected_by_dependent"
    WITHIN_RETENTION = "within_retention"
    OUT_OF_SCOPE = "out_of_scope"
    UNRECOGNIZED = "unrecognized"


class StoreProtocol(StrEnum):
    """Transport used to reach the backup store."""

    FTP = "ftp"
    FTPS = "ftps"
    LOCAL = "local"

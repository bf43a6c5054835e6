"""Value types flowing through the parse -> build -> expire pipeline.

All types are frozen: each stage produces new values and never mutates
the output of the stage before it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple

from retainer.contracts.enums import BackupKind, VerdictReason


class BackupKey(NamedTuple):
    """Identity of a backup set: every file of one set shares this key."""

    profile: str
    timestamp: datetime


@dataclass(frozen=True, slots=True)
class BackupRecord:
    """One recognized filename.

    Attributes:
        raw_name: Filename exactly as listed; deletion key and tie-breaker.
        profile: Logical backup set the file belongs to.
        kind: FULL starts a chain, INCREMENTAL extends one.
        timestamp: UTC instant the backup was taken.
        parent_timestamp: Timestamp of the backup set this one was taken
            against, when the name spells it out. None means "the previous
            backup in the profile" for incrementals and "nothing" for fulls.
    """

    raw_name: str
    profile: str
    kind: BackupKind
    timestamp: datetime
    parent_timestamp: datetime | None = None

    def __post_init__(self) -> None:
        if self.timestamp.tzinfo is None:
            raise ValueError(f"BackupRecord timestamp must be timezone-aware: {self.raw_name!r}")
        if self.kind == BackupKind.FULL and self.parent_timestamp is not None:
            raise ValueError(f"Full backup cannot reference a parent: {self.raw_name!r}")
        if self.parent_timestamp is not None and self.parent_timestamp >= self.timestamp:
            raise ValueError(f"Parent of {self.raw_name!r} must be strictly earlier than the backup itself")

    @property
    def key(self) -> BackupKey:
        return BackupKey(self.profile, self.timestamp)

    @property
    def parent_key(self) -> BackupKey | None:
        if self.parent_timestamp is None:
            return None
        return BackupKey(self.profile, self.parent_timestamp)

    @property
    def sort_key(self) -> tuple[datetime, str]:
        """Deterministic output order: oldest first, then by name."""
        return (self.timestamp, self.raw_name)


@dataclass(frozen=True, slots=True)
class Unrecognized:
    """A filename no grammar rule matched. Never deletable."""

    raw_name: str
    reason: str


@dataclass(frozen=True, slots=True)
class ExpirationVerdict:
    """Final decision for one listed file."""

    raw_name: str
    reason: VerdictReason

    @property
    def deletable(self) -> bool:
        return self.reason == VerdictReason.EXPIRED


type ParseResult = BackupRecord | Unrecognized

"""Shared contracts: enums, records, errors and protocols.

Leaf package: nothing here imports from retainer.core or retainer.transport.
"""

from retainer.contracts.enums import BackupKind, StoreProtocol, VerdictReason
from retainer.contracts.errors import (
    AmbiguousScopeError,
    ConfigurationError,
    ExpiryError,
    InvalidThresholdError,
    NoScopeSelectedError,
    RetainerError,
    ScopeSelectionError,
    StoreConnectionError,
    StoreOperationError,
    TransportError,
)
from retainer.contracts.grammar import NameGrammar
from retainer.contracts.records import (
    BackupKey,
    BackupRecord,
    ExpirationVerdict,
    ParseResult,
    Unrecognized,
)

__all__ = [
    "AmbiguousScopeError",
    "BackupKey",
    "BackupKind",
    "BackupRecord",
    "ConfigurationError",
    "ExpirationVerdict",
    "ExpiryError",
    "InvalidThresholdError",
    "NameGrammar",
    "NoScopeSelectedError",
    "ParseResult",
    "RetainerError",
    "ScopeSelectionError",
    "StoreConnectionError",
    "StoreOperationError",
    "StoreProtocol",
    "TransportError",
    "Unrecognized",
    "VerdictReason",
]

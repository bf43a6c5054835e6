"""Types for dependency-chain construction.

Leaf module: no imports from forest.py or builder.py.
"""

from __future__ import annotations

from dataclasses import dataclass

DANGLING_PARENT = "dangling_parent"
ORPHAN_INCREMENTAL = "orphan_incremental"


@dataclass(frozen=True, slots=True)
class ChainWarning:
    """Non-fatal problem found while linking a profile's backups.

    A warned record becomes the root of its own degenerate chain: it is
    still evaluated for expiry, but it protects nothing above it.
    """

    code: str
    message: str
    raw_names: tuple[str, ...]

# src/retainer/core/chains/builder.py
"""Dependency forest construction from parsed records.

Parents are resolved by lookup on (profile, timestamp), never by position in
the listing: remote stores do not promise any listing order.
"""

from __future__ import annotations

from bisect import bisect_left
from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime

from retainer.contracts.enums import BackupKind
from retainer.contracts.records import BackupRecord
from retainer.core.chains.forest import DependencyForest
from retainer.core.chains.models import DANGLING_PARENT, ORPHAN_INCREMENTAL, ChainWarning
from retainer.core.logging import get_logger

logger = get_logger(__name__)


def _link_profile(
    records: list[BackupRecord],
) -> tuple[list[tuple[str, str]], list[ChainWarning]]:
    """Compute parent -> dependent edges for one profile's records."""
    by_stamp: dict[datetime, list[BackupRecord]] = defaultdict(list)
    for record in records:
        by_stamp[record.timestamp].append(record)
    stamps = sorted(by_stamp)

    edges: list[tuple[str, str]] = []
    warnings: list[ChainWarning] = []

    for record in records:
        if record.kind == BackupKind.FULL:
            continue

        if record.parent_timestamp is not None:
            parents = by_stamp.get(record.parent_timestamp, [])
            if not parents:
                warnings.append(
                    ChainWarning(
                        code=DANGLING_PARENT,
                        message=(
                            f"Incremental {record.raw_name!r} was taken against "
                            f"{record.parent_timestamp.isoformat()}, which is not in the listing"
                        ),
                        raw_names=(record.raw_name,),
                    )
                )
        else:
            index = bisect_left(stamps, record.timestamp)
            if index == 0:
                parents = []
                warnings.append(
                    ChainWarning(
                        code=ORPHAN_INCREMENTAL,
                        message=f"Incremental {record.raw_name!r} has no earlier backup in its profile",
                        raw_names=(record.raw_name,),
                    )
                )
            else:
                parents = by_stamp[stamps[index - 1]]

        edges.extend((parent.raw_name, record.raw_name) for parent in parents)

    return edges, warnings


def build_forests(records: Iterable[BackupRecord]) -> dict[str, DependencyForest]:
    """Group records by profile and link each incremental to its parent.

    A record whose parent is missing becomes a degenerate root (see
    ChainWarning). Profiles never share edges, even when names collide.
    Duplicate raw names keep their first occurrence.

    Args:
        records: Parsed records from one listing

    Returns:
        Mapping of profile name to its DependencyForest
    """
    by_profile: dict[str, list[BackupRecord]] = defaultdict(list)
    seen: set[str] = set()
    for record in records:
        if record.raw_name in seen:
            continue
        seen.add(record.raw_name)
        by_profile[record.profile].append(record)

    forests: dict[str, DependencyForest] = {}
    for profile in sorted(by_profile):
        profile_records = sorted(by_profile[profile], key=lambda r: r.sort_key)
        edges, warnings = _link_profile(profile_records)
        forests[profile] = DependencyForest(profile, profile_records, edges, warnings)
        logger.debug(
            "forest_built",
            profile=profile,
            records=len(profile_records),
            dependencies=len(edges),
            warnings=len(warnings),
        )

    return forests

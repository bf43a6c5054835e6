# src/retainer/core/naming/dashed.py
"""Dashed filename grammar: ``<profile>-<kind>-<stamp>[-<parent>][.<suffix>]``.

Examples:
    home-full-20240101.tar.gz           full backup of profile "home"
    home-incr-20240110.tar.gz           incremental against the previous backup
    home-incr-20240115-20240101.tar.gz  incremental against the 2024-01-01 set
    web-01-full-20240101T0300           profile names may contain dashes

Stamps are YYYYMMDD, optionally followed by HHMM or HHMMSS with or without a
"T" separator, and are read as UTC. The suffix is not part of the identity,
so ``x.tar.gz`` and ``x.tar.gz.md5`` belong to the same backup set.
"""

from __future__ import annotations

import re

from retainer.contracts.enums import BackupKind
from retainer.contracts.records import BackupRecord, ParseResult, Unrecognized
from retainer.core.naming.timestamps import parse_compact_stamp

_STAMP = r"\d{8}(?:T?\d{4}(?:\d{2})?)?"

_DASHED_PATTERN = re.compile(
    rf"^(?P<profile>.+?)-(?P<kind>full|incr|inc)-(?P<stamp>{_STAMP})"
    rf"(?:-(?P<parent>{_STAMP}))?(?P<suffix>\..*)?$",
    re.IGNORECASE | re.ASCII,
)

_KIND_MARKERS: dict[str, BackupKind] = {
    "full": BackupKind.FULL,
    "incr": BackupKind.INCREMENTAL,
    "inc": BackupKind.INCREMENTAL,
}


def _has_path_separator(raw_name: str) -> bool:
    return "/" in raw_name or "\\" in raw_name


class DashedNameGrammar:
    """Grammar for archives named ``<profile>-<full|incr>-<stamp>``."""

    name = "dashed"

    def parse(self, raw_name: str) -> ParseResult:
        if _has_path_separator(raw_name):
            return Unrecognized(raw_name, "name contains a path separator")

        match = _DASHED_PATTERN.match(raw_name)
        if match is None:
            return Unrecognized(raw_name, "name does not match <profile>-<kind>-<stamp>")

        timestamp = parse_compact_stamp(match["stamp"])
        if timestamp is None:
            return Unrecognized(raw_name, f"invalid timestamp {match['stamp']!r}")

        kind = _KIND_MARKERS[match["kind"].lower()]
        parent_token = match["parent"]
        if parent_token is None:
            return BackupRecord(raw_name, match["profile"], kind, timestamp)

        if kind == BackupKind.FULL:
            return Unrecognized(raw_name, "full backup cannot name a parent")
        parent_timestamp = parse_compact_stamp(parent_token)
        if parent_timestamp is None:
            return Unrecognized(raw_name, f"invalid parent timestamp {parent_token!r}")
        if parent_timestamp >= timestamp:
            return Unrecognized(raw_name, "parent is not earlier than the backup itself")
        return BackupRecord(raw_name, match["profile"], kind, timestamp, parent_timestamp)

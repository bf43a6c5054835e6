# src/retainer/core/naming/duplicity.py
"""Duplicity filename grammar.

duplicity (and duply, which drives it through named profiles) writes every
backup set as several files sharing one timestamp:

    duplicity-full.20240101T030000Z.vol1.difftar.gpg
    duplicity-full.20240101T030000Z.manifest.gpg
    duplicity-full-signatures.20240101T030000Z.sigtar.gpg
    duplicity-inc.20240101T030000Z.to.20240102T030000Z.vol1.difftar.gpg
    duplicity-inc.20240101T030000Z.to.20240102T030000Z.manifest.gpg
    duplicity-new-signatures.20240101T030000Z.to.20240102T030000Z.sigtar.gpg

Incrementals spell out the set they were taken against ("<parent>.to.<own>"),
so every incremental carries an explicit parent. A ``--file-prefix`` in front
of "duplicity-" names the profile; unprefixed files belong to "default".
Interrupted uploads (``.part``) never match.
"""

from __future__ import annotations

import re

from retainer.contracts.enums import BackupKind
from retainer.contracts.records import BackupRecord, ParseResult, Unrecognized
from retainer.core.naming.timestamps import parse_iso_basic_stamp

DEFAULT_PROFILE = "default"

_T = r"\d{8}T\d{6}Z"
_VOLUME_OR_MANIFEST = r"(?:vol\d+\.difftar(?:\.gz|\.gpg)?|manifest(?:\.gpg)?)"
_SIGTAR = r"sigtar(?:\.gz|\.gpg)?"

_FULL_PATTERNS = (
    re.compile(rf"^(?P<prefix>.*?)duplicity-full\.(?P<stamp>{_T})\.{_VOLUME_OR_MANIFEST}$", re.ASCII),
    re.compile(rf"^(?P<prefix>.*?)duplicity-full-signatures\.(?P<stamp>{_T})\.{_SIGTAR}$", re.ASCII),
)
_INCREMENTAL_PATTERNS = (
    re.compile(rf"^(?P<prefix>.*?)duplicity-inc\.(?P<parent>{_T})\.to\.(?P<stamp>{_T})\.{_VOLUME_OR_MANIFEST}$", re.ASCII),
    re.compile(rf"^(?P<prefix>.*?)duplicity-new-signatures\.(?P<parent>{_T})\.to\.(?P<stamp>{_T})\.{_SIGTAR}$", re.ASCII),
)


def _profile_from_prefix(prefix: str) -> str:
    return prefix.rstrip("-_.") or DEFAULT_PROFILE


class DuplicityNameGrammar:
    """Grammar for duplicity backup chains."""

    name = "duplicity"

    def parse(self, raw_name: str) -> ParseResult:
        if "/" in raw_name or "\\" in raw_name:
            return Unrecognized(raw_name, "name contains a path separator")

        for pattern in _FULL_PATTERNS:
            match = pattern.match(raw_name)
            if match is not None:
                timestamp = parse_iso_basic_stamp(match["stamp"])
                if timestamp is None:
                    return Unrecognized(raw_name, f"invalid timestamp {match['stamp']!r}")
                return BackupRecord(raw_name, _profile_from_prefix(match["prefix"]), BackupKind.FULL, timestamp)

        for pattern in _INCREMENTAL_PATTERNS:
            match = pattern.match(raw_name)
            if match is not None:
                timestamp = parse_iso_basic_stamp(match["stamp"])
                parent_timestamp = parse_iso_basic_stamp(match["parent"])
                if timestamp is None or parent_timestamp is None:
                    return Unrecognized(raw_name, "invalid timestamp in incremental range")
                if parent_timestamp >= timestamp:
                    return Unrecognized(raw_name, "incremental range does not move forward in time")
                return BackupRecord(
                    raw_name,
                    _profile_from_prefix(match["prefix"]),
                    BackupKind.INCREMENTAL,
                    timestamp,
                    parent_timestamp,
                )

        return Unrecognized(raw_name, "not a duplicity volume, manifest or signature file")

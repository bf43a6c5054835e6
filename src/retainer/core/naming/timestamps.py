"""Timestamp token parsing shared by the filename grammars."""

from __future__ import annotations

from datetime import UTC, datetime

# Digit count (after removing the optional "T" separator) -> strptime format
_COMPACT_FORMATS: dict[int, str] = {
    8: "%Y%m%d",
    12: "%Y%m%d%H%M",
    14: "%Y%m%d%H%M%S",
}


def parse_compact_stamp(token: str) -> datetime | None:
    """Parse YYYYMMDD[[T]HHMM[SS]] as a UTC instant.

    Returns None for calendar-invalid stamps (month 13, Feb 30, hour 25).
    """
    digits = token.replace("T", "").replace("t", "")
    if not (digits.isascii() and digits.isdigit()):
        return None
    try:
        fmt = _COMPACT_FORMATS[len(digits)]
    except KeyError:
        return None
    try:
        return datetime.strptime(digits, fmt).replace(tzinfo=UTC)
    except ValueError:
        return None


def parse_iso_basic_stamp(token: str) -> datetime | None:
    """Parse the ISO 8601 basic form YYYYMMDDTHHMMSSZ as a UTC instant."""
    try:
        return datetime.strptime(token, "%Y%m%dT%H%M%SZ").replace(tzinfo=UTC)
    except ValueError:
        return None

# tests/conftest.py
"""Shared test fixtures and helpers.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/

Time Handling:
    Expiry depends on "now". Unit tests pin it with MockClock at FIXED_NOW
    so ages are exact; CLI tests run against the real clock and build
    filenames relative to datetime.now(UTC) with a wide safety margin.
"""

import os
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from retainer.contracts import BackupKind, BackupRecord
from retainer.core.clock import MockClock
from retainer.core.expiry import ExpiryFilter

# 2024-02-15: 45 days after 2024-01-01, 36 days after 2024-01-10
FIXED_NOW = datetime(2024, 2, 15, tzinfo=UTC)


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    """Shorthand for a UTC datetime."""
    return datetime(year, month, day, hour, minute, second, tzinfo=UTC)


def full(profile: str, when: datetime, raw_name: str | None = None) -> BackupRecord:
    """Build a full-backup record with a dashed-style name."""
    name = raw_name or f"{profile}-full-{when:%Y%m%dT%H%M%S}"
    return BackupRecord(name, profile, BackupKind.FULL, when)


def incr(
    profile: str,
    when: datetime,
    parent: datetime | None = None,
    raw_name: str | None = None,
) -> BackupRecord:
    """Build an incremental record; parent=None means "previous backup"."""
    name = raw_name or f"{profile}-incr-{when:%Y%m%dT%H%M%S}"
    return BackupRecord(name, profile, BackupKind.INCREMENTAL, when, parent)


def stamp_days_ago(days: int) -> str:
    """YYYYMMDD stamp for a backup taken ``days`` days before the real now."""
    return f"{datetime.now(UTC) - timedelta(days=days):%Y%m%d}"


def make_store_dir(directory: Path, names: Iterable[str]) -> Path:
    """Populate a directory with non-empty files named ``names``."""
    directory.mkdir(parents=True, exist_ok=True)
    for name in names:
        (directory / name).write_bytes(b"backup-data")
    return directory


@pytest.fixture
def clock() -> MockClock:
    """Clock pinned to FIXED_NOW."""
    return MockClock(FIXED_NOW)


@pytest.fixture
def expiry_filter(clock: MockClock) -> ExpiryFilter:
    """ExpiryFilter with the dashed grammar and the pinned clock."""
    return ExpiryFilter(clock=clock)


# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))

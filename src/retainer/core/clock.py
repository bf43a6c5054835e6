# src/retainer/core/clock.py
"""Clock abstraction for testable age computation.

Archive ages are measured against "now". Production code uses SystemClock;
tests inject MockClock to pin "now" to a fixed instant.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Source of the current wall-clock instant."""

    def now(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""
        ...


class SystemClock:
    """Production clock backed by datetime.now(UTC)."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class MockClock:
    """Controllable clock for deterministic testing.

    Example:
        clock = MockClock(datetime(2024, 2, 15, tzinfo=UTC))
        expiry = ExpiryFilter(clock=clock)
        clock.advance(timedelta(days=10))
    """

    def __init__(self, start: datetime) -> None:
        """Initialize mock clock at a given instant.

        Raises:
            ValueError: If start is naive.
        """
        if start.tzinfo is None:
            raise ValueError("MockClock requires a timezone-aware start time")
        self._current = start

    def now(self) -> datetime:
        return self._current

    def advance(self, delta: timedelta) -> None:
        """Move the clock forward.

        Raises:
            ValueError: If delta is negative.
        """
        if delta < timedelta(0):
            raise ValueError(f"Cannot advance time by negative amount: {delta}")
        self._current += delta

    def set(self, value: datetime) -> None:
        """Set the clock to an absolute instant (may move backwards)."""
        if value.tzinfo is None:
            raise ValueError("MockClock requires a timezone-aware time")
        self._current = value


DEFAULT_CLOCK: Clock = SystemClock()

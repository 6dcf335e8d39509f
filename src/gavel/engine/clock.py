"""Time sources for the auction engine and ledger."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Wall-clock time in UTC."""
    return datetime.now(timezone.utc)


class ManualClock:
    """Settable clock for simulations and tests.

    Calling the instance returns the current simulated instant.
    """

    def __init__(self, start: datetime) -> None:
        self._now = start

    def __call__(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> datetime:
        """Move the clock forward. Returns the new instant."""
        assert seconds >= 0, "Clock cannot move backwards"
        self._now += timedelta(seconds=seconds)
        return self._now

    def set(self, instant: datetime) -> None:
        self._now = instant

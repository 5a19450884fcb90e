"""Injectable time source.

The read model never calls datetime.now() directly. Freshness cutoffs
and query-time expiry both ask a Clock, so tests can pin "now" and move
it forward.
"""

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """Injectable time source."""

    def now_utc(self) -> datetime:
        """Return current UTC time."""
        ...  # pragma: no cover


class SystemClock:
    """Production clock, real system time."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Test clock returning a fixed, movable timestamp.

    Usage:
        clock = FixedClock(datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc))
        clock.advance(minutes=31)
    """

    def __init__(self, fixed_dt: datetime) -> None:
        self._fixed_dt = self._require_aware(fixed_dt)

    @staticmethod
    def _require_aware(value: datetime) -> datetime:
        if value.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        return value

    def now_utc(self) -> datetime:
        return self._fixed_dt

    def set(self, value: datetime) -> None:
        self._fixed_dt = self._require_aware(value)

    def advance(self, **delta: float) -> None:
        """Move the clock forward by a timedelta given as keyword arguments."""
        self._fixed_dt = self._fixed_dt + timedelta(**delta)

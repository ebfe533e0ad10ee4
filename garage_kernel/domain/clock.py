"""
Clock -- injectable source of "now" for the report path.

The valuation report needs the current date for its default cutoff and a
timestamp for ``generated_at`` and the export file name.  Both come from a
Clock passed to the service, never from ``datetime.now()`` directly, so a
test can pin them.

Architecture position:
    Kernel > Domain.  SystemClock is the one place that reads real time.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone, tzinfo


class Clock(ABC):
    """
    Contract:
        ``now()`` returns a timezone-aware datetime; ``today()`` is its
        calendar date in that same zone.
    """

    @abstractmethod
    def now(self) -> datetime:
        ...

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """
    Wall-clock time in the shop's zone.

    Cutoffs are end-of-day in local time, so without an explicit ``tz`` the
    host's local zone is used.
    """

    def __init__(self, tz: tzinfo | None = None):
        self._tz = tz

    def now(self) -> datetime:
        current = datetime.now(timezone.utc)
        return current.astimezone(self._tz) if self._tz is not None else current.astimezone()


class DeterministicClock(Clock):
    """Test clock: returns a fixed instant until moved explicitly."""

    DEFAULT_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __init__(self, fixed_time: datetime | None = None):
        self._now = fixed_time or self.DEFAULT_TIME

    def now(self) -> datetime:
        return self._now

    def set_time(self, time: datetime) -> None:
        self._now = time

    def advance(self, seconds: int = 1) -> None:
        self._now += timedelta(seconds=seconds)

# core/clock.py

"""Hour-of-day providers consumed by the time-of-day spawn gate.

The host owns the actual day/night simulation. This module only adapts
whatever it exposes into ``current_hour() -> float | None`` where ``None``
means "this provider is not available right now".
"""

from datetime import datetime, tzinfo
from typing import Callable, Optional, Protocol

HOURS_PER_DAY = 24.0


class ClockSource(Protocol):
    """Anything that can report the current in-game hour in [0, 24)."""

    def current_hour(self) -> Optional[float]: ...


def normalize_hour(hour: float) -> float:
    """Wrap an hour value into [0, 24)."""
    return hour % HOURS_PER_DAY


class FixedClock:
    """Clock pinned to a given hour. Handy for tests and frozen worlds."""

    def __init__(self, hour: float):
        self.hour = hour

    def current_hour(self) -> Optional[float]:
        return normalize_hour(self.hour)


class DayNightCycleClock:
    """Derives the hour from elapsed simulation seconds.

    Args:
        get_time: Callable returning simulation seconds since start
        day_length: Simulation seconds in one in-game day
        start_hour: Hour of day at simulation time 0
    """

    def __init__(
        self,
        get_time: Callable[[], Optional[float]],
        day_length: float = 86400.0,
        start_hour: float = 0.0,
    ):
        if day_length <= 0:
            raise ValueError("Day length must be positive")
        self._get_time = get_time
        self.day_length = day_length
        self.start_hour = start_hour

    def current_hour(self) -> Optional[float]:
        elapsed = self._get_time()
        if elapsed is None:
            return None
        fraction = (elapsed % self.day_length) / self.day_length
        return normalize_hour(self.start_hour + fraction * HOURS_PER_DAY)


class WallClock:
    """Real-world time of day; the last-resort provider."""

    def __init__(self, tz: Optional[tzinfo] = None):
        self.tz = tz

    def current_hour(self) -> Optional[float]:
        now = datetime.now(self.tz)
        return now.hour + now.minute / 60.0 + now.second / 3600.0


class FallbackClock:
    """Asks each provider in order and returns the first answer.

    Typical chain: the host's time system, then its day/night cycle, then
    ``WallClock()``.
    """

    def __init__(self, *sources: ClockSource):
        self.sources = list(sources)

    def current_hour(self) -> Optional[float]:
        for source in self.sources:
            hour = source.current_hour()
            if hour is not None:
                return normalize_hour(hour)
        return None

"""Unit tests for hour-of-day providers."""

import pytest

from core.clock import DayNightCycleClock, FallbackClock, FixedClock, WallClock


def test_fixed_clock_wraps():
    """Fixed hours are normalized into [0, 24)."""
    assert FixedClock(12.5).current_hour() == pytest.approx(12.5)
    assert FixedClock(24).current_hour() == pytest.approx(0.0)
    assert FixedClock(26).current_hour() == pytest.approx(2.0)


def test_day_night_cycle_from_simulation_time():
    """Simulation seconds map onto the day."""
    now = {"t": 0.0}
    clock = DayNightCycleClock(lambda: now["t"], day_length=2400.0, start_hour=6.0)

    assert clock.current_hour() == pytest.approx(6.0)

    now["t"] = 600.0  # a quarter of the day
    assert clock.current_hour() == pytest.approx(12.0)

    now["t"] = 2400.0 * 3 + 1800.0  # three days and three quarters later
    assert clock.current_hour() == pytest.approx(0.0)


def test_day_night_cycle_unavailable():
    """A cycle without a time source reports no hour."""
    clock = DayNightCycleClock(lambda: None)
    assert clock.current_hour() is None


def test_day_night_cycle_rejects_bad_length():
    with pytest.raises(ValueError):
        DayNightCycleClock(lambda: 0.0, day_length=0)


def test_wall_clock_in_range():
    """Wall clock hours are within a day."""
    hour = WallClock().current_hour()
    assert 0.0 <= hour < 24.0


def test_fallback_clock_order():
    """The first provider with an answer wins."""

    class Offline:
        def current_hour(self):
            return None

    assert FallbackClock(Offline(), FixedClock(5), FixedClock(9)).current_hour() == pytest.approx(5)
    assert FallbackClock(FixedClock(9), FixedClock(5)).current_hour() == pytest.approx(9)
    assert FallbackClock(Offline()).current_hour() is None

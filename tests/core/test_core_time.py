"""
Tests for core.time: clock protocol, ISO helpers and day windows.
"""

import pytest
from datetime import date, datetime, timedelta, timezone

from core.time import (
    FixedClock,
    SystemClock,
    TimeWindow,
    day_window,
    now_iso,
    parse_iso,
    to_iso,
)


# ── Clock Tests ──────────────────────────────────────────────

class TestSystemClock:
    def test_returns_utc_datetime(self):
        dt = SystemClock().now_utc()
        assert dt.tzinfo == timezone.utc

    def test_time_advances(self):
        clock = SystemClock()
        t1 = clock.now_utc()
        t2 = clock.now_utc()
        assert t2 >= t1


class TestFixedClock:
    def test_returns_fixed_time(self):
        fixed = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)
        clock = FixedClock(fixed)
        assert clock.now_utc() == fixed
        assert clock.now_utc() == fixed

    def test_rejects_naive_datetime(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            FixedClock(datetime(2025, 1, 1))

    def test_advance(self):
        fixed = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)
        clock = FixedClock(fixed)
        clock.advance(60)
        assert clock.now_utc() == fixed + timedelta(seconds=60)


# ── ISO helpers ──────────────────────────────────────────────

class TestIsoHelpers:
    def test_to_iso_normalizes_to_utc(self):
        eat = timezone(timedelta(hours=3))
        dt = datetime(2025, 3, 1, 15, 0, 0, tzinfo=eat)
        assert to_iso(dt) == "2025-03-01T12:00:00+00:00"

    def test_to_iso_rejects_naive(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            to_iso(datetime(2025, 3, 1))

    def test_parse_iso_accepts_z_suffix(self):
        assert parse_iso("2025-03-01T12:00:00Z") == datetime(
            2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc
        )

    def test_parse_iso_treats_naive_as_utc(self):
        assert parse_iso("2025-03-01T12:00:00").tzinfo == timezone.utc

    def test_now_iso_uses_clock(self):
        clock = FixedClock(datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        assert now_iso(clock) == "2025-01-02T03:04:05+00:00"


# ── TimeWindow Tests ─────────────────────────────────────────

class TestTimeWindow:
    def test_contains(self):
        start = datetime(2025, 1, 1, tzinfo=timezone.utc)
        end = datetime(2025, 12, 31, tzinfo=timezone.utc)
        window = TimeWindow(start=start, end=end)

        assert window.contains(datetime(2025, 6, 15, tzinfo=timezone.utc))
        assert window.contains(start)
        assert window.contains(end)
        assert not window.contains(datetime(2024, 12, 31, tzinfo=timezone.utc))

    def test_rejects_start_after_end(self):
        with pytest.raises(ValueError, match="start"):
            TimeWindow(
                start=datetime(2025, 12, 31, tzinfo=timezone.utc),
                end=datetime(2025, 1, 1, tzinfo=timezone.utc),
            )

    def test_duration(self):
        w = TimeWindow(
            start=datetime(2025, 1, 1, tzinfo=timezone.utc),
            end=datetime(2025, 1, 2, tzinfo=timezone.utc),
        )
        assert w.duration() == timedelta(days=1)


class TestDayWindow:
    def test_covers_whole_end_day(self):
        window = day_window(date(2025, 3, 1), date(2025, 3, 31))
        assert window.contains(datetime(2025, 3, 1, 0, 0, tzinfo=timezone.utc))
        assert window.contains(datetime(2025, 3, 31, 23, 59, 59, tzinfo=timezone.utc))
        assert not window.contains(datetime(2025, 4, 1, 0, 0, tzinfo=timezone.utc))

    def test_contains_iso(self):
        window = day_window(date(2025, 3, 1), date(2025, 3, 1))
        assert window.contains_iso("2025-03-01T23:59:00Z")
        assert not window.contains_iso("2025-03-02T00:00:01+00:00")

    def test_single_day(self):
        window = day_window(date(2025, 3, 1), date(2025, 3, 1))
        assert window.contains(datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc))

    def test_reversed_days_rejected(self):
        with pytest.raises(ValueError):
            day_window(date(2025, 3, 2), date(2025, 3, 1))

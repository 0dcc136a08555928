"""
Nawiri Core Time - Report Windows
==================================
Date ranges for reports. A report asks for whole days
("1st to 31st March"), so windows run from the first instant
of the start day to the last instant of the end day, in UTC.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone

from core.time.clock import parse_iso


@dataclass(frozen=True)
class TimeWindow:
    """Closed interval; both ends are inside."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(
                f"Window start {self.start.isoformat()} is after "
                f"end {self.end.isoformat()}."
            )

    def contains(self, dt: datetime) -> bool:
        return self.start <= dt <= self.end

    def contains_iso(self, timestamp: str) -> bool:
        """contains() for a stored ISO timestamp."""
        return self.contains(parse_iso(timestamp))

    def duration(self) -> timedelta:
        return self.end - self.start


def day_window(start_day: date, end_day: date) -> TimeWindow:
    return TimeWindow(
        start=datetime.combine(start_day, time.min, tzinfo=timezone.utc),
        end=datetime.combine(end_day, time.max, tzinfo=timezone.utc),
    )

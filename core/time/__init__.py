"""
Nawiri Core Time - Public API
==============================
Injectable clock and temporal helpers.
"""

from core.time.clock import (
    Clock,
    FixedClock,
    SystemClock,
    now_iso,
    parse_iso,
    to_iso,
)
from core.time.temporal import TimeWindow, day_window

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "now_iso",
    "parse_iso",
    "to_iso",
    "TimeWindow",
    "day_window",
]

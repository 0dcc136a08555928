"""
Nawiri Core Time - Injectable Clock
====================================
Ledger rows carry created_at / updated_at as ISO-8601 UTC
strings. The store stamps them from an injected Clock, never
from datetime.now(), so tests can pin time with FixedClock.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


def _require_aware(dt: datetime, who: str) -> None:
    if dt.tzinfo is None:
        raise ValueError(f"{who} requires a timezone-aware datetime, got {dt!r}.")


# ══════════════════════════════════════════════════════════════
# CLOCKS
# ══════════════════════════════════════════════════════════════

class Clock(Protocol):
    def now_utc(self) -> datetime:
        ...  # pragma: no cover


class SystemClock:
    """Wall-clock time in UTC."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Stands still until told to move:

        clock = FixedClock(datetime(2025, 3, 1, 9, tzinfo=timezone.utc))
        clock.advance(3600)    # 10:00
    """

    def __init__(self, fixed_dt: datetime) -> None:
        _require_aware(fixed_dt, "FixedClock")
        self._current = fixed_dt

    def now_utc(self) -> datetime:
        return self._current

    def advance(self, seconds: float) -> None:
        self._current += timedelta(seconds=seconds)


# ══════════════════════════════════════════════════════════════
# ISO TIMESTAMPS
# ══════════════════════════════════════════════════════════════

def to_iso(dt: datetime) -> str:
    """'2025-03-01T09:00:00+00:00' style, always in UTC."""
    _require_aware(dt, "to_iso")
    return dt.astimezone(timezone.utc).isoformat()


def parse_iso(value: str) -> datetime:
    """
    Read a stored timestamp back as an aware UTC datetime.

    Browser-written blobs end in 'Z'; older rows may have no
    offset at all and are taken as UTC.
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def now_iso(clock: Clock) -> str:
    return to_iso(clock.now_utc())

"""
Injected clock for calendar-day computations.

Heatmap and streak logic never read the system date themselves; the caller
passes `today` explicitly, usually from one of these clocks.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Protocol


class Clock(Protocol):
    """Source of the current calendar day."""

    def today(self) -> date:
        ...


class SystemClock:
    """Wall clock pinned to an explicit timezone (UTC by default)."""

    def __init__(self, tz: tzinfo | None = None):
        self.tz = tz or timezone.utc

    def today(self) -> date:
        return datetime.now(self.tz).date()


class FixedClock:
    """Clock frozen on a given day; advance() moves it forward."""

    def __init__(self, day: date):
        self._day = day

    def today(self) -> date:
        return self._day

    def advance(self, days: int = 1) -> date:
        self._day = self._day + timedelta(days=days)
        return self._day

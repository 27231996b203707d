"""
Streak Calculator.

A streak is the number of consecutive calendar days with activity, ending
today or yesterday. Continuity is checked at exact day granularity from the
most recent active day backwards; the first missing day ends the count.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta

from loguru import logger

from src.core.models import HeatmapEntry


def _active_days(heatmap: Iterable[HeatmapEntry]) -> list[date]:
    """Active dates, newest first. Assumes the aggregator merged same-day entries."""
    return sorted({e.date for e in heatmap if e.intensity > 0}, reverse=True)


def current_streak(heatmap: Iterable[HeatmapEntry], today: date) -> int:
    """
    Count the current consecutive-day streak.

    Args:
        heatmap: Heatmap entries (any order)
        today: Reference day (injected clock)

    Returns:
        Streak length; 0 when neither today nor yesterday was active
    """
    active = _active_days(heatmap)
    if not active:
        return 0

    most_recent = active[0]
    if most_recent != today and most_recent != today - timedelta(days=1):
        logger.debug(f"Streak broken: last active {most_recent}, today {today}")
        return 0

    streak = 0
    for i, day in enumerate(active):
        if day != most_recent - timedelta(days=i):
            break
        streak += 1
    return streak


def carry_streak(window_streak: int, window: int, stored: int, new_day: bool) -> int:
    """
    Continue a streak past the heatmap window.

    The heatmap only keeps `window` days, so a run that fills it may be
    longer than the window. The stored streak carries the earlier days,
    plus one when the activity opened a new most recent day.

    Args:
        window_streak: Streak counted from the heatmap alone
        window: Heatmap retention size
        stored: Streak saved on the record before this update
        new_day: Whether the activity is newer than every stored day

    Returns:
        Streak including days that fell out of the window
    """
    if window_streak < window:
        return window_streak
    return max(window_streak, stored + int(new_day))


def longest_streak(heatmap: Iterable[HeatmapEntry]) -> int:
    """Longest run of consecutive active days within the heatmap window."""
    active = sorted(_active_days(heatmap))
    if not active:
        return 0

    best = run = 1
    for prev, day in zip(active, active[1:]):
        run = run + 1 if day - prev == timedelta(days=1) else 1
        best = max(best, run)
    return best

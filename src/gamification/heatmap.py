"""
Heatmap Aggregator.

Folds normalized activities into a per-day intensity calendar. The calendar
is a fixed-size ring: after every fold it is sorted newest first and cut to
the retention window, silently dropping the oldest days.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from loguru import logger

from src.core.models import ActivityRecord, HeatmapEntry

RETENTION_DAYS = 90
MAX_INTENSITY = 4


def combine_tooltips(existing: str | None, new: str | None) -> str:
    """Join same-day tooltips, one activity per line."""
    if not existing:
        return new or ""
    if not new:
        return existing
    return f"{existing}\n{new}"


def fold(
    heatmap: Iterable[HeatmapEntry],
    record: ActivityRecord,
    retention: int = RETENTION_DAYS,
    max_intensity: int = MAX_INTENSITY,
) -> tuple[HeatmapEntry, ...]:
    """
    Fold one activity into the heatmap.

    Same-day activity accumulates intensity (capped at max_intensity) and
    appends its tooltip on a new line; a new day is inserted with the
    record's own intensity.

    Args:
        heatmap: Existing entries, at most one per date
        record: Normalized activity
        retention: Number of most recent days to keep
        max_intensity: Intensity ceiling

    Returns:
        New heatmap, newest first, at most `retention` entries
    """
    by_date: dict[date, HeatmapEntry] = {entry.date: entry for entry in heatmap}

    existing = by_date.get(record.date)
    if existing is not None:
        by_date[record.date] = HeatmapEntry(
            date=record.date,
            intensity=min(max_intensity, existing.intensity + record.activity_points),
            tooltip=combine_tooltips(existing.tooltip, record.tooltip),
        )
    else:
        by_date[record.date] = HeatmapEntry(
            date=record.date,
            intensity=min(max_intensity, record.intensity),
            tooltip=record.tooltip,
        )

    ordered = sorted(by_date.values(), key=lambda e: e.date, reverse=True)
    if len(ordered) > retention:
        logger.debug(f"Heatmap retention: dropping {len(ordered) - retention} day(s) before {ordered[retention - 1].date}")
    return tuple(ordered[:retention])


# ============================================================================
# Activity summaries
# ============================================================================


@dataclass(frozen=True)
class RecentActivity:
    """Activity totals over the last week and month."""

    weekly_total: int
    weekly_average: float  # per day over 7 days
    monthly_total: int
    active_days: int  # days with activity in the last week


def recent_activity(heatmap: Sequence[HeatmapEntry], today: date) -> RecentActivity:
    """
    Summarize activity over the trailing 7 and 30 days, today included.

    Args:
        heatmap: Heatmap entries (any order)
        today: Reference day (injected clock)
    """
    week_start = today - timedelta(days=6)
    month_start = today - timedelta(days=29)

    last_week = [e for e in heatmap if week_start <= e.date <= today]
    last_month = [e for e in heatmap if month_start <= e.date <= today]

    weekly_total = sum(e.intensity for e in last_week)
    return RecentActivity(
        weekly_total=weekly_total,
        weekly_average=weekly_total / 7 if last_week else 0.0,
        monthly_total=sum(e.intensity for e in last_month),
        active_days=sum(1 for e in last_week if e.intensity > 0),
    )


def growth_rate(heatmap: Sequence[HeatmapEntry], min_days: int = 14) -> float:
    """
    Relative change in mean intensity between the older and newer half.

    Returns 0.0 when fewer than `min_days` entries exist or the older half
    had no activity.
    """
    if len(heatmap) < min_days:
        return 0.0

    chronological = sorted(heatmap, key=lambda e: e.date)
    mid = len(chronological) // 2
    first, second = chronological[:mid], chronological[mid:]

    first_avg = sum(e.intensity for e in first) / len(first)
    second_avg = sum(e.intensity for e in second) / len(second)
    if first_avg <= 0:
        return 0.0
    return (second_avg - first_avg) / first_avg


def calendar_window(heatmap: Sequence[HeatmapEntry], today: date, days: int = 14) -> list[HeatmapEntry]:
    """
    Dense day-by-day view of the last `days` days, oldest first.

    Days without activity are filled with zero-intensity entries.
    """
    by_date = {e.date: e for e in heatmap}
    window = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        window.append(by_date.get(day, HeatmapEntry(date=day, intensity=0)))
    return window

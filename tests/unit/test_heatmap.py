"""
Unit tests for the heatmap aggregator and activity summaries.

Run: pytest tests/unit/test_heatmap.py -v
"""

from datetime import date, timedelta

from src.core.models import ActivityKind, ActivityRecord, HeatmapEntry
from src.gamification.heatmap import (
    calendar_window,
    combine_tooltips,
    fold,
    growth_rate,
    recent_activity,
)


def _activity(day: date, points: int = 1, tooltip: str = "Lesson Completed") -> ActivityRecord:
    return ActivityRecord(
        kind=ActivityKind.LESSON_COMPLETED,
        roadmap_id="web_development",
        date=day,
        xp_earned=0,
        activity_points=points,
        intensity=min(points, 4),
        tooltip=tooltip,
    )


def _days(today: date, intensities: list[int]) -> list[HeatmapEntry]:
    """Entries ending today; intensities are given oldest first."""
    start = today - timedelta(days=len(intensities) - 1)
    return [HeatmapEntry(date=start + timedelta(days=i), intensity=v) for i, v in enumerate(intensities)]


class TestFold:
    """Folding activities into the calendar."""

    def test_new_day_inserted(self, today):
        heatmap = fold((), _activity(today, 2))
        assert heatmap == (HeatmapEntry(today, 2, "Lesson Completed"),)

    def test_same_day_accumulates_and_caps(self, today):
        heatmap = fold((), _activity(today, 3, "Project Submitted"))
        heatmap = fold(heatmap, _activity(today, 2, "Test Passed"))

        assert len(heatmap) == 1
        assert heatmap[0].intensity == 4
        assert heatmap[0].tooltip == "Project Submitted\nTest Passed"

    def test_sorted_newest_first(self, today):
        heatmap = ()
        for offset in (3, 0, 5, 1):
            heatmap = fold(heatmap, _activity(today - timedelta(days=offset)))
        dates = [e.date for e in heatmap]
        assert dates == sorted(dates, reverse=True)

    def test_retention_drops_oldest(self, today):
        heatmap = ()
        for offset in range(95):
            heatmap = fold(heatmap, _activity(today - timedelta(days=offset)))

        assert len(heatmap) == 90
        assert heatmap[0].date == today
        assert heatmap[-1].date == today - timedelta(days=89)

    def test_custom_retention(self, today):
        heatmap = ()
        for offset in range(5):
            heatmap = fold(heatmap, _activity(today - timedelta(days=offset)), retention=3)
        assert [e.date for e in heatmap] == [today, today - timedelta(days=1), today - timedelta(days=2)]

    def test_backdated_activity_outside_window_is_discarded(self, today):
        heatmap = ()
        for offset in range(90):
            heatmap = fold(heatmap, _activity(today - timedelta(days=offset)))
        heatmap = fold(heatmap, _activity(today - timedelta(days=200)))
        assert all(e.date >= today - timedelta(days=89) for e in heatmap)

    def test_input_not_mutated(self, today):
        original = (HeatmapEntry(today, 1, "Lesson Completed"),)
        fold(original, _activity(today, 1))
        assert original[0].intensity == 1


class TestCombineTooltips:
    def test_joins_with_newline(self):
        assert combine_tooltips("a", "b") == "a\nb"

    def test_empty_sides(self):
        assert combine_tooltips("", "b") == "b"
        assert combine_tooltips("a", None) == "a"
        assert combine_tooltips(None, None) == ""


class TestRecentActivity:
    def test_week_window_includes_today(self, today):
        heatmap = _days(today, [9, 1, 1, 1, 1, 1, 1, 1])  # oldest day is outside the week
        recent = recent_activity(heatmap, today)
        assert recent.weekly_total == 7
        assert recent.weekly_average == 1.0
        assert recent.active_days == 7

    def test_month_window(self, today):
        heatmap = [
            HeatmapEntry(today - timedelta(days=29), 2),
            HeatmapEntry(today - timedelta(days=30), 3),
        ]
        assert recent_activity(heatmap, today).monthly_total == 2

    def test_empty(self, today):
        recent = recent_activity([], today)
        assert recent.weekly_total == 0
        assert recent.weekly_average == 0.0


class TestGrowthRate:
    def test_too_few_days(self, today):
        assert growth_rate(_days(today, [1] * 13)) == 0.0

    def test_upward_trend(self, today):
        heatmap = _days(today, [1] * 7 + [2] * 7)
        assert growth_rate(heatmap) == 1.0

    def test_idle_first_half(self, today):
        assert growth_rate(_days(today, [0] * 7 + [3] * 7)) == 0.0


class TestCalendarWindow:
    def test_dense_oldest_first(self, today):
        heatmap = [HeatmapEntry(today, 3, "x"), HeatmapEntry(today - timedelta(days=2), 1)]
        window = calendar_window(heatmap, today, days=4)

        assert [e.date for e in window] == [today - timedelta(days=d) for d in (3, 2, 1, 0)]
        assert [e.intensity for e in window] == [0, 1, 0, 3]

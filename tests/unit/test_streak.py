"""
Unit tests for streak calculation.

Run: pytest tests/unit/test_streak.py -v
"""

from datetime import timedelta

from src.core.models import HeatmapEntry
from src.gamification.streak import carry_streak, current_streak, longest_streak


def _active(today, *offsets, intensity=1):
    return [HeatmapEntry(today - timedelta(days=o), intensity) for o in offsets]


class TestCurrentStreak:
    def test_empty_heatmap(self, today):
        assert current_streak([], today) == 0

    def test_active_today(self, today):
        assert current_streak(_active(today, 0, 1, 2), today) == 3

    def test_yesterday_keeps_streak_alive(self, today):
        assert current_streak(_active(today, 1, 2), today) == 2

    def test_gap_of_two_days_breaks(self, today):
        assert current_streak(_active(today, 2, 3, 4), today) == 0

    def test_counts_back_to_first_missing_day(self, today):
        assert current_streak(_active(today, 0, 1, 3, 4, 5), today) == 2

    def test_order_does_not_matter(self, today):
        assert current_streak(_active(today, 2, 0, 1), today) == 3

    def test_zero_intensity_gap_breaks_streak(self, today):
        heatmap = _active(today, 0, 1, 3) + _active(today, 2, intensity=0)
        assert current_streak(heatmap, today) == 2

    def test_old_history_ignored_without_recent_activity(self, today):
        assert current_streak(_active(today, *range(2, 40)), today) == 0

    def test_zero_intensity_days_are_inactive(self, today):
        heatmap = _active(today, 0) + _active(today, 1, intensity=0) + _active(today, 2)
        assert current_streak(heatmap, today) == 1

    def test_month_boundary(self, today):
        # 2024-03-01 back through 2024-02-28 (leap year)
        march_first = today.replace(day=1)
        heatmap = _active(march_first, 0, 1, 2)
        assert [e.date.isoformat() for e in heatmap] == ["2024-03-01", "2024-02-29", "2024-02-28"]
        assert current_streak(heatmap, march_first) == 3


class TestLongestStreak:
    def test_empty(self):
        assert longest_streak([]) == 0

    def test_finds_longest_run(self, today):
        heatmap = _active(today, 0, 1, 5, 6, 7, 8, 12)
        assert longest_streak(heatmap) == 4

    def test_single_day(self, today):
        assert longest_streak(_active(today, 10)) == 1


class TestCarryStreak:
    def test_short_run_uses_window_count(self):
        assert carry_streak(12, 90, stored=40, new_day=True) == 12

    def test_full_window_continues_stored_streak(self):
        assert carry_streak(90, 90, stored=95, new_day=True) == 96
        assert carry_streak(90, 90, stored=95, new_day=False) == 95

    def test_never_below_window_count(self):
        assert carry_streak(90, 90, stored=0, new_day=False) == 90

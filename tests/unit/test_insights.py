"""
Unit tests for progress insights.

Run: pytest tests/unit/test_insights.py -v
"""

from datetime import timedelta

from src.core.models import HeatmapEntry, ProgressRecord
from src.gamification.insights import InsightKind, generate_insights


def _record(**fields):
    return ProgressRecord(user_id="u", roadmap_id="r", **fields)


def _kinds(insights):
    return [i.kind for i in insights]


class TestStreakInsights:
    def test_no_streak_motivates(self, today):
        insights = generate_insights(_record(), today)
        assert _kinds(insights) == [InsightKind.MOTIVATION]
        assert insights[0].title == "Start Your Streak"

    def test_streak_power(self, today):
        insights = generate_insights(_record(current_streak=7, longest_streak=7), today)
        assert insights[0].kind is InsightKind.STREAK
        assert "7-day" in insights[0].message

    def test_short_streak_is_silent(self, today):
        assert generate_insights(_record(current_streak=3, longest_streak=3), today) == []


class TestActivityInsight:
    def test_high_performer(self, today):
        heatmap = tuple(HeatmapEntry(today - timedelta(days=d), 1) for d in range(5))
        insights = generate_insights(_record(current_streak=5, longest_streak=5, heatmap=heatmap), today)
        assert _kinds(insights) == [InsightKind.ACTIVITY]

    def test_old_activity_does_not_count(self, today):
        heatmap = (HeatmapEntry(today - timedelta(days=7), 4), HeatmapEntry(today, 4))
        insights = generate_insights(_record(current_streak=1, longest_streak=1, heatmap=heatmap), today)
        assert InsightKind.ACTIVITY not in _kinds(insights)


class TestPerformanceInsight:
    def test_test_master(self, today):
        insights = generate_insights(_record(current_streak=1, test_scores=(90.0, 85.0, 80.0)), today)
        assert _kinds(insights) == [InsightKind.PERFORMANCE]
        assert insights[0].message == "Excellent 85% average test score!"

    def test_needs_three_tests(self, today):
        insights = generate_insights(_record(current_streak=1, test_scores=(100.0, 100.0)), today)
        assert InsightKind.PERFORMANCE not in _kinds(insights)


class TestGrowthInsight:
    def test_rising_star(self, today):
        heatmap = tuple(
            HeatmapEntry(today - timedelta(days=d), 1 if d >= 20 else 2)
            for d in range(10, 30)
        )
        insights = generate_insights(_record(current_streak=1, heatmap=heatmap), today)
        assert _kinds(insights) == [InsightKind.GROWTH]

    def test_fixed_order(self, today):
        heatmap = tuple(HeatmapEntry(today - timedelta(days=d), 1 if d >= 7 else 3) for d in range(14))
        record = _record(current_streak=14, longest_streak=14, heatmap=heatmap, test_scores=(95.0, 95.0, 95.0))
        assert _kinds(generate_insights(record, today)) == [
            InsightKind.STREAK,
            InsightKind.ACTIVITY,
            InsightKind.PERFORMANCE,
            InsightKind.GROWTH,
        ]

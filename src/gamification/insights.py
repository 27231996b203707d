"""
Progress insights.

Structured motivational insights derived from a ProgressRecord. Each
insight carries a stable `kind` so the presentation layer can localize and
style it; the English title/message are defaults only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from src.core.models import ProgressRecord
from src.gamification.heatmap import growth_rate, recent_activity

STREAK_POWER_DAYS = 7
HIGH_PERFORMER_WEEKLY_TOTAL = 5
TEST_MASTER_MIN_TESTS = 3
TEST_MASTER_AVERAGE = 85
RISING_STAR_GROWTH = 0.2


class InsightKind(str, Enum):
    STREAK = "streak"
    MOTIVATION = "motivation"
    ACTIVITY = "activity"
    PERFORMANCE = "performance"
    GROWTH = "growth"


@dataclass(frozen=True)
class Insight:
    kind: InsightKind
    icon: str
    title: str
    message: str


def generate_insights(record: ProgressRecord, today: date) -> list[Insight]:
    """
    Derive insights for a learner's roadmap progress.

    Args:
        record: Current progress record
        today: Reference day (injected clock)

    Returns:
        Insights in a fixed order: streak, activity, performance, growth
    """
    insights: list[Insight] = []

    if record.current_streak >= STREAK_POWER_DAYS:
        insights.append(Insight(
            InsightKind.STREAK, "🔥", "Streak Power!",
            f"You're on a {record.current_streak}-day learning streak!",
        ))
    elif record.current_streak == 0:
        insights.append(Insight(
            InsightKind.MOTIVATION, "💪", "Start Your Streak",
            "Complete a lesson today to start your learning streak!",
        ))

    recent = recent_activity(record.heatmap, today)
    if recent.weekly_total >= HIGH_PERFORMER_WEEKLY_TOTAL:
        insights.append(Insight(
            InsightKind.ACTIVITY, "⚡", "High Performer",
            "5+ activity points logged this week!",
        ))

    average = record.average_test_score
    if len(record.test_scores) >= TEST_MASTER_MIN_TESTS and average is not None and average >= TEST_MASTER_AVERAGE:
        insights.append(Insight(
            InsightKind.PERFORMANCE, "🎯", "Test Master",
            f"Excellent {round(average)}% average test score!",
        ))

    if growth_rate(record.heatmap) > RISING_STAR_GROWTH:
        insights.append(Insight(
            InsightKind.GROWTH, "📈", "Rising Star",
            "Your learning activity is trending upward!",
        ))

    return insights

"""
Activity Normalizer.

Converts an ActivityEvent into the canonical ActivityRecord carrying the
heatmap point weight, clamped intensity and a human-readable tooltip.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from loguru import logger

from src.core.errors import ValidationError
from src.core.models import ActivityEvent, ActivityKind, ActivityRecord

MAX_INTENSITY = 4

# Step completion XP (time-based component + test bonus)
MINUTES_PER_XP = 5
HIGH_SCORE_BONUS = 50
BASE_COMPLETION_BONUS = 25
HIGH_SCORE_THRESHOLD = 80


@dataclass(frozen=True)
class ActivityWeight:
    """Heatmap weight and label for an activity kind."""

    points: int
    label: str


ACTIVITY_WEIGHTS: dict[ActivityKind, ActivityWeight] = {
    ActivityKind.LESSON_COMPLETED: ActivityWeight(1, "Lesson Completed"),
    ActivityKind.TEST_PASSED: ActivityWeight(2, "Test Passed"),
    ActivityKind.PROJECT_SUBMITTED: ActivityWeight(3, "Project Submitted"),
    ActivityKind.STREAK_MAINTAINED: ActivityWeight(1, "Daily Streak"),
    ActivityKind.BADGE_EARNED: ActivityWeight(2, "Badge Earned"),
    ActivityKind.ROADMAP_COMPLETED: ActivityWeight(4, "Roadmap Completed"),
    ActivityKind.PERFECT_SCORE: ActivityWeight(3, "Perfect Test Score"),
    ActivityKind.HELP_GIVEN: ActivityWeight(1, "Helped Community"),
}


def validate_weights(weights: dict[ActivityKind, ActivityWeight]) -> None:
    """
    Check that every activity kind carries a weight.

    Raises:
        ValueError: If a kind is missing from the table
    """
    missing = [kind.value for kind in ActivityKind if kind not in weights]
    if missing:
        raise ValueError(f"No heatmap weight for activity kinds: {missing}")


validate_weights(ACTIVITY_WEIGHTS)


def weight_for(kind: ActivityKind | str) -> ActivityWeight:
    """
    Look up the heatmap weight for an activity kind.

    Raises:
        ValidationError: If the kind is not part of the closed set
    """
    resolved = ActivityKind.parse(kind)
    try:
        return ACTIVITY_WEIGHTS[resolved]
    except KeyError:
        raise ValidationError(f"No weight registered for activity kind {resolved.value}") from None


def clamp_intensity(points: int, max_intensity: int = MAX_INTENSITY) -> int:
    """Map activity points onto the 1..max heatmap scale."""
    return max(1, min(max_intensity, points))


def build_tooltip(
    label: str,
    xp_earned: int = 0,
    test_score: float | None = None,
    time_spent_minutes: int | None = None,
) -> str:
    """
    Compose the heatmap tooltip for one activity.

    Example: "Test Passed (+120 XP) (85% score) (30 mins)"
    """
    tooltip = label
    if xp_earned:
        tooltip += f" (+{xp_earned} XP)"
    if test_score is not None:
        tooltip += f" ({round(test_score)}% score)"
    if time_spent_minutes:
        tooltip += f" ({time_spent_minutes} mins)"
    return tooltip


def normalize(event: ActivityEvent, max_intensity: int = MAX_INTENSITY) -> ActivityRecord:
    """
    Normalize an activity event.

    Args:
        event: Validated activity event
        max_intensity: Heatmap ceiling used to clamp the raw intensity

    Returns:
        ActivityRecord dated on the event's calendar day

    Raises:
        ValidationError: If the event kind is unknown
    """
    weight = weight_for(event.kind)
    record = ActivityRecord(
        kind=ActivityKind.parse(event.kind),
        roadmap_id=event.roadmap_id,
        date=event.occurred_on,
        xp_earned=event.xp_earned,
        activity_points=weight.points,
        intensity=clamp_intensity(weight.points, max_intensity),
        tooltip=build_tooltip(
            weight.label,
            xp_earned=event.xp_earned,
            test_score=event.test_score,
            time_spent_minutes=event.time_spent_minutes,
        ),
    )
    logger.debug(f"Normalized {record.kind.value} on {record.date}: {record.activity_points} pts")
    return record


def step_completion_xp(time_spent_minutes: int | None, test_score: float | None = None) -> int:
    """
    XP awarded for completing a roadmap step.

    One XP per five minutes of study, plus a completion bonus that doubles
    when the step's checkpoint score reaches 80%.

    Args:
        time_spent_minutes: Minutes spent on the step
        test_score: Checkpoint percentage, if the step had a test

    Returns:
        XP to credit
    """
    minutes = max(0, time_spent_minutes or 0)
    bonus = HIGH_SCORE_BONUS if (test_score or 0) >= HIGH_SCORE_THRESHOLD else BASE_COMPLETION_BONUS
    return math.floor(minutes / MINUTES_PER_XP) + bonus

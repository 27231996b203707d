"""
Progress pipeline.

Threads an explicit ProgressRecord through normalize -> heatmap fold ->
streak -> counters -> milestone detection. Every stage is a pure function of
its inputs; persisting the returned record and serializing updates per
(user, roadmap) key is the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from loguru import logger

from src.core.errors import ValidationError
from src.core.models import (
    SCORED_KINDS,
    STEP_COMPLETING_KINDS,
    ActivityEvent,
    ActivityKind,
    ActivityRecord,
    ProgressRecord,
    validate_record,
)
from src.gamification.heatmap import MAX_INTENSITY, RETENTION_DAYS, fold
from src.gamification.milestones import Milestone, MilestoneDetector
from src.gamification.normalizer import normalize
from src.gamification.streak import carry_streak, current_streak


@dataclass(frozen=True)
class ProgressUpdate:
    """Outcome of applying one activity."""

    record: ProgressRecord
    activity: ActivityRecord
    milestones: list[Milestone] = field(default_factory=list)

    @property
    def xp_gained(self) -> int:
        return self.activity.xp_earned


def new_record(user_id: str, roadmap_id: str) -> ProgressRecord:
    """Empty record, created on the first activity for a roadmap."""
    if not user_id or not roadmap_id:
        raise ValidationError("user_id and roadmap_id are required")
    return ProgressRecord(user_id=user_id, roadmap_id=roadmap_id)


def reset_record(record: ProgressRecord) -> ProgressRecord:
    """Wipe a record back to its empty state (explicit user data wipe)."""
    logger.info(f"Resetting progress for {record.user_id}/{record.roadmap_id}")
    return new_record(record.user_id, record.roadmap_id)


class ProgressTracker:
    """
    Applies activities to progress records.

    Args:
        retention_days: Heatmap ring size
        max_intensity: Heatmap per-day ceiling
        detector: Milestone detector (static catalog by default)
    """

    def __init__(
        self,
        retention_days: int = RETENTION_DAYS,
        max_intensity: int = MAX_INTENSITY,
        detector: MilestoneDetector | None = None,
    ):
        self.retention_days = retention_days
        self.max_intensity = max_intensity
        self.detector = detector or MilestoneDetector()

    def apply(self, record: ProgressRecord, event: ActivityEvent, today: date) -> ProgressUpdate:
        """
        Apply one activity event.

        Args:
            record: Current record for (user, event.roadmap_id)
            event: Activity to apply
            today: Current day from the injected clock

        Returns:
            ProgressUpdate with the new record and any milestones

        Raises:
            ValidationError: If the event belongs to another roadmap or is
                dated after today
            StateInvariantViolation: If the incoming record is corrupted
        """
        if event.roadmap_id != record.roadmap_id:
            raise ValidationError(
                "Activity roadmap does not match progress record",
                [f"event roadmap {event.roadmap_id!r} != record roadmap {record.roadmap_id!r}"],
            )
        if event.occurred_on > today:
            raise ValidationError(
                "Activity is dated in the future",
                [f"occurred_on {event.occurred_on.isoformat()} is after today {today.isoformat()}"],
            )
        validate_record(record, self.max_intensity)

        activity = normalize(event, self.max_intensity)
        heatmap = fold(record.heatmap, activity, self.retention_days, self.max_intensity)
        new_day = not record.heatmap or activity.date > max(e.date for e in record.heatmap)
        streak = carry_streak(current_streak(heatmap, today), self.retention_days, record.current_streak, new_day)

        badges = record.badges
        if event.badge_earned:
            badges = badges | {event.badge_earned}
        steps = record.completed_steps
        if event.step_id and event.kind in STEP_COMPLETING_KINDS:
            steps = steps | {event.step_id}
        scores = record.test_scores
        if event.test_score is not None and event.kind in SCORED_KINDS:
            scores = scores + (float(event.test_score),)
        roadmaps = record.completed_roadmaps + (1 if event.kind is ActivityKind.ROADMAP_COMPLETED else 0)

        after = record.evolve(
            total_xp=record.total_xp + event.xp_earned,
            current_streak=streak,
            longest_streak=max(record.longest_streak, streak),
            heatmap=heatmap,
            badges=badges,
            completed_steps=steps,
            test_scores=scores,
            completed_roadmaps=roadmaps,
        )

        milestones = self.detector.detect(record, after, event)
        logger.debug(
            f"{record.user_id}/{record.roadmap_id}: {event.kind.value} "
            f"xp {record.total_xp}->{after.total_xp}, streak {record.current_streak}->{streak}"
        )
        return ProgressUpdate(record=after, activity=activity, milestones=milestones)

    def refresh_streak(self, record: ProgressRecord, today: date) -> ProgressRecord:
        """Recompute the streak for a new day without recording activity."""
        streak = carry_streak(current_streak(record.heatmap, today), self.retention_days, record.current_streak, False)
        if streak == record.current_streak:
            return record
        return record.evolve(current_streak=streak, longest_streak=max(record.longest_streak, streak))


_default_tracker = ProgressTracker()


def apply_activity(record: ProgressRecord, event: ActivityEvent, today: date) -> ProgressUpdate:
    """Apply one activity with default retention and catalog."""
    return _default_tracker.apply(record, event, today)

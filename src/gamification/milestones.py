"""
Milestone Detector.

Compares progress before and after a single activity against the threshold
catalog. Counter categories (xp, streak, badge, roadmap) fire a threshold
only when the counter crosses it, so replaying an event against a state
that already includes it fires nothing. Test-score milestones are
performance based and fire on every test or project attempt that meets
the bar.

One event per detect() call: when several events are batched, detect each
one against its own before/after pair.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from loguru import logger

from src.core.models import SCORED_KINDS, ActivityEvent, ProgressRecord, validate_record
from src.gamification.catalog import THRESHOLDS, MilestoneCategory, MilestoneThreshold


@dataclass(frozen=True)
class Milestone:
    """A detected threshold crossing."""

    category: MilestoneCategory
    threshold: int
    title: str
    emoji: str
    description: str
    observed_value: float
    is_performance_based: bool = False

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.category.priority, self.threshold)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "category": self.category.value,
            "threshold": self.threshold,
            "title": self.title,
            "emoji": self.emoji,
            "description": self.description,
            "observed_value": self.observed_value,
            "is_performance_based": self.is_performance_based,
        }


def _milestone(row: MilestoneThreshold, value: float) -> Milestone:
    return Milestone(
        category=row.category,
        threshold=row.threshold,
        title=row.title,
        emoji=row.emoji,
        description=row.describe(value),
        observed_value=value,
        is_performance_based=row.category.is_performance_based,
    )


def crossed(
    thresholds: Sequence[MilestoneThreshold],
    before: float,
    after: float,
) -> list[MilestoneThreshold]:
    """Thresholds t with before < t <= after, ascending."""
    if after <= before:
        return []
    return [t for t in thresholds if before < t.threshold <= after]


class MilestoneDetector:
    """
    Detects newly crossed milestones for one activity.

    Args:
        catalog: Threshold tables per category (defaults to the static catalog)
    """

    def __init__(self, catalog: Mapping[MilestoneCategory, Sequence[MilestoneThreshold]] | None = None):
        self.catalog = catalog or THRESHOLDS

    def detect(
        self,
        before: ProgressRecord,
        after: ProgressRecord,
        event: ActivityEvent,
    ) -> list[Milestone]:
        """
        Emit milestones crossed between `before` and `after`.

        Args:
            before: Record prior to the event
            after: Record including the event
            event: The triggering activity

        Returns:
            Milestones ordered by category priority, then threshold

        Raises:
            StateInvariantViolation: If either record is corrupted
        """
        validate_record(before)
        validate_record(after)

        # XP before the event's own contribution
        xp_before = max(before.total_xp, after.total_xp - event.xp_earned)

        counters = {
            MilestoneCategory.XP: (xp_before, after.total_xp),
            MilestoneCategory.STREAK: (before.current_streak, after.current_streak),
            MilestoneCategory.BADGE: (before.badge_count, after.badge_count),
            MilestoneCategory.ROADMAP: (before.completed_roadmaps, after.completed_roadmaps),
        }

        found: list[Milestone] = []
        for category, (old, new) in counters.items():
            for row in crossed(self.catalog.get(category, ()), old, new):
                found.append(_milestone(row, new))

        if event.test_score is not None and event.kind in SCORED_KINDS:
            for row in self.catalog.get(MilestoneCategory.TEST, ()):
                if event.test_score >= row.threshold:
                    found.append(_milestone(row, event.test_score))

        found.sort(key=lambda m: m.sort_key)
        if found:
            logger.info(
                f"{after.user_id}/{after.roadmap_id}: {len(found)} milestone(s) "
                f"[{', '.join(f'{m.category.value}:{m.threshold}' for m in found)}]"
            )
        return found


_default_detector = MilestoneDetector()


def detect(before: ProgressRecord, after: ProgressRecord, event: ActivityEvent) -> list[Milestone]:
    """Detect milestones with the static catalog."""
    return _default_detector.detect(before, after, event)


# ============================================================================
# Next milestone progress
# ============================================================================


@dataclass(frozen=True)
class MilestoneProgress:
    """Progress towards the next uncrossed threshold of a category."""

    category: MilestoneCategory
    threshold: int
    title: str
    emoji: str
    current: int
    progress: float  # 0-1
    remaining: int


def next_milestones(
    record: ProgressRecord,
    catalog: Mapping[MilestoneCategory, Sequence[MilestoneThreshold]] | None = None,
) -> list[MilestoneProgress]:
    """
    Next xp, streak and badge milestones, closest to completion first.

    Categories whose thresholds are all crossed are omitted.
    """
    catalog = catalog or THRESHOLDS
    current_values = {
        MilestoneCategory.XP: record.total_xp,
        MilestoneCategory.STREAK: record.current_streak,
        MilestoneCategory.BADGE: record.badge_count,
    }

    upcoming = []
    for category, current in current_values.items():
        nxt = next((t for t in catalog.get(category, ()) if t.threshold > current), None)
        if nxt is None:
            continue
        upcoming.append(MilestoneProgress(
            category=category,
            threshold=nxt.threshold,
            title=nxt.title,
            emoji=nxt.emoji,
            current=current,
            progress=current / nxt.threshold,
            remaining=nxt.threshold - current,
        ))

    return sorted(upcoming, key=lambda p: p.progress, reverse=True)

"""
Threshold Catalog - static milestone tables.

Each category holds strictly increasing thresholds with a display title,
emoji and description template. Templates are rendered with
`threshold` and `value` (the observed counter).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

CATALOG_VERSION = "2024.1"


class MilestoneCategory(str, Enum):
    """Milestone categories, declared in presentation priority order."""

    XP = "xp"
    STREAK = "streak"
    BADGE = "badge"
    ROADMAP = "roadmap"
    TEST = "test"

    @property
    def priority(self) -> int:
        """Position in the fixed celebration order (xp first)."""
        return list(MilestoneCategory).index(self)

    @property
    def is_performance_based(self) -> bool:
        """Performance milestones may fire on every qualifying attempt."""
        return self is MilestoneCategory.TEST


@dataclass(frozen=True)
class MilestoneThreshold:
    """Static descriptor for one milestone."""

    category: MilestoneCategory
    threshold: int
    title: str
    emoji: str
    description_template: str

    def describe(self, value: float | int | None = None) -> str:
        """Render the description for an observed value."""
        observed = self.threshold if value is None else value
        if isinstance(observed, float) and observed.is_integer():
            observed = int(observed)
        return self.description_template.format(threshold=self.threshold, value=observed)


def _tier(category: MilestoneCategory, rows: list[tuple[int, str, str, str]]) -> tuple[MilestoneThreshold, ...]:
    return tuple(MilestoneThreshold(category, t, title, emoji, desc) for t, title, emoji, desc in rows)


THRESHOLDS: dict[MilestoneCategory, tuple[MilestoneThreshold, ...]] = {
    MilestoneCategory.XP: _tier(MilestoneCategory.XP, [
        (100, "First Steps", "🚀", "Earned your first {threshold} XP!"),
        (500, "Getting Started", "⭐", "Reached the {threshold} XP milestone!"),
        (1000, "Knowledge Seeker", "🎯", "Hit the 1K XP mark!"),
        (2500, "Learning Enthusiast", "🔥", "Blazed past 2.5K XP!"),
        (5000, "Skill Builder", "💪", "Powered through 5K XP!"),
        (10000, "Learning Master", "👑", "Achieved 10K XP mastery!"),
    ]),
    MilestoneCategory.STREAK: _tier(MilestoneCategory.STREAK, [
        (3, "Getting Consistent", "📈", "{threshold}-day learning streak!"),
        (7, "Week Warrior", "🗓️", "{threshold}-day learning streak!"),
        (14, "Two Week Champion", "🏆", "{threshold}-day learning streak!"),
        (30, "Monthly Master", "🌟", "{threshold}-day learning streak!"),
        (60, "Consistency King", "👑", "{threshold}-day learning streak!"),
        (100, "Legendary Learner", "🎖️", "{threshold}-day learning streak!"),
    ]),
    MilestoneCategory.BADGE: _tier(MilestoneCategory.BADGE, [
        (1, "First Badge", "🎖️", "Earned your first skill badge!"),
        (5, "Badge Collector", "🏅", "Collected {threshold} skill badges!"),
        (10, "Skill Specialist", "⚡", "Earned {threshold} skill badges!"),
        (20, "Multi-Skilled", "🌈", "Mastered {threshold} different skills!"),
        (50, "Badge Master", "👑", "Incredible! {threshold} skill badges!"),
    ]),
    MilestoneCategory.ROADMAP: _tier(MilestoneCategory.ROADMAP, [
        (1, "First Journey Complete", "🎯", "Completed your first roadmap!"),
        (3, "Path Explorer", "🗺️", "Completed {threshold} learning paths!"),
        (5, "Journey Master", "🧭", "Completed {threshold} roadmaps!"),
        (10, "Learning Nomad", "🎒", "Completed {threshold} roadmaps!"),
    ]),
    MilestoneCategory.TEST: _tier(MilestoneCategory.TEST, [
        (90, "Perfectionist", "💯", "Scored {value}% on a test!"),
        (95, "Excellence Achieved", "⭐", "Scored {value}% on a test!"),
        (100, "Perfect Score", "🎯", "Achieved a perfect score!"),
    ]),
}


def thresholds_for(category: MilestoneCategory) -> tuple[MilestoneThreshold, ...]:
    """Thresholds of a category in ascending order."""
    return THRESHOLDS[category]


def validate_catalog(catalog: dict[MilestoneCategory, tuple[MilestoneThreshold, ...]]) -> None:
    """
    Check that every category is strictly increasing and self-consistent.

    Raises:
        ValueError: If a category repeats or reorders thresholds
    """
    for category, rows in catalog.items():
        values = [row.threshold for row in rows]
        if any(b <= a for a, b in zip(values, values[1:])):
            raise ValueError(f"Thresholds for {category.value} must be strictly increasing: {values}")
        if any(row.category is not category for row in rows):
            raise ValueError(f"Threshold filed under the wrong category: {category.value}")


validate_catalog(THRESHOLDS)

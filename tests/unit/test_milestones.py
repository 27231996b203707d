"""
Unit tests for the threshold catalog and milestone detection.

Run: pytest tests/unit/test_milestones.py -v
"""

import pytest

from src.core.errors import StateInvariantViolation
from src.core.models import ActivityKind, HeatmapEntry, ProgressRecord
from src.gamification.catalog import THRESHOLDS, MilestoneCategory, MilestoneThreshold, validate_catalog
from src.gamification.milestones import MilestoneDetector, crossed, detect, next_milestones


class TestCatalog:
    def test_strictly_increasing(self):
        for rows in THRESHOLDS.values():
            values = [r.threshold for r in rows]
            assert values == sorted(set(values))

    def test_rejects_reordered_thresholds(self):
        bad = {
            MilestoneCategory.XP: (
                MilestoneThreshold(MilestoneCategory.XP, 500, "b", "x", ""),
                MilestoneThreshold(MilestoneCategory.XP, 100, "a", "x", ""),
            )
        }
        with pytest.raises(ValueError):
            validate_catalog(bad)

    def test_priority_order(self):
        assert [c.value for c in sorted(MilestoneCategory, key=lambda c: c.priority)] == [
            "xp", "streak", "badge", "roadmap", "test",
        ]

    def test_describe_renders_observed_value(self):
        perfectionist = THRESHOLDS[MilestoneCategory.TEST][0]
        assert perfectionist.describe(92.0) == "Scored 92% on a test!"


class TestCrossed:
    def test_half_open_interval(self):
        xp = THRESHOLDS[MilestoneCategory.XP]
        assert [t.threshold for t in crossed(xp, 90, 100)] == [100]
        assert crossed(xp, 100, 150) == []

    def test_multiple_in_one_jump(self):
        xp = THRESHOLDS[MilestoneCategory.XP]
        assert [t.threshold for t in crossed(xp, 0, 1200)] == [100, 500, 1000]

    def test_xp_jump_emits_each_threshold_once(self, empty_record, make_event):
        before = empty_record.evolve(total_xp=450)
        after = empty_record.evolve(total_xp=1200)
        milestones = detect(before, after, make_event(xp_earned=750))
        assert [(m.category, m.threshold) for m in milestones] == [
            (MilestoneCategory.XP, 500),
            (MilestoneCategory.XP, 1000),
        ]

    def test_decrease_fires_nothing(self):
        assert crossed(THRESHOLDS[MilestoneCategory.STREAK], 7, 0) == []


class TestDetect:
    """Milestones between before/after snapshots."""

    def test_xp_threshold(self, empty_record, make_event):
        before = empty_record.evolve(total_xp=90)
        event = make_event(ActivityKind.LESSON_COMPLETED, xp_earned=20)
        after = before.evolve(total_xp=110)

        milestones = detect(before, after, event)
        assert [(m.category, m.threshold) for m in milestones] == [(MilestoneCategory.XP, 100)]
        assert milestones[0].title == "First Steps"
        assert milestones[0].observed_value == 110

    def test_replay_is_idempotent(self, empty_record, make_event):
        event = make_event(ActivityKind.LESSON_COMPLETED, xp_earned=20)
        already_applied = empty_record.evolve(total_xp=110)
        assert detect(already_applied, already_applied, event) == []

    def test_xp_measured_from_before_event_contribution(self, empty_record, make_event):
        # before already reflects part of a batch; only this event's 20 XP is new
        before = empty_record.evolve(total_xp=480)
        after = empty_record.evolve(total_xp=510)
        event = make_event(ActivityKind.TEST_PASSED, xp_earned=20)

        milestones = detect(before, after, event)
        assert [m.threshold for m in milestones] == [500]

    def test_streak_badge_roadmap(self, empty_record, make_event):
        before = empty_record.evolve(current_streak=2, badges=frozenset())
        after = before.evolve(current_streak=3, badges=frozenset({"css"}), completed_roadmaps=1)
        event = make_event(ActivityKind.ROADMAP_COMPLETED, badge_earned="css")

        milestones = detect(before, after, event)
        assert [(m.category.value, m.threshold) for m in milestones] == [
            ("streak", 3),
            ("badge", 1),
            ("roadmap", 1),
        ]

    def test_test_score_fires_every_attempt(self, empty_record, make_event):
        event = make_event(ActivityKind.TEST_PASSED, test_score=96)
        record = empty_record.evolve(test_scores=(96.0,))

        first = detect(empty_record, record, event)
        again = detect(record, record.evolve(test_scores=(96.0, 96.0)), event)

        assert [m.threshold for m in first] == [90, 95]
        assert [m.threshold for m in again] == [90, 95]
        assert all(m.is_performance_based for m in first)
        assert first[0].description == "Scored 96% on a test!"

    def test_perfect_score_fires_all_test_tiers(self, empty_record, make_event):
        event = make_event(ActivityKind.PERFECT_SCORE, test_score=100)
        milestones = detect(empty_record, empty_record, event)
        assert [m.threshold for m in milestones] == [90, 95, 100]

    def test_ordering_by_priority_then_threshold(self, empty_record, make_event):
        before = empty_record.evolve(total_xp=0, current_streak=6)
        after = before.evolve(total_xp=600, current_streak=7)
        event = make_event(ActivityKind.TEST_PASSED, xp_earned=600, test_score=90)

        milestones = detect(before, after, event)
        assert [(m.category.value, m.threshold) for m in milestones] == [
            ("xp", 100),
            ("xp", 500),
            ("streak", 7),
            ("test", 90),
        ]

    def test_corrupted_record_rejected(self, empty_record, make_event):
        corrupted = empty_record.evolve(total_xp=-1)
        with pytest.raises(StateInvariantViolation):
            detect(corrupted, empty_record, make_event())

    def test_duplicate_heatmap_dates_rejected(self, empty_record, make_event, today):
        corrupted = empty_record.evolve(heatmap=(HeatmapEntry(today, 1), HeatmapEntry(today, 2)))
        with pytest.raises(StateInvariantViolation, match="Corrupted progress record"):
            detect(empty_record, corrupted, make_event())

    def test_custom_catalog(self, empty_record, make_event):
        catalog = {MilestoneCategory.XP: (MilestoneThreshold(MilestoneCategory.XP, 10, "Ten", "🔟", "{threshold} XP"),)}
        detector = MilestoneDetector(catalog)
        milestones = detector.detect(empty_record, empty_record.evolve(total_xp=15), make_event(xp_earned=15))
        assert [m.title for m in milestones] == ["Ten"]


class TestNextMilestones:
    def test_closest_first(self):
        record = ProgressRecord("u", "r", total_xp=450, current_streak=1, badges=frozenset({"a"}))
        upcoming = next_milestones(record)

        assert [(p.category.value, p.threshold) for p in upcoming] == [
            ("xp", 500),
            ("streak", 3),
            ("badge", 5),
        ]
        assert upcoming[0].remaining == 50
        assert upcoming[0].progress == pytest.approx(0.9)

    def test_exhausted_category_omitted(self):
        record = ProgressRecord("u", "r", total_xp=20000)
        assert MilestoneCategory.XP not in {p.category for p in next_milestones(record)}

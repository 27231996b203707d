"""
Unit tests for ProgressService (store + clock + pipeline).

Run: pytest tests/unit/test_progress_service.py -v
"""

import pytest

from src.assessment.base import parse_submission
from src.assessment.evaluator import CheckpointEvaluator
from src.core.errors import ValidationError
from src.core.models import ActivityKind
from src.delivery import InMemoryProgressStore, ProgressService
from src.diagnostic import DiagnosticEngine
from src.gamification.insights import InsightKind
from src.gamification.progress import ProgressTracker


@pytest.fixture
def store():
    return InMemoryProgressStore()


@pytest.fixture
def service(store, fixed_clock):
    return ProgressService(store, clock=fixed_clock)


class TestRecordActivity:
    def test_persists_and_logs(self, service, store, make_event):
        update = service.record_activity("learner-1", make_event(xp_earned=120))

        assert store.load("learner-1", "web_development") == update.record
        assert [e.xp_earned for e in store.history("learner-1", "web_development")] == [120]
        assert [m.threshold for m in update.milestones] == [100]

    def test_streak_across_days(self, service, fixed_clock, make_event):
        for _ in range(3):
            update = service.record_activity("learner-1", make_event(occurred_on=fixed_clock.today()))
            fixed_clock.advance()

        assert update.record.current_streak == 3
        assert [m.title for m in update.milestones] == ["Getting Consistent"]

    def test_invalid_event_leaves_store_untouched(self, service, store, make_event):
        with pytest.raises(ValidationError):
            service.record_activity("", make_event())
        assert store.keys() == []

    def test_custom_tracker(self, store, fixed_clock, make_event):
        service = ProgressService(store, clock=fixed_clock, tracker=ProgressTracker(max_intensity=2))
        update = service.record_activity("learner-1", make_event(ActivityKind.ROADMAP_COMPLETED))
        assert update.record.heatmap[0].intensity == 2


class TestRecordEvaluation:
    def test_passed_test_recorded(self, service):
        evaluator = CheckpointEvaluator()
        result = evaluator.evaluate_by_id(
            "css-layout-mcq",
            parse_submission({"test_id": "css-layout-mcq", "answers": {"1": 1, "2": 2, "3": 1}, "time_spent_minutes": 10}),
        )
        update = service.record_evaluation("learner-1", result, "web_development", "web_development-2")

        assert update.activity.kind is ActivityKind.PERFECT_SCORE
        assert update.record.total_xp == 2 + 50
        assert update.record.completed_steps == frozenset({"web_development-2"})
        assert update.record.test_scores == (100.0,)
        assert [m.threshold for m in update.milestones if m.category.value == "test"] == [90, 95, 100]

    def test_failed_test_records_nothing(self, service, store):
        evaluator = CheckpointEvaluator()
        result = evaluator.evaluate_by_id("css-layout-mcq", parse_submission({"test_id": "css-layout-mcq"}))

        assert service.record_evaluation("learner-1", result, "web_development") is None
        assert store.keys() == []


class TestRecordDiagnostic:
    def test_diagnostic_counts_as_lesson(self, service):
        analysis = DiagnosticEngine().score_by_id("business", {"biz_1": 0, "biz_2": 2, "biz_3": 1})
        update = service.record_diagnostic("learner-1", analysis, "digital_marketing", time_spent_minutes=10)

        assert update.activity.kind is ActivityKind.LESSON_COMPLETED
        assert update.record.total_xp == 2 + 50
        # diagnostic scores stay out of the test average and test milestones
        assert update.record.test_scores == ()
        assert all(m.category.value != "test" for m in update.milestones)


class TestSummary:
    def test_summary_for_active_learner(self, service, fixed_clock, make_event):
        for offset in range(7):
            if offset:
                fixed_clock.advance()
            service.record_activity("learner-1", make_event(occurred_on=fixed_clock.today(), xp_earned=20))

        summary = service.summary("learner-1", "web_development", calendar_days=10)

        assert summary.record.current_streak == 7
        assert summary.recent.weekly_total == 7
        assert [i.kind for i in summary.insights] == [InsightKind.STREAK, InsightKind.ACTIVITY]
        assert len(summary.calendar) == 10
        assert [e.intensity for e in summary.calendar] == [0, 0, 0] + [1] * 7
        assert [(p.category.value, p.threshold) for p in summary.next_milestones] == [
            ("streak", 14),
            ("xp", 500),
            ("badge", 1),
        ]

    def test_summary_refreshes_stale_streak(self, service, store, fixed_clock, make_event):
        service.record_activity("learner-1", make_event(occurred_on=fixed_clock.today()))
        fixed_clock.advance(3)

        summary = service.summary("learner-1", "web_development")

        assert summary.record.current_streak == 0
        assert store.load("learner-1", "web_development").current_streak == 0
        assert summary.insights[0].kind is InsightKind.MOTIVATION

    def test_summary_for_unknown_learner(self, service):
        summary = service.summary("nobody", "web_development")
        assert summary.record.total_xp == 0
        assert all(e.intensity == 0 for e in summary.calendar)


class TestReset:
    def test_reset(self, service, store, make_event):
        service.record_activity("learner-1", make_event(xp_earned=500))
        record = service.reset("learner-1", "web_development")

        assert record.total_xp == 0
        assert store.load("learner-1", "web_development").total_xp == 0
        assert store.history("learner-1", "web_development") == []

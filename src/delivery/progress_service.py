"""
Progress service.

Caller-side driver for the pure pipeline: serializes updates per
(user, roadmap) through the store's lock and performs
load -> apply -> save. Evaluations and diagnostics are converted to
activity events and recorded the same way.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from loguru import logger

from src.assessment.base import EvaluationResult
from src.assessment.evaluator import evaluation_to_event
from src.core.clock import Clock, SystemClock
from src.core.models import ActivityEvent, HeatmapEntry, ProgressRecord
from src.diagnostic.models import SkillAnalysis
from src.diagnostic.roadmaps import analysis_to_event
from src.gamification.heatmap import RecentActivity, calendar_window, recent_activity
from src.gamification.insights import Insight, generate_insights
from src.gamification.milestones import MilestoneProgress, next_milestones
from src.gamification.progress import ProgressTracker, ProgressUpdate

from .progress_store import ProgressStore


@dataclass
class ProgressSummary:
    """Read model for a learner's roadmap progress."""

    record: ProgressRecord
    recent: RecentActivity
    insights: list[Insight] = field(default_factory=list)
    next_milestones: list[MilestoneProgress] = field(default_factory=list)
    calendar: list[HeatmapEntry] = field(default_factory=list)  # oldest first


class ProgressService:
    """
    Applies activities to stored progress.

    Args:
        store: Progress persistence
        clock: Source of the current day (UTC system clock by default)
        tracker: Pipeline configuration (defaults from module constants)
    """

    def __init__(
        self,
        store: ProgressStore,
        clock: Clock | None = None,
        tracker: ProgressTracker | None = None,
    ):
        self.store = store
        self.clock = clock or SystemClock()
        self.tracker = tracker or ProgressTracker()

    def record_activity(self, user_id: str, event: ActivityEvent) -> ProgressUpdate:
        """
        Apply one activity for a learner.

        Args:
            user_id: Learner id
            event: Activity to record

        Returns:
            ProgressUpdate with the saved record and any milestones
        """
        with self.store.lock(user_id, event.roadmap_id):
            record = self.store.load(user_id, event.roadmap_id)
            update = self.tracker.apply(record, event, self.clock.today())
            self.store.save(update.record)
            self.store.log_activity(user_id, update.activity)

        logger.info(
            f"Recorded {event.kind.value} for {user_id}/{event.roadmap_id}: "
            f"+{event.xp_earned} XP, streak {update.record.current_streak}, "
            f"{len(update.milestones)} milestone(s)"
        )
        return update

    def record_evaluation(
        self,
        user_id: str,
        result: EvaluationResult,
        roadmap_id: str,
        step_id: str | None = None,
    ) -> ProgressUpdate | None:
        """Record the activity an evaluation earns; failed tests record nothing."""
        event = evaluation_to_event(result, roadmap_id, step_id, self.clock.today())
        if event is None:
            logger.debug(f"{user_id}: {result.test_id} not passed, nothing recorded")
            return None
        return self.record_activity(user_id, event)

    def record_diagnostic(
        self,
        user_id: str,
        analysis: SkillAnalysis,
        roadmap_id: str,
        time_spent_minutes: int | None = None,
    ) -> ProgressUpdate:
        """Record a completed diagnostic as a lesson."""
        event = analysis_to_event(analysis, roadmap_id, self.clock.today(), time_spent_minutes)
        return self.record_activity(user_id, event)

    def refresh(self, user_id: str, roadmap_id: str) -> ProgressRecord:
        """Recompute the stored streak against today without recording activity."""
        with self.store.lock(user_id, roadmap_id):
            record = self.store.load(user_id, roadmap_id)
            refreshed = self.tracker.refresh_streak(record, self.clock.today())
            if refreshed is not record:
                self.store.save(refreshed)
        return refreshed

    def reset(self, user_id: str, roadmap_id: str) -> ProgressRecord:
        """Explicit user data wipe."""
        with self.store.lock(user_id, roadmap_id):
            record = self.store.reset(user_id, roadmap_id)
        logger.info(f"Reset progress for {user_id}/{roadmap_id}")
        return record

    def summary(self, user_id: str, roadmap_id: str, calendar_days: int = 14) -> ProgressSummary:
        """Record plus insights, next milestones and a dense recent calendar."""
        today: date = self.clock.today()
        record = self.refresh(user_id, roadmap_id)
        return ProgressSummary(
            record=record,
            recent=recent_activity(record.heatmap, today),
            insights=generate_insights(record, today),
            next_milestones=next_milestones(record),
            calendar=calendar_window(record.heatmap, today, calendar_days),
        )

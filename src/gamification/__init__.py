"""
Gamification pipeline: activity normalization, heatmap, streaks, milestones.

Components:
- catalog: Static milestone threshold tables
- normalizer: ActivityEvent -> ActivityRecord (points, intensity, tooltip)
- heatmap: Per-day intensity calendar with fixed retention
- streak: Consecutive active days ending today or yesterday
- milestones: Threshold crossings between two records
- progress: The record-threading pipeline tying the stages together
- insights: Motivational insights derived from a record
"""

from src.gamification.catalog import CATALOG_VERSION, THRESHOLDS, MilestoneCategory, MilestoneThreshold
from src.gamification.heatmap import fold
from src.gamification.insights import Insight, InsightKind, generate_insights
from src.gamification.milestones import Milestone, MilestoneDetector, detect, next_milestones
from src.gamification.normalizer import normalize, step_completion_xp
from src.gamification.progress import ProgressTracker, ProgressUpdate, apply_activity, new_record, reset_record
from src.gamification.streak import carry_streak, current_streak, longest_streak

__all__ = [
    "CATALOG_VERSION",
    "THRESHOLDS",
    "MilestoneCategory",
    "MilestoneThreshold",
    "fold",
    "Insight",
    "InsightKind",
    "generate_insights",
    "Milestone",
    "MilestoneDetector",
    "detect",
    "next_milestones",
    "normalize",
    "step_completion_xp",
    "ProgressTracker",
    "ProgressUpdate",
    "apply_activity",
    "new_record",
    "reset_record",
    "current_streak",
    "carry_streak",
    "longest_streak",
]

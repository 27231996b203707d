"""
Checkpoint feedback.

Feedback is a deterministic function of (passed, percentage). Callers key on
the tier and recommendation kinds; the English strings are defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .base import (
    EvaluationResult,
    Feedback,
    FeedbackTier,
    Recommendation,
    RecommendationKind,
)

EXCELLENT_PERCENTAGE = 90
GOOD_PERCENTAGE = 80


def feedback_tier(passed: bool, percentage: float) -> FeedbackTier:
    """Band an attempt into a feedback tier."""
    if not passed:
        return FeedbackTier.RETRY
    if percentage >= EXCELLENT_PERCENTAGE:
        return FeedbackTier.EXCELLENT
    if percentage >= GOOD_PERCENTAGE:
        return FeedbackTier.GOOD
    return FeedbackTier.PASSED


def build_feedback(passed: bool, percentage: float) -> Feedback:
    """
    Build tiered feedback for an attempt.

    Args:
        passed: Whether the attempt met the test's passing score
        percentage: Score percentage (0-100)

    Returns:
        Feedback with tier, default copy and structured recommendations
    """
    tier = feedback_tier(passed, percentage)

    if tier is FeedbackTier.EXCELLENT:
        return Feedback(
            tier=tier,
            overall="Excellent work! You have a strong understanding of the concepts.",
            strengths=["Comprehensive knowledge of the subject"],
            recommendations=[
                Recommendation(RecommendationKind.ADVANCE, "Consider taking on advanced challenges"),
            ],
        )

    if tier is FeedbackTier.GOOD:
        return Feedback(
            tier=tier,
            overall="Good job! You understand most of the key concepts.",
            strengths=["Solid foundation in the fundamentals"],
            recommendations=[
                Recommendation(RecommendationKind.REVIEW_MATERIALS, "Practice the areas where you lost points"),
            ],
        )

    if tier is FeedbackTier.PASSED:
        return Feedback(
            tier=tier,
            overall="You passed! Focus on strengthening your understanding.",
            improvements=["Review the concepts you missed"],
            recommendations=[
                Recommendation(RecommendationKind.REVIEW_MATERIALS, "Take additional practice exercises"),
            ],
        )

    return Feedback(
        tier=tier,
        overall="Don't worry! This is a learning opportunity.",
        improvements=[
            "Review the study materials carefully",
            "Practice more examples",
        ],
        recommendations=[
            Recommendation(RecommendationKind.REVIEW_MATERIALS, "Take your time to understand each concept"),
            Recommendation(RecommendationKind.RETAKE, "Try the test again when you feel ready"),
            Recommendation(RecommendationKind.SEEK_HELP, "Consider seeking help from mentors or community"),
        ],
    )


# ============================================================================
# Next steps
# ============================================================================


class NextStepKind(str, Enum):
    CONTINUE = "continue"
    CHALLENGE = "challenge"
    REVIEW = "review"
    PRACTICE = "practice"
    RETAKE = "retake"


@dataclass(frozen=True)
class NextStep:
    kind: NextStepKind
    title: str
    description: str


def next_steps(result: EvaluationResult, path_name: str | None = None) -> list[NextStep]:
    """
    Suggested follow-ups after a checkpoint attempt.

    Args:
        result: Evaluated attempt
        path_name: Roadmap category shown in the "continue" step
    """
    if not result.passed:
        return [
            NextStep(NextStepKind.REVIEW, "Review Materials", "Go back and review the learning materials"),
            NextStep(NextStepKind.PRACTICE, "Get More Practice", "Practice with additional exercises and examples"),
            NextStep(NextStepKind.RETAKE, "Retake Test", "Try the test again when you feel ready"),
        ]

    journey = f"your {path_name} journey" if path_name else "your learning path"
    steps = [NextStep(NextStepKind.CONTINUE, "Continue Learning Path", f"Proceed to the next step in {journey}")]
    if result.percentage >= EXCELLENT_PERCENTAGE:
        steps.append(NextStep(
            NextStepKind.CHALLENGE,
            "Take Advanced Challenge",
            "Ready for more complex problems? Try an advanced challenge!",
        ))
    return steps

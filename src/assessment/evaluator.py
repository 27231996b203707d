"""
Checkpoint Test Evaluator.

Grades submissions against registered test definitions:

1. Resolve the definition (NotFoundError for unknown ids)
2. Let the kind's grader validate the submission (ValidationError listing
   every problem)
3. Grade unit by unit, apply the pass bar and attach tiered feedback

The evaluator never executes code; coding tests consume sandbox verdicts.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from loguru import logger

from src.core.errors import NotFoundError, ValidationError
from src.core.models import ActivityEvent, ActivityKind
from src.gamification.normalizer import step_completion_xp

from . import TestKind, get_grader
from .base import DEFAULT_PASSING_SCORE, EvaluationResult, TestDefinition, TestSubmission
from .catalog import BUILTIN_TESTS, DEFAULT_TEST_ID, SKILL_TESTS
from .feedback import build_feedback


class CheckpointEvaluator:
    """
    Registry of checkpoint tests plus grading.

    Args:
        tests: Definitions to register (built-in catalog by default)
        default_passing_score: Pass bar for tests that do not set their own
    """

    def __init__(
        self,
        tests: Iterable[TestDefinition] | None = None,
        default_passing_score: float = DEFAULT_PASSING_SCORE,
    ):
        self.default_passing_score = default_passing_score
        self._tests: dict[str, TestDefinition] = {}
        for test in BUILTIN_TESTS if tests is None else tests:
            self.register(test)

    def register(self, test: TestDefinition) -> None:
        """Add or replace a test definition."""
        if "passing_score" not in test.model_fields_set:
            test = test.model_copy(update={"passing_score": self.default_passing_score})
        if test.id in self._tests:
            logger.debug(f"Replacing checkpoint test {test.id}")
        self._tests[test.id] = test

    def get(self, test_id: str) -> TestDefinition:
        """
        Look up a registered test.

        Raises:
            NotFoundError: If the id is not registered
        """
        test = self._tests.get(test_id)
        if test is None:
            raise NotFoundError(f"Checkpoint test not found: {test_id}")
        return test

    @property
    def tests(self) -> list[TestDefinition]:
        return list(self._tests.values())

    def tests_by_kind(self, kind: TestKind | str) -> list[TestDefinition]:
        """All registered tests of one kind, in registration order."""
        kind = TestKind(kind) if isinstance(kind, str) else kind
        return [t for t in self._tests.values() if t.kind is kind]

    def test_for_skill(self, skill: str | None, category: str | None = None) -> TestDefinition:
        """
        Pick the gating test for a roadmap step.

        The step's skill wins over its category; falls back to the default test.
        """
        for key in (skill, category):
            if key and key in SKILL_TESTS and SKILL_TESTS[key] in self._tests:
                return self._tests[SKILL_TESTS[key]]
        return self.get(DEFAULT_TEST_ID)

    def evaluate(self, test: TestDefinition, submission: TestSubmission) -> EvaluationResult:
        """
        Grade a submission.

        Args:
            test: Test definition; the registered definition with this id is used
            submission: Learner attempt for this test

        Returns:
            EvaluationResult with per-unit breakdown and tiered feedback

        Raises:
            NotFoundError: If test.id is not registered
            ValidationError: If the submission is for another test or malformed
        """
        test = self.get(test.id)
        if submission.test_id != test.id:
            raise ValidationError(
                "Submission does not belong to this test",
                [f"submission test_id {submission.test_id!r} != {test.id!r}"],
            )

        grader = get_grader(test.kind)
        if grader is None:
            raise ValidationError(f"No grader registered for test kind {test.kind.value}")

        problems = grader.validate(test, submission)
        if problems:
            logger.warning(f"Rejected submission for {test.id}: {'; '.join(problems)}")
            raise ValidationError(f"Invalid submission for {test.id}", problems)

        grading = grader.grade(test, submission)
        percentage = grading.percentage
        passed = percentage >= test.passing_score

        result = EvaluationResult(
            test_id=test.id,
            kind=test.kind,
            score=grading.score,
            max_score=grading.max_score,
            total_units=grading.total_units,
            percentage=percentage,
            passed=passed,
            passing_score=test.passing_score,
            breakdown=grading.breakdown,
            feedback=build_feedback(passed, percentage),
            time_spent_minutes=submission.time_spent_minutes,
            category_breakdown=grading.category_breakdown,
        )
        logger.info(
            f"Evaluated {test.id} ({test.kind.value}): {percentage:.1f}% "
            f"{'passed' if passed else 'failed'} [{result.feedback.tier.value}]"
        )
        return result

    def evaluate_by_id(self, test_id: str, submission: TestSubmission) -> EvaluationResult:
        """Resolve a registered test by id and grade the submission."""
        return self.evaluate(self.get(test_id), submission)


def evaluation_to_event(
    result: EvaluationResult,
    roadmap_id: str,
    step_id: str | None,
    occurred_on: date,
) -> ActivityEvent | None:
    """
    Convert an evaluation into the activity it earns.

    Projects always count as submitted. Passed mcq/coding attempts become
    TEST_PASSED (PERFECT_SCORE at 100%); failed attempts earn nothing.

    Returns:
        ActivityEvent to feed the progress pipeline, or None
    """
    if result.kind is TestKind.PROJECT:
        kind = ActivityKind.PROJECT_SUBMITTED
    elif not result.passed:
        return None
    elif result.percentage >= 100:
        kind = ActivityKind.PERFECT_SCORE
    else:
        kind = ActivityKind.TEST_PASSED

    return ActivityEvent(
        kind=kind,
        roadmap_id=roadmap_id,
        step_id=step_id,
        xp_earned=step_completion_xp(result.time_spent_minutes, result.percentage),
        test_score=round(result.percentage, 2),
        time_spent_minutes=result.time_spent_minutes,
        occurred_on=occurred_on,
    )

"""
Unit tests for checkpoint test grading.

Covers the mcq, coding and project graders through the evaluator, plus
conversion of results into activity events.

Run: pytest tests/unit/test_checkpoint_evaluator.py -v
"""

import pytest

from src.assessment import GRADERS, TestKind, get_grader
from src.assessment.base import FeedbackTier, parse_submission, parse_test
from src.assessment.evaluator import CheckpointEvaluator, evaluation_to_event
from src.core.errors import NotFoundError, ValidationError
from src.core.models import ActivityKind


@pytest.fixture
def evaluator():
    return CheckpointEvaluator()


def _submit(evaluator, test_id, **fields):
    return evaluator.evaluate_by_id(test_id, parse_submission({"test_id": test_id, **fields}))


class TestGraderRegistry:
    def test_every_kind_registered(self):
        assert set(GRADERS) == set(TestKind)

    def test_lookup_by_string(self):
        assert get_grader("MCQ") is GRADERS[TestKind.MCQ]
        assert get_grader("essay") is None


class TestDefinitions:
    def test_builtin_catalog_loaded(self, evaluator):
        ids = {t.id for t in evaluator.tests}
        assert {"react-basics-mcq", "javascript-algorithms-coding", "ui-design-project"} <= ids

    def test_tests_by_kind(self, evaluator):
        assert {t.id for t in evaluator.tests_by_kind("project")} == {"ui-design-project", "web-app-project"}

    def test_kind_without_units_rejected(self):
        with pytest.raises(ValidationError, match="test definition"):
            parse_test({"id": "empty", "kind": "mcq", "title": "Empty"})

    def test_correct_index_out_of_range(self):
        with pytest.raises(ValidationError):
            parse_test({
                "id": "bad",
                "kind": "mcq",
                "title": "Bad",
                "questions": [{"id": 1, "question": "?", "options": ["a", "b"], "correct_index": 2}],
            })

    def test_default_passing_score_applied(self, sample_mcq_payload):
        evaluator = CheckpointEvaluator([parse_test(sample_mcq_payload)], default_passing_score=50)
        assert evaluator.get("sample-mcq").passing_score == 50

    def test_explicit_passing_score_kept(self, sample_mcq_payload):
        test = parse_test({**sample_mcq_payload, "passing_score": 90})
        evaluator = CheckpointEvaluator([test], default_passing_score=50)
        assert evaluator.get("sample-mcq").passing_score == 90

    def test_test_for_skill(self, evaluator):
        assert evaluator.test_for_skill("css").id == "css-layout-mcq"
        assert evaluator.test_for_skill(None, "business").id == "business-strategy-mcq"
        assert evaluator.test_for_skill("cobol").id == "react-basics-mcq"


class TestMCQ:
    def test_all_correct(self, evaluator):
        result = _submit(evaluator, "css-layout-mcq", answers={"1": 1, "2": 2, "3": 1})

        assert result.score == 3
        assert result.max_score == 3
        assert result.percentage == 100
        assert result.passed is True
        assert result.feedback.tier is FeedbackTier.EXCELLENT

    def test_integer_question_ids_accepted(self, evaluator):
        result = _submit(evaluator, "css-layout-mcq", answers={1: 1, 2: 2, 3: 1})
        assert result.correct_units == 3

    def test_unanswered_counts_wrong(self, evaluator):
        result = _submit(evaluator, "react-basics-mcq", answers={"1": 1, "2": 1, "3": 0})

        assert result.score == 3
        assert result.total_units == 5
        assert result.percentage == 60
        assert result.passed is False
        assert result.feedback.tier is FeedbackTier.RETRY
        unanswered = result.breakdown[3]
        assert unanswered.submitted is None
        assert unanswered.correct is False

    def test_breakdown_carries_explanation(self, evaluator):
        result = _submit(evaluator, "css-layout-mcq", answers={"1": 0})
        first = result.breakdown[0]
        assert first.expected == 1
        assert "flex" in first.explanation

    def test_pass_bar_is_inclusive(self, sample_mcq_payload):
        evaluator = CheckpointEvaluator([parse_test({**sample_mcq_payload, "passing_score": 75})])
        result = _submit(evaluator, "sample-mcq", answers={"q1": 1, "q2": 0, "q3": 1})
        assert result.percentage == 75
        assert result.passed is True
        assert result.feedback.tier is FeedbackTier.PASSED

    def test_numeric_string_answer_coerced(self, evaluator):
        result = _submit(evaluator, "css-layout-mcq", answers={"1": "1", "2": "2", "3": "1"})
        assert result.correct_units == 3

    def test_boolean_answer_rejected(self, evaluator):
        with pytest.raises(ValidationError, match="Invalid test submission"):
            _submit(evaluator, "css-layout-mcq", answers={"1": True})

    def test_unknown_question_rejected(self, evaluator):
        with pytest.raises(ValidationError) as exc_info:
            _submit(evaluator, "css-layout-mcq", answers={"1": 1, "42": 0})
        assert exc_info.value.details == ["answer for unknown question id '42'"]


class TestCoding:
    def test_problem_needs_every_case(self, evaluator):
        result = _submit(
            evaluator,
            "javascript-algorithms-coding",
            case_verdicts={"1": [True, True, True], "2": [True, False, True]},
        )
        assert [u.correct for u in result.breakdown] == [True, False]
        assert result.percentage == 50
        assert result.passed is False
        assert result.breakdown[1].submitted == "2/3 cases passed"

    def test_all_solved(self, evaluator):
        result = _submit(
            evaluator,
            "javascript-algorithms-coding",
            case_verdicts={"1": [True] * 3, "2": [True] * 3},
        )
        assert result.passed is True
        assert result.percentage == 100

    def test_missing_problem_counts_wrong(self, evaluator):
        result = _submit(evaluator, "javascript-algorithms-coding", case_verdicts={"1": [True] * 3})
        assert result.breakdown[1].correct is False
        assert result.breakdown[1].submitted is None

    def test_verdict_count_mismatch_rejected(self, evaluator):
        with pytest.raises(ValidationError, match="Invalid submission"):
            _submit(evaluator, "node-api-coding", case_verdicts={"1": [True]})


class TestProject:
    REQUIRED = ["1", "2", "3", "4"]

    def test_required_only(self, evaluator):
        result = _submit(
            evaluator,
            "ui-design-project",
            completed_requirement_ids=self.REQUIRED,
            deliverables=["https://example.com/portfolio"],
        )
        assert result.score == 80
        assert result.max_score == 100
        assert result.passed is True
        assert result.feedback.tier is FeedbackTier.GOOD
        assert result.category_breakdown == {
            "functionality": pytest.approx(25 / 35 * 100),
            "design": 100.0,
            "documentation": 100.0,
            "quality": 0.0,
        }

    def test_everything_complete(self, evaluator):
        result = _submit(
            evaluator,
            "web-app-project",
            completed_requirement_ids=[1, 2, 3, 4, 5, 6],
            deliverables=["https://git.example.com/app"],
        )
        assert result.percentage == 100

    def test_missing_required_rejected(self, evaluator):
        with pytest.raises(ValidationError) as exc_info:
            _submit(
                evaluator,
                "ui-design-project",
                completed_requirement_ids=["1", "2", "5"],
                deliverables=["mockups.png"],
            )
        assert exc_info.value.details == [
            "complete all required requirements (2/4): Visual Hierarchy, Design Rationale",
        ]

    def test_optional_points_do_not_replace_required(self, evaluator):
        # 1, 3, 4, 5, 6 complete = 85 points, requirement 2 still missing
        with pytest.raises(ValidationError, match="Invalid submission"):
            _submit(
                evaluator,
                "web-app-project",
                completed_requirement_ids=["1", "3", "4", "5", "6"],
                deliverables=["https://git.example.com/app"],
            )

    def test_deliverable_required(self, evaluator):
        with pytest.raises(ValidationError) as exc_info:
            _submit(evaluator, "ui-design-project", completed_requirement_ids=self.REQUIRED, deliverables=["  "])
        assert exc_info.value.details == ["attach a repository link or at least one project file"]

    def test_all_problems_reported(self, evaluator):
        with pytest.raises(ValidationError) as exc_info:
            _submit(evaluator, "ui-design-project", completed_requirement_ids=["99"])
        assert len(exc_info.value.details) == 3


class TestEvaluatorErrors:
    def test_unknown_test(self, evaluator):
        with pytest.raises(NotFoundError):
            _submit(evaluator, "no-such-test")

    def test_mismatched_submission(self, evaluator):
        submission = parse_submission({"test_id": "react-basics-mcq", "answers": {}})
        with pytest.raises(ValidationError, match="does not belong"):
            evaluator.evaluate(evaluator.get("css-layout-mcq"), submission)

    def test_malformed_submission(self):
        with pytest.raises(ValidationError, match="test submission"):
            parse_submission({"test_id": "css-layout-mcq", "answers": {"1": "b"}})


class TestEvaluationToEvent:
    def test_passed_test(self, evaluator, today):
        result = _submit(evaluator, "react-basics-mcq", answers={"1": 1, "2": 1, "3": 0, "4": 1}, time_spent_minutes=12)
        event = evaluation_to_event(result, "web_development", "web_development-3", today)

        assert event.kind is ActivityKind.TEST_PASSED
        assert event.test_score == 80
        assert event.xp_earned == 2 + 50
        assert event.step_id == "web_development-3"

    def test_perfect_score(self, evaluator, today):
        result = _submit(evaluator, "css-layout-mcq", answers={"1": 1, "2": 2, "3": 1})
        assert evaluation_to_event(result, "web", None, today).kind is ActivityKind.PERFECT_SCORE

    def test_failed_attempt_earns_nothing(self, evaluator, today):
        result = _submit(evaluator, "css-layout-mcq", answers={})
        assert evaluation_to_event(result, "web", None, today) is None

    def test_project_submission(self, evaluator, today):
        result = _submit(
            evaluator,
            "web-app-project",
            completed_requirement_ids=["1", "2", "3", "4"],
            deliverables=["https://git.example.com/app"],
            time_spent_minutes=120,
        )
        event = evaluation_to_event(result, "web", "web-4", today)
        assert event.kind is ActivityKind.PROJECT_SUBMITTED
        assert event.xp_earned == 24 + 50

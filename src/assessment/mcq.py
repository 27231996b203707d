"""
MCQ (Multiple Choice Question) grader.

- One unit per question.
- Correct iff the submitted option index equals the question's correct index.
- Unanswered questions count as wrong.
"""

from __future__ import annotations

from . import TestKind, register
from .base import Grading, TestDefinition, TestSubmission, UnitResult


@register(TestKind.MCQ)
class MCQGrader:
    """Grades multiple choice tests."""

    def validate(self, test: TestDefinition, submission: TestSubmission) -> list[str]:
        known = {q.id for q in test.questions}
        return [
            f"answer for unknown question id {qid!r}"
            for qid in submission.answers
            if qid not in known
        ]

    def grade(self, test: TestDefinition, submission: TestSubmission) -> Grading:
        breakdown = []
        for question in test.questions:
            answer = submission.answers.get(question.id)
            correct = answer is not None and answer == question.correct_index
            breakdown.append(UnitResult(
                unit_id=question.id,
                correct=correct,
                points=1.0 if correct else 0.0,
                max_points=1.0,
                submitted=answer,
                expected=question.correct_index,
                explanation=question.explanation,
            ))

        score = sum(unit.points for unit in breakdown)
        return Grading(score=score, max_score=float(len(breakdown)), breakdown=breakdown)

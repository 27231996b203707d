"""
Coding problem grader.

Submitted code is executed by an external sandbox; this grader consumes
one pass/fail verdict per test case. A problem counts as solved only when
every one of its cases passed. Problems without verdicts count as wrong.
"""

from __future__ import annotations

from . import TestKind, register
from .base import Grading, TestDefinition, TestSubmission, UnitResult


@register(TestKind.CODING)
class CodingGrader:
    """Grades coding tests from sandbox verdicts."""

    def validate(self, test: TestDefinition, submission: TestSubmission) -> list[str]:
        problems_by_id = {p.id: p for p in test.problems}
        errors = []
        for problem_id, verdicts in submission.case_verdicts.items():
            problem = problems_by_id.get(problem_id)
            if problem is None:
                errors.append(f"verdicts for unknown problem id {problem_id!r}")
            elif len(verdicts) != len(problem.test_cases):
                errors.append(
                    f"problem {problem_id!r} has {len(problem.test_cases)} test cases "
                    f"but {len(verdicts)} verdicts were supplied"
                )
        return errors

    def grade(self, test: TestDefinition, submission: TestSubmission) -> Grading:
        breakdown = []
        for problem in test.problems:
            verdicts = submission.case_verdicts.get(problem.id)
            solved = bool(verdicts) and all(verdicts)
            breakdown.append(UnitResult(
                unit_id=problem.id,
                correct=solved,
                points=1.0 if solved else 0.0,
                max_points=1.0,
                submitted=None if verdicts is None else f"{sum(verdicts)}/{len(verdicts)} cases passed",
                expected=f"{len(problem.test_cases)}/{len(problem.test_cases)} cases passed",
            ))

        score = sum(unit.points for unit in breakdown)
        return Grading(score=score, max_score=float(len(breakdown)), breakdown=breakdown)

"""
Project submission grader.

Requirements are partitioned into required and optional. A submission is
only gradable when every required requirement is complete and at least one
deliverable (repository link or uploaded artifact reference) is attached.
Percentage is earned points over all points; the per-category breakdown
reports the same ratio within each requirement category.
"""

from __future__ import annotations

from . import TestKind, register
from .base import Grading, TestDefinition, TestSubmission, UnitResult


@register(TestKind.PROJECT)
class ProjectGrader:
    """Grades project submissions by requirement points."""

    def validate(self, test: TestDefinition, submission: TestSubmission) -> list[str]:
        known = {r.id for r in test.requirements}
        completed = set(submission.completed_requirement_ids)
        errors = [
            f"unknown requirement id {rid!r}"
            for rid in submission.completed_requirement_ids
            if rid not in known
        ]

        required = [r for r in test.requirements if r.required]
        missing = [r for r in required if r.id not in completed]
        if missing:
            errors.append(
                f"complete all required requirements ({len(required) - len(missing)}/{len(required)}): "
                + ", ".join(r.title for r in missing)
            )

        if not any(d.strip() for d in submission.deliverables):
            errors.append("attach a repository link or at least one project file")
        return errors

    def grade(self, test: TestDefinition, submission: TestSubmission) -> Grading:
        completed = set(submission.completed_requirement_ids)
        breakdown = []
        earned_by_category: dict[str, int] = {}
        max_by_category: dict[str, int] = {}

        for requirement in test.requirements:
            done = requirement.id in completed
            breakdown.append(UnitResult(
                unit_id=requirement.id,
                correct=done,
                points=float(requirement.points) if done else 0.0,
                max_points=float(requirement.points),
                submitted=done,
                expected=requirement.required,
                explanation=requirement.title,
                category=requirement.category,
            ))
            max_by_category[requirement.category] = max_by_category.get(requirement.category, 0) + requirement.points
            if done:
                earned_by_category[requirement.category] = (
                    earned_by_category.get(requirement.category, 0) + requirement.points
                )

        category_breakdown = {
            category: earned_by_category.get(category, 0) * 100 / total
            for category, total in max_by_category.items()
        }
        return Grading(
            score=sum(unit.points for unit in breakdown),
            max_score=sum(unit.max_points for unit in breakdown),
            breakdown=breakdown,
            category_breakdown=category_breakdown,
        )

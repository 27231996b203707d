"""
Diagnostic scoring.

Groups questions by skill tag. Per skill, the level is a joint function of
accuracy and the average declared difficulty, so a learner who only answered
beginner questions can never be classed above intermediate. The overall
level uses total accuracy alone.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from src.core.errors import ValidationError, from_pydantic
from src.core.models import OptionIndex

from .models import DiagnosticDefinition, SkillAnalysis, SkillAssessment, SkillLevel

ADVANCED_DIFFICULTY = 2.5
INTERMEDIATE_DIFFICULTY = 2.0
ADVANCED_ACCURACY = 0.8
INTERMEDIATE_ACCURACY = 0.6

NEEDS_IMPROVEMENT_BELOW = 0.6
STRENGTH_FROM = 0.8

# Domain -> (strong skill, path) in priority order
RECOMMENDED_PATHS: dict[str, list[tuple[str, str]]] = {
    "programming": [("javascript", "web_development"), ("algorithms", "computer_science")],
    "design": [("user_research", "ux_research"), ("design_principles", "ui_design")],
    "business": [("marketing_analytics", "growth_marketing"), ("business_basics", "business_strategy")],
}
DEFAULT_PATH = "general"

_ANSWERS = TypeAdapter(dict[str, OptionIndex])


def parse_answers(answers: Mapping[Any, Any]) -> dict[str, int]:
    """
    Validate a diagnostic answer map (question id -> option index).

    Ids are coerced to strings and numeric strings to ints, matching the
    checkpoint submission path.

    Raises:
        ValidationError: If the map or any index is malformed
    """
    if not isinstance(answers, Mapping):
        raise ValidationError("Invalid diagnostic answers", ["answers must be a mapping of question id to option index"])
    try:
        return _ANSWERS.validate_python({str(k): v for k, v in answers.items()})
    except PydanticValidationError as e:
        raise from_pydantic(e, "diagnostic answers") from e


def average_difficulty(levels: Iterable[SkillLevel]) -> float:
    """Mean difficulty weight (beginner=1, intermediate=2, advanced=3)."""
    weights = [level.weight for level in levels]
    if not weights:
        return 0.0
    return sum(weights) / len(weights)


def skill_level(accuracy: float, avg_difficulty: float) -> SkillLevel:
    """
    Level for one skill; difficulty gates the ceiling.

    Advanced needs hard questions (avg >= 2.5) at 80% accuracy. Intermediate
    needs avg >= 2 at 60% accuracy, or 80% accuracy on easier questions.
    """
    if avg_difficulty >= ADVANCED_DIFFICULTY and accuracy >= ADVANCED_ACCURACY:
        return SkillLevel.ADVANCED
    if avg_difficulty >= INTERMEDIATE_DIFFICULTY and accuracy >= INTERMEDIATE_ACCURACY:
        return SkillLevel.INTERMEDIATE
    if accuracy >= ADVANCED_ACCURACY:
        return SkillLevel.INTERMEDIATE
    return SkillLevel.BEGINNER


def overall_level(accuracy: float) -> SkillLevel:
    """Overall level from total accuracy only."""
    if accuracy >= ADVANCED_ACCURACY:
        return SkillLevel.ADVANCED
    if accuracy >= INTERMEDIATE_ACCURACY:
        return SkillLevel.INTERMEDIATE
    return SkillLevel.BEGINNER


def recommended_path(profile: Mapping[str, SkillAssessment], domain: str) -> str:
    """First domain path whose key skill is a strength, else 'general'."""
    for skill, path in RECOMMENDED_PATHS.get(domain, []):
        assessment = profile.get(skill)
        if assessment is not None and assessment.strength:
            return path
    return DEFAULT_PATH


def score(diagnostic: DiagnosticDefinition, answers: Mapping[str, int]) -> SkillAnalysis:
    """
    Score a diagnostic attempt.

    Args:
        diagnostic: Diagnostic definition
        answers: Question id -> selected option index; unanswered questions
            count as wrong

    Returns:
        SkillAnalysis with per-skill profile (in question order)

    Raises:
        ValidationError: If answers are malformed or reference question ids
            not in the diagnostic
    """
    answers = parse_answers(answers)
    known = {q.id for q in diagnostic.questions}
    unknown = [qid for qid in answers if qid not in known]
    if unknown:
        logger.warning(f"Rejected answers for {diagnostic.id}: unknown question ids {unknown}")
        raise ValidationError(
            f"Answers reference unknown questions in {diagnostic.id}",
            [f"unknown question id {qid!r}" for qid in unknown],
        )

    correct_by_skill: dict[str, int] = {}
    difficulties: dict[str, list[SkillLevel]] = {}
    total_correct = 0
    for question in diagnostic.questions:
        is_correct = answers.get(question.id) == question.correct_index
        correct_by_skill[question.skill] = correct_by_skill.get(question.skill, 0) + int(is_correct)
        difficulties.setdefault(question.skill, []).append(question.difficulty)
        total_correct += int(is_correct)

    profile: dict[str, SkillAssessment] = {}
    for skill, levels in difficulties.items():
        total = len(levels)
        correct = correct_by_skill[skill]
        accuracy = correct / total
        avg = average_difficulty(levels)
        profile[skill] = SkillAssessment(
            skill=skill,
            correct=correct,
            total=total,
            accuracy=accuracy,
            avg_difficulty=avg,
            level=skill_level(accuracy, avg),
            needs_improvement=accuracy < NEEDS_IMPROVEMENT_BELOW,
            strength=accuracy >= STRENGTH_FROM,
        )

    max_score = len(diagnostic.questions)
    accuracy = total_correct / max_score
    analysis = SkillAnalysis(
        diagnostic_id=diagnostic.id,
        domain=diagnostic.domain,
        total_score=total_correct,
        max_score=max_score,
        percentage=total_correct * 100 / max_score,
        skill_profile=profile,
        overall_level=overall_level(accuracy),
        recommended_path=recommended_path(profile, diagnostic.domain),
    )
    logger.debug(
        f"Scored {diagnostic.id}: {total_correct}/{max_score} "
        f"overall={analysis.overall_level.value} path={analysis.recommended_path}"
    )
    return analysis

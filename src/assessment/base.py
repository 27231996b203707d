"""
Base models and protocol for checkpoint test graders.

Definitions and submissions are pydantic models validated at the boundary;
grading results are plain dataclasses.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from src.core.errors import from_pydantic
from src.core.models import OptionIndex

from . import TestKind

DEFAULT_PASSING_SCORE = 70.0


def _str_keys(value: Any) -> Any:
    """Coerce mapping keys to string ids."""
    if isinstance(value, Mapping):
        return {str(k): v for k, v in value.items()}
    return value


# ============================================================================
# Test definitions
# ============================================================================


class MCQQuestion(BaseModel):
    """Single-answer multiple choice question."""

    model_config = ConfigDict(frozen=True)

    id: str
    question: str
    options: list[str] = Field(..., min_length=2)
    correct_index: int = Field(..., ge=0)
    explanation: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @model_validator(mode="after")
    def _check_correct_index(self) -> MCQQuestion:
        if self.correct_index >= len(self.options):
            raise ValueError(f"correct_index {self.correct_index} out of range for {len(self.options)} options")
        return self


class CodingTestCase(BaseModel):
    """Input/expected pair run by the external sandbox."""

    model_config = ConfigDict(frozen=True)

    input: str
    expected: str


class CodingProblem(BaseModel):
    """Coding problem graded from per-case sandbox verdicts."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    difficulty: str = "easy"
    test_cases: list[CodingTestCase] = Field(..., min_length=1)
    template: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class ProjectRequirement(BaseModel):
    """Project requirement worth a number of points."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    required: bool = True
    points: int = Field(default=10, gt=0)
    category: str = "functionality"

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class TestDefinition(BaseModel):
    """A checkpoint test of one kind."""

    model_config = ConfigDict(frozen=True)
    __test__ = False

    id: str = Field(..., min_length=1)
    kind: TestKind
    title: str
    description: str = ""
    skill: str | None = Field(default=None, description="Skill tag used to pick the test for a roadmap step")
    time_limit_minutes: int | None = Field(default=None, gt=0)
    passing_score: float = Field(default=DEFAULT_PASSING_SCORE, ge=0, le=100)
    questions: list[MCQQuestion] = Field(default_factory=list)
    problems: list[CodingProblem] = Field(default_factory=list)
    requirements: list[ProjectRequirement] = Field(default_factory=list)
    deliverables: list[str] = Field(default_factory=list, description="Expected deliverables (display only)")

    @model_validator(mode="after")
    def _check_units(self) -> TestDefinition:
        units = {
            TestKind.MCQ: ("questions", self.questions),
            TestKind.CODING: ("problems", self.problems),
            TestKind.PROJECT: ("requirements", self.requirements),
        }
        name, items = units[self.kind]
        if not items:
            raise ValueError(f"{self.kind.value} test needs at least one entry in {name}")
        ids = [item.id for item in items]
        if len(ids) != len(set(ids)):
            raise ValueError(f"duplicate ids in {name}")
        return self

    @property
    def units(self) -> list[MCQQuestion] | list[CodingProblem] | list[ProjectRequirement]:
        """The gradable units for this test's kind."""
        if self.kind is TestKind.MCQ:
            return self.questions
        if self.kind is TestKind.CODING:
            return self.problems
        return self.requirements


class TestSubmission(BaseModel):
    """A learner's attempt at a checkpoint test."""

    model_config = ConfigDict(frozen=True)
    __test__ = False

    test_id: str = Field(..., min_length=1)
    answers: dict[str, OptionIndex] = Field(default_factory=dict, description="mcq: question id -> option index")
    case_verdicts: dict[str, list[bool]] = Field(
        default_factory=dict, description="coding: problem id -> pass/fail per test case"
    )
    completed_requirement_ids: list[str] = Field(default_factory=list)
    deliverables: list[str] = Field(default_factory=list, description="Repository URL or uploaded artifact refs")
    time_spent_minutes: int = Field(default=0, ge=0)

    @field_validator("answers", "case_verdicts", mode="before")
    @classmethod
    def _coerce_keys(cls, value: Any) -> Any:
        return _str_keys(value)

    @field_validator("completed_requirement_ids", mode="before")
    @classmethod
    def _coerce_requirement_ids(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple, set)):
            return [str(v) for v in value]
        return value


def parse_test(payload: Mapping[str, Any]) -> TestDefinition:
    """
    Build a TestDefinition from a raw mapping.

    Raises:
        ValidationError: If the definition is malformed
    """
    try:
        return TestDefinition.model_validate(dict(payload))
    except PydanticValidationError as e:
        raise from_pydantic(e, "test definition") from e


def parse_submission(payload: Mapping[str, Any]) -> TestSubmission:
    """
    Build a TestSubmission from a raw mapping (JSON body, CLI file).

    Raises:
        ValidationError: If any field is missing or has the wrong shape
    """
    try:
        return TestSubmission.model_validate(dict(payload))
    except PydanticValidationError as e:
        raise from_pydantic(e, "test submission") from e


# ============================================================================
# Grading results
# ============================================================================


@dataclass
class UnitResult:
    """Outcome for one question, problem or requirement."""

    unit_id: str
    correct: bool
    points: float
    max_points: float
    submitted: Any = None
    expected: Any = None
    explanation: str = ""
    category: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "unit_id": self.unit_id,
            "correct": self.correct,
            "points": self.points,
            "max_points": self.max_points,
            "submitted": self.submitted,
            "expected": self.expected,
            "explanation": self.explanation,
            "category": self.category,
        }


@dataclass
class Grading:
    """Raw grader output before pass/fail and feedback are applied."""

    score: float
    max_score: float
    breakdown: list[UnitResult]
    category_breakdown: dict[str, float] | None = None

    @property
    def total_units(self) -> int:
        return len(self.breakdown)

    @property
    def percentage(self) -> float:
        if self.max_score <= 0:
            return 0.0
        return self.score * 100 / self.max_score


class FeedbackTier(str, Enum):
    """Feedback band, derived from (passed, percentage)."""

    EXCELLENT = "excellent"
    GOOD = "good"
    PASSED = "passed"
    RETRY = "retry"


class RecommendationKind(str, Enum):
    """Structured recommendation kinds callers localize."""

    ADVANCE = "advance"
    REVIEW_MATERIALS = "review_materials"
    RETAKE = "retake"
    SEEK_HELP = "seek_help"


@dataclass(frozen=True)
class Recommendation:
    kind: RecommendationKind
    message: str


@dataclass
class Feedback:
    """Tiered feedback with default English copy."""

    tier: FeedbackTier
    overall: str
    strengths: list[str] = field(default_factory=list)
    improvements: list[str] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)

    @property
    def recommendation_kinds(self) -> list[RecommendationKind]:
        return [r.kind for r in self.recommendations]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "tier": self.tier.value,
            "overall": self.overall,
            "strengths": list(self.strengths),
            "improvements": list(self.improvements),
            "recommendations": [{"kind": r.kind.value, "message": r.message} for r in self.recommendations],
        }


@dataclass
class EvaluationResult:
    """Graded checkpoint test attempt."""

    test_id: str
    kind: TestKind
    score: float
    max_score: float
    total_units: int
    percentage: float
    passed: bool
    passing_score: float
    breakdown: list[UnitResult]
    feedback: Feedback
    time_spent_minutes: int = 0
    category_breakdown: dict[str, float] | None = None  # project only

    @property
    def correct_units(self) -> int:
        return sum(1 for unit in self.breakdown if unit.correct)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "test_id": self.test_id,
            "kind": self.kind.value,
            "score": self.score,
            "max_score": self.max_score,
            "total_units": self.total_units,
            "percentage": self.percentage,
            "passed": self.passed,
            "passing_score": self.passing_score,
            "breakdown": [unit.to_dict() for unit in self.breakdown],
            "feedback": self.feedback.to_dict(),
            "time_spent_minutes": self.time_spent_minutes,
            "category_breakdown": self.category_breakdown,
        }


class Grader(Protocol):
    """Protocol for test kind graders."""

    def validate(self, test: TestDefinition, submission: TestSubmission) -> list[str]:
        """Return every problem with the submission; empty when it can be graded."""
        ...

    def grade(self, test: TestDefinition, submission: TestSubmission) -> Grading:
        """Score a validated submission."""
        ...

"""
Diagnostic assessment models.

Design:
- DiagnosticDefinition / DiagnosticQuestion: skill-tagged pre-test (pydantic)
- SkillAssessment / SkillAnalysis: scoring output per skill and overall
- RoadmapTemplate / RoadmapStep: static learning paths tagged by tier and domain
- PersonalizedRoadmap / LearningPlan: per-learner output of personalization
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from src.core.errors import from_pydantic


class SkillLevel(str, Enum):
    """Question difficulty and assessed skill level share one scale."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def weight(self) -> int:
        """Numeric difficulty: beginner=1, intermediate=2, advanced=3."""
        return list(SkillLevel).index(self) + 1


class StepStatus(str, Enum):
    LOCKED = "locked"
    AVAILABLE = "available"


# ============================================================================
# Diagnostic definitions
# ============================================================================


class DiagnosticQuestion(BaseModel):
    """Multiple choice question tagged with a skill and difficulty."""

    model_config = ConfigDict(frozen=True)

    id: str
    question: str
    options: list[str] = Field(..., min_length=2)
    correct_index: int = Field(..., ge=0)
    skill: str = Field(..., min_length=1)
    difficulty: SkillLevel = SkillLevel.BEGINNER

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @model_validator(mode="after")
    def _check_correct_index(self) -> DiagnosticQuestion:
        if self.correct_index >= len(self.options):
            raise ValueError(f"correct_index {self.correct_index} out of range for {len(self.options)} options")
        return self


class DiagnosticDefinition(BaseModel):
    """Upfront skill assessment for one domain."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    domain: str = Field(..., min_length=1)
    title: str
    description: str = ""
    time_limit_minutes: int | None = Field(default=None, gt=0)
    questions: list[DiagnosticQuestion] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_unique_ids(self) -> DiagnosticDefinition:
        ids = [q.id for q in self.questions]
        if len(ids) != len(set(ids)):
            raise ValueError("duplicate question ids")
        return self

    @property
    def skills(self) -> list[str]:
        """Skill tags in first-appearance order."""
        return list(dict.fromkeys(q.skill for q in self.questions))


def parse_diagnostic(payload: Mapping[str, Any]) -> DiagnosticDefinition:
    """
    Build a DiagnosticDefinition from a raw mapping.

    Raises:
        ValidationError: If the definition is malformed
    """
    try:
        return DiagnosticDefinition.model_validate(dict(payload))
    except PydanticValidationError as e:
        raise from_pydantic(e, "diagnostic definition") from e


# ============================================================================
# Scoring output
# ============================================================================


@dataclass(frozen=True)
class SkillAssessment:
    """Accuracy and level for one skill tag."""

    skill: str
    correct: int
    total: int
    accuracy: float
    avg_difficulty: float
    level: SkillLevel
    needs_improvement: bool
    strength: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "skill": self.skill,
            "correct": self.correct,
            "total": self.total,
            "accuracy": self.accuracy,
            "avg_difficulty": self.avg_difficulty,
            "level": self.level.value,
            "needs_improvement": self.needs_improvement,
            "strength": self.strength,
        }


@dataclass(frozen=True)
class SkillAnalysis:
    """Scored diagnostic: per-skill profile plus overall level."""

    diagnostic_id: str
    domain: str
    total_score: int
    max_score: int
    percentage: float
    skill_profile: dict[str, SkillAssessment]
    overall_level: SkillLevel
    recommended_path: str = "general"

    @property
    def weak_skills(self) -> list[str]:
        return [s for s, a in self.skill_profile.items() if a.needs_improvement]

    @property
    def strong_skills(self) -> list[str]:
        return [s for s, a in self.skill_profile.items() if a.strength]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "diagnostic_id": self.diagnostic_id,
            "domain": self.domain,
            "total_score": self.total_score,
            "max_score": self.max_score,
            "percentage": self.percentage,
            "skill_profile": {s: a.to_dict() for s, a in self.skill_profile.items()},
            "overall_level": self.overall_level.value,
            "recommended_path": self.recommended_path,
        }


# ============================================================================
# Roadmaps
# ============================================================================


class RoadmapStep(BaseModel):
    """One step of a roadmap; personalization returns updated copies."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    title: str
    summary: str = ""
    skills: list[str] = Field(default_factory=list, description="Prerequisite skills that allow skipping ahead")
    has_checkpoint_test: bool = True
    xp_reward: int = Field(default=100, ge=0)
    estimated_hours: int = Field(default=2, ge=1)
    status: StepStatus = StepStatus.LOCKED


class RoadmapTemplate(BaseModel):
    """Static learning path tagged by tier and domains."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1)
    title: str
    description: str = ""
    tier: SkillLevel
    domains: list[str] = Field(..., min_length=1)
    estimated_weeks: int = Field(..., gt=0)
    steps: list[RoadmapStep] = Field(..., min_length=1)


@dataclass
class PersonalizedRoadmap:
    """A roadmap prepared for one learner's skill profile."""

    key: str
    title: str
    description: str
    tier: SkillLevel
    estimated_weeks: int
    steps: list[RoadmapStep]
    personalized_for: str
    user_level: SkillLevel
    is_focus_area: bool = False
    focus_skill: str | None = None
    tags: list[str] = field(default_factory=list)

    @property
    def available_steps(self) -> list[RoadmapStep]:
        return [s for s in self.steps if s.status is StepStatus.AVAILABLE]

    @property
    def total_hours(self) -> int:
        return sum(s.estimated_hours for s in self.steps)

    def step(self, step_id: str) -> RoadmapStep | None:
        return next((s for s in self.steps if s.id == step_id), None)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "key": self.key,
            "title": self.title,
            "description": self.description,
            "tier": self.tier.value,
            "estimated_weeks": self.estimated_weeks,
            "steps": [s.model_dump(mode="json") for s in self.steps],
            "personalized_for": self.personalized_for,
            "user_level": self.user_level.value,
            "is_focus_area": self.is_focus_area,
            "focus_skill": self.focus_skill,
            "tags": list(self.tags),
        }


class PlanRecommendationKind(str, Enum):
    ADVANCEMENT = "advancement"
    FOUNDATION = "foundation"


@dataclass(frozen=True)
class PlanRecommendation:
    kind: PlanRecommendationKind
    title: str
    description: str


class SkillAction(str, Enum):
    IMPROVE = "improve"
    ADVANCE = "advance"


@dataclass(frozen=True)
class SkillNextStep:
    action: SkillAction
    skill: str
    priority: str  # "high" | "medium"
    estimated_time: str


@dataclass
class LearningPlan:
    """Personalized roadmaps plus plan-level guidance."""

    analysis: SkillAnalysis
    roadmaps: list[PersonalizedRoadmap]
    recommendations: list[PlanRecommendation] = field(default_factory=list)
    next_steps: list[SkillNextStep] = field(default_factory=list)

    @property
    def estimated_weeks(self) -> int:
        """Weeks to complete every recommended roadmap."""
        return sum(r.estimated_weeks for r in self.roadmaps)

    @property
    def focus_roadmaps(self) -> list[PersonalizedRoadmap]:
        return [r for r in self.roadmaps if r.is_focus_area]

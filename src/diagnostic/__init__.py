"""
Diagnostic assessment: skill scoring and roadmap personalization.
"""

from src.diagnostic.engine import DiagnosticEngine
from src.diagnostic.models import (
    DiagnosticDefinition,
    DiagnosticQuestion,
    LearningPlan,
    PersonalizedRoadmap,
    RoadmapStep,
    RoadmapTemplate,
    SkillAnalysis,
    SkillAssessment,
    SkillLevel,
    StepStatus,
)
from src.diagnostic.roadmaps import analysis_to_event, build_learning_plan, generate_personalized_roadmaps
from src.diagnostic.scoring import score

__all__ = [
    "DiagnosticEngine",
    "DiagnosticDefinition",
    "DiagnosticQuestion",
    "LearningPlan",
    "PersonalizedRoadmap",
    "RoadmapStep",
    "RoadmapTemplate",
    "SkillAnalysis",
    "SkillAssessment",
    "SkillLevel",
    "StepStatus",
    "analysis_to_event",
    "build_learning_plan",
    "generate_personalized_roadmaps",
    "score",
]

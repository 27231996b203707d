"""
Diagnostic Assessment Engine.

Registry of diagnostics and roadmap templates plus the scoring and
personalization entry points. Holds no per-learner state.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from src.core.errors import NotFoundError

from . import roadmaps
from .catalog import BUILTIN_DIAGNOSTICS, ROADMAP_TEMPLATES
from .models import DiagnosticDefinition, LearningPlan, PersonalizedRoadmap, RoadmapTemplate, SkillAnalysis
from .scoring import score as score_answers


class DiagnosticEngine:
    """
    Scores diagnostics and personalizes roadmaps.

    Args:
        diagnostics: Diagnostic definitions (built-in catalog by default)
        templates: Roadmap templates (built-in catalog by default)
        skip_ahead_hours: Estimate reduction for pre-unlocked steps
        min_step_hours: Floor for reduced estimates
        focus_steps: Steps per focus roadmap
        focus_weeks: Estimated weeks per focus roadmap
    """

    def __init__(
        self,
        diagnostics: Iterable[DiagnosticDefinition] | None = None,
        templates: Iterable[RoadmapTemplate] | None = None,
        skip_ahead_hours: int = roadmaps.SKIP_AHEAD_HOURS,
        min_step_hours: int = roadmaps.MIN_STEP_HOURS,
        focus_steps: int = roadmaps.FOCUS_ROADMAP_STEPS,
        focus_weeks: int = roadmaps.FOCUS_ROADMAP_WEEKS,
    ):
        self._diagnostics = {d.id: d for d in (BUILTIN_DIAGNOSTICS if diagnostics is None else diagnostics)}
        self.templates = list(ROADMAP_TEMPLATES if templates is None else templates)
        self.skip_ahead_hours = skip_ahead_hours
        self.min_step_hours = min_step_hours
        self.focus_steps = focus_steps
        self.focus_weeks = focus_weeks

    @property
    def diagnostics(self) -> list[DiagnosticDefinition]:
        return list(self._diagnostics.values())

    def get(self, key: str) -> DiagnosticDefinition:
        """
        Look up a diagnostic by id or by domain.

        Raises:
            NotFoundError: If no diagnostic matches
        """
        diagnostic = self._diagnostics.get(key)
        if diagnostic is None:
            diagnostic = next((d for d in self._diagnostics.values() if d.domain == key), None)
        if diagnostic is None:
            raise NotFoundError(f"Diagnostic not found: {key}")
        return diagnostic

    def score(self, diagnostic: DiagnosticDefinition, answers: Mapping[str, int]) -> SkillAnalysis:
        """
        Score answers for a registered diagnostic.

        Raises:
            NotFoundError: If the diagnostic is not registered
            ValidationError: If answers are malformed or reference unknown
                question ids
        """
        if diagnostic.id not in self._diagnostics:
            raise NotFoundError(f"Diagnostic not found: {diagnostic.id}")
        return score_answers(diagnostic, answers)

    def score_by_id(self, key: str, answers: Mapping[str, int]) -> SkillAnalysis:
        return self.score(self.get(key), answers)

    def generate_personalized_roadmaps(self, analysis: SkillAnalysis) -> list[PersonalizedRoadmap]:
        return roadmaps.generate_personalized_roadmaps(
            analysis,
            self.templates,
            skip_ahead_hours=self.skip_ahead_hours,
            min_step_hours=self.min_step_hours,
            focus_steps=self.focus_steps,
            focus_weeks=self.focus_weeks,
        )

    def build_learning_plan(self, analysis: SkillAnalysis) -> LearningPlan:
        return roadmaps.build_learning_plan(
            analysis,
            self.templates,
            skip_ahead_hours=self.skip_ahead_hours,
            min_step_hours=self.min_step_hours,
            focus_steps=self.focus_steps,
            focus_weeks=self.focus_weeks,
        )

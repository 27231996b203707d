"""
Roadmap personalization.

Turns a SkillAnalysis into personalized roadmaps:

1. Select templates tagged with the analysis domain and overall tier
2. Pre-unlock steps whose prerequisite skills are all proven (non-beginner),
   trimming the skip-ahead allowance off their estimate
3. Append a short beginner focus roadmap for every weak skill

Pure and deterministic: output order follows template and profile order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date

from loguru import logger

from src.core.models import ActivityEvent, ActivityKind
from src.gamification.normalizer import step_completion_xp

from .models import (
    LearningPlan,
    PersonalizedRoadmap,
    PlanRecommendation,
    PlanRecommendationKind,
    RoadmapStep,
    RoadmapTemplate,
    SkillAction,
    SkillAnalysis,
    SkillAssessment,
    SkillLevel,
    SkillNextStep,
    StepStatus,
)

SKIP_AHEAD_HOURS = 1
MIN_STEP_HOURS = 1
FOCUS_ROADMAP_STEPS = 5
FOCUS_ROADMAP_WEEKS = 4

ADVANCEMENT_PERCENTAGE = 80
FOUNDATION_PERCENTAGE = 60

# (title, summary, xp) per focus step; {name} is the readable skill name
FOCUS_STEP_PLAN: list[tuple[str, str, int]] = [
    ("{name} Basics", "Learn the fundamentals of {name}", 75),
    ("Core {name} Concepts", "Work through the key ideas behind {name}", 100),
    ("Guided {name} Practice", "Practice {name} with worked examples", 100),
    ("Applied {name}", "Apply {name} in a small exercise", 125),
    ("{name} Review", "Consolidate {name} before the checkpoint", 100),
]


def readable_skill(skill: str) -> str:
    """'design_principles' -> 'Design Principles'."""
    return skill.replace("_", " ").replace("-", " ").title()


def templates_for(templates: Iterable[RoadmapTemplate], domain: str, tier: SkillLevel) -> list[RoadmapTemplate]:
    """Templates tagged with both the domain and the tier."""
    return [t for t in templates if t.tier is tier and domain in t.domains]


def step_unlocked(step: RoadmapStep, profile: Mapping[str, SkillAssessment]) -> bool:
    """
    A step is pre-unlocked when it declares prerequisite skills and every
    one of them was assessed above beginner. Unassessed skills count as
    unproven.
    """
    if not step.skills:
        return False
    return all(
        skill in profile and profile[skill].level is not SkillLevel.BEGINNER
        for skill in step.skills
    )


def personalize(
    template: RoadmapTemplate,
    analysis: SkillAnalysis,
    skip_ahead_hours: int = SKIP_AHEAD_HOURS,
    min_step_hours: int = MIN_STEP_HOURS,
) -> PersonalizedRoadmap:
    """
    Copy a template with step statuses and estimates set for this learner.

    The first step is the entry point and is always available; it only gets
    the skip-ahead reduction when its skills are proven.
    """
    steps = []
    for index, step in enumerate(template.steps):
        if step_unlocked(step, analysis.skill_profile):
            steps.append(step.model_copy(update={
                "status": StepStatus.AVAILABLE,
                "estimated_hours": max(min_step_hours, step.estimated_hours - skip_ahead_hours),
            }))
        elif index == 0:
            steps.append(step.model_copy(update={"status": StepStatus.AVAILABLE}))
        else:
            steps.append(step.model_copy(update={"status": StepStatus.LOCKED}))

    return PersonalizedRoadmap(
        key=template.key,
        title=template.title,
        description=template.description,
        tier=template.tier,
        estimated_weeks=template.estimated_weeks,
        steps=steps,
        personalized_for=analysis.domain,
        user_level=analysis.overall_level,
        tags=list(template.domains),
    )


def focus_roadmap(
    skill: str,
    personalized_for: str,
    user_level: SkillLevel,
    steps: int = FOCUS_ROADMAP_STEPS,
    weeks: int = FOCUS_ROADMAP_WEEKS,
) -> PersonalizedRoadmap:
    """Synthetic beginner roadmap strengthening one weak skill."""
    name = readable_skill(skill)
    focus_steps = []
    for index in range(steps):
        if index < len(FOCUS_STEP_PLAN):
            title, summary, xp = FOCUS_STEP_PLAN[index]
        else:
            title, summary, xp = (f"{{name}} Practice {index + 1}", "Extra {name} practice", 100)
        focus_steps.append(RoadmapStep(
            id=f"focus-{skill}-{index + 1}",
            title=title.format(name=name),
            summary=summary.format(name=name),
            skills=[skill],
            xp_reward=xp,
            estimated_hours=1,
            status=StepStatus.AVAILABLE if index == 0 else StepStatus.LOCKED,
        ))

    return PersonalizedRoadmap(
        key=f"focus-{skill}",
        title=f"{name} Fundamentals",
        description=f"Strengthen your {name.lower()} skills",
        tier=SkillLevel.BEGINNER,
        estimated_weeks=weeks,
        steps=focus_steps,
        personalized_for=personalized_for,
        user_level=user_level,
        is_focus_area=True,
        focus_skill=skill,
        tags=[skill, "fundamentals", "improvement"],
    )


def generate_personalized_roadmaps(
    analysis: SkillAnalysis,
    templates: Iterable[RoadmapTemplate],
    skip_ahead_hours: int = SKIP_AHEAD_HOURS,
    min_step_hours: int = MIN_STEP_HOURS,
    focus_steps: int = FOCUS_ROADMAP_STEPS,
    focus_weeks: int = FOCUS_ROADMAP_WEEKS,
) -> list[PersonalizedRoadmap]:
    """
    Personalized roadmaps for a scored diagnostic.

    Args:
        analysis: Scored diagnostic
        templates: Template catalog
        skip_ahead_hours: Estimate reduction for pre-unlocked steps
        min_step_hours: Floor for reduced estimates
        focus_steps: Steps per focus roadmap
        focus_weeks: Estimated weeks per focus roadmap

    Returns:
        Template-derived roadmaps followed by one focus roadmap per weak skill
    """
    selected = templates_for(templates, analysis.domain, analysis.overall_level)
    roadmaps = [personalize(t, analysis, skip_ahead_hours, min_step_hours) for t in selected]
    roadmaps.extend(
        focus_roadmap(skill, analysis.domain, analysis.overall_level, focus_steps, focus_weeks)
        for skill in analysis.weak_skills
    )
    logger.info(
        f"Personalized {len(selected)} roadmap(s) and {len(analysis.weak_skills)} focus area(s) "
        f"for {analysis.domain} ({analysis.overall_level.value})"
    )
    return roadmaps


# ============================================================================
# Learning plan
# ============================================================================


def plan_recommendations(analysis: SkillAnalysis) -> list[PlanRecommendation]:
    """Advancement or foundation guidance from the overall percentage."""
    if analysis.percentage >= ADVANCEMENT_PERCENTAGE:
        return [PlanRecommendation(
            PlanRecommendationKind.ADVANCEMENT,
            "Consider Advanced Topics",
            "You show strong fundamentals. Consider exploring advanced concepts.",
        )]
    if analysis.percentage < FOUNDATION_PERCENTAGE:
        return [PlanRecommendation(
            PlanRecommendationKind.FOUNDATION,
            "Strengthen Fundamentals",
            "Focus on building stronger foundations before advancing.",
        )]
    return []


def skill_next_steps(profile: Mapping[str, SkillAssessment]) -> list[SkillNextStep]:
    """Improve weak skills first, then advance strong ones; profile order within each group."""
    improve = [
        SkillNextStep(SkillAction.IMPROVE, skill, "high", "2-3 weeks")
        for skill, a in profile.items()
        if a.needs_improvement
    ]
    advance = [
        SkillNextStep(SkillAction.ADVANCE, skill, "medium", "1-2 weeks")
        for skill, a in profile.items()
        if a.strength
    ]
    return improve + advance


def build_learning_plan(
    analysis: SkillAnalysis,
    templates: Iterable[RoadmapTemplate],
    **personalization: int,
) -> LearningPlan:
    """Roadmaps plus recommendations, per-skill next steps and total weeks."""
    return LearningPlan(
        analysis=analysis,
        roadmaps=generate_personalized_roadmaps(analysis, templates, **personalization),
        recommendations=plan_recommendations(analysis),
        next_steps=skill_next_steps(analysis.skill_profile),
    )


def analysis_to_event(
    analysis: SkillAnalysis,
    roadmap_id: str,
    occurred_on: date,
    time_spent_minutes: int | None = None,
) -> ActivityEvent:
    """A completed diagnostic counts as a lesson carrying its percentage."""
    return ActivityEvent(
        kind=ActivityKind.LESSON_COMPLETED,
        roadmap_id=roadmap_id,
        xp_earned=step_completion_xp(time_spent_minutes, analysis.percentage),
        test_score=round(analysis.percentage, 2),
        time_spent_minutes=time_spent_minutes,
        occurred_on=occurred_on,
    )

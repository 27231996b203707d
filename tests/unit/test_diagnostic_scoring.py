"""
Unit tests for diagnostic scoring.

Run: pytest tests/unit/test_diagnostic_scoring.py -v
"""

import pytest

from src.core.errors import NotFoundError, ValidationError
from src.diagnostic import DiagnosticEngine
from src.diagnostic.models import SkillLevel, parse_diagnostic
from src.diagnostic.scoring import average_difficulty, overall_level, score, skill_level

# Correct answers for the built-in programming diagnostic
PROGRAMMING_CORRECT = {"prog_1": 2, "prog_2": 0, "prog_3": 2, "prog_4": 1, "prog_5": 2}


@pytest.fixture
def engine():
    return DiagnosticEngine()


@pytest.fixture
def mixed_diagnostic():
    return parse_diagnostic({
        "id": "mixed",
        "domain": "programming",
        "title": "Mixed",
        "questions": [
            {"id": "a", "question": "?", "options": ["x", "y"], "correct_index": 0,
             "skill": "javascript", "difficulty": "advanced"},
            {"id": "b", "question": "?", "options": ["x", "y"], "correct_index": 0,
             "skill": "javascript", "difficulty": "intermediate"},
            {"id": "c", "question": "?", "options": ["x", "y"], "correct_index": 1,
             "skill": "html", "difficulty": "beginner"},
        ],
    })


class TestLevelRules:
    def test_average_difficulty(self):
        assert average_difficulty([SkillLevel.BEGINNER, SkillLevel.ADVANCED]) == 2.0
        assert average_difficulty([]) == 0.0

    @pytest.mark.parametrize("accuracy,difficulty,level", [
        (1.0, 3.0, SkillLevel.ADVANCED),
        (0.8, 2.5, SkillLevel.ADVANCED),
        (1.0, 2.0, SkillLevel.INTERMEDIATE),
        (0.6, 2.0, SkillLevel.INTERMEDIATE),
        (0.5, 3.0, SkillLevel.BEGINNER),
        (1.0, 1.0, SkillLevel.INTERMEDIATE),
        (0.7, 1.0, SkillLevel.BEGINNER),
    ])
    def test_skill_level(self, accuracy, difficulty, level):
        assert skill_level(accuracy, difficulty) is level

    def test_difficulty_gates_the_ceiling(self):
        assert skill_level(0.85, 2.7) is SkillLevel.ADVANCED
        assert skill_level(0.85, 1.0) is SkillLevel.INTERMEDIATE

    def test_overall_level_uses_accuracy_only(self):
        assert overall_level(0.8) is SkillLevel.ADVANCED
        assert overall_level(0.6) is SkillLevel.INTERMEDIATE
        assert overall_level(0.59) is SkillLevel.BEGINNER


class TestScore:
    def test_all_correct(self, engine):
        analysis = engine.score_by_id("pre_test_programming", PROGRAMMING_CORRECT)

        assert analysis.total_score == 5
        assert analysis.percentage == 100
        assert analysis.overall_level is SkillLevel.ADVANCED
        assert analysis.recommended_path == "web_development"
        # beginner-only skills stay capped below advanced
        assert analysis.skill_profile["programming_concepts"].level is SkillLevel.INTERMEDIATE
        assert analysis.skill_profile["javascript"].level is SkillLevel.INTERMEDIATE
        assert analysis.skill_profile["design_patterns"].level is SkillLevel.ADVANCED

    def test_profile_follows_question_order(self, engine):
        analysis = engine.score_by_id("programming", PROGRAMMING_CORRECT)
        assert list(analysis.skill_profile) == [
            "programming_concepts", "web_development", "javascript", "algorithms", "design_patterns",
        ]

    def test_unanswered_count_wrong(self, engine):
        analysis = engine.score_by_id("pre_test_programming", {"prog_1": 2, "prog_2": 0})

        assert analysis.total_score == 2
        assert analysis.percentage == 40
        assert analysis.overall_level is SkillLevel.BEGINNER
        assert analysis.weak_skills == ["javascript", "algorithms", "design_patterns"]
        assert analysis.recommended_path == "general"

    def test_grouping_by_skill(self, mixed_diagnostic):
        analysis = score(mixed_diagnostic, {"a": 0, "b": 1, "c": 1})
        js = analysis.skill_profile["javascript"]

        assert (js.correct, js.total) == (1, 2)
        assert js.accuracy == 0.5
        assert js.avg_difficulty == 2.5
        assert js.needs_improvement is True
        assert js.strength is False
        assert js.level is SkillLevel.BEGINNER
        assert analysis.strong_skills == ["html"]

    def test_path_priority(self, engine):
        # algorithms strong, javascript wrong
        answers = {**PROGRAMMING_CORRECT, "prog_3": 0}
        assert engine.score_by_id("programming", answers).recommended_path == "computer_science"

    def test_unknown_question_rejected(self, engine):
        with pytest.raises(ValidationError) as exc_info:
            engine.score_by_id("design", {"design_1": 0, "nope": 1})
        assert exc_info.value.details == ["unknown question id 'nope'"]

    def test_numeric_string_answers_coerced(self, engine):
        answers = {qid: str(index) for qid, index in PROGRAMMING_CORRECT.items()}
        analysis = engine.score_by_id("programming", answers)
        assert analysis.total_score == 5

    @pytest.mark.parametrize("bad", [True, "b", 1.5, -1, None, [2]])
    def test_malformed_answer_rejected(self, engine, bad):
        with pytest.raises(ValidationError, match="Invalid diagnostic answers") as exc_info:
            engine.score_by_id("programming", {**PROGRAMMING_CORRECT, "prog_1": bad})
        assert exc_info.value.details[0].startswith("prog_1:")

    def test_answers_must_be_a_mapping(self, engine):
        with pytest.raises(ValidationError):
            engine.score_by_id("programming", [2, 0, 2, 1, 2])

    def test_unknown_diagnostic(self, engine):
        with pytest.raises(NotFoundError):
            engine.score_by_id("cooking", {})

    def test_unregistered_definition(self, mixed_diagnostic, engine):
        with pytest.raises(NotFoundError):
            engine.score(mixed_diagnostic, {})

    def test_to_dict(self, engine):
        data = engine.score_by_id("business", {"biz_1": 0, "biz_2": 2, "biz_3": 1}).to_dict()
        assert data["overall_level"] == "advanced"
        assert data["recommended_path"] == "growth_marketing"
        assert data["skill_profile"]["marketing_analytics"]["level"] == "intermediate"


class TestDiagnosticDefinition:
    def test_duplicate_question_ids_rejected(self):
        question = {"id": "q", "question": "?", "options": ["a", "b"], "correct_index": 0, "skill": "s"}
        with pytest.raises(ValidationError):
            parse_diagnostic({"id": "d", "domain": "x", "title": "D", "questions": [question, question]})

    def test_skills_in_first_seen_order(self, mixed_diagnostic):
        assert mixed_diagnostic.skills == ["javascript", "html"]

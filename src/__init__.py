"""SkillNet learner progress engine."""

"""
Configuration settings for the SkillNet progress engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Heatmap & Streaks
    # ========================================
    heatmap_retention_days: int = Field(
        default=90,
        ge=1,
        description="Number of most recent days kept in the activity heatmap",
    )
    max_heatmap_intensity: int = Field(
        default=4,
        ge=1,
        description="Per-day heatmap intensity ceiling",
    )

    # ========================================
    # Checkpoint Tests
    # ========================================
    default_passing_score: float = Field(
        default=70.0,
        ge=0,
        le=100,
        description="Pass bar for tests that do not set their own passing score",
    )

    # ========================================
    # Roadmap Personalization
    # ========================================
    skip_ahead_hours: int = Field(
        default=1,
        ge=0,
        description="Hours taken off a step's estimate when its skills are already proven",
    )
    min_step_hours: int = Field(
        default=1,
        ge=1,
        description="Floor for reduced step estimates",
    )
    focus_roadmap_steps: int = Field(
        default=5,
        ge=1,
        description="Steps in a generated focus roadmap",
    )
    focus_roadmap_weeks: int = Field(
        default=4,
        ge=1,
        description="Estimated weeks for a generated focus roadmap",
    )

    # ========================================
    # Persistence
    # ========================================
    progress_db_path: Path = Field(
        default=Path.home() / ".skillnet" / "progress.db",
        description="SQLite file used by the local progress store",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum log level for the stderr sink",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional rotating log file",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

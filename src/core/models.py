"""
Core progress records shared by the gamification pipeline.

Design:
- ActivityEvent: immutable pipeline input (pydantic, validated at the boundary)
- ActivityRecord: normalized event with heatmap points and tooltip
- HeatmapEntry: one calendar day of activity intensity
- ProgressRecord: per (user, roadmap) aggregate threaded through pure functions
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from src.core.errors import StateInvariantViolation, ValidationError, from_pydantic


class ActivityKind(str, Enum):
    """Closed set of learning activities the pipeline accepts."""

    LESSON_COMPLETED = "lesson_completed"
    TEST_PASSED = "test_passed"
    PROJECT_SUBMITTED = "project_submitted"
    STREAK_MAINTAINED = "streak_maintained"
    BADGE_EARNED = "badge_earned"
    ROADMAP_COMPLETED = "roadmap_completed"
    PERFECT_SCORE = "perfect_score"
    HELP_GIVEN = "help_given"

    @classmethod
    def parse(cls, value: str | ActivityKind) -> ActivityKind:
        """
        Resolve a kind from its enum value or name, case-insensitively.

        Raises:
            ValidationError: If the value names no known activity kind
        """
        if isinstance(value, ActivityKind):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(
                f"Unknown activity kind: {value!r}",
                [f"expected one of {', '.join(k.value for k in cls)}"],
            ) from None

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return self.value.replace("_", " ").title()


# Kinds that mark a roadmap step as completed when a step id is present
STEP_COMPLETING_KINDS = frozenset({
    ActivityKind.LESSON_COMPLETED,
    ActivityKind.TEST_PASSED,
    ActivityKind.PROJECT_SUBMITTED,
    ActivityKind.PERFECT_SCORE,
})

# Kinds whose test_score counts toward assessment history
SCORED_KINDS = frozenset({
    ActivityKind.TEST_PASSED,
    ActivityKind.PROJECT_SUBMITTED,
    ActivityKind.PERFECT_SCORE,
})


def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("option index must be an integer, not a boolean")
    return value


# Selected option in a multiple choice answer; "2" coerces, True and 1.5 do not
OptionIndex = Annotated[int, BeforeValidator(_reject_bool), Field(ge=0)]


class ActivityEvent(BaseModel):
    """A single learning activity delivered by the caller."""

    model_config = ConfigDict(frozen=True)

    kind: ActivityKind
    roadmap_id: str = Field(..., min_length=1, description="Roadmap the activity belongs to")
    step_id: str | None = Field(default=None, description="Roadmap step, when applicable")
    xp_earned: int = Field(default=0, ge=0, description="XP gained by this activity")
    test_score: float | None = Field(default=None, ge=0, le=100, description="Percentage score")
    badge_earned: str | None = Field(default=None, description="Badge id unlocked by this activity")
    time_spent_minutes: int | None = Field(default=None, ge=0)
    occurred_on: date

    @field_validator("kind", mode="before")
    @classmethod
    def _normalize_kind(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


def parse_event(payload: Mapping[str, Any]) -> ActivityEvent:
    """
    Build an ActivityEvent from a raw mapping (JSON body, CLI flags).

    Args:
        payload: Raw event fields

    Returns:
        Validated ActivityEvent

    Raises:
        ValidationError: If any field is missing or out of range
    """
    kind = payload.get("kind")
    if kind is not None:
        # Fail fast with the engine error for unknown kinds
        ActivityKind.parse(kind)
    try:
        return ActivityEvent.model_validate(dict(payload))
    except PydanticValidationError as e:
        raise from_pydantic(e, "activity event") from e


@dataclass(frozen=True)
class ActivityRecord:
    """Normalized activity ready to be folded into the heatmap."""

    kind: ActivityKind
    roadmap_id: str
    date: date
    xp_earned: int
    activity_points: int  # 1-4
    intensity: int  # points clamped to the heatmap scale
    tooltip: str = ""


@dataclass(frozen=True)
class HeatmapEntry:
    """Activity intensity for one calendar day."""

    date: date
    intensity: int  # 0-4
    tooltip: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "date": self.date.isoformat(),
            "intensity": self.intensity,
            "tooltip": self.tooltip,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HeatmapEntry:
        """Build from a stored dictionary; a missing tooltip becomes empty."""
        raw_date = data["date"]
        day = raw_date if isinstance(raw_date, date) else date.fromisoformat(str(raw_date))
        return cls(
            date=day,
            intensity=int(data.get("intensity", 0)),
            tooltip=data.get("tooltip") or "",
        )


@dataclass(frozen=True)
class ProgressRecord:
    """
    Per (user, roadmap) progress aggregate.

    Records are values: the pipeline returns a new record for every
    activity and the caller persists it.
    """

    user_id: str
    roadmap_id: str
    total_xp: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    heatmap: tuple[HeatmapEntry, ...] = ()  # newest first
    badges: frozenset[str] = field(default_factory=frozenset)
    completed_steps: frozenset[str] = field(default_factory=frozenset)
    test_scores: tuple[float, ...] = ()  # attempt order
    completed_roadmaps: int = 0

    @property
    def key(self) -> tuple[str, str]:
        """Persistence key."""
        return (self.user_id, self.roadmap_id)

    @property
    def badge_count(self) -> int:
        return len(self.badges)

    @property
    def average_test_score(self) -> float | None:
        """Mean of all recorded test scores, None when no tests were taken."""
        if not self.test_scores:
            return None
        return sum(self.test_scores) / len(self.test_scores)

    def evolve(self, **changes: Any) -> ProgressRecord:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "user_id": self.user_id,
            "roadmap_id": self.roadmap_id,
            "total_xp": self.total_xp,
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "heatmap": [entry.to_dict() for entry in self.heatmap],
            "badges": sorted(self.badges),
            "completed_steps": sorted(self.completed_steps),
            "test_scores": list(self.test_scores),
            "completed_roadmaps": self.completed_roadmaps,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ProgressRecord:
        """Build from a stored dictionary, defaulting absent optional fields."""
        return cls(
            user_id=str(data["user_id"]),
            roadmap_id=str(data["roadmap_id"]),
            total_xp=int(data.get("total_xp", 0)),
            current_streak=int(data.get("current_streak", 0)),
            longest_streak=int(data.get("longest_streak", 0)),
            heatmap=tuple(HeatmapEntry.from_dict(e) for e in data.get("heatmap", [])),
            badges=frozenset(data.get("badges", [])),
            completed_steps=frozenset(str(s) for s in data.get("completed_steps", [])),
            test_scores=tuple(float(s) for s in data.get("test_scores", [])),
            completed_roadmaps=int(data.get("completed_roadmaps", 0)),
        )


def validate_record(record: ProgressRecord, max_intensity: int = 4) -> ProgressRecord:
    """
    Check a ProgressRecord's structural invariants.

    Args:
        record: Record to check
        max_intensity: Heatmap intensity ceiling

    Returns:
        The same record, for chaining

    Raises:
        StateInvariantViolation: If counters are negative, intensities are
            out of range or a day appears twice in the heatmap
    """
    problems = []
    if record.total_xp < 0:
        problems.append(f"total_xp is negative ({record.total_xp})")
    if record.current_streak < 0:
        problems.append(f"current_streak is negative ({record.current_streak})")
    if record.longest_streak < 0:
        problems.append(f"longest_streak is negative ({record.longest_streak})")
    if record.completed_roadmaps < 0:
        problems.append(f"completed_roadmaps is negative ({record.completed_roadmaps})")

    seen: set[date] = set()
    for entry in record.heatmap:
        if not 0 <= entry.intensity <= max_intensity:
            problems.append(f"heatmap intensity {entry.intensity} on {entry.date} outside 0..{max_intensity}")
        if entry.date in seen:
            problems.append(f"heatmap has duplicate date {entry.date}")
        seen.add(entry.date)

    for score in record.test_scores:
        if not 0 <= score <= 100:
            problems.append(f"test score {score} outside 0..100")

    if problems:
        raise StateInvariantViolation(
            f"Corrupted progress record for {record.user_id}/{record.roadmap_id}", problems
        )
    return record

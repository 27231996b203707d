"""
Core Module - Shared records, errors and clock.

Components:
- models: ActivityEvent, ActivityRecord, HeatmapEntry, ProgressRecord
- errors: EngineError taxonomy (validation, not found, state invariant)
- clock: Injected calendar-day source

Design Principle:
Pipeline modules (src/gamification/, src/assessment/, src/diagnostic/)
import shared concepts from src/core/ rather than redefining them.
"""

from src.core.clock import Clock, FixedClock, SystemClock
from src.core.errors import EngineError, NotFoundError, StateInvariantViolation, ValidationError
from src.core.models import (
    ActivityEvent,
    ActivityKind,
    ActivityRecord,
    HeatmapEntry,
    ProgressRecord,
    parse_event,
    validate_record,
)

__all__ = [
    # Clock
    "Clock",
    "FixedClock",
    "SystemClock",
    # Errors
    "EngineError",
    "NotFoundError",
    "StateInvariantViolation",
    "ValidationError",
    # Records
    "ActivityEvent",
    "ActivityKind",
    "ActivityRecord",
    "HeatmapEntry",
    "ProgressRecord",
    "parse_event",
    "validate_record",
]

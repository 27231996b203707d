"""
Checkpoint test graders.

Each test kind (mcq, coding, project) has its own module with a grader:
- validate(): Reject malformed submissions before grading
- grade(): Score the submission unit by unit
"""

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .base import Grader


class TestKind(str, Enum):
    """Supported checkpoint test kinds."""
    __test__ = False

    MCQ = "mcq"
    CODING = "coding"
    PROJECT = "project"


# Grader registry - populated by @register decorator
GRADERS: dict[TestKind, "Grader"] = {}


def register(kind: TestKind):
    """Decorator to register a grader for a test kind."""
    def decorator(cls):
        GRADERS[kind] = cls()
        return cls
    return decorator


def get_grader(kind: str | TestKind) -> "Grader | None":
    """Get the grader for a test kind."""
    if isinstance(kind, str):
        try:
            kind = TestKind(kind.lower())
        except ValueError:
            return None
    return GRADERS.get(kind)


# Import graders to trigger registration
from . import mcq
from . import coding
from . import project

__all__ = [
    "TestKind",
    "GRADERS",
    "get_grader",
    "register",
]

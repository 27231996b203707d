"""
Engine error taxonomy.

- ValidationError: malformed or incomplete input (submission, event, answers)
- NotFoundError: unknown test or diagnostic id
- StateInvariantViolation: a ProgressRecord with an impossible shape

Validation and not-found errors are raised to the immediate caller for
remediation. StateInvariantViolation means a record was corrupted outside
the pipeline and should be treated as fatal.
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str, details: list[str] | None = None):
        super().__init__(message)
        self.message = message
        self.details: list[str] = list(details or [])

    def __str__(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message}: " + "; ".join(self.details)


class ValidationError(EngineError):
    """Raised when a submission, event or answer map is malformed."""
    pass


class NotFoundError(EngineError):
    """Raised when a test or diagnostic id is not registered."""
    pass


class StateInvariantViolation(EngineError):
    """Raised when a ProgressRecord violates its structural invariants."""
    pass


def from_pydantic(exc: Exception, context: str) -> ValidationError:
    """
    Convert a pydantic validation failure into an engine ValidationError.

    Args:
        exc: pydantic.ValidationError raised while parsing
        context: What was being parsed (used as the message)

    Returns:
        ValidationError with one detail line per field error
    """
    details = []
    errors = getattr(exc, "errors", None)
    if callable(errors):
        for err in errors():
            location = ".".join(str(part) for part in err.get("loc", ())) or "value"
            details.append(f"{location}: {err.get('msg', 'invalid')}")
    else:
        details.append(str(exc))
    return ValidationError(f"Invalid {context}", details)

"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from datetime import date
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.core.clock import FixedClock  # noqa: E402
from src.core.models import ActivityEvent, ActivityKind, ProgressRecord  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.path):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.path):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def today():
    """Fixed reference day for calendar computations."""
    return date(2024, 3, 15)


@pytest.fixture
def fixed_clock(today):
    """Clock frozen on the reference day."""
    return FixedClock(today)


@pytest.fixture
def empty_record():
    """Fresh progress record for one learner and roadmap."""
    return ProgressRecord(user_id="learner-1", roadmap_id="web_development")


@pytest.fixture
def make_event(today):
    """Factory for activity events on the web_development roadmap."""
    def _make(kind=ActivityKind.LESSON_COMPLETED, occurred_on=None, **fields):
        return ActivityEvent(
            kind=kind,
            roadmap_id=fields.pop("roadmap_id", "web_development"),
            occurred_on=occurred_on or today,
            **fields,
        )
    return _make


@pytest.fixture
def sample_mcq_payload():
    """Provide a small multiple choice test definition."""
    return {
        "id": "sample-mcq",
        "kind": "mcq",
        "title": "Sample Quiz",
        "questions": [
            {"id": "q1", "question": "2 + 2?", "options": ["3", "4"], "correct_index": 1},
            {"id": "q2", "question": "Capital of France?", "options": ["Paris", "Rome"], "correct_index": 0},
            {"id": "q3", "question": "HTTP 404 means?", "options": ["OK", "Not Found"], "correct_index": 1},
            {"id": "q4", "question": "Python is?", "options": ["Compiled only", "Interpreted"], "correct_index": 1},
        ],
    }

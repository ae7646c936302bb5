"""Shared fixtures for the guessing game test suite."""

import sys
from pathlib import Path

import pytest

# Ensure the project root is on sys.path so 'guessgame' and 'tests' resolve
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tests.helpers import FakeClock, RecordingFeedback, ScriptedLineSource  # noqa: E402


@pytest.fixture
def scripted_source():
    """Factory for ScriptedLineSource; every source is released at teardown
    so no reader thread stays blocked after the test."""
    sources = []

    def _make(*script):
        source = ScriptedLineSource(script)
        sources.append(source)
        return source

    yield _make
    for source in sources:
        source.close()


@pytest.fixture
def feedback():
    return RecordingFeedback()


@pytest.fixture
def clock():
    return FakeClock()

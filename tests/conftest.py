"""
Test fixtures for the fitness tracker.

Every test gets in-memory storage and a fixed clock so sessions are
deterministic and nothing touches the filesystem unless a test asks for it.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

import pytest
from fastapi.testclient import TestClient

# Repo root: .../fitness-tracker
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import fitness_tracker...`
for p in {ROOT, SRC}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from fitness_tracker.main import app
from fitness_tracker.api.routes import get_tracker
from fitness_tracker.models import Exercise, WorkoutSession
from fitness_tracker.services.session_store import SessionStore
from fitness_tracker.services.session_tracker import SessionTracker
from fitness_tracker.storage.backends import InMemoryStorage


# ---------------------------------------------------------------------------
# Clock / Storage
# ---------------------------------------------------------------------------


FIXED_NOW = datetime(2026, 3, 14, 10, 30, tzinfo=timezone.utc)
TODAY = "2026-03-14"


@pytest.fixture
def fixed_now() -> Callable[[], datetime]:
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def store(storage) -> SessionStore:
    return SessionStore(storage)


@pytest.fixture
def tracker(store, fixed_now) -> SessionTracker:
    return SessionTracker(store, now=fixed_now)


# ---------------------------------------------------------------------------
# Core Test Client
# ---------------------------------------------------------------------------


@pytest.fixture
def client(tracker) -> TestClient:
    """Per-test FastAPI TestClient backed by the in-memory tracker."""
    app.dependency_overrides[get_tracker] = lambda: tracker
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Sample Data Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_exercises() -> list:
    return [
        Exercise(id="ex-0", name="Push Ups on Bench", sets=3, reps="12"),
        Exercise(
            id="ex-1",
            name="Half Kneeling Cable Rows",
            sets=3,
            reps="8each side (Heavy)",
            notes="each side (Heavy)",
        ),
    ]


@pytest.fixture
def make_session(sample_exercises) -> Callable[..., WorkoutSession]:
    """Factory for sessions with the sample exercises."""
    def _make(session_id: str = "workout-1", date: str = TODAY, completed_sets=None) -> WorkoutSession:
        return WorkoutSession(
            id=session_id,
            date=date,
            exercises=sample_exercises,
            completed_sets=completed_sets or {},
        )
    return _make

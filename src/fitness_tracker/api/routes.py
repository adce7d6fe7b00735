"""
API routes for the fitness tracker.

Serves today's session with per-set rows, takes draft weights and set
completions, and answers history lookups. Single user, no auth.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from fitness_tracker.config import settings
from fitness_tracker.models import (
    MAX_SETS,
    Exercise,
    ExerciseProgress,
    HistoryEntry,
    SetStatus,
    WorkoutSession,
)
from fitness_tracker.parsers.text_parser import parse_workout
from fitness_tracker.services.session_store import SessionStore
from fitness_tracker.services.session_tracker import SessionTracker
from fitness_tracker.storage.backends import get_storage_backend

logger = logging.getLogger(__name__)

router = APIRouter()

_tracker: Optional[SessionTracker] = None


async def get_tracker() -> SessionTracker:
    """Get or create the process-wide session tracker."""
    global _tracker
    if _tracker is None:
        storage = get_storage_backend(settings.STORAGE, settings.STORAGE_PATH)
        _tracker = SessionTracker(SessionStore(storage))
    return _tracker


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class ParseRequest(BaseModel):
    """Request model for POST /parse and POST /sessions/today"""
    text: str = Field(..., max_length=50000, description="Workout text, one exercise per line")


class ParseResponse(BaseModel):
    exercises: List[Exercise]


class TodayResponse(BaseModel):
    """Today's session with a row per set"""
    session: WorkoutSession
    progress: List[ExerciseProgress]


class DraftWeightRequest(BaseModel):
    exercise_id: str
    set_number: int = Field(..., ge=1, le=MAX_SETS)
    weight: float = Field(..., ge=0)


class CompleteSetRequest(BaseModel):
    exercise_id: str
    set_number: int = Field(..., ge=1, le=MAX_SETS)
    weight: Optional[float] = Field(default=None, ge=0, description="Falls back to the draft weight")


def _today_response(tracker: SessionTracker, session: WorkoutSession) -> TodayResponse:
    return TodayResponse(session=session, progress=tracker.progress(session))


def _check_set(session: WorkoutSession, exercise_id: str, set_number: int) -> None:
    exercise = session.get_exercise(exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail=f"Exercise {exercise_id} not found in today's session")
    if set_number > exercise.sets:
        raise HTTPException(
            status_code=404,
            detail=f"{exercise.name} has {exercise.sets} sets, no set {set_number}",
        )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
# Handlers are async and never await, so each read-then-write of the
# session slot runs to completion on the event loop before the next starts.

@router.get("/health")
async def health():
    return {"status": "ok"}


@router.post("/parse", response_model=ParseResponse)
async def parse_text(payload: ParseRequest):
    """Parse workout text without touching stored sessions."""
    return ParseResponse(exercises=parse_workout(payload.text))


@router.get("/sessions", response_model=List[WorkoutSession])
async def list_sessions(tracker: SessionTracker = Depends(get_tracker)):
    return tracker.store.get_all()


@router.get("/sessions/today", response_model=TodayResponse)
async def get_today(tracker: SessionTracker = Depends(get_tracker)):
    """Today's stored session, or a new one from the default workout."""
    return _today_response(tracker, tracker.load_or_create_today())


@router.post("/sessions/today", response_model=TodayResponse, status_code=201)
async def create_today(payload: ParseRequest, tracker: SessionTracker = Depends(get_tracker)):
    """Start today's session from custom workout text."""
    if tracker.store.get_by_date(tracker.today()):
        raise HTTPException(status_code=409, detail="Today's session already exists")

    session = tracker.new_session(payload.text)
    tracker.store.save(session)
    return _today_response(tracker, session)


@router.put("/sessions/today/drafts", response_model=SetStatus)
async def set_draft_weight(payload: DraftWeightRequest, tracker: SessionTracker = Depends(get_tracker)):
    """Hold a weight for a pending set until it is completed."""
    session = tracker.load_or_create_today()
    _check_set(session, payload.exercise_id, payload.set_number)

    completed_set = tracker.set_status(session, payload.exercise_id, payload.set_number)
    if completed_set and completed_set.completed:
        raise HTTPException(status_code=409, detail=f"Set {payload.set_number} is already complete")

    tracker.drafts.set(session, payload.exercise_id, payload.set_number, payload.weight)
    return SetStatus(
        exercise_id=payload.exercise_id,
        set_number=payload.set_number,
        weight=payload.weight,
    )


@router.post("/sessions/today/sets", response_model=TodayResponse)
async def complete_set(payload: CompleteSetRequest, tracker: SessionTracker = Depends(get_tracker)):
    """Mark a set complete and persist today's session."""
    session = tracker.load_or_create_today()
    _check_set(session, payload.exercise_id, payload.set_number)

    completed_set = tracker.set_status(session, payload.exercise_id, payload.set_number)
    if completed_set and completed_set.completed:
        raise HTTPException(status_code=409, detail=f"Set {payload.set_number} is already complete")

    session = tracker.complete_set(session, payload.exercise_id, payload.set_number, payload.weight)
    return _today_response(tracker, session)


@router.get("/history/{exercise_id}", response_model=List[HistoryEntry])
async def get_history(
    exercise_id: str,
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    tracker: SessionTracker = Depends(get_tracker),
):
    return tracker.store.get_history(exercise_id, limit or settings.HISTORY_LIMIT)

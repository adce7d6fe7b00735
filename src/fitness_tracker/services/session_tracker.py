"""
Session lifecycle and set completion.

Each (exercise, set_number) is either pending (no CompletedSet) or completed.
Marking a set complete records the weight and the exercise's leading rep
count and persists the session right away. Completed sets are shown locked;
there is no way back to pending.

Weights typed for pending sets live in WeightDrafts until committed and are
never persisted on their own.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from fitness_tracker.models import (
    CompletedSet,
    ExerciseProgress,
    SetStatus,
    WorkoutSession,
)
from fitness_tracker.parsers.text_parser import DEFAULT_WORKOUT, parse_workout
from fitness_tracker.services.session_store import SessionStore
from fitness_tracker.utils import leading_int

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def mark_set_complete(
    session: WorkoutSession,
    exercise_id: str,
    set_number: int,
    weight: float,
    now: Optional[datetime] = None,
) -> WorkoutSession:
    """
    Return a copy of the session with the set recorded as completed.

    Any earlier record for the same set number is replaced and the sets stay
    sorted by set number. Reps come from the leading integer of the exercise's
    reps text ("8each side" -> 8, "each side" -> None). An unknown exercise id
    leaves the session unchanged.
    """
    exercise = session.get_exercise(exercise_id)
    if not exercise:
        logger.warning(f"Cannot complete set {set_number}: no exercise {exercise_id} in session {session.id}")
        return session

    completed_set = CompletedSet(
        set_number=set_number,
        weight=weight,
        reps=leading_int(exercise.reps),
        completed=True,
        timestamp=(now or _utcnow()).isoformat(),
    )

    sets = [s for s in session.sets_for(exercise_id) if s.set_number != set_number]
    sets.append(completed_set)
    sets.sort(key=lambda s: s.set_number)

    completed_sets = dict(session.completed_sets)
    completed_sets[exercise_id] = sets
    return session.model_copy(update={"completed_sets": completed_sets})


class WeightDrafts:
    """
    Weights typed for sets that haven't been committed yet.

    Drafts are keyed by the session's date, since an unsaved session gets a
    new id on every load. Drafts from other days never show up in today's
    session and are dropped as soon as a draft is set for a new day.
    """

    def __init__(self):
        self._weights: Dict[Tuple[str, str, int], float] = {}

    def set(self, session: WorkoutSession, exercise_id: str, set_number: int, weight: float) -> None:
        stale = [key for key in self._weights if key[0] != session.date]
        for key in stale:
            del self._weights[key]
        self._weights[(session.date, exercise_id, set_number)] = weight

    def get(self, session: WorkoutSession, exercise_id: str, set_number: int) -> float:
        """Draft weight if any, otherwise the stored weight, otherwise 0."""
        key = (session.date, exercise_id, set_number)
        if key in self._weights:
            return self._weights[key]
        for completed_set in session.sets_for(exercise_id):
            if completed_set.set_number == set_number:
                return completed_set.weight
        return 0

    def clear(self, session: WorkoutSession, exercise_id: str, set_number: int) -> None:
        self._weights.pop((session.date, exercise_id, set_number), None)

    def __len__(self) -> int:
        return len(self._weights)


class SessionTracker:
    """Today's session: loading, completing sets, and per-set status."""

    def __init__(
        self,
        store: SessionStore,
        now: Callable[[], datetime] = _utcnow,
        drafts: Optional[WeightDrafts] = None,
    ):
        self.store = store
        self.now = now
        self.drafts = drafts if drafts is not None else WeightDrafts()

    def today(self) -> str:
        return self.now().date().isoformat()

    def new_session(self, workout_text: Optional[str] = None) -> WorkoutSession:
        """Build an unsaved session for today from workout text."""
        now = self.now()
        exercises = parse_workout(workout_text if workout_text is not None else DEFAULT_WORKOUT)
        return WorkoutSession(
            id=f"workout-{int(now.timestamp() * 1000)}",
            date=now.date().isoformat(),
            exercises=exercises,
            completed_sets={},
        )

    def load_or_create_today(self, workout_text: Optional[str] = None) -> WorkoutSession:
        """
        Return today's stored session, or a new unsaved one.

        The new session is only persisted once a set is completed.
        """
        session = self.store.get_by_date(self.today())
        if session:
            return session
        logger.info(f"No session for {self.today()}, starting a new one")
        return self.new_session(workout_text)

    def set_status(self, session: WorkoutSession, exercise_id: str, set_number: int) -> Optional[CompletedSet]:
        for completed_set in session.sets_for(exercise_id):
            if completed_set.set_number == set_number:
                return completed_set
        return None

    def complete_set(
        self,
        session: WorkoutSession,
        exercise_id: str,
        set_number: int,
        weight: Optional[float] = None,
    ) -> WorkoutSession:
        """Commit a set with the given weight (or its draft weight) and persist the session."""
        if weight is None:
            weight = self.drafts.get(session, exercise_id, set_number)

        updated = mark_set_complete(session, exercise_id, set_number, weight, now=self.now())
        if updated is session:
            return session

        self.store.save(updated)
        self.drafts.clear(session, exercise_id, set_number)
        return updated

    def progress(self, session: WorkoutSession) -> List[ExerciseProgress]:
        """Per-set rows for every exercise in the session."""
        result = []
        for exercise in session.exercises:
            rows = []
            for set_number in range(1, exercise.sets + 1):
                completed_set = self.set_status(session, exercise.id, set_number)
                is_completed = bool(completed_set and completed_set.completed)
                rows.append(SetStatus(
                    exercise_id=exercise.id,
                    set_number=set_number,
                    weight=self.drafts.get(session, exercise.id, set_number),
                    completed=is_completed,
                    locked=is_completed,
                    completed_set=completed_set,
                ))
            result.append(ExerciseProgress(
                exercise=exercise,
                completed_count=len(session.sets_for(exercise.id)),
                sets=rows,
            ))
        return result

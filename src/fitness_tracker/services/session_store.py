"""Workout session store backed by a single storage slot."""
from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from fitness_tracker.models import HistoryEntry, HistorySet, WorkoutSession
from fitness_tracker.storage.backends import StorageBackend

logger = logging.getLogger(__name__)

STORAGE_KEY = "fitness-tracker-sessions"
DEFAULT_HISTORY_LIMIT = 10


class SessionStore:
    """
    Reads and writes the whole WorkoutSession collection as a JSON array.

    Storage problems never reach the caller: reads fall back to an empty
    collection and writes become no-ops, both logged. Saves are
    read-modify-write without locking, so two processes sharing a slot can
    lose updates.
    """

    def __init__(self, storage: Optional[StorageBackend], key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key

    def _load_raw(self) -> List[Any]:
        """Return the stored JSON array as-is. Raises if the slot can't be decoded."""
        raw = self.storage.get_item(self.key)
        if not raw:
            return []
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError(f"expected a JSON array, got {type(data).__name__}")
        return data

    def get_all(self) -> List[WorkoutSession]:
        """
        Return all stored sessions, or [] if storage is unavailable or unreadable.

        Records that don't validate are skipped and logged; the rest are kept.
        """
        if not self.storage:
            return []
        try:
            data = self._load_raw()
        except Exception as e:
            logger.error("Failed to load workout sessions: %s", e)
            return []

        sessions = []
        for index, item in enumerate(data):
            try:
                sessions.append(WorkoutSession.model_validate(item))
            except ValidationError as e:
                logger.error("Skipping invalid workout session at index %s: %s", index, e)
        return sessions

    def save(self, session: WorkoutSession) -> None:
        """
        Update the session with the same id in place, or append it.

        Works on the raw stored records, so records this version can't
        validate are written back untouched. Nothing is written when the slot
        can't be decoded at all.
        """
        if not self.storage:
            return
        try:
            records = self._load_raw()
            payload = session.to_storage()
            for i, existing in enumerate(records):
                if isinstance(existing, dict) and existing.get("id") == session.id:
                    records[i] = payload
                    break
            else:
                records.append(payload)

            self.storage.set_item(self.key, json.dumps(records))
            logger.info("Saved workout session %s (%s)", session.id, session.date)
        except Exception as e:
            logger.error("Failed to save workout session %s: %s", session.id, e)

    def get_by_date(self, date: str) -> Optional[WorkoutSession]:
        """Return the first session recorded for a date, or None."""
        for session in self.get_all():
            if session.date == date:
                return session
        return None

    def get_history(self, exercise_id: str, limit: int = DEFAULT_HISTORY_LIMIT) -> List[HistoryEntry]:
        """
        Return the sets performed for an exercise, most recent date first.

        Only sessions with at least one completed set for the exercise are
        included, at most `limit` of them.
        """
        sessions = [s for s in self.get_all() if s.sets_for(exercise_id)]
        sessions.sort(key=lambda s: s.date, reverse=True)

        return [
            HistoryEntry(
                date=session.date,
                sets=[HistorySet(weight=cs.weight, reps=cs.reps) for cs in session.sets_for(exercise_id)],
            )
            for session in sessions[:max(limit, 0)]
        ]

"""Data models for workout tracking."""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

# Upper bound on sets per exercise; each set gets its own row
MAX_SETS = 100


class Exercise(BaseModel):
    """A single planned exercise parsed from one line of workout text."""
    id: str
    name: str
    sets: int = Field(default=3, ge=1, le=MAX_SETS)
    reps: str = "10"  # Free text: "12", "8each side (Heavy)"
    notes: Optional[str] = None

    class Config:
        frozen = True
        extra = "ignore"  # Ignore extra fields like 'videoUrl' from older payloads


class CompletedSet(BaseModel):
    """A recorded set of an exercise, with the weight (lbs) and reps used."""
    set_number: int = Field(..., ge=1, alias="setNumber")
    weight: float = 0
    reps: Optional[int] = None  # Leading integer of Exercise.reps, None if it has none
    completed: bool = True
    timestamp: str

    class Config:
        populate_by_name = True
        extra = "ignore"


class WorkoutSession(BaseModel):
    """
    One calendar day's workout.

    completed_sets maps exercise id -> sets sorted by set_number, with at most
    one entry per set_number.
    """
    id: str
    date: str = Field(..., pattern=r'^\d{4}-\d{2}-\d{2}$')
    exercises: List[Exercise] = Field(default_factory=list)
    completed_sets: Dict[str, List[CompletedSet]] = Field(default_factory=dict, alias="completedSets")

    class Config:
        populate_by_name = True
        extra = "ignore"

    def get_exercise(self, exercise_id: str) -> Optional[Exercise]:
        """Return the exercise with the given id, or None."""
        for exercise in self.exercises:
            if exercise.id == exercise_id:
                return exercise
        return None

    def sets_for(self, exercise_id: str) -> List[CompletedSet]:
        """Return the completed sets recorded for an exercise (possibly empty)."""
        return self.completed_sets.get(exercise_id, [])

    def to_storage(self) -> Dict[str, Any]:
        """Serialize using the persisted camelCase layout."""
        return self.model_dump(by_alias=True)


class HistorySet(BaseModel):
    """Weight and reps of one set in a history entry."""
    weight: float
    reps: Optional[int] = None


class HistoryEntry(BaseModel):
    """Sets performed for one exercise on one date."""
    date: str
    sets: List[HistorySet] = Field(default_factory=list)


class SetStatus(BaseModel):
    """State of one set row as shown to the user."""
    exercise_id: str
    set_number: int
    weight: float = 0
    completed: bool = False
    locked: bool = False
    completed_set: Optional[CompletedSet] = None


class ExerciseProgress(BaseModel):
    """An exercise with its per-set rows and completion count."""
    exercise: Exercise
    completed_count: int = 0
    sets: List[SetStatus] = Field(default_factory=list)

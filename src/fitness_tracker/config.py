"""Configuration settings for the fitness tracker."""
import os
from typing import Literal

from fitness_tracker.utils import to_int


EnvironmentType = Literal["development", "staging", "production"]
StorageType = Literal["file", "memory", "none"]


class Settings:
    """Application settings."""

    # Environment
    ENVIRONMENT: EnvironmentType = "development"

    # Storage
    STORAGE: StorageType = "file"
    STORAGE_PATH: str = "fitness-tracker-storage.json"

    # History
    HISTORY_LIMIT: int = 10

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"

        # Storage
        storage = os.getenv("FITNESS_TRACKER_STORAGE", "file").lower()
        if storage in ("file", "memory", "none"):
            self.STORAGE = storage  # type: ignore
        else:
            self.STORAGE = "file"
        self.STORAGE_PATH = os.getenv("FITNESS_TRACKER_STORAGE_PATH", self.STORAGE_PATH)

        # History
        limit = to_int(os.getenv("FITNESS_TRACKER_HISTORY_LIMIT"))
        self.HISTORY_LIMIT = limit if limit and limit > 0 else 10


settings = Settings()

"""
Text Parser

Parses plain workout text, one exercise per line:

    Push Ups on Bench 3X12
    Half Kneeling Cable Rows 3X8 each side (Heavy)

Lines that don't follow the "<name> <sets>X<reps>" notation still become
exercises, with the whole line as the name and a default of 3 sets of 10.

Exercise ids are positional ("ex-0", "ex-1", ...) among non-blank lines.
Re-parsing edited text reassigns ids, so completed sets recorded against the
old ids no longer line up with the new exercises.
"""

import re
import logging
from typing import List

from fitness_tracker.models import MAX_SETS, Exercise

logger = logging.getLogger(__name__)

# Defaults for lines without sets/reps notation
DEFAULT_SETS = 3
DEFAULT_REPS = "10"

DEFAULT_WORKOUT = """Push Ups on Bench 3X12
DB floor Press 3X8
DB Lateral raises 3X8
Leg press machine 3X10
Half Kneeling Cable Rows 3X8 each side (Heavy)
DB Bicep curls 3X6 each side
DB Side Bends (minimize movement at the HIP) 3X8 each side"""


class WorkoutTextParser:
    """Parser for plain-text workout descriptions"""

    EXERCISE_LINE_PATTERN = re.compile(
        r'^(.+?)'  # Exercise name
        r'\s+'  # Separator
        r'(\d+)X(\d+)'  # Sets X Reps
        r'(.*)$',  # Trailing notes ("each side (Heavy)")
        re.IGNORECASE | re.ASCII  # Digits are 0-9 only
    )

    def parse(self, text: str) -> List[Exercise]:
        """Parse workout text into exercises, one per non-blank line"""
        lines = [line for line in text.split('\n') if line.strip()]
        return [self.parse_line(line, index) for index, line in enumerate(lines)]

    def parse_line(self, line: str, index: int) -> Exercise:
        """Parse a single line; never fails"""
        exercise_id = f"ex-{index}"
        match = self.EXERCISE_LINE_PATTERN.match(line)

        # "0X10" or "500X10" has no sensible sets to track, treat it like unstructured text
        if not match or not 1 <= int(match.group(2)) <= MAX_SETS:
            logger.debug(f"No sets/reps notation in line, using defaults: {line.strip()!r}")
            return Exercise(
                id=exercise_id,
                name=line.strip(),
                sets=DEFAULT_SETS,
                reps=DEFAULT_REPS,
            )

        name, sets, reps, notes = match.groups()
        notes = notes.strip()

        # Notes are appended to the reps without a separator: "8" + "each side" -> "8each side"
        return Exercise(
            id=exercise_id,
            name=name.strip(),
            sets=int(sets),
            reps=reps.strip() + notes,
            notes=notes or None,
        )


def parse_workout(text: str) -> List[Exercise]:
    """Parse workout text with the default parser."""
    return WorkoutTextParser().parse(text)

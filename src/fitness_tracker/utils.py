"""Utility functions."""
import re
from typing import Optional

LEADING_INT_PATTERN = re.compile(r'^\s*([+-]?[0-9]+)')


def to_int(s: Optional[str]) -> Optional[int]:
    """Convert string to int, returning None if conversion fails."""
    try:
        return int(s) if s is not None else None
    except Exception:
        return None


def leading_int(txt: Optional[str]) -> Optional[int]:
    """
    Extract the leading integer of a reps string.

    Only the leading digits count, so '8each side' gives 8 and '12' gives 12.
    Text without leading digits ('each side', '') gives None.
    """
    if not txt:
        return None
    match = LEADING_INT_PATTERN.match(txt)
    return int(match.group(1)) if match else None

"""
modules/scheduling/clock.py
---------------------------
"HH:MM" helpers shared by the reservation and timeline calculators.
"""

from __future__ import annotations

from typing import Optional


def parse_hhmm(text: Optional[str]) -> Optional[tuple[int, int]]:
    """
    Parse "HH:MM" into (hour, minute).

    Returns None for missing or malformed input.  Hour 24 is accepted so
    "24:00" can close a day.
    """
    if not text:
        return None
    parts = text.strip().split(":")
    if len(parts) < 2:
        return None
    try:
        hour, minute = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not (0 <= hour <= 24 and 0 <= minute <= 59):
        return None
    return hour, minute


def to_minutes(text: Optional[str]) -> Optional[int]:
    """Minutes from midnight for an "HH:MM" string, or None."""
    parsed = parse_hhmm(text)
    if parsed is None:
        return None
    return parsed[0] * 60 + parsed[1]

"""
modules/scheduling/timeline.py
------------------------------
Gantt-style geometry for the calendar overview.

Every activity with both a start and an end time becomes a horizontal bar
inside a display window (06:00–24:00 by default).  Positions are fractions
of the window width on a 0..1 scale; multiply by 100 for CSS percentages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import config
from modules.scheduling.clock import to_minutes
from schemas.itinerary import ActivityType, Day


@dataclass(frozen=True)
class TimelineWindow:
    start_hour: int = config.TIMELINE_START_HOUR
    end_hour: int = config.TIMELINE_END_HOUR

    @property
    def total_minutes(self) -> int:
        return (self.end_hour - self.start_hour) * 60


DEFAULT_WINDOW = TimelineWindow()


@dataclass
class TimelinePosition:
    offset_fraction: float
    width_fraction: float

    def as_percentages(self) -> tuple[float, float]:
        return self.offset_fraction * 100, self.width_fraction * 100


@dataclass
class TimelineBar:
    activity_id: str
    activity_type: ActivityType
    title: str
    start_time: str
    end_time: str
    position: TimelinePosition


def compute_timeline_position(
    start_time: Optional[str],
    end_time: Optional[str],
    window_start_hour: int = config.TIMELINE_START_HOUR,
    window_end_hour: int = config.TIMELINE_END_HOUR,
) -> Optional[TimelinePosition]:
    """
    Place one activity bar inside ``[window_start_hour, window_end_hour)``.

    Returns None when either time is missing or unparsable: the activity
    cannot be drawn.  The offset never goes below 0 and the width never
    below ``config.TIMELINE_MIN_WIDTH``, so zero-length or out-of-window
    activities still show as a sliver.
    """
    start = to_minutes(start_time)
    end = to_minutes(end_time)
    if start is None or end is None:
        return None

    total = (window_end_hour - window_start_hour) * 60
    if total <= 0:
        raise ValueError(
            f"empty timeline window {window_start_hour}-{window_end_hour}"
        )

    offset = (start - window_start_hour * 60) / total
    width = (end - start) / total
    return TimelinePosition(
        offset_fraction=max(0.0, offset),
        width_fraction=max(config.TIMELINE_MIN_WIDTH, width),
    )


def hour_ticks(
    window_start_hour: int = config.TIMELINE_START_HOUR,
    window_end_hour: int = config.TIMELINE_END_HOUR,
) -> list[tuple[int, float]]:
    """(hour, offset_fraction) for every grid line in the window."""
    total = (window_end_hour - window_start_hour) * 60
    return [
        (hour, (hour - window_start_hour) * 60 / total)
        for hour in range(window_start_hour, window_end_hour)
    ]


def layout_day(day: Day, window: TimelineWindow = DEFAULT_WINDOW) -> list[TimelineBar]:
    """Bars for every positionable activity of ``day``, in insertion order."""
    bars: list[TimelineBar] = []
    for activity in day.activities:
        position = compute_timeline_position(
            activity.start_time, activity.end_time, window.start_hour, window.end_hour
        )
        if position is None:
            continue
        bars.append(TimelineBar(
            activity_id=activity.id,
            activity_type=activity.type,
            title=activity.title,
            start_time=activity.start_time or "",
            end_time=activity.end_time or "",
            position=position,
        ))
    return bars

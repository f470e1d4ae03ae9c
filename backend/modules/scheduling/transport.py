"""
modules/scheduling/transport.py
-------------------------------
Derived figures for a transport leg (station totals, transfers, duration).

Segment adjacency (leg i ends where leg i+1 starts) is a display
convention only.  ``segment_gaps`` reports breaks; nothing rejects them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from schemas.itinerary import Transport, TransportMode, parse_int


@dataclass
class SegmentGap:
    index: int               # gap sits between segments[index] and segments[index + 1]
    end_station: str
    next_start_station: str


def parse_station_count(raw: Any) -> int:
    """Free-form station count from a form field; anything unusable is 0."""
    return parse_int(raw, default=0)


def total_station_count(transport: Transport) -> int:
    if transport.mode is not TransportMode.SUBWAY:
        return 0
    return sum(parse_station_count(s.station_count) for s in transport.segments)


def transfer_count(transport: Transport) -> int:
    if transport.mode is not TransportMode.SUBWAY:
        return 0
    return max(0, len(transport.segments) - 1)


def format_duration(minutes: Any) -> tuple[int, int]:
    """(hours, minutes) split of a duration; malformed input counts as 0."""
    total = parse_int(minutes)
    return total // 60, total % 60


def segment_gaps(transport: Transport) -> list[SegmentGap]:
    gaps: list[SegmentGap] = []
    segments = transport.segments
    for i in range(len(segments) - 1):
        end = segments[i].end_station.strip()
        nxt = segments[i + 1].start_station.strip()
        if end and nxt and end != nxt:
            gaps.append(SegmentGap(index=i, end_station=end, next_start_station=nxt))
    return gaps

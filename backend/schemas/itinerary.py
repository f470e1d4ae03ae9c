"""
schemas/itinerary.py
--------------------
Dataclass definitions for the itinerary entities: Day, Activity, Transport,
Segment.

Wire format is the camelCase JSON document shared by the local blob and the
remote per-day documents.  Optional fields that are unset are omitted.

Entities are replaced wholesale at the storage boundary, so every ``with_*``
helper returns a new object and leaves the receiver untouched.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any, Optional

import config


def new_id() -> str:
    """Random 128-bit id rendered as a canonical UUID string."""
    return str(uuid.uuid4())


def parse_int(raw: Any, default: int = 0) -> int:
    """
    Lenient integer coercion for user-editable numeric fields.

    "3", 3.0 and 3 all give 3; None, "", "abc" and NaN give ``default``.
    Negative values are clamped to zero.
    """
    if raw is None or isinstance(raw, bool):
        return default
    try:
        value = int(float(raw))
    except (TypeError, ValueError, OverflowError):
        return default
    return max(0, value)


def _parse_float(raw: Any, default: float = 0.0) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    return value if value == value else default   # NaN


def _opt_str(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    text = str(raw)
    return text if text else None


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────

class ActivityType(Enum):
    BREAKFAST = "breakfast"
    MORNING   = "morning"
    LUNCH     = "lunch"
    AFTERNOON = "afternoon"
    DINNER    = "dinner"

    @property
    def is_meal(self) -> bool:
        return self in (ActivityType.BREAKFAST, ActivityType.LUNCH, ActivityType.DINNER)


class TransportMode(Enum):
    SUBWAY = "subway"
    CAR    = "car"
    WALK   = "walk"


# ─────────────────────────────────────────────────────────────────────────────
# Entities
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Segment:
    """One uninterrupted ride on a single subway line."""
    id: str = ""
    line_name: str = ""
    line_color: str = ""          # hex colour token
    start_station: str = ""
    end_station: str = ""
    station_count: int = 0
    direction: Optional[str] = None
    status: Optional[str] = None  # e.g. "operating normally"

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id":           self.id,
            "lineName":     self.line_name,
            "lineColor":    self.line_color,
            "startStation": self.start_station,
            "endStation":   self.end_station,
            "stationCount": self.station_count,
        }
        if self.direction is not None:
            out["direction"] = self.direction
        if self.status is not None:
            out["status"] = self.status
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Segment":
        return cls(
            id=str(data.get("id") or new_id()),
            line_name=str(data.get("lineName") or ""),
            line_color=str(data.get("lineColor") or ""),
            start_station=str(data.get("startStation") or ""),
            end_station=str(data.get("endStation") or ""),
            station_count=parse_int(data.get("stationCount")),
            direction=_opt_str(data.get("direction")),
            status=_opt_str(data.get("status")),
        )


@dataclass
class Transport:
    """
    The journey taken to reach an activity.

    ``segments`` is only meaningful for subway mode; other modes keep it
    empty by convention.  ``total_distance_km`` and ``price`` are persisted
    but not used by any computation.
    """
    id: str = ""
    mode: TransportMode = TransportMode.SUBWAY
    start_location: str = ""
    end_location: str = ""
    total_duration_minutes: int = 0
    total_distance_km: float = 0.0
    segments: list[Segment] = field(default_factory=list)
    price: Optional[float] = None

    def with_segment_added(self, segment: Segment) -> "Transport":
        return replace(self, segments=[*self.segments, segment])

    def with_segment_replaced(self, index: int, segment: Segment) -> "Transport":
        segments = list(self.segments)
        segments[index] = segment
        return replace(self, segments=segments)

    def with_segment_removed(self, index: int) -> "Transport":
        return replace(
            self, segments=[s for i, s in enumerate(self.segments) if i != index]
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id":                   self.id,
            "mode":                 self.mode.value,
            "startLocation":        self.start_location,
            "endLocation":          self.end_location,
            "totalDurationMinutes": self.total_duration_minutes,
            "totalDistanceKm":      self.total_distance_km,
            "segments":             [s.to_dict() for s in self.segments],
        }
        if self.price is not None:
            out["price"] = self.price
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transport":
        price = data.get("price")
        return cls(
            id=str(data.get("id") or new_id()),
            mode=TransportMode(data.get("mode", TransportMode.SUBWAY.value)),
            start_location=str(data.get("startLocation") or ""),
            end_location=str(data.get("endLocation") or ""),
            total_duration_minutes=parse_int(data.get("totalDurationMinutes")),
            total_distance_km=_parse_float(data.get("totalDistanceKm")),
            segments=[Segment.from_dict(s) for s in data.get("segments") or []],
            price=None if price is None else _parse_float(price),
        )


@dataclass
class Activity:
    """
    A single scheduled event within a day.

    ``reservation_advance_days`` / ``reservation_time`` only mean something
    when ``requires_reservation`` is set.  ``transport`` is the leg used to
    arrive here from the previous activity in insertion order.
    """
    id: str = ""
    type: ActivityType = ActivityType.MORNING
    title: str = ""
    location: Optional[str] = None
    start_time: Optional[str] = None          # "HH:MM"
    end_time: Optional[str] = None            # "HH:MM"
    requires_reservation: bool = False
    reservation_advance_days: Optional[int] = None
    reservation_time: Optional[str] = None    # "HH:MM" tickets go on sale
    transport: Optional[Transport] = None

    def with_transport(self, transport: Transport) -> "Activity":
        return replace(self, transport=transport)

    def without_transport(self) -> "Activity":
        return replace(self, transport=None)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id":                  self.id,
            "type":                self.type.value,
            "title":               self.title,
            "requiresReservation": self.requires_reservation,
        }
        optional = {
            "location":               self.location,
            "startTime":              self.start_time,
            "endTime":                self.end_time,
            "reservationAdvanceDays": self.reservation_advance_days,
            "reservationTime":        self.reservation_time,
        }
        out.update({k: v for k, v in optional.items() if v is not None})
        if self.transport is not None:
            out["transport"] = self.transport.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Activity":
        advance = data.get("reservationAdvanceDays")
        transport = data.get("transport")
        return cls(
            id=str(data.get("id") or new_id()),
            type=ActivityType(data.get("type")),
            title=str(data.get("title") or ""),
            location=_opt_str(data.get("location")),
            start_time=_opt_str(data.get("startTime")),
            end_time=_opt_str(data.get("endTime")),
            requires_reservation=bool(data.get("requiresReservation", False)),
            reservation_advance_days=None if advance is None else parse_int(advance),
            reservation_time=_opt_str(data.get("reservationTime")),
            transport=Transport.from_dict(transport) if transport else None,
        )


@dataclass
class Day:
    """One calendar date's itinerary.  ``date`` is an ISO-8601 string."""
    id: str = ""
    date: str = ""
    activities: list[Activity] = field(default_factory=list)

    def activities_of_type(self, activity_type: ActivityType) -> list[Activity]:
        """Activities of one type, in insertion order (day-editor sections)."""
        return [a for a in self.activities if a.type is activity_type]

    def find_activity(self, activity_id: str) -> Optional[Activity]:
        return next((a for a in self.activities if a.id == activity_id), None)

    def with_activity_added(self, activity: Activity) -> "Day":
        return replace(self, activities=[*self.activities, activity])

    def with_activity_replaced(self, activity: Activity) -> "Day":
        return replace(
            self,
            activities=[activity if a.id == activity.id else a for a in self.activities],
        )

    def with_activity_removed(self, activity_id: str) -> "Day":
        return replace(
            self, activities=[a for a in self.activities if a.id != activity_id]
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id":         self.id,
            "date":       self.date,
            "activities": [a.to_dict() for a in self.activities],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Day":
        return cls(
            id=str(data["id"]),
            date=str(data.get("date") or ""),
            activities=[Activity.from_dict(a) for a in data.get("activities") or []],
        )


# ─────────────────────────────────────────────────────────────────────────────
# Factories: fresh entities with client-generated ids
# ─────────────────────────────────────────────────────────────────────────────

def new_day(on: Optional[date] = None) -> Day:
    """A new empty day, dated today unless ``on`` is given."""
    return Day(id=new_id(), date=(on or date.today()).isoformat(), activities=[])


def new_activity(activity_type: ActivityType) -> Activity:
    return Activity(id=new_id(), type=activity_type, title="", requires_reservation=False)


def new_transport(destination: Optional[str] = None) -> Transport:
    """Default subway leg ending at ``destination`` (the activity's location)."""
    return Transport(
        id=new_id(),
        mode=TransportMode.SUBWAY,
        start_location="Start",
        end_location=destination or "Destination",
        total_duration_minutes=config.DEFAULT_TRANSPORT_MINUTES,
        total_distance_km=0.0,
        segments=[],
    )


def new_segment() -> Segment:
    return Segment(
        id=new_id(),
        line_name=config.DEFAULT_LINE_NAME,
        line_color=config.DEFAULT_LINE_COLOR,
        start_station="",
        end_station="",
        station_count=1,
    )


def seed_days(on: Optional[date] = None) -> list[Day]:
    """First-run collection: one empty day for today."""
    return [new_day(on)]

"""
api/routes/days.py
------------------
Day and activity endpoints over the ItineraryCoordinator.

Flow:
  1. GET    /v1/days                        → all days (date order) + current selection
  2. POST   /v1/days                        → add an empty day for today
  3. PUT    /v1/days/{day_id}               → replace a whole day
  4. DELETE /v1/days/{day_id}               → delete a day and everything in it
  5. POST   /v1/days/{day_id}/activities    → append an empty activity of a type
  6. PUT    /v1/days/{day_id}/activities/{activity_id}/transport
                                            → attach or replace the journey to an activity
  7. DELETE /v1/days/{day_id}/activities/{activity_id}/transport
                                            → remove that journey
  8. GET    /v1/days/{day_id}/schedule      → reservation deadlines + timeline bars
  9. GET    /v1/reservations/upcoming       → bookings still to be made

All writes are optimistic: the response reflects memory immediately and the
backend write completes in the background.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from db.selector import get_backend
from modules.scheduling import (
    DEFAULT_WINDOW,
    hour_ticks,
    layout_day,
    reservation_status,
    upcoming_reservations,
)
from modules.scheduling.transport import format_duration, segment_gaps, total_station_count
from modules.sync.coordinator import ActivityNotFoundError, DayNotFoundError, ItineraryCoordinator
from schemas.itinerary import Activity, ActivityType, Day, Transport

router = APIRouter()

# ── Coordinator singleton ──────────────────────────────────────────────────────
# One in-memory view per process, bound to the backend db.selector picked.
_coordinator: ItineraryCoordinator | None = None


def get_coordinator() -> ItineraryCoordinator:
    global _coordinator
    if _coordinator is None:
        selection = get_backend()
        _coordinator = ItineraryCoordinator(
            selection.backend, broadcaster=selection.broadcaster
        )
        _coordinator.start()
    return _coordinator


def shutdown_coordinator() -> None:
    global _coordinator
    if _coordinator is not None:
        _coordinator.stop()
        _coordinator.wait_idle(timeout=10)
    _coordinator = None


# ── Request schemas (camelCase, same as the stored documents) ──────────────────

Numeric = Optional[Union[int, float, str]]   # user-typed; coerced leniently


class SegmentBody(BaseModel):
    id: Optional[str] = None
    lineName: str = ""
    lineColor: str = ""
    startStation: str = ""
    endStation: str = ""
    stationCount: Numeric = 0
    direction: Optional[str] = None
    status: Optional[str] = None


class TransportBody(BaseModel):
    id: Optional[str] = None
    mode: str = "subway"                     # subway | car | walk
    startLocation: str = ""
    endLocation: str = ""
    totalDurationMinutes: Numeric = 0
    totalDistanceKm: Numeric = 0
    price: Optional[float] = None
    segments: list[SegmentBody] = Field(default_factory=list)


class ActivityBody(BaseModel):
    id: Optional[str] = None
    type: str                                # breakfast | morning | lunch | afternoon | dinner
    title: str = ""
    location: Optional[str] = None
    startTime: Optional[str] = None          # "HH:MM"
    endTime: Optional[str] = None            # "HH:MM"
    requiresReservation: bool = False
    reservationAdvanceDays: Numeric = None
    reservationTime: Optional[str] = None    # "HH:MM"
    transport: Optional[TransportBody] = None


class DayBody(BaseModel):
    id: str
    date: str = Field(..., description="ISO-8601 date YYYY-MM-DD")
    activities: list[ActivityBody] = Field(default_factory=list)


class NewActivityRequest(BaseModel):
    type: str


# ── Helpers ────────────────────────────────────────────────────────────────────

def _load_day(coordinator: ItineraryCoordinator, day_id: str) -> Day:
    try:
        return coordinator.get_day(day_id)
    except DayNotFoundError:
        raise HTTPException(status_code=404, detail=f"day '{day_id}' not found")


def _set_transport(
    coordinator: ItineraryCoordinator,
    day_id: str,
    activity_id: str,
    transport: Optional[Transport],
) -> Activity:
    try:
        return coordinator.set_transport(day_id, activity_id, transport)
    except ActivityNotFoundError:
        raise HTTPException(status_code=404, detail=f"activity '{activity_id}' not found")


def _fmt_deadline(deadline: Optional[datetime]) -> Optional[str]:
    return deadline.isoformat(timespec="minutes") if deadline else None


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.get("/days", summary="List all days in date order")
def list_days(coordinator: ItineraryCoordinator = Depends(get_coordinator)) -> dict:
    return {
        "loading":        coordinator.loading,
        "current_day_id": coordinator.current_day_id,
        "days":           [d.to_dict() for d in coordinator.days_by_date()],
    }


@router.post("/days", summary="Add an empty day dated today", status_code=201)
def add_day(coordinator: ItineraryCoordinator = Depends(get_coordinator)) -> dict:
    day = coordinator.add_day()
    return {"current_day_id": coordinator.current_day_id, "day": day.to_dict()}


@router.put("/days/{day_id}", summary="Replace a whole day")
def put_day(
    day_id: str,
    body: DayBody,
    coordinator: ItineraryCoordinator = Depends(get_coordinator),
) -> dict:
    if body.id != day_id:
        raise HTTPException(status_code=422, detail="day id in body does not match path")
    _load_day(coordinator, day_id)
    try:
        day = Day.from_dict(body.model_dump(exclude_none=True))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    coordinator.update_day(day)
    return {"day": day.to_dict()}


@router.delete("/days/{day_id}", summary="Delete a day and all of its activities")
def delete_day(
    day_id: str,
    coordinator: ItineraryCoordinator = Depends(get_coordinator),
) -> dict:
    _load_day(coordinator, day_id)
    coordinator.delete_day(day_id)
    return {"deleted": day_id, "current_day_id": coordinator.current_day_id}


@router.post("/days/{day_id}/activities", summary="Append an empty activity", status_code=201)
def add_activity(
    day_id: str,
    req: NewActivityRequest,
    coordinator: ItineraryCoordinator = Depends(get_coordinator),
) -> dict:
    _load_day(coordinator, day_id)
    try:
        activity_type = ActivityType(req.type)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"unknown activity type '{req.type}'")
    activity = coordinator.add_activity(day_id, activity_type)
    return {"activity": activity.to_dict()}


@router.put("/days/{day_id}/activities/{activity_id}/transport", summary="Set the journey to an activity")
def put_transport(
    day_id: str,
    activity_id: str,
    body: TransportBody,
    coordinator: ItineraryCoordinator = Depends(get_coordinator),
) -> dict:
    _load_day(coordinator, day_id)
    try:
        transport = Transport.from_dict(body.model_dump(exclude_none=True))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    activity = _set_transport(coordinator, day_id, activity_id, transport)
    return {"activity": activity.to_dict()}


@router.delete("/days/{day_id}/activities/{activity_id}/transport", summary="Remove the journey to an activity")
def delete_transport(
    day_id: str,
    activity_id: str,
    coordinator: ItineraryCoordinator = Depends(get_coordinator),
) -> dict:
    _load_day(coordinator, day_id)
    activity = _set_transport(coordinator, day_id, activity_id, None)
    return {"activity": activity.to_dict()}


@router.get("/days/{day_id}/schedule", summary="Derived reservation + timeline data")
def day_schedule(
    day_id: str,
    coordinator: ItineraryCoordinator = Depends(get_coordinator),
) -> dict:
    day = _load_day(coordinator, day_id)
    now = datetime.now()
    bars = {bar.activity_id: bar for bar in layout_day(day, DEFAULT_WINDOW)}

    activities: list[dict[str, Any]] = []
    for activity in day.activities:
        status = reservation_status(activity, day.date, now)
        bar = bars.get(activity.id)
        entry: dict[str, Any] = {
            "id":                   activity.id,
            "type":                 activity.type.value,
            "title":                activity.title,
            "reservation_deadline": _fmt_deadline(status.deadline),
            "reservation_past":     status.is_past,
            "timeline": None if bar is None else {
                "offset": bar.position.offset_fraction,
                "width":  bar.position.width_fraction,
            },
        }
        if activity.transport is not None:
            hours, minutes = format_duration(activity.transport.total_duration_minutes)
            entry["transport"] = {
                "mode":          activity.transport.mode.value,
                "duration":      {"hours": hours, "minutes": minutes},
                "station_count": total_station_count(activity.transport),
                "segment_gaps":  [g.index for g in segment_gaps(activity.transport)],
            }
        activities.append(entry)

    return {
        "day_id":     day.id,
        "date":       day.date,
        "window":     {"start_hour": DEFAULT_WINDOW.start_hour, "end_hour": DEFAULT_WINDOW.end_hour},
        "hour_ticks": [{"hour": h, "offset": off} for h, off in hour_ticks(
            DEFAULT_WINDOW.start_hour, DEFAULT_WINDOW.end_hour)],
        "activities": activities,
    }


@router.get("/reservations/upcoming", summary="Reservations whose deadline has not passed")
def upcoming(coordinator: ItineraryCoordinator = Depends(get_coordinator)) -> dict:
    pending = upcoming_reservations(coordinator.days, datetime.now())
    return {
        "reservations": [
            {
                "day_id":      r.day_id,
                "date":        r.day_date,
                "activity_id": r.activity_id,
                "title":       r.title,
                "deadline":    _fmt_deadline(r.deadline),
            }
            for r in pending
        ]
    }

"""
modules/scheduling/reservation.py
---------------------------------
Reservation deadline evaluation.

An activity that needs booking opens for reservation ``advance_days``
calendar days before the trip date, optionally at a release time of day
(e.g. tickets go on sale at 09:00).  The deadline is a naive local
datetime, compared against a caller-supplied ``now``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Union

from modules.scheduling.clock import parse_hhmm
from schemas.itinerary import Activity, Day


@dataclass
class ReservationStatus:
    deadline: Optional[datetime] = None
    is_past: bool = False


@dataclass
class UpcomingReservation:
    """One pending booking reminder, as shown on the calendar overview."""
    day_id: str
    day_date: str
    activity_id: str
    title: str
    deadline: datetime


def _as_date(trip_date: Union[str, date]) -> Optional[date]:
    if isinstance(trip_date, datetime):
        return trip_date.date()
    if isinstance(trip_date, date):
        return trip_date
    try:
        return date.fromisoformat(trip_date)
    except (TypeError, ValueError):
        return None


def compute_reservation_deadline(
    trip_date: Union[str, date],
    advance_days: Optional[int] = None,
    reservation_time: Optional[str] = None,
    requires_reservation: bool = True,
) -> Optional[datetime]:
    """
    Return the moment the reservation must be made, or None.

    ``advance_days`` is subtracted as calendar days, so month and year
    boundaries roll over correctly.  ``reservation_time`` replaces the
    time of day (it is not added); without it the deadline is midnight.
    A malformed ``reservation_time`` is ignored.  An unparsable trip date
    yields None.
    """
    if not requires_reservation or advance_days is None:
        return None
    day = _as_date(trip_date)
    if day is None:
        return None

    deadline_day = day - timedelta(days=int(advance_days))
    clock = parse_hhmm(reservation_time)
    if clock is None or clock[0] == 24:
        return datetime.combine(deadline_day, time(0, 0))
    return datetime.combine(deadline_day, time(clock[0], clock[1]))


def is_deadline_past(deadline: Optional[datetime], now: datetime) -> bool:
    """True only when ``now`` is strictly after ``deadline``."""
    if deadline is None:
        return False
    return now > deadline


def reservation_status(
    activity: Activity,
    trip_date: Union[str, date],
    now: datetime,
) -> ReservationStatus:
    deadline = compute_reservation_deadline(
        trip_date,
        activity.reservation_advance_days,
        activity.reservation_time,
        requires_reservation=activity.requires_reservation,
    )
    return ReservationStatus(deadline=deadline, is_past=is_deadline_past(deadline, now))


def upcoming_reservations(days: Iterable[Day], now: datetime) -> list[UpcomingReservation]:
    """All bookings whose deadline has not passed yet, soonest first."""
    pending: list[UpcomingReservation] = []
    for day in days:
        for activity in day.activities:
            status = reservation_status(activity, day.date, now)
            if status.deadline is None or status.is_past:
                continue
            pending.append(UpcomingReservation(
                day_id=day.id,
                day_date=day.date,
                activity_id=activity.id,
                title=activity.title,
                deadline=status.deadline,
            ))
    pending.sort(key=lambda r: r.deadline)
    return pending

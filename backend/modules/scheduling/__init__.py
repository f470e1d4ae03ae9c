"""modules/scheduling — pure schedule computations derived from itinerary data."""

from modules.scheduling.reservation import (
    ReservationStatus,
    UpcomingReservation,
    compute_reservation_deadline,
    is_deadline_past,
    reservation_status,
    upcoming_reservations,
)
from modules.scheduling.timeline import (
    DEFAULT_WINDOW,
    TimelineBar,
    TimelinePosition,
    TimelineWindow,
    compute_timeline_position,
    hour_ticks,
    layout_day,
)
from modules.scheduling.transport import (
    SegmentGap,
    format_duration,
    parse_station_count,
    segment_gaps,
    total_station_count,
    transfer_count,
)

__all__ = [
    "ReservationStatus",
    "UpcomingReservation",
    "compute_reservation_deadline",
    "is_deadline_past",
    "reservation_status",
    "upcoming_reservations",
    "DEFAULT_WINDOW",
    "TimelineBar",
    "TimelinePosition",
    "TimelineWindow",
    "compute_timeline_position",
    "hour_ticks",
    "layout_day",
    "SegmentGap",
    "format_duration",
    "parse_station_count",
    "segment_gaps",
    "total_station_count",
    "transfer_count",
]

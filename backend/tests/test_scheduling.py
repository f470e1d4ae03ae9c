"""Tests for reservation deadlines, timeline geometry and transport figures."""

from datetime import date, datetime

import pytest

from modules.scheduling import (
    TimelineWindow,
    compute_reservation_deadline,
    compute_timeline_position,
    format_duration,
    hour_ticks,
    is_deadline_past,
    layout_day,
    parse_station_count,
    reservation_status,
    segment_gaps,
    total_station_count,
    transfer_count,
    upcoming_reservations,
)
from modules.scheduling.clock import parse_hhmm, to_minutes
from schemas.itinerary import Activity, ActivityType, Day, Segment, Transport, TransportMode


# ── reservation deadlines ─────────────────────────────────────────────────────

def test_deadline_with_release_time():
    assert compute_reservation_deadline("2024-03-10", 3, "09:00") == datetime(2024, 3, 7, 9, 0)


def test_deadline_crosses_month_at_midnight():
    assert compute_reservation_deadline("2024-03-01", 5, None) == datetime(2024, 2, 25, 0, 0)


def test_deadline_crosses_year():
    assert compute_reservation_deadline(date(2025, 1, 2), 7, "20:30") == datetime(2024, 12, 26, 20, 30)


def test_release_time_replaces_time_of_day():
    deadline = compute_reservation_deadline("2024-03-10", 1, "23:59")
    assert deadline == datetime(2024, 3, 9, 23, 59)


def test_same_day_booking():
    assert compute_reservation_deadline("2024-03-10", 0, "08:00") == datetime(2024, 3, 10, 8, 0)


@pytest.mark.parametrize("kwargs", [
    {"advance_days": None},
    {"advance_days": 3, "requires_reservation": False},
])
def test_no_deadline(kwargs):
    assert compute_reservation_deadline("2024-03-10", **kwargs) is None


def test_bad_inputs_degrade_quietly():
    assert compute_reservation_deadline("not-a-date", 3) is None
    assert compute_reservation_deadline("2024-03-10", 1, "soon") == datetime(2024, 3, 9, 0, 0)


def test_is_deadline_past_is_strict():
    deadline = datetime(2024, 3, 7, 9, 0)
    assert is_deadline_past(deadline, datetime(2024, 3, 7, 9, 1))
    assert not is_deadline_past(deadline, deadline)
    assert not is_deadline_past(None, datetime(2100, 1, 1))


def test_reservation_status_for_activity(sample_day):
    museum = sample_day.activities[0]
    status = reservation_status(museum, sample_day.date, datetime(2024, 3, 8))
    assert status.deadline == datetime(2024, 3, 7, 9, 0)
    assert status.is_past


def test_upcoming_reservations_sorted_and_filtered():
    def booking(act_id, advance):
        return Activity(id=act_id, type=ActivityType.DINNER, title=act_id,
                        requires_reservation=True, reservation_advance_days=advance)

    days = [
        Day(id="d2", date="2024-04-20", activities=[booking("late", 2)]),
        Day(id="d1", date="2024-04-10", activities=[
            booking("soon", 1),
            booking("gone", 30),
            Activity(id="walk", type=ActivityType.MORNING, title="walk"),
        ]),
    ]
    pending = upcoming_reservations(days, now=datetime(2024, 4, 1))
    assert [r.activity_id for r in pending] == ["soon", "late"]
    assert pending[0].deadline == datetime(2024, 4, 9)
    assert pending[0].day_id == "d1"


# ── timeline geometry ─────────────────────────────────────────────────────────

def test_timeline_position_inside_window():
    pos = compute_timeline_position("09:00", "10:30", 6, 24)
    assert pos.offset_fraction == pytest.approx(180 / 1080)
    assert pos.width_fraction == pytest.approx(90 / 1080)
    left, width = pos.as_percentages()
    assert left == pytest.approx(16.6667, abs=1e-3)
    assert width == pytest.approx(8.3333, abs=1e-3)


@pytest.mark.parametrize("start, end", [(None, "10:00"), ("09:00", None), ("", ""), ("9am", "10:00")])
def test_timeline_not_representable(start, end):
    assert compute_timeline_position(start, end, 6, 24) is None


def test_zero_length_activity_still_visible():
    pos = compute_timeline_position("12:00", "12:00", 6, 24)
    assert pos.width_fraction == pytest.approx(0.01)


def test_activity_before_window_clamps_offset():
    pos = compute_timeline_position("05:00", "07:00", 6, 24)
    assert pos.offset_fraction == 0.0
    assert pos.width_fraction == pytest.approx(120 / 1080)


def test_empty_window_rejected():
    with pytest.raises(ValueError):
        compute_timeline_position("09:00", "10:00", 10, 10)


def test_hour_ticks():
    ticks = hour_ticks(6, 24)
    assert len(ticks) == 18
    assert ticks[0] == (6, 0.0)
    assert ticks[6] == (12, pytest.approx(1 / 3))


def test_layout_day_skips_unplaced(sample_day):
    bars = layout_day(sample_day, TimelineWindow(6, 24))
    assert [b.activity_id for b in bars] == ["act-museum"]
    assert bars[0].activity_type is ActivityType.MORNING


def test_clock_parsing():
    assert parse_hhmm("07:05") == (7, 5)
    assert parse_hhmm("24:00") == (24, 0)
    assert parse_hhmm("25:00") is None
    assert to_minutes("10:30") == 630
    assert to_minutes(None) is None


# ── transport figures ─────────────────────────────────────────────────────────

def test_transport_totals(sample_day):
    transport = sample_day.activities[0].transport
    assert total_station_count(transport) == 7
    assert transfer_count(transport) == 1
    assert format_duration(transport.total_duration_minutes) == (1, 15)
    assert segment_gaps(transport) == []


def test_segment_gap_is_reported_not_rejected():
    transport = Transport(
        id="t", mode=TransportMode.SUBWAY,
        segments=[
            Segment(id="a", start_station="A", end_station="B", station_count=2),
            Segment(id="b", start_station="C", end_station="D", station_count=1),
        ],
    )
    gaps = segment_gaps(transport)
    assert len(gaps) == 1
    assert (gaps[0].index, gaps[0].end_station, gaps[0].next_start_station) == (0, "B", "C")


def test_non_subway_modes_have_no_stations():
    car = Transport(id="t", mode=TransportMode.CAR, total_duration_minutes=20)
    assert total_station_count(car) == 0
    assert transfer_count(car) == 0


@pytest.mark.parametrize("raw, expected", [("5", 5), ("five", 0), (None, 0), (2.0, 2)])
def test_parse_station_count(raw, expected):
    assert parse_station_count(raw) == expected


def test_format_duration_handles_garbage():
    assert format_duration("abc") == (0, 0)
    assert format_duration(125) == (2, 5)

"""Tests for the itinerary dataclasses and their JSON documents."""

from datetime import date
import uuid

import pytest

from schemas.itinerary import (
    Activity,
    ActivityType,
    Day,
    Segment,
    TransportMode,
    new_activity,
    new_day,
    new_segment,
    new_transport,
    parse_int,
    seed_days,
)


def test_document_uses_camel_case_and_omits_unset_fields(sample_day):
    doc = sample_day.to_dict()
    museum, lunch = doc["activities"]

    assert museum["startTime"] == "09:00"
    assert museum["reservationAdvanceDays"] == 3
    assert museum["transport"]["segments"][1]["direction"] == "Xizhimen"
    assert "direction" not in museum["transport"]["segments"][0]
    assert "price" not in museum["transport"]

    assert lunch == {
        "id": "act-lunch",
        "type": "lunch",
        "title": "Duck",
        "requiresReservation": False,
    }


def test_from_dict_restores_equal_day(sample_day):
    assert Day.from_dict(sample_day.to_dict()) == sample_day


def test_malformed_station_count_is_coerced_to_zero():
    seg = Segment.from_dict({"id": "s", "lineName": "Line 4", "stationCount": "lots"})
    assert seg.station_count == 0


@pytest.mark.parametrize("raw, expected", [
    ("3", 3), (3.9, 3), (None, 0), ("", 0), ("abc", 0), (float("nan"), 0), (-2, 0), (True, 0),
])
def test_parse_int(raw, expected):
    assert parse_int(raw) == expected


def test_unknown_activity_type_is_rejected():
    with pytest.raises(ValueError):
        Activity.from_dict({"id": "a", "type": "brunch", "title": "x"})


def test_missing_reservation_fields_stay_absent():
    act = Activity.from_dict({"id": "a", "type": "dinner", "title": "x", "requiresReservation": True})
    assert act.reservation_advance_days is None
    assert act.reservation_time is None


def test_with_helpers_leave_original_untouched(sample_day):
    extra = new_activity(ActivityType.DINNER)
    added = sample_day.with_activity_added(extra)

    assert len(sample_day.activities) == 2
    assert [a.id for a in added.activities][-1] == extra.id

    removed = added.with_activity_removed("act-museum")
    assert [a.id for a in removed.activities] == ["act-lunch", extra.id]

    renamed = Activity(id="act-lunch", type=ActivityType.LUNCH, title="Hotpot")
    replaced = sample_day.with_activity_replaced(renamed)
    assert replaced.activities[1].title == "Hotpot"
    assert sample_day.activities[1].title == "Duck"


def test_transport_segment_helpers(sample_day):
    transport = sample_day.activities[0].transport
    extra = new_segment()

    grown = transport.with_segment_added(extra)
    assert len(grown.segments) == 3 and len(transport.segments) == 2

    swapped = grown.with_segment_replaced(0, extra)
    assert swapped.segments[0].id == extra.id

    shrunk = grown.with_segment_removed(1)
    assert [s.id for s in shrunk.segments] == ["seg-1", extra.id]


def test_activity_transport_helpers(sample_day):
    museum = sample_day.find_activity("act-museum")
    bare = museum.without_transport()
    assert bare.transport is None
    assert museum.transport is not None

    leg = new_transport("Palace Museum")
    assert bare.with_transport(leg).transport == leg
    assert sample_day.find_activity("nope") is None


def test_activities_of_type_keeps_insertion_order(sample_day):
    second_morning = new_activity(ActivityType.MORNING)
    day = sample_day.with_activity_added(second_morning)
    assert [a.id for a in day.activities_of_type(ActivityType.MORNING)] == [
        "act-museum", second_morning.id,
    ]
    assert day.activities_of_type(ActivityType.BREAKFAST) == []


def test_factories():
    day = new_day(date(2024, 5, 1))
    assert day.date == "2024-05-01"
    assert day.activities == []
    assert str(uuid.UUID(day.id)) == day.id

    act = new_activity(ActivityType.BREAKFAST)
    assert act.title == "" and act.requires_reservation is False

    leg = new_transport("Summer Palace")
    assert leg.mode is TransportMode.SUBWAY
    assert leg.end_location == "Summer Palace"
    assert leg.total_duration_minutes == 30
    assert leg.segments == []
    assert new_transport().end_location == "Destination"

    seg = new_segment()
    assert seg.station_count == 1

    seeded = seed_days(date(2024, 1, 2))
    assert len(seeded) == 1 and seeded[0].date == "2024-01-02"


def test_meal_types():
    assert ActivityType.LUNCH.is_meal
    assert not ActivityType.AFTERNOON.is_meal

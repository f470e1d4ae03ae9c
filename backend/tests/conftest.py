"""Shared fixtures for the sync-core tests."""

from datetime import date

import pytest

from db.backends.local import LocalStoreBackend
from db.broadcast import ChangeBroadcaster
from db.local_store import LocalKeyValueStore
from schemas.itinerary import Activity, ActivityType, Day, Segment, Transport, TransportMode

TRIP_DAY = date(2024, 3, 10)


@pytest.fixture
def store(tmp_path):
    return LocalKeyValueStore(tmp_path / "store")


@pytest.fixture
def broadcaster():
    return ChangeBroadcaster()


@pytest.fixture
def local_backend(store, broadcaster):
    backend = LocalStoreBackend(
        store=store,
        broadcaster=broadcaster,
        seed=lambda: [Day(id="seed-day", date=TRIP_DAY.isoformat(), activities=[])],
    )
    yield backend
    backend.close()


@pytest.fixture
def sample_day():
    """A day with a reserved museum visit reached by a two-leg subway ride."""
    museum = Activity(
        id="act-museum",
        type=ActivityType.MORNING,
        title="Palace Museum",
        location="Dongcheng",
        start_time="09:00",
        end_time="10:30",
        requires_reservation=True,
        reservation_advance_days=3,
        reservation_time="09:00",
        transport=Transport(
            id="tr-1",
            mode=TransportMode.SUBWAY,
            start_location="Hotel",
            end_location="Palace Museum",
            total_duration_minutes=75,
            total_distance_km=12.5,
            segments=[
                Segment(id="seg-1", line_name="Line 1", line_color="#c23a30",
                        start_station="Sihui", end_station="Jianguomen", station_count=4),
                Segment(id="seg-2", line_name="Line 2", line_color="#006098",
                        start_station="Jianguomen", end_station="Qianmen",
                        station_count=3, direction="Xizhimen"),
            ],
        ),
    )
    lunch = Activity(id="act-lunch", type=ActivityType.LUNCH, title="Duck")
    return Day(id="day-1", date=TRIP_DAY.isoformat(), activities=[museum, lunch])

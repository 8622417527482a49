from datetime import datetime, timezone

import pytest_asyncio

from schemas.photo import PhotoCreate
from services import registration, stats


@pytest_asyncio.fixture
async def logbook(db_session, media, user_id, other_user, jpeg_bytes):
    """A small spotting log: three A321s at KSEA, a 737 at KLAX, a Cessna with no airport."""
    this_year = datetime.now(timezone.utc).year

    async def log(uid=user_id, **fields):
        return await registration.create_photo(db_session, media, uid, PhotoCreate(**fields), jpeg_bytes)

    await log(
        registration="N801DL", aircraft_type_id="A321", airline_code="DAL", airport_code="KSEA",
        taken_at=datetime(this_year, 3, 1, tzinfo=timezone.utc),
    )
    await log(registration="N801DL", airport_code="KSEA", taken_at=datetime(this_year, 3, 2, tzinfo=timezone.utc))
    await log(
        registration="N802DL", aircraft_type_id="A321", airline_code="DAL", airport_code="KSEA",
        taken_at=datetime(this_year - 2, 7, 1, tzinfo=timezone.utc),
    )
    await log(
        registration="N901AA", aircraft_type_id="B738", airline_code="AAL", airport_code="KLAX",
        taken_at=datetime(this_year - 1, 1, 1, tzinfo=timezone.utc),
    )
    await log(registration="N12345", aircraft_type_id="C172", taken_at=datetime(2001, 1, 1, tzinfo=timezone.utc))
    # someone else's photo never shows up in these numbers
    await log(uid=other_user.id, registration="N801DL", airport_code="KJFK")
    return this_year


async def test_airline_counts(db_session, user_id, logbook):
    rows = await stats.airline_counts_by_user(db_session, user_id)

    assert [(r.airline, r.name, r.count) for r in rows] == [
        ("DAL", "Delta Air Lines", 3),
        ("AAL", "American Airlines", 1),
    ]


async def test_airport_counts_and_recent_airports(db_session, user_id, logbook):
    rows = await stats.airport_counts_by_user(db_session, user_id)
    assert [(r.icao_code, r.count) for r in rows] == [("KSEA", 3), ("KLAX", 1)]

    recent = await stats.recent_airports_by_user(db_session, user_id)
    assert [r.icao_code for r in recent] == ["KSEA", "KLAX"]


async def test_airplane_and_manufacturer_counts(db_session, user_id, logbook):
    airplanes = await stats.airplane_counts_by_user(db_session, user_id)
    assert [(r.icao_type, r.count) for r in airplanes] == [("A321", 3), ("B738", 1), ("C172", 1)]
    assert airplanes[0].variant == "A321neo"

    manufacturers = await stats.manufacturer_counts_by_user(db_session, user_id, limit=2)
    assert [(r.manufacturer, r.count) for r in manufacturers] == [("Airbus", 3), ("Boeing", 1)]


async def test_most_seen_aircraft(db_session, user_id, logbook):
    rows = await stats.most_seen_aircraft_by_user(db_session, user_id, limit=3)

    assert [(r.registration, r.icao_type, r.count) for r in rows] == [
        ("N801DL", "A321", 2),
        ("N12345", "C172", 1),
        ("N802DL", "A321", 1),
    ]


async def test_photo_counts_by_year_are_zero_filled(db_session, user_id, logbook):
    this_year = logbook

    rows = await stats.photo_counts_by_user_by_year(db_session, user_id, num_years=4)

    assert [(r.year, r.count) for r in rows] == [
        (this_year - 3, 0),
        (this_year - 2, 1),
        (this_year - 1, 1),
        (this_year, 2),
    ]


async def test_aggregates_for_a_user_without_photos(db_session, user_id):
    assert await stats.airline_counts_by_user(db_session, user_id) == []
    assert await stats.recent_airports_by_user(db_session, user_id) == []
    years = await stats.photo_counts_by_user_by_year(db_session, user_id)
    assert len(years) == 5
    assert all(r.count == 0 for r in years)


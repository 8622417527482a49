# utils/seed_db.py
import asyncio
import logging
import os

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import AsyncSessionLocal, engine
from core.security import hash_password
from models.aircraft import AircraftType
from models.airline import Airline
from models.airport import Airport
from models.base import Base
from models.photo import Photo  # noqa: F401  (table must be registered for create_all)
from models.user import User

log = logging.getLogger(__name__)

# Sample reference data
AIRLINES = [
    ("AAL", "American Airlines", "United States"),
    ("DAL", "Delta Air Lines", "United States"),
    ("UAL", "United Airlines", "United States"),
    ("SWA", "Southwest Airlines", "United States"),
    ("BAW", "British Airways", "United Kingdom"),
    ("DLH", "Lufthansa", "Germany"),
]

AIRCRAFT_TYPES = [
    ("A320", "Airbus", "A320", "A320-200"),
    ("A321", "Airbus", "A321", "A321neo"),
    ("A359", "Airbus", "A350", "A350-900"),
    ("B738", "Boeing", "737", "737-800"),
    ("B77W", "Boeing", "777", "777-300ER"),
    ("B789", "Boeing", "787", "787-9"),
    ("C172", "Cessna", "172", "Skyhawk"),
    ("E75L", "Embraer", "E175", None),
]

AIRPORTS = [
    ("KSEA", "Seattle-Tacoma International Airport", 47.4502, -122.3088),
    ("KLAX", "Los Angeles International Airport", 33.9416, -118.4085),
    ("KJFK", "John F. Kennedy International Airport", 40.6413, -73.7781),
    ("KSFO", "San Francisco International Airport", 37.6213, -122.3790),
    ("EGLL", "London Heathrow Airport", 51.4700, -0.4543),
    ("EDDF", "Frankfurt Airport", 50.0379, 8.5622),
]


async def seed(db: AsyncSession, admin_username: str | None = None, admin_password: str | None = None) -> dict:
    """
    Insert the sample airlines, aircraft types and airports, plus an admin
    account when credentials are given. Existing rows are left untouched.
    Returns how many rows of each kind were added.
    """
    added = {"airlines": 0, "aircraft_types": 0, "airports": 0, "admins": 0}

    for code, name, country in AIRLINES:
        if await db.get(Airline, code) is None:
            db.add(Airline(code=code, name=name, country=country))
            added["airlines"] += 1

    for icao_type, manufacturer, type_name, variant in AIRCRAFT_TYPES:
        if await db.get(AircraftType, icao_type) is None:
            db.add(AircraftType(icao_type=icao_type, manufacturer=manufacturer, type=type_name, variant=variant))
            added["aircraft_types"] += 1

    for icao_code, name, lat, lon in AIRPORTS:
        if await db.get(Airport, icao_code) is None:
            db.add(Airport(icao_code=icao_code, name=name, latitude=lat, longitude=lon))
            added["airports"] += 1

    if admin_username and admin_password:
        existing = await db.execute(select(User.id).where(User.username == admin_username))
        if existing.scalar_one_or_none() is None:
            db.add(User(username=admin_username, password_hash=hash_password(admin_password), type="admin"))
            added["admins"] += 1

    await db.commit()
    log.info("Seed complete: %s", added)
    return added


async def main():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        await seed(db, os.getenv("SEED_ADMIN_USERNAME"), os.getenv("SEED_ADMIN_PASSWORD"))

    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())

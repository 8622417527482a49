from typing import Optional

from pydantic import BaseModel


class RecentAirport(BaseModel):
    icao_code: str
    name: str


class AirlineCount(BaseModel):
    airline: str
    name: Optional[str] = None
    count: int


class AirportCount(BaseModel):
    icao_code: str
    name: str
    count: int


class AirplaneCount(BaseModel):
    icao_type: str
    manufacturer: str
    type: str
    variant: Optional[str] = None
    count: int


class ManufacturerCount(BaseModel):
    manufacturer: str
    count: int


class AircraftSeenCount(BaseModel):
    registration: str
    icao_type: str
    count: int


class YearCount(BaseModel):
    year: int
    count: int

from datetime import date
from typing import Optional

from pydantic import BaseModel


class AircraftSearchResult(BaseModel):
    uuid_rh: str
    registration: str
    airline: Optional[str] = None
    is_current: bool
    icao_type: str
    manufacturer: str
    type: str
    variant: Optional[str] = None
    manufactured_date: Optional[date] = None

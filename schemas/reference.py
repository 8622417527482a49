from typing import Optional

from pydantic import BaseModel, Field


class AirportCreate(BaseModel):
    icao_code: Optional[str] = Field(None, max_length=8, description="ICAO code")
    name: Optional[str] = Field(None, max_length=255, description="Airport name")
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class AirportRead(BaseModel):
    icao_code: str
    name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    class Config:
        from_attributes = True


class AirportBrief(BaseModel):
    icao_code: str
    name: str

    class Config:
        from_attributes = True


class AirlineRead(BaseModel):
    code: str
    name: str
    country: Optional[str] = None

    class Config:
        from_attributes = True


class AircraftTypeCreate(BaseModel):
    icao_type: Optional[str] = Field(None, max_length=8, description="ICAO type designator")
    manufacturer: Optional[str] = Field(None, max_length=128)
    type: Optional[str] = Field(None, max_length=128)
    variant: Optional[str] = Field(None, max_length=128)


class AircraftTypeRead(BaseModel):
    icao_type: str
    manufacturer: str
    type: str
    variant: Optional[str] = None

    class Config:
        from_attributes = True

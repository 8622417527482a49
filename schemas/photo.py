from datetime import date, datetime
from typing import Optional, List

from pydantic import BaseModel, Field

from schemas.reference import AircraftTypeRead, AirportBrief


class AirportDetails(BaseModel):
    """Details for an ad-hoc airport, used when airport_code == "other"."""
    icao_code: Optional[str] = None
    name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class PhotoMetadata(BaseModel):
    taken_at: Optional[datetime] = Field(None, description="Capture time")
    shutter_speed: Optional[str] = Field(None, max_length=32, description="e.g. 1/1000")
    iso: Optional[int] = Field(None, ge=0)
    aperture: Optional[str] = Field(None, max_length=32, description="e.g. f/8")
    camera_model: Optional[str] = Field(None, max_length=128)
    focal_length: Optional[str] = Field(None, max_length=32)


class RegistrationInput(BaseModel):
    registration: Optional[str] = Field(None, max_length=16, description="Tail mark, e.g. N12345")
    aircraft_type_id: Optional[str] = Field(None, description="ICAO type; declares a new airframe")
    manufactured_date: Optional[date] = None
    airline_code: Optional[str] = None
    uuid_rh: Optional[str] = Field(None, description="Reuse an existing registration history row")


class PhotoCreate(PhotoMetadata, RegistrationInput):
    airport_code: Optional[str] = None
    airport: Optional[AirportDetails] = None


class PhotoUpdate(PhotoMetadata, RegistrationInput):
    airport_code: Optional[str] = None
    airport_icao_code: Optional[str] = None
    airport_name: Optional[str] = None
    airport_latitude: Optional[float] = None
    airport_longitude: Optional[float] = None

    def airport_details(self) -> AirportDetails:
        return AirportDetails(
            icao_code=self.airport_icao_code,
            name=self.airport_name,
            latitude=self.airport_latitude,
            longitude=self.airport_longitude,
        )


class SpecificAircraftRead(BaseModel):
    manufactured_date: Optional[date] = None
    aircraft_type: AircraftTypeRead


class RegistrationRead(BaseModel):
    uuid_rh: str
    registration: str
    airline: Optional[str] = None
    is_current: bool
    aircraft: SpecificAircraftRead


class PhotoRead(BaseModel):
    id: int = Field(..., description="PK in the database")
    user_id: int
    uuid_rh: Optional[str] = None
    airport_code: Optional[str] = None
    image_url: str = Field(..., description="Public image URL")
    taken_at: Optional[datetime] = None
    shutter_speed: Optional[str] = None
    iso: Optional[int] = None
    aperture: Optional[str] = None
    camera_model: Optional[str] = None
    focal_length: Optional[str] = None
    created_at: datetime


class PhotoDetail(PhotoRead):
    airport: Optional[AirportBrief] = None
    registration: Optional[RegistrationRead] = None


class PageMeta(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class PhotoPage(BaseModel):
    data: List[PhotoDetail]
    meta: PageMeta


class SampleMeta(BaseModel):
    total: int
    limit: int
    offset: Optional[int] = None


class PhotoSample(BaseModel):
    data: List[PhotoDetail]
    meta: SampleMeta


class MessageResponse(BaseModel):
    message: str

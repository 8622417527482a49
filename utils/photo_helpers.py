"""Helpers turning Photo models into Pydantic response schemas."""
from collections.abc import Iterable
from typing import List

from core.config import settings
from models.photo import Photo
from schemas.photo import PhotoDetail, PhotoRead
from schemas.reference import AircraftTypeRead, AirportBrief


def build_photo_url(s3_key: str) -> str:
    return f"{settings.s3_base_url}/{s3_key}"


def _photo_fields(photo: Photo) -> dict:
    return dict(
        id=photo.id,
        user_id=photo.user_id,
        uuid_rh=photo.uuid_rh,
        airport_code=photo.airport_code,
        image_url=build_photo_url(photo.s3_key),
        taken_at=photo.taken_at,
        shutter_speed=photo.shutter_speed,
        iso=photo.iso,
        aperture=photo.aperture,
        camera_model=photo.camera_model,
        focal_length=photo.focal_length,
        created_at=photo.created_at,
    )


def to_photo_read(photo: Photo) -> PhotoRead:
    return PhotoRead(**_photo_fields(photo))


def to_photo_detail(photo: Photo) -> PhotoDetail:
    """
    Full photo with airport and registration -> airframe -> type nested.
    Relationships must be eager-loaded (see services.photo_search).
    """
    rh = photo.registration
    registration = None
    if rh is not None:
        registration = {
            "uuid_rh": rh.uuid_rh,
            "registration": rh.registration,
            "airline": rh.airline,
            "is_current": rh.is_current,
            "aircraft": {
                "manufactured_date": rh.aircraft.manufactured_date,
                "aircraft_type": AircraftTypeRead.model_validate(rh.aircraft.aircraft_type),
            },
        }
    airport = AirportBrief.model_validate(photo.airport) if photo.airport is not None else None
    return PhotoDetail(**_photo_fields(photo), airport=airport, registration=registration)


def to_photo_details(photos: Iterable[Photo]) -> List[PhotoDetail]:
    return [to_photo_detail(p) for p in photos]

from datetime import date, datetime
from math import ceil
from typing import List, Optional

from fastapi import APIRouter, Depends, status, UploadFile, File, Form, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user
from models.user import User
from schemas.photo import (
    AirportDetails,
    MessageResponse,
    PageMeta,
    PhotoCreate,
    PhotoPage,
    PhotoRead,
    PhotoSample,
    PhotoUpdate,
    SampleMeta,
)
from schemas.stats import (
    AircraftSeenCount,
    AirlineCount,
    AirplaneCount,
    AirportCount,
    ManufacturerCount,
    YearCount,
)
from services import registration, stats
from services.photo_search import (
    PHOTO_PAGE_LIMIT,
    RANDOM_SAMPLE_SIZE,
    PhotoFilters,
    parse_filter_array,
    sample_photos,
    search_photos,
)
from utils.photo_helpers import to_photo_details, to_photo_read
from utils.s3 import MediaStore, get_media_store

router = APIRouter(prefix="/photos", tags=["photos"])


def photo_filters(
    search: str = Query("", max_length=64, description="Part of the registration"),
    aircraftTypeFilter: Optional[str] = Query(None, description='JSON array of ICAO types, e.g. ["A320"]'),
    manufacturerFilter: Optional[str] = Query(None, description='JSON array of manufacturers'),
) -> PhotoFilters:
    return PhotoFilters(
        search=search.strip(),
        aircraft_types=parse_filter_array(aircraftTypeFilter, "aircraftTypeFilter"),
        manufacturers=parse_filter_array(manufacturerFilter, "manufacturerFilter"),
    )


@router.get(
    "/my-photos",
    response_model=PhotoPage,
    summary="My photos, paginated and filtered",
)
async def list_my_photos(
    page: int = Query(1, ge=1),
    limit: int = Query(PHOTO_PAGE_LIMIT, ge=1, le=100),
    filters: PhotoFilters = Depends(photo_filters),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    photos, total = await search_photos(db, current_user.id, filters, page, limit)
    return PhotoPage(
        data=to_photo_details(photos),
        meta=PageMeta(page=page, limit=limit, total=total, totalPages=ceil(total / limit)),
    )


@router.get(
    "/my-photos/random",
    response_model=PhotoSample,
    summary="A random window of my photos",
)
async def random_photos(
    filters: PhotoFilters = Depends(photo_filters),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    photos, total, offset = await sample_photos(db, current_user.id, filters, RANDOM_SAMPLE_SIZE)
    return PhotoSample(
        data=to_photo_details(photos),
        meta=SampleMeta(total=total, limit=RANDOM_SAMPLE_SIZE, offset=offset),
    )


@router.get("/airline-counts", response_model=List[AirlineCount], summary="Photos per airline")
async def airline_counts(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await stats.airline_counts_by_user(db, current_user.id, limit)


@router.get("/airport-counts", response_model=List[AirportCount], summary="Photos per airport")
async def airport_counts(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await stats.airport_counts_by_user(db, current_user.id, limit)


@router.get("/airplane-counts", response_model=List[AirplaneCount], summary="Photos per aircraft type")
async def airplane_counts(
    limit: int = Query(8, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await stats.airplane_counts_by_user(db, current_user.id, limit)


@router.get("/manufacturer-counts", response_model=List[ManufacturerCount], summary="Photos per manufacturer")
async def manufacturer_counts(
    limit: int = Query(8, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await stats.manufacturer_counts_by_user(db, current_user.id, limit)


@router.get("/most-seen-aircraft", response_model=List[AircraftSeenCount], summary="Most photographed registrations")
async def most_seen_aircraft(
    limit: int = Query(8, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await stats.most_seen_aircraft_by_user(db, current_user.id, limit)


@router.get("/photo-counts", response_model=List[YearCount], summary="Photos per year")
async def photo_counts(
    num_years: int = Query(5, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await stats.photo_counts_by_user_by_year(db, current_user.id, num_years)


@router.post(
    "",
    response_model=PhotoRead,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a photo and log the aircraft on it",
)
async def upload_photo(
    image: UploadFile = File(..., description="Photo; resized to a JPEG before storage"),
    registration_mark: Optional[str] = Form(None, alias="registration"),
    airport_code: Optional[str] = Form(None, description="ICAO code, or 'other' with airport_* fields"),
    taken_at: Optional[datetime] = Form(None),
    shutter_speed: Optional[str] = Form(None),
    iso: Optional[int] = Form(None),
    aperture: Optional[str] = Form(None),
    camera_model: Optional[str] = Form(None),
    focal_length: Optional[str] = Form(None),
    aircraft_type_id: Optional[str] = Form(None, description="Declares a new airframe of this type"),
    manufactured_date: Optional[date] = Form(None),
    airline_code: Optional[str] = Form(None),
    uuid_rh: Optional[str] = Form(None, description="Reuse an existing registration history"),
    airport_icao_code: Optional[str] = Form(None),
    airport_name: Optional[str] = Form(None),
    airport_latitude: Optional[float] = Form(None),
    airport_longitude: Optional[float] = Form(None),
    db: AsyncSession = Depends(get_db),
    media: MediaStore = Depends(get_media_store),
    current_user: User = Depends(get_current_user),
):
    payload = PhotoCreate(
        registration=registration_mark,
        airport_code=airport_code,
        taken_at=taken_at,
        shutter_speed=shutter_speed,
        iso=iso,
        aperture=aperture,
        camera_model=camera_model,
        focal_length=focal_length,
        aircraft_type_id=aircraft_type_id,
        manufactured_date=manufactured_date,
        airline_code=airline_code,
        uuid_rh=uuid_rh,
        airport=AirportDetails(
            icao_code=airport_icao_code,
            name=airport_name,
            latitude=airport_latitude,
            longitude=airport_longitude,
        ),
    )
    data = await image.read()
    photo = await registration.create_photo(db, media, current_user.id, payload, data)
    return to_photo_read(photo)


@router.put(
    "/{photo_id}",
    response_model=PhotoRead,
    summary="Edit a photo's metadata, airport or registration",
)
async def update_photo(
    payload: PhotoUpdate,
    photo_id: int = Path(..., description="Photo ID"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    photo = await registration.update_photo(db, photo_id, current_user.id, payload)
    return to_photo_read(photo)


@router.delete(
    "/{photo_id}",
    response_model=MessageResponse,
    summary="Delete a photo, its stored image and any orphaned aircraft records",
)
async def delete_photo(
    photo_id: int = Path(..., description="Photo ID"),
    db: AsyncSession = Depends(get_db),
    media: MediaStore = Depends(get_media_store),
    current_user: User = Depends(get_current_user),
):
    await registration.delete_photo(db, media, photo_id, current_user.id)
    return MessageResponse(message="Photo deleted and cleanup performed successfully")

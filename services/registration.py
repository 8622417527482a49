"""
Registration lifecycle for logged photos.

Photos point at a RegistrationHistory row, which points at a SpecificAircraft
(one airframe). Both rows exist only because photos reference them:

    Photo -> RegistrationHistory -> SpecificAircraft

Creating a photo may create a new airframe + registration pair or reuse an
existing registration. Re-pointing or deleting a photo runs ``cleanup`` on the
registration it left, which deletes the registration when no photo uses it and
then the airframe when no registration uses it.

Every mutation runs in one ``unit_of_work`` transaction. ``cleanup`` is also
idempotent, so a pass over an already collected registration is a no-op and
any orphan left by a failure elsewhere is removed the next time a photo
touching it is changed.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from core.config import settings
from core.database import unit_of_work
from core.errors import (
    InsertFailed,
    MediaDeleteFailure,
    NotFoundOrForbidden,
    RegistrationNotFound,
    ValidationError,
)
from models.aircraft import RegistrationHistory, SpecificAircraft
from models.airport import Airport
from models.photo import Photo
from schemas.photo import AirportDetails, PhotoCreate, PhotoUpdate
from services import reference
from utils.image_tools import compress_image_bytes
from utils.s3 import MediaStore

logger = logging.getLogger(__name__)

OTHER_AIRPORT = "other"

METADATA_FIELDS = (
    "taken_at",
    "shutter_speed",
    "iso",
    "aperture",
    "camera_model",
    "focal_length",
)


@dataclass
class CleanupResult:
    registration_deleted: bool = False
    aircraft_deleted: bool = False


async def _count(db: AsyncSession, model, *criteria) -> int:
    stmt = select(func.count()).select_from(model).where(*criteria)
    return (await db.execute(stmt)).scalar_one()


# --- Registration resolution ---

async def lookup_registration(db: AsyncSession, registration: str) -> str:
    """Most recent registration row whose mark equals ``registration``, case-insensitively."""
    mark = registration.strip().upper()
    stmt = (
        select(RegistrationHistory.uuid_rh)
        .where(func.upper(RegistrationHistory.registration) == mark)
        .order_by(RegistrationHistory.created_at.desc())
        .limit(1)
    )
    uuid_rh = (await db.execute(stmt)).scalar_one_or_none()
    if uuid_rh is None:
        raise RegistrationNotFound()
    return uuid_rh


async def create_registration(
    db: AsyncSession,
    registration: str,
    aircraft_type_id: str,
    manufactured_date: Optional[date] = None,
    airline_code: Optional[str] = None,
) -> str:
    """New airframe plus its first registration row. Never merges with existing marks."""
    icao_type = await reference.require_aircraft_type(db, aircraft_type_id)
    airline = await reference.require_airline(db, airline_code) if airline_code else None

    try:
        aircraft = SpecificAircraft(icao_type=icao_type, manufactured_date=manufactured_date)
        db.add(aircraft)
        await db.flush()

        history = RegistrationHistory(
            uuid_sa=aircraft.uuid,
            registration=registration.strip().upper(),
            airline=airline,
            is_current=True,
        )
        db.add(history)
        await db.flush()
    except SQLAlchemyError as exc:
        raise InsertFailed(f"Failed to insert registration {registration!r}: {exc}") from exc

    logger.info(
        "Registration %s created: uuid_rh=%s uuid_sa=%s",
        history.registration, history.uuid_rh, aircraft.uuid,
    )
    return history.uuid_rh


async def resolve_or_create(
    db: AsyncSession,
    registration: Optional[str] = None,
    aircraft_type_id: Optional[str] = None,
    manufactured_date: Optional[date] = None,
    airline_code: Optional[str] = None,
    uuid_rh: Optional[str] = None,
) -> str:
    """
    Work out which RegistrationHistory a photo should point at.

    - ``uuid_rh`` given: used as-is once it is known to exist.
    - ``aircraft_type_id`` given: a fresh airframe + registration pair.
    - otherwise: lookup by registration text, RegistrationNotFound if absent.
    """
    if uuid_rh:
        if await db.get(RegistrationHistory, uuid_rh) is None:
            raise RegistrationNotFound(f"Registration history {uuid_rh} does not exist")
        return uuid_rh

    if not registration or not registration.strip():
        raise ValidationError("Registration is required")

    if aircraft_type_id:
        return await create_registration(
            db, registration, aircraft_type_id, manufactured_date, airline_code
        )
    return await lookup_registration(db, registration)


def _require_airport_details(details: Optional[AirportDetails]) -> AirportDetails:
    if (
        details is None
        or not details.icao_code
        or not details.name
        or details.latitude is None
        or details.longitude is None
    ):
        raise ValidationError("All airport fields are required for 'other' airport.")
    return details


async def resolve_airport(
    db: AsyncSession,
    airport_code: Optional[str],
    details: Optional[AirportDetails],
    reuse_existing: bool = False,
) -> Optional[str]:
    """
    Airport code to store on a photo. "other" inserts the airport from
    ``details`` first; an already known ICAO code is a DuplicateAirport
    unless ``reuse_existing`` is set.
    """
    if airport_code != OTHER_AIRPORT:
        return airport_code or None

    details = _require_airport_details(details)
    code = details.icao_code.strip().upper()
    if reuse_existing and await db.get(Airport, code) is not None:
        return code

    airport = await reference.create_airport(
        db, code, details.name, details.latitude, details.longitude
    )
    return airport.icao_code


# --- Garbage collection ---

async def cleanup(db: AsyncSession, uuid_rh: str) -> CleanupResult:
    """
    Delete ``uuid_rh`` if no photo references it, then its airframe if no
    registration references that. Flushes, does not commit.
    """
    result = CleanupResult()

    if await _count(db, Photo, Photo.uuid_rh == uuid_rh):
        return result

    stmt = select(RegistrationHistory.uuid_sa).where(RegistrationHistory.uuid_rh == uuid_rh)
    uuid_sa = (await db.execute(stmt)).scalar_one_or_none()
    if uuid_sa is None:
        return result

    await db.execute(delete(RegistrationHistory).where(RegistrationHistory.uuid_rh == uuid_rh))
    result.registration_deleted = True

    if not await _count(db, RegistrationHistory, RegistrationHistory.uuid_sa == uuid_sa):
        await db.execute(delete(SpecificAircraft).where(SpecificAircraft.uuid == uuid_sa))
        result.aircraft_deleted = True

    logger.info(
        "Cleanup uuid_rh=%s: registration_deleted=%s aircraft_deleted=%s",
        uuid_rh, result.registration_deleted, result.aircraft_deleted,
    )
    return result


# --- Photo operations ---

async def get_owned_photo(db: AsyncSession, photo_id: int, user_id: int) -> Photo:
    stmt = select(Photo).where(Photo.id == photo_id, Photo.user_id == user_id)
    photo = (await db.execute(stmt)).scalar_one_or_none()
    if photo is None:
        raise NotFoundOrForbidden()
    return photo


async def _discard_media(media: MediaStore, key: str) -> bool:
    try:
        await run_in_threadpool(media.delete, key)
    except MediaDeleteFailure as exc:
        logger.warning("Media object left behind: %s", exc)
        return False
    return True


async def create_photo(
    db: AsyncSession,
    media: MediaStore,
    user_id: int,
    payload: PhotoCreate,
    image: bytes,
) -> Photo:
    if not payload.uuid_rh and not (payload.registration and payload.registration.strip()):
        raise ValidationError("Registration is required")
    if payload.airport_code == OTHER_AIRPORT:
        _require_airport_details(payload.airport)

    try:
        data = await run_in_threadpool(
            compress_image_bytes, image, settings.IMAGE_MAX_WIDTH, settings.IMAGE_QUALITY
        )
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc

    key = await run_in_threadpool(media.put, media.build_key(user_id), data, "image/jpeg")

    try:
        async with unit_of_work(db):
            airport_code = await resolve_airport(db, payload.airport_code, payload.airport)
            uuid_rh = await resolve_or_create(
                db,
                registration=payload.registration,
                aircraft_type_id=payload.aircraft_type_id,
                manufactured_date=payload.manufactured_date,
                airline_code=payload.airline_code,
                uuid_rh=payload.uuid_rh,
            )
            photo = Photo(
                user_id=user_id,
                uuid_rh=uuid_rh,
                airport_code=airport_code,
                s3_key=key,
                **{field: getattr(payload, field) for field in METADATA_FIELDS},
            )
            db.add(photo)
    except BaseException:
        # the row never made it, so neither should the upload (cancellation included)
        await _discard_media(media, key)
        raise

    await db.refresh(photo)
    logger.info("Photo %s created by user %s (uuid_rh=%s)", photo.id, user_id, uuid_rh)
    return photo


async def update_photo(
    db: AsyncSession,
    photo_id: int,
    user_id: int,
    payload: PhotoUpdate,
) -> Photo:
    photo = await get_owned_photo(db, photo_id, user_id)
    old_ref = photo.uuid_rh

    async with unit_of_work(db):
        if payload.airport_code is not None:
            photo.airport_code = await resolve_airport(
                db, payload.airport_code, payload.airport_details(), reuse_existing=True
            )

        new_ref = old_ref
        if payload.uuid_rh and payload.uuid_rh != old_ref:
            new_ref = await resolve_or_create(db, uuid_rh=payload.uuid_rh)
        elif payload.registration and not payload.uuid_rh:
            new_ref = await resolve_or_create(
                db,
                registration=payload.registration,
                aircraft_type_id=payload.aircraft_type_id,
                manufactured_date=payload.manufactured_date,
                airline_code=payload.airline_code,
            )

        # metadata is replaced wholesale, missing fields become null
        for field in METADATA_FIELDS:
            setattr(photo, field, getattr(payload, field))

        if new_ref != old_ref:
            photo.uuid_rh = new_ref
            await db.flush()
            if old_ref:
                await cleanup(db, old_ref)

    logger.info("Photo %s updated (uuid_rh %s -> %s)", photo_id, old_ref, new_ref)
    return photo


async def delete_photo(
    db: AsyncSession,
    media: MediaStore,
    photo_id: int,
    user_id: int,
) -> CleanupResult:
    photo = await get_owned_photo(db, photo_id, user_id)
    uuid_rh, s3_key = photo.uuid_rh, photo.s3_key

    result = CleanupResult()
    async with unit_of_work(db):
        await db.execute(delete(Photo).where(Photo.id == photo_id))
        if uuid_rh:
            result = await cleanup(db, uuid_rh)

    # ownership record first, storage reclamation is best-effort
    await _discard_media(media, s3_key)
    logger.info("Photo %s deleted by user %s", photo_id, user_id)
    return result

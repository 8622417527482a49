"""
Error taxonomy shared by services and routers.

Services raise these; ``main.py`` maps them to JSON responses with the
attached status code.
"""
from starlette import status


class PlaneTrackerError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(PlaneTrackerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class AuthorizationError(PlaneTrackerError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied. Admins only."


class NotFoundOrForbidden(PlaneTrackerError):
    # absent and foreign resources are reported the same way
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Photo not found or access denied"


class RegistrationNotFound(PlaneTrackerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Registration not found. Please provide aircraft details."


class DuplicateKey(PlaneTrackerError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Record already exists"


class DuplicateAirport(DuplicateKey):
    default_detail = "Airport with this ICAO code already exists."


class StoreFailure(PlaneTrackerError):
    """Unclassified store error. The detail is logged, never returned."""


class InsertFailed(StoreFailure):
    pass


class MediaUploadFailure(StoreFailure):
    pass


class MediaDeleteFailure(PlaneTrackerError):
    pass

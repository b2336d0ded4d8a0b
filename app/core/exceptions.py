"""
Domain exceptions for sighting operations.

Services raise these; routers translate them into HTTP responses using
``status_code`` and ``message``.
"""

from typing import Optional

from fastapi import status


class SightingError(Exception):
    """Base exception for sighting-related errors"""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class CoordinateValidationError(SightingError):
    """Latitude/longitude missing, non-finite or outside geographic range"""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class SightingValidationError(SightingError):
    """Submitted sighting field is empty or malformed"""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class IntegrityError(SightingError):
    """Insert references an owner that does not exist"""

    status_code = status.HTTP_409_CONFLICT


class SightingNotFoundOrUnauthorized(SightingError):
    """Delete targeted a missing sighting or one owned by someone else"""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Sighting not found or not authorized"):
        super().__init__(message)


class SpeciesNotFoundError(SightingError):
    """Species lookup reported no match for the submitted name"""

    status_code = 422

    def __init__(self, species_name: str):
        self.species_name = species_name
        super().__init__(f"Unknown species: {species_name}")


class SpeciesLookupError(SightingError):
    """Species lookup service could not be reached or answered with an error"""

    status_code = status.HTTP_502_BAD_GATEWAY


class PhotoUploadError(SightingError):
    """Photo was supplied but could not be stored"""

    status_code = status.HTTP_400_BAD_REQUEST

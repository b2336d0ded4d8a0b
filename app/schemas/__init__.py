from app.schemas.user import (
    UserCreate,
    UserRead,
    UserUpdate,
    RegisterResponse,
    LoginRequest,
    TokenResponse,
)
from app.schemas.sighting import SightingCreate, SightingRead, SightingNearbyRead
from app.schemas.species import SpeciesResult, SpeciesSearchResponse

__all__ = [
    "UserCreate",
    "UserRead",
    "UserUpdate",
    "RegisterResponse",
    "LoginRequest",
    "TokenResponse",
    "SightingCreate",
    "SightingRead",
    "SightingNearbyRead",
    "SpeciesResult",
    "SpeciesSearchResponse",
]

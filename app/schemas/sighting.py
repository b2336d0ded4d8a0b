from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from datetime import datetime
from typing import Optional


class SightingBase(BaseModel):
    species_name: str = Field(..., min_length=1)
    latitude: float
    longitude: float
    notes: Optional[str] = None
    observed_at: Optional[datetime] = None


class SightingCreate(SightingBase):
    """Submission payload. Coordinates are range-checked by the service, not here."""
    pass


class SightingRead(SightingBase):
    id: int
    user_id: UUID
    observed_at: datetime
    photo_url: Optional[str] = None
    verification_status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SightingNearbyRead(SightingRead):
    """Sighting returned by a radius query; distance is kilometers from the query center."""
    distance: float

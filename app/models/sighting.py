from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Sighting(Base):
    __tablename__ = "sightings"
    __table_args__ = (
        CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_sightings_latitude_range"),
        CheckConstraint("longitude >= -180 AND longitude <= 180", name="ck_sightings_longitude_range"),
    )

    # Autoincrement id doubles as storage order for distance tie-breaks
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    species_name = Column(String, nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    notes = Column(Text, nullable=True)
    observed_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    photo_url = Column(String, nullable=True)
    verification_status = Column(String, nullable=False, default="unverified")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    # Relationships
    user = relationship("User", back_populates="sightings")

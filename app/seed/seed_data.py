import uuid
from datetime import datetime, timedelta, timezone
from sqlalchemy.orm import Session

from app.core.auth import hash_password
from app.models.user import User
from app.models.sighting import Sighting
from app.models.login_token import LoginToken

SEED_PASSWORD = "wildlife123"


def seed_db(db: Session) -> None:
    """Seed the database with sample users and sightings."""

    # Clear existing data (optional - comment out if you want to preserve data)
    db.query(Sighting).delete()
    db.query(LoginToken).delete()
    db.query(User).delete()
    db.commit()

    password_hash = hash_password(SEED_PASSWORD)
    alice = User(
        id=uuid.uuid4(),
        username="alice",
        email="alice@example.com",
        phone_number="555-0100",
        password_hash=password_hash,
    )
    bob = User(
        id=uuid.uuid4(),
        username="bob",
        email="bob@example.com",
        password_hash=password_hash,
    )
    db.add(alice)
    db.add(bob)
    db.commit()
    db.refresh(alice)
    db.refresh(bob)

    # Oldest first so created_at increases with id
    base = datetime.now(timezone.utc) - timedelta(days=3)
    sightings = [
        Sighting(
            user_id=alice.id,
            species_name="Ardea herodias",
            latitude=10.0,
            longitude=10.0,
            notes="Wading at the shoreline",
            observed_at=base,
            created_at=base,
        ),
        Sighting(
            user_id=bob.id,
            species_name="Haliaeetus leucocephalus",
            latitude=10.0,
            longitude=10.01,
            observed_at=base + timedelta(days=1),
            created_at=base + timedelta(days=1),
        ),
        Sighting(
            user_id=alice.id,
            species_name="Vulpes vulpes",
            latitude=50.0,
            longitude=50.0,
            notes="Crossed the trail at dusk",
            observed_at=base + timedelta(days=2),
            created_at=base + timedelta(days=2),
        ),
    ]
    for sighting in sightings:
        db.add(sighting)
    db.commit()

    print("Database seeded successfully!")
    print(f"Created 2 users (password: {SEED_PASSWORD}), {len(sightings)} sightings")

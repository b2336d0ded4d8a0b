"""
Load the sample users and sightings used for local development.
Run with: python seed_db.py

Seeded accounts log in with app.seed.seed_data.SEED_PASSWORD.
"""
from dotenv import load_dotenv
from sqlalchemy.orm import Session

from app.db.session import SessionLocal, init_db
from app.models.sighting import Sighting
from app.models.user import User
from app.seed.seed_data import seed_db

load_dotenv()


def main():
    init_db()
    db: Session = SessionLocal()
    try:
        seed_db(db)
        for user in db.query(User).order_by(User.username).all():
            count = db.query(Sighting).filter(Sighting.user_id == user.id).count()
            print(f"  {user.username} <{user.email}>: {count} sightings")
    finally:
        db.close()


if __name__ == "__main__":
    main()

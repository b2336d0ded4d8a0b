import os
import tempfile

# Settings are read at import time; keep uploads out of the working tree
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="sightings-uploads-"))

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.seed.seed_data import seed_db, SEED_PASSWORD
from app.services.photo_storage import LocalPhotoStorage, get_photo_storage
from app.services.species_client import SpeciesValidator, get_species_validator


# Use SQLite database file for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)


@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enforce foreign keys so owner checks and cascades behave like PostgreSQL."""
    dbapi_conn.execute("PRAGMA foreign_keys=ON")


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class StubSpeciesValidator(SpeciesValidator):
    """Accepts every name except those listed as unknown."""

    def __init__(self, unknown=()):
        super().__init__(enabled=True)
        self.unknown = {name.casefold() for name in unknown}
        self.calls = []

    async def validate(self, species_name: str) -> bool:
        self.calls.append(species_name)
        return species_name.casefold() not in self.unknown


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def species_validator():
    return StubSpeciesValidator(unknown=["Dragon"])


@pytest.fixture
def photo_storage(tmp_path):
    return LocalPhotoStorage(upload_dir=str(tmp_path / "photos"), base_url="/uploads", max_bytes=1024 * 1024)


def _make_client(session, species_validator, photo_storage):
    def override_get_db():
        try:
            yield session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_species_validator] = lambda: species_validator
    app.dependency_overrides[get_photo_storage] = lambda: photo_storage
    return TestClient(app)


@pytest.fixture(scope="function")
def client(db_session, species_validator, photo_storage):
    """Create a test client with database and collaborator overrides."""
    client = _make_client(db_session, species_validator, photo_storage)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def seeded_db(db_session):
    """Create a database session with seeded data."""
    seed_db(db_session)
    return db_session


@pytest.fixture(scope="function")
def seeded_client(seeded_db, species_validator, photo_storage):
    """Create a test client with seeded database."""
    client = _make_client(seeded_db, species_validator, photo_storage)
    yield client
    app.dependency_overrides.clear()


def register_and_login(client, username="walker", email="walker@example.com", password="s3cret-pass"):
    """Register a user through the API and return Authorization headers for them."""
    client.post(
        "/api/v1/auth/register",
        json={"username": username, "email": email, "password": password},
    )
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def auth_headers(client):
    return register_and_login(client)


@pytest.fixture
def seeded_auth_headers(seeded_client):
    """Headers for seeded users: {"alice": {...}, "bob": {...}}."""
    headers = {}
    for name in ("alice", "bob"):
        response = seeded_client.post(
            "/api/v1/auth/login",
            json={"email": f"{name}@example.com", "password": SEED_PASSWORD},
        )
        assert response.status_code == 200, response.text
        headers[name] = {"Authorization": f"Bearer {response.json()['token']}"}
    return headers

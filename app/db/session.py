from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session

from app.core.config import settings
from app.db.base import Base

_is_sqlite = settings.database_url.startswith("sqlite")
_connect_args = {"check_same_thread": False} if _is_sqlite else {}

engine = create_engine(settings.database_url, connect_args=_connect_args)


def enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    """SQLite ignores FOREIGN KEY / ON DELETE CASCADE unless asked per connection."""
    dbapi_conn.execute("PRAGMA foreign_keys=ON")


if _is_sqlite:
    event.listen(engine, "connect", enable_sqlite_foreign_keys)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    # Register model metadata before create_all
    import app.models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()

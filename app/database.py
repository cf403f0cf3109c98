"""
Database connection setup.
"""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.config import settings
from app.errors import StorageError

logger = logging.getLogger(__name__)

# SQLite needs check_same_thread=False when sessions cross threadpool workers
connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(
    settings.DATABASE_URL,
    connect_args=connect_args,
    echo=settings.DEBUG,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Request-scoped session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def storage_guard(db: Session, action: str):
    """Roll back and re-raise persistence failures as ``StorageError``."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Storage failure during %s: %s", action, exc, exc_info=True)
        raise StorageError(action) from exc


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)

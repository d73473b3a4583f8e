"""
Database connection and session management for the transcript backend.
"""

from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from transcript_app.config import config

# Create base class for SQLAlchemy models
Base = declarative_base()

DATABASE_URL = config.DATABASE_URL

engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Type alias for session
DBSession = Session


def init_db() -> None:
    """Initialize the database by creating all tables."""
    from transcript_app.db.models import User, Transcript, AISettings, Memory

    # Create all tables
    Base.metadata.create_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Get a database session.

    This is a dependency that will be used in FastAPI route functions.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

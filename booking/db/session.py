"""
Database session and engine.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from booking.config import settings


def build_engine(url: str):
    if url.startswith("sqlite"):
        # Request threads and the embedded worker share the file
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_size=8,
        max_overflow=10,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_timeout=30,
    )


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> sessionmaker:
    """Factory for work that outlives the request (background tasks, worker ticks)."""
    return SessionLocal

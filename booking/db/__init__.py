from booking.db.base import Base
from booking.db.session import get_db, get_session_factory, engine, SessionLocal
from booking.db.tables import ALL_TABLE_NAMES, RESETTABLE_TABLE_NAMES

__all__ = [
    "get_db",
    "get_session_factory",
    "engine",
    "SessionLocal",
    "Base",
    "ALL_TABLE_NAMES",
    "RESETTABLE_TABLE_NAMES",
]

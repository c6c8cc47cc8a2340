"""Users: clients and service providers. Credentials live with the identity service, not here."""
from sqlalchemy import Boolean, Column, DateTime, Integer, String, false
from sqlalchemy.sql import func

from booking.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    provider = Column(Boolean, nullable=False, default=False, server_default=false(), index=True)
    avatar_path = Column(String(255), nullable=True)  # key under files_base_url
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

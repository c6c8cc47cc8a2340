"""Provider notifications: persisted mailbox with read state.

recipient_id: the provider who receives it.
read: flipped once by PUT /notifications/{id}; rows are never deleted.
"""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, Text, false
from sqlalchemy.sql import func

from booking.db.base import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (Index("ix_notifications_recipient_created", "recipient_id", "created_at"),)

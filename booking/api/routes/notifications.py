"""
Provider notifications API: persisted mailbox with read state.

Caller identified by the bearer token. Supports: list (newest 20), unread badge count, mark one read.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from booking.api.deps import get_current_user_id
from booking.core.constants import MAX_DB_INT
from booking.db.session import get_db
from booking.services.notification_service import (
    list_for_provider,
    mark_read,
    serialize_notification,
    unread_count,
)

router = APIRouter()
logger = logging.getLogger(__name__)


# --- List ---


@router.get("/notifications")
def list_notifications(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
) -> list[dict[str, Any]]:
    """List the provider's notifications, newest first (20 at most)."""
    return [serialize_notification(r) for r in list_for_provider(db, user_id)]


# --- Unread count ---


@router.get("/notifications/unread-count")
def get_unread_count(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
) -> dict[str, int]:
    """Unread notifications in the provider's mailbox (badge count)."""
    return {"unread_count": unread_count(db, user_id)}


# --- Mark one read ---


@router.put("/notifications/{notification_id}")
def mark_notification_read(
    notification_id: int = Path(..., ge=1, le=MAX_DB_INT),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
) -> dict[str, Any]:
    """Mark a single notification as read (persisted). Only the recipient may."""
    row = mark_read(db, user_id, notification_id)
    logger.debug("Notification %s marked read by %s", notification_id, user_id)
    return serialize_notification(row)

"""Provider schedule: one day of active appointments."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from booking.api.deps import get_current_user_id
from booking.db.session import get_db
from booking.services.schedule_service import list_schedule, serialize_schedule_entry

router = APIRouter()


@router.get("/schedule")
def get_schedule(
    date: str | None = Query(None, description="Day to show (ISO date or timestamp); defaults to today"),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
) -> dict:
    rows = list_schedule(db, user_id, date)
    return {"appointments": [serialize_schedule_entry(a) for a in rows]}

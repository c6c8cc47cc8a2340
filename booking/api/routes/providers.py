"""Providers directory: who can be booked."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from booking.api.deps import get_current_user_id
from booking.db.session import get_db
from booking.services.user_directory import list_providers

router = APIRouter()


@router.get("/providers")
def get_providers(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)) -> list[dict]:
    return list_providers(db)

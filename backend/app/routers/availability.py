"""Availability API routes — planning grid, single toggle and batch save."""
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps import get_current_user
from app.models.user import User
from app.notifications.dispatcher import NotificationDispatcher, get_dispatcher
from app.schemas.availability import BatchOut, BatchSave, GridOut, SlotRef, ToggleOut
from app.services import availability_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=GridOut)
def get_grid(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Headcounts per slot over a date range, plus the caller's own slots."""
    return availability_service.get_grid(db, user.user_id, start, end)


@router.post("/", response_model=ToggleOut)
def toggle_slot(
    payload: SlotRef,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Toggle the caller's availability for one slot."""
    status = availability_service.toggle_slot(db, user, payload.date, payload.hour, dispatcher)
    return ToggleOut(status=status)


@router.post("/batch", response_model=BatchOut)
def save_batch(
    payload: BatchSave,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Apply pending additions and removals in one request."""
    result = availability_service.save_batch(
        db,
        user,
        additions=[(s.date, s.hour) for s in payload.additions],
        removals=[(s.date, s.hour) for s in payload.removals],
        dispatcher=dispatcher,
    )
    return BatchOut(**result)

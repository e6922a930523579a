"""Call API routes — delegates to call_service."""
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps import get_current_user
from app.models.user import User
from app.notifications.dispatcher import NotificationDispatcher, get_dispatcher
from app.schemas.call import CallCreate, CallOut, RespondOut, RespondPayload, RosterOut
from app.services import call_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _roster_out(db: Session, roster) -> RosterOut:
    accepted, declined = call_service.roster_names(db, roster)
    return RosterOut(accepted=accepted, declined=declined)


@router.post("/", response_model=CallOut, status_code=status.HTTP_201_CREATED)
def create_call(
    payload: CallCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Create a call; the creator is booked across the occupied hours."""
    return call_service.create_call(
        db,
        creator=user,
        day=payload.date,
        start_hour=payload.hour,
        location=payload.location,
        dispatcher=dispatcher,
        duration_minutes=payload.duration,
        price=payload.price,
        comment=payload.comment,
    )


@router.get("/", response_model=list[CallOut])
def list_calls(from_date: Optional[date] = Query(None), db: Session = Depends(get_db)):
    """List upcoming calls (from today by default)."""
    return call_service.list_calls(db, from_date)


@router.get("/{call_id}", response_model=CallOut)
def get_call(call_id: str, db: Session = Depends(get_db)):
    return call_service.get_call(db, call_id)


@router.delete("/{call_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_call(
    call_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Cancel a call (creator or administrator)."""
    call = call_service.get_call(db, call_id)
    call_service.delete_call(db, call, user, dispatcher)


@router.post("/{call_id}/respond", response_model=RespondOut)
def respond(
    call_id: str,
    payload: RespondPayload,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Accept or decline a call."""
    outcome = call_service.respond_to_call(db, call_id, user, payload.status, dispatcher)
    return RespondOut(
        result=outcome.result,
        status=outcome.status,
        roster=_roster_out(db, outcome.roster),
    )


@router.get("/{call_id}/roster", response_model=RosterOut)
def get_roster(call_id: str, db: Session = Depends(get_db)):
    """Resolved attendees (explicit + implicit) and absentees."""
    call = call_service.get_call(db, call_id)
    return _roster_out(db, call_service.get_roster(db, call))

"""Call service — match calls, RSVPs and roster resolution.

Responsibilities:
- Creating a call books the creator's availability across the occupied span
- RSVP upserts one response per (call, user) and syncs availability:
  accept fills the span, decline removes only rows that call filled
- The creator cannot decline their own call; a decline is a cancellation
- Deleting a call always reverses the creator's auto-filled availability
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from app.models.availability import Availability
from app.models.call import Call, CallResponse, ResponseStatus
from app.models.user import User
from app.notifications import messages
from app.scheduling.roster import Roster, implicit_attendees, resolve_roster
from app.services import availability_service, golden_slot_service, user_service

logger = logging.getLogger(__name__)

ALLOWED_DURATIONS = (60, 90)


@dataclass
class RSVPOutcome:
    result: str  # "updated", "unchanged" or "cancelled"
    status: Optional[str] = None
    roster: Roster = field(default_factory=Roster)


def get_call(db: Session, call_id: str) -> Call:
    if not call_id:
        raise ValidationError("Missing call id")
    call = db.query(Call).filter(Call.call_id == call_id).first()
    if not call:
        raise NotFoundError("Call not found")
    return call


def list_calls(db: Session, from_date: Optional[date] = None) -> list[Call]:
    from_date = from_date or date.today()
    return (
        db.query(Call)
        .filter(Call.date >= from_date)
        .order_by(Call.date, Call.start_hour)
        .all()
    )


def create_call(
    db: Session,
    creator: User,
    day: Any,
    start_hour: Any,
    location: str,
    dispatcher: Any,
    duration_minutes: int = 60,
    price: Optional[str] = None,
    comment: Optional[str] = None,
) -> Call:
    """Create a call and book the creator across its occupied hours."""
    day, start_hour = availability_service.validate_slot(day, start_hour)
    if not location or not location.strip():
        raise ValidationError("Missing location")
    if duration_minutes not in ALLOWED_DURATIONS:
        raise ValidationError(f"Duration must be one of {ALLOWED_DURATIONS}, got {duration_minutes}")

    call = Call(
        creator_id=creator.user_id,
        date=day,
        start_hour=start_hour,
        location=location.strip(),
        duration_minutes=duration_minutes,
        price=price,
        comment=comment,
    )
    db.add(call)
    db.commit()
    db.refresh(call)
    logger.info("Created call %s on %s %dh by %s", call.call_id, day, start_hour, creator.user_id)

    try:
        availability_service.add_slots(
            db, creator.user_id, day, call.occupied_hours, dispatcher, source_call_id=call.call_id
        )
    except Exception:
        db.rollback()
        logger.exception("Auto-fill of creator availability failed for call %s", call.call_id)

    dispatcher.send(messages.call_created(call, creator.display_name), mention_all=True)
    return call


def delete_call(db: Session, call: Call, actor: User, dispatcher: Any) -> None:
    """Delete a call (creator or admin) and reverse the creator's auto-fill."""
    if call.creator_id != actor.user_id and not user_service.is_admin(actor):
        raise ForbiddenError("Only the creator or an administrator may cancel this call")

    call_id, day, creator_id = call.call_id, call.date, call.creator_id
    creator_name = call.creator.display_name if call.creator else "A player"
    embed = messages.call_cancelled(call, creator_name, cancelled_by=actor.display_name)

    tagged = db.query(Availability).filter(Availability.source_call_id == call_id).all()
    removed_hours = []
    for row in tagged:
        if row.user_id == creator_id:
            removed_hours.append(row.hour)
            db.delete(row)
        else:
            # Players who accepted keep their hours, untagged
            row.source_call_id = None
    db.flush()
    db.delete(call)
    db.commit()
    logger.info("Call %s deleted by %s; reversed creator hours %s", call_id, actor.user_id, sorted(removed_hours))

    for hour in sorted(removed_hours):
        try:
            golden_slot_service.evaluate_removal(db, day, hour, dispatcher, actor_name=creator_name)
        except Exception:
            db.rollback()
            logger.exception("Golden slot evaluation failed after cancelling call %s", call_id)

    dispatcher.send(embed)


def _upsert_response(db: Session, call_id: str, user_id: str, status: ResponseStatus) -> None:
    for attempt in range(2):
        existing = (
            db.query(CallResponse)
            .filter(CallResponse.call_id == call_id, CallResponse.user_id == user_id)
            .first()
        )
        if existing:
            existing.status = status
        else:
            db.add(CallResponse(call_id=call_id, user_id=user_id, status=status))
        try:
            db.commit()
            return
        except IntegrityError:
            db.rollback()
            logger.warning("Response race on call %s for user %s (attempt %d)", call_id, user_id, attempt + 1)
    raise ConflictError("Could not record the response, please retry")


def sync_availability(db: Session, call: Call, user: User, action: str, dispatcher: Any) -> list[int]:
    """Fill (``add``) or clear (``remove``) the user's hours for the call's span."""
    if action == "add":
        return availability_service.add_slots(
            db, user.user_id, call.date, call.occupied_hours, dispatcher, source_call_id=call.call_id
        )
    if action == "remove":
        return availability_service.remove_call_slots(
            db,
            user.user_id,
            call.date,
            call.occupied_hours,
            call.call_id,
            dispatcher,
            actor_name=user.display_name,
        )
    raise ValueError(f"Unknown sync action: {action}")


def _call_availability(db: Session, call: Call) -> list[Availability]:
    return (
        db.query(Availability)
        .filter(Availability.date == call.date, Availability.hour.in_(call.occupied_hours))
        .all()
    )


def respond_to_call(db: Session, call_id: str, user: User, status: str, dispatcher: Any) -> RSVPOutcome:
    """Record an RSVP; idempotent when the user is already in that state."""
    try:
        new_status = ResponseStatus(status)
    except ValueError:
        raise ValidationError(f"Invalid response status: {status}")
    call = get_call(db, call_id)

    if call.creator_id == user.user_id:
        if new_status == ResponseStatus.declined:
            logger.info("Creator %s declined own call %s; cancelling it", user.user_id, call_id)
            delete_call(db, call, user, dispatcher)
            return RSVPOutcome(result="cancelled")
        return RSVPOutcome(result="unchanged", status=new_status.value, roster=get_roster(db, call))

    existing = next((r for r in call.responses if r.user_id == user.user_id), None)
    if existing is not None and existing.status == new_status:
        return RSVPOutcome(result="unchanged", status=new_status.value, roster=get_roster(db, call))

    # Already holding every hour: record the accept, leave the hours alone
    already_present = (
        new_status == ResponseStatus.accepted
        and existing is None
        and user.user_id in implicit_attendees(call.occupied_hours, _call_availability(db, call))
    )

    _upsert_response(db, call_id, user.user_id, new_status)
    logger.info("User %s responded %s to call %s", user.user_id, new_status.value, call_id)

    action = "add" if new_status == ResponseStatus.accepted else "remove"
    if already_present:
        logger.debug("User %s already present on call %s through availability", user.user_id, call_id)
    else:
        try:
            sync_availability(db, call, user, action, dispatcher)
        except Exception:
            db.rollback()
            logger.exception("Availability sync (%s) failed for user %s on call %s", action, user.user_id, call_id)

    db.refresh(call)
    return RSVPOutcome(result="updated", status=new_status.value, roster=get_roster(db, call))


def get_roster(db: Session, call: Call) -> Roster:
    return resolve_roster(
        call.occupied_hours,
        call.responses,
        _call_availability(db, call),
        creator_id=call.creator_id,
    )


def roster_names(db: Session, roster: Roster) -> tuple[list[dict[str, str]], list[dict[str, str]]]:
    names = user_service.display_names(db, roster.accepted + roster.declined)

    def _entries(ids: list[str]) -> list[dict[str, str]]:
        return [{"user_id": uid, "name": names.get(uid, "Player")} for uid in ids]

    return _entries(roster.accepted), _entries(roster.declined)


def roster_embed(db: Session, call: Call) -> dict[str, Any]:
    accepted, declined = roster_names(db, get_roster(db, call))
    creator_name = call.creator.display_name if call.creator else "A player"
    return messages.call_roster(
        call,
        creator_name,
        [e["name"] for e in accepted],
        [e["name"] for e in declined],
        settings.MATCH_SIZE,
    )

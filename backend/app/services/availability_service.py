"""Availability service — slot toggles, batch saves and the planning grid.

Every mutation commits the availability row first; golden-slot evaluation
runs afterwards against post-write state and never fails the mutation.
"""
import logging
import time
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.config import settings
from app.errors import BatchTimeoutError, ConflictError, ValidationError
from app.models.availability import Availability
from app.models.user import User
from app.scheduling.pending import PendingEdits
from app.scheduling.slot_index import SlotIndex
from app.services import golden_slot_service

logger = logging.getLogger(__name__)


def slot_key(day: date, hour: int) -> str:
    return f"{day.isoformat()}-{hour}"


def validate_slot(day: Any, hour: Any) -> tuple[date, int]:
    """Reject malformed dates and hours outside the operating range."""
    if isinstance(day, str):
        try:
            day = date.fromisoformat(day[:10])
        except ValueError:
            raise ValidationError(f"Invalid date: {day}")
    if isinstance(day, datetime):
        day = day.date()
    if not isinstance(day, date):
        raise ValidationError("Missing or invalid date")
    if isinstance(hour, bool) or not isinstance(hour, int):
        raise ValidationError("Missing or invalid hour")
    if not (settings.OPENING_HOUR <= hour <= settings.CLOSING_HOUR):
        raise ValidationError(
            f"Hour must be between {settings.OPENING_HOUR} and {settings.CLOSING_HOUR}, got {hour}"
        )
    return day, hour


def _find(db: Session, user_id: str, day: date, hour: int) -> Optional[Availability]:
    return (
        db.query(Availability)
        .filter(Availability.user_id == user_id, Availability.date == day, Availability.hour == hour)
        .first()
    )


def add_slot(db: Session, user_id: str, day: date, hour: int, source_call_id: Optional[str] = None) -> bool:
    """Upsert one slot. Returns True if a row was created."""
    for attempt in range(2):
        if _find(db, user_id, day, hour) is not None:
            return False
        db.add(Availability(user_id=user_id, date=day, hour=hour, source_call_id=source_call_id))
        try:
            db.commit()
            return True
        except IntegrityError:
            db.rollback()
            logger.warning("Unique race on slot %s for user %s (attempt %d)", slot_key(day, hour), user_id, attempt + 1)
    raise ConflictError(f"Could not save slot {slot_key(day, hour)}, please retry")


def remove_slot(db: Session, user_id: str, day: date, hour: int) -> bool:
    """Delete one slot. Returns True if a row was deleted."""
    deleted = (
        db.query(Availability)
        .filter(Availability.user_id == user_id, Availability.date == day, Availability.hour == hour)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0


def _after_addition(db: Session, day: date, hour: int, dispatcher: Any) -> None:
    try:
        golden_slot_service.evaluate_addition(db, day, hour, dispatcher)
    except Exception:
        db.rollback()
        logger.exception("Golden slot evaluation failed after adding %s", slot_key(day, hour))


def _after_removal(db: Session, day: date, hour: int, dispatcher: Any, actor_name: str) -> None:
    try:
        golden_slot_service.evaluate_removal(db, day, hour, dispatcher, actor_name=actor_name)
    except Exception:
        db.rollback()
        logger.exception("Golden slot evaluation failed after removing %s", slot_key(day, hour))


def toggle_slot(db: Session, user: User, day: date, hour: int, dispatcher: Any) -> str:
    """Add the slot if the user does not hold it, remove it otherwise."""
    day, hour = validate_slot(day, hour)
    if _find(db, user.user_id, day, hour) is not None:
        remove_slot(db, user.user_id, day, hour)
        logger.info("User %s removed %s", user.user_id, slot_key(day, hour))
        _after_removal(db, day, hour, dispatcher, user.display_name)
        return "removed"

    add_slot(db, user.user_id, day, hour)
    logger.info("User %s added %s", user.user_id, slot_key(day, hour))
    _after_addition(db, day, hour, dispatcher)
    return "added"


def add_slots(
    db: Session,
    user_id: str,
    day: date,
    hours: Iterable[int],
    dispatcher: Any,
    source_call_id: Optional[str] = None,
) -> list[int]:
    """Upsert several hours of one day; existing rows are left untouched."""
    added = [h for h in hours if add_slot(db, user_id, day, h, source_call_id=source_call_id)]
    for h in added:
        _after_addition(db, day, h, dispatcher)
    return added


def remove_call_slots(
    db: Session,
    user_id: str,
    day: date,
    hours: Iterable[int],
    source_call_id: str,
    dispatcher: Any,
    actor_name: str = "A player",
) -> list[int]:
    """Delete the user's rows in ``hours`` that were auto-filled by ``source_call_id``."""
    rows = (
        db.query(Availability)
        .filter(
            Availability.user_id == user_id,
            Availability.date == day,
            Availability.hour.in_(list(hours)),
            Availability.source_call_id == source_call_id,
        )
        .all()
    )
    removed = sorted(row.hour for row in rows)
    for row in rows:
        db.delete(row)
    db.commit()
    for h in removed:
        _after_removal(db, day, h, dispatcher, actor_name)
    return removed


def save_batch(
    db: Session,
    user: User,
    additions: list[tuple[Any, Any]],
    removals: list[tuple[Any, Any]],
    dispatcher: Any,
) -> dict[str, int]:
    """Apply a batch of pending edits against the user's current slots.

    Writes run sequentially under an overall deadline. Already-applied writes
    stay committed if the deadline is hit.
    """
    pending = PendingEdits.from_lists(
        (validate_slot(d, h) for d, h in additions),
        (validate_slot(d, h) for d, h in removals),
    )
    if pending.is_empty():
        return {"added": 0, "removed": 0}

    touched_days = sorted({d for d, _ in pending.additions | pending.removals})
    server_slots = {
        (row.date, row.hour)
        for row in db.query(Availability).filter(
            Availability.user_id == user.user_id,
            Availability.date.in_(touched_days),
        )
    }
    to_add, to_remove = pending.operations(server_slots)

    deadline = time.monotonic() + settings.BATCH_TIMEOUT_SECONDS
    added = removed = 0
    for day, hour in to_add:
        if time.monotonic() > deadline:
            logger.error("Batch save for %s timed out after %d adds", user.user_id, added)
            raise BatchTimeoutError()
        added += add_slot(db, user.user_id, day, hour)
    for day, hour in to_remove:
        if time.monotonic() > deadline:
            logger.error("Batch save for %s timed out after %d removals", user.user_id, removed)
            raise BatchTimeoutError()
        removed += remove_slot(db, user.user_id, day, hour)

    logger.info("Batch save for %s: +%d -%d", user.user_id, added, removed)
    for day in touched_days:
        try:
            golden_slot_service.reconcile_day(db, day, dispatcher, actor_name=user.display_name)
        except Exception:
            db.rollback()
            logger.exception("Golden slot reconciliation failed for %s", day)
    return {"added": added, "removed": removed}


def get_availability(db: Session, start: date, end: date) -> list[Availability]:
    return (
        db.query(Availability)
        .options(joinedload(Availability.user))
        .filter(Availability.date >= start, Availability.date <= end)
        .order_by(Availability.date, Availability.hour)
        .all()
    )


def get_grid(db: Session, user_id: str, start: Optional[date] = None, end: Optional[date] = None) -> dict[str, Any]:
    """Per-slot headcounts over a date range plus the caller's own slots."""
    start = start or date.today()
    end = end or start + timedelta(days=settings.REMINDER_HORIZON_DAYS)
    if end < start:
        raise ValidationError("end must not be before start")

    rows = get_availability(db, start, end)
    index = SlotIndex.build(rows)
    my_slots = [slot_key(r.date, r.hour) for r in rows if r.user_id == user_id]
    slots = [
        {
            "date": day,
            "hour": hour,
            "count": agg.count,
            "users": [{"user_id": u.user_id, "name": u.name} for u in agg.users],
        }
        for (day, hour), agg in index.items()
    ]
    return {"my_slots": my_slots, "slots": slots}

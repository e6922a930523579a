"""Golden slot notifier — at-most-once confirm / revoke per run.

A run of GOLDEN_RUN_LENGTH consecutive hours is "golden" when every hour
reaches MATCH_SIZE players. Per (date, start_hour) a SlotStatus row tracks
whether the confirmation went out:

- Unconfirmed (no row, or notified=False) -> Confirmed when the run is full.
- Confirmed -> Unconfirmed when any hour of the run drops below quorum.

Both transitions are conditional updates; the message is sent only by the
caller whose update actually changed the row, so replays and concurrent
writers never duplicate a notification.
"""
import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.config import settings
from app.models.availability import Availability, SlotStatus
from app.notifications import messages
from app.scheduling.runs import candidate_starts, common_users, is_full_run
from app.scheduling.slot_index import SlotIndex

logger = logging.getLogger(__name__)


def count_slot(db: Session, day: date, hour: int) -> int:
    return (
        db.query(func.count(Availability.id))
        .filter(Availability.date == day, Availability.hour == hour)
        .scalar()
    ) or 0


def load_index(db: Session, day: date, first_hour: int, last_hour: int) -> SlotIndex:
    """Build a SlotIndex for one day restricted to ``first_hour..last_hour``."""
    rows = (
        db.query(Availability)
        .options(joinedload(Availability.user))
        .filter(
            Availability.date == day,
            Availability.hour >= first_hour,
            Availability.hour <= last_hour,
        )
        .all()
    )
    return SlotIndex.build(rows)


def _confirm(db: Session, day: date, start_hour: int) -> bool:
    """Flip the run to notified. True only if this call made the change."""
    result = db.execute(
        update(SlotStatus)
        .where(
            SlotStatus.date == day,
            SlotStatus.start_hour == start_hour,
            SlotStatus.notified == False,  # noqa: E712
        )
        .values(notified=True)
    )
    if result.rowcount == 1:
        db.commit()
        return True

    existing = db.query(SlotStatus).filter(SlotStatus.date == day, SlotStatus.start_hour == start_hour).first()
    if existing is not None:
        db.rollback()
        return False

    db.add(SlotStatus(date=day, start_hour=start_hour, notified=True))
    try:
        db.commit()
    except IntegrityError:
        # Another writer inserted the row first and owns the notification
        db.rollback()
        return False
    return True


def _revoke(db: Session, day: date, start_hour: int) -> bool:
    result = db.execute(
        update(SlotStatus)
        .where(
            SlotStatus.date == day,
            SlotStatus.start_hour == start_hour,
            SlotStatus.notified == True,  # noqa: E712
        )
        .values(notified=False)
    )
    db.commit()
    return result.rowcount == 1


def _send_confirmed(dispatcher: Any, index: SlotIndex, day: date, start_hour: int, run_length: int) -> None:
    players = [u.name for u in common_users(index, day, start_hour, run_length)]
    dispatcher.send(messages.golden_confirmed(day, start_hour, run_length, players))


def evaluate_addition(db: Session, day: date, hour: int, dispatcher: Any) -> list[int]:
    """Confirm every run through ``hour`` that the addition completed.

    Must run after the availability row is committed. Returns the start
    hours newly confirmed.
    """
    run_length = settings.GOLDEN_RUN_LENGTH
    quorum = settings.MATCH_SIZE
    if count_slot(db, day, hour) < quorum:
        return []

    starts = candidate_starts(hour, run_length, settings.OPENING_HOUR, settings.CLOSING_HOUR)
    if not starts:
        return []
    index = load_index(db, day, starts[0], starts[-1] + run_length - 1)

    confirmed = []
    for start in starts:
        if not is_full_run(index, day, start, run_length, quorum):
            continue
        if not _confirm(db, day, start):
            logger.debug("Golden run %s %dh already notified", day, start)
            continue
        logger.info("Golden run %s %dh-%dh confirmed", day, start, start + run_length)
        _send_confirmed(dispatcher, index, day, start, run_length)
        confirmed.append(start)
    return confirmed


def evaluate_removal(
    db: Session,
    day: date,
    hour: int,
    dispatcher: Any,
    actor_name: str = "A player",
) -> list[int]:
    """Revoke every confirmed run through ``hour`` that the removal broke."""
    run_length = settings.GOLDEN_RUN_LENGTH
    if count_slot(db, day, hour) >= settings.MATCH_SIZE:
        return []

    starts = candidate_starts(hour, run_length, settings.OPENING_HOUR, settings.CLOSING_HOUR)
    if not starts:
        return []
    rows = (
        db.query(SlotStatus)
        .filter(
            SlotStatus.date == day,
            SlotStatus.start_hour.in_(starts),
            SlotStatus.notified == True,  # noqa: E712
        )
        .order_by(SlotStatus.start_hour)
        .all()
    )
    candidates = [row.start_hour for row in rows]

    revoked = []
    for start in candidates:
        if not _revoke(db, day, start):
            continue
        logger.info("Golden run %s %dh broken by %s at %dh", day, start, actor_name, hour)
        dispatcher.send(messages.golden_revoked(day, start, run_length, hour, actor_name))
        revoked.append(start)
    return revoked


def reconcile_day(
    db: Session,
    day: date,
    dispatcher: Any,
    actor_name: Optional[str] = None,
) -> tuple[list[int], list[int]]:
    """Bring every run of ``day`` in line with current availability.

    Used after batch saves, where many hours change together, and by the
    on-demand sweep. Returns (confirmed, revoked) start hours.
    """
    run_length = settings.GOLDEN_RUN_LENGTH
    quorum = settings.MATCH_SIZE
    opening, closing = settings.OPENING_HOUR, settings.CLOSING_HOUR
    index = load_index(db, day, opening, closing)
    notified = {
        row.start_hour
        for row in db.query(SlotStatus).filter(SlotStatus.date == day, SlotStatus.notified == True)  # noqa: E712
    }

    confirmed, revoked = [], []
    for start in range(opening, closing - run_length + 2):
        full = is_full_run(index, day, start, run_length, quorum)
        if full and start not in notified:
            if _confirm(db, day, start):
                _send_confirmed(dispatcher, index, day, start, run_length)
                confirmed.append(start)
        elif not full and start in notified:
            if _revoke(db, day, start):
                broken = next(
                    h for h in range(start, start + run_length) if index.count(day, h) < quorum
                )
                dispatcher.send(
                    messages.golden_revoked(day, start, run_length, broken, actor_name or "A player")
                )
                revoked.append(start)
    if confirmed or revoked:
        logger.info("Reconciled %s: confirmed %s, revoked %s", day, confirmed, revoked)
    return confirmed, revoked

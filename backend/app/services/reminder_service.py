"""Reminder sweep — chase missing players for the hottest run of the horizon."""
import logging
from datetime import date, timedelta
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.notifications import messages
from app.scheduling.reminder import ReminderPick, best_run
from app.scheduling.slot_index import SlotIndex
from app.services.availability_service import get_availability

logger = logging.getLogger(__name__)


def _pick_to_dict(pick: ReminderPick) -> dict[str, Any]:
    return {
        "date": pick.date.isoformat(),
        "start_hour": pick.start_hour,
        "end_hour": pick.end_hour,
        "count": pick.count,
        "missing": pick.missing,
        "users": [{"user_id": u.user_id, "name": u.name} for u in pick.users],
    }


def send_reminder(db: Session, dispatcher: Any, today: Optional[date] = None, dry_run: bool = False) -> dict[str, Any]:
    """Find the best REMINDER_RUN_LENGTH run in the horizon and remind the channel.

    Status values: ``no_active_slots``, ``no_common_players``,
    ``already_full``, ``dry_run`` or ``sent``.
    """
    today = today or date.today()
    days = [today + timedelta(days=i) for i in range(settings.REMINDER_HORIZON_DAYS)]
    index = SlotIndex.build(get_availability(db, days[0], days[-1]))

    pick = best_run(
        index,
        days,
        run_length=settings.REMINDER_RUN_LENGTH,
        quorum=settings.MATCH_SIZE,
        opening=settings.OPENING_HOUR,
        closing=settings.CLOSING_HOUR,
    )
    if pick is None:
        logger.info("Reminder sweep: no active slots in the next %d days", settings.REMINDER_HORIZON_DAYS)
        return {"status": "no_active_slots", "message": "No active slots found"}

    slot = _pick_to_dict(pick)
    if pick.count == 0:
        return {"status": "no_common_players", "message": "No run found with common players", "slot": slot}
    if pick.is_full:
        return {"status": "already_full", "message": "Best run is already full", "slot": slot}

    embed = messages.reminder(pick.date, pick.start_hour, pick.run_length, pick.count, pick.quorum)
    if dry_run:
        return {"status": "dry_run", "slot": slot, "embed": embed}

    dispatcher.send(embed)
    logger.info("Reminder sent for %s %dh (%d/%d)", pick.date, pick.start_hour, pick.count, pick.quorum)
    return {"status": "sent", "slot": slot, "embed": embed}

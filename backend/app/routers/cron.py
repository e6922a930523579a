"""Time-triggered jobs, invoked by an external scheduler."""
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps import require_cron_secret
from app.notifications.dispatcher import NotificationDispatcher, get_dispatcher
from app.services import golden_slot_service, reminder_service

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_cron_secret)])


@router.post("/reminder")
def reminder(
    dry_run: bool = Query(False),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Remind the channel about the hottest run that still misses players."""
    return reminder_service.send_reminder(db, dispatcher, dry_run=dry_run)


@router.post("/sweep")
def sweep(
    day: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Reconcile golden-run notification state for one day (today by default)."""
    day = day or date.today()
    confirmed, revoked = golden_slot_service.reconcile_day(db, day, dispatcher)
    return {"date": day.isoformat(), "confirmed": confirmed, "revoked": revoked}

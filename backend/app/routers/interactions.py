"""Chat button relay route."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps import require_interactions_secret
from app.notifications.dispatcher import NotificationDispatcher, get_dispatcher
from app.schemas.call import InteractionOut, InteractionPayload
from app.services import interaction_service

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_interactions_secret)])


@router.post("/", response_model=InteractionOut)
def handle_interaction(
    payload: InteractionPayload,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Handle a button press forwarded by the chat relay bot."""
    logger.info("Interaction %s on call %s from %s:%s", payload.action, payload.call_id, payload.provider, payload.external_id)
    return interaction_service.handle_action(
        db,
        action=payload.action,
        call_id=payload.call_id,
        provider=payload.provider,
        external_id=payload.external_id,
        dispatcher=dispatcher,
    )

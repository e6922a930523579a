"""Chat button relay — accept / decline / list / cancel from the channel.

A relay bot verifies the chat platform's signature and forwards the button
press with the clicker's external account id. Replies are ephemeral text
plus, after a state change, the refreshed call embed.
"""
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.errors import ValidationError
from app.services import call_service, user_service

logger = logging.getLogger(__name__)

ACTIONS = ("accept_call", "decline_call", "list_participants", "cancel_call")


def _reply(content: str, embed: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    return {"content": content, "embed": embed}


def handle_action(
    db: Session,
    action: str,
    call_id: str,
    provider: str,
    external_id: str,
    dispatcher: Any,
) -> dict[str, Any]:
    if action not in ACTIONS:
        raise ValidationError(f"Unknown action: {action}")

    user = user_service.find_user_by_provider_id(db, provider, external_id)
    if user is None:
        return _reply("You must sign in to the planner at least once before joining from the chat.")
    if user.is_banned:
        return _reply("Your account cannot take part in calls.")

    call = call_service.get_call(db, call_id)
    is_creator = call.creator_id == user.user_id

    if action == "list_participants":
        accepted, declined = call_service.roster_names(db, call_service.get_roster(db, call))
        present = "\n".join(f"- {e['name']}" for e in accepted) or "Nobody yet."
        absent = "\n".join(f"- {e['name']}" for e in declined) or "Nobody."
        return _reply(f"**In:**\n{present}\n\n**Out:**\n{absent}")

    if action == "cancel_call":
        if not is_creator:
            return _reply("Only the creator can cancel the call.")
        call_service.delete_call(db, call, user, dispatcher)
        return _reply("Call cancelled.")

    if is_creator:
        if action == "accept_call":
            return _reply("No need, you created the call so you are in.")
        return _reply("You cannot leave your own call. Cancel it instead.")

    status = "ACCEPTED" if action == "accept_call" else "DECLINED"
    outcome = call_service.respond_to_call(db, call_id, user, status, dispatcher)
    if outcome.result == "unchanged":
        if status == "ACCEPTED":
            return _reply("You are already in for this call.")
        return _reply("You already declined this call.")

    logger.info("Chat relay: %s %s call %s", user.user_id, action, call_id)
    call = call_service.get_call(db, call_id)
    text = "You're in!" if status == "ACCEPTED" else "You're out for this one."
    return _reply(text, embed=call_service.roster_embed(db, call))

"""Request dependencies: current user and shared-secret guards.

Authentication happens upstream; requests arrive with the authenticated user
id in the ``X-User-Id`` header.
"""
import secrets
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.errors import ForbiddenError, UnauthorizedError
from app.models.user import User


def get_current_user(
    x_user_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> User:
    if not x_user_id:
        raise UnauthorizedError()
    user = db.query(User).filter(User.user_id == x_user_id).first()
    if not user:
        raise UnauthorizedError("Unknown user")
    if user.is_banned:
        raise ForbiddenError("User is banned")
    return user


def _check_bearer(authorization: Optional[str], secret: str) -> None:
    if not secret:
        raise UnauthorizedError("Endpoint disabled: no secret configured")
    if not authorization or not secrets.compare_digest(authorization, f"Bearer {secret}"):
        raise UnauthorizedError("Unauthorized")


def require_cron_secret(authorization: Optional[str] = Header(None)) -> None:
    _check_bearer(authorization, settings.CRON_SECRET)


def require_interactions_secret(authorization: Optional[str] = Header(None)) -> None:
    _check_bearer(authorization, settings.INTERACTIONS_SECRET)

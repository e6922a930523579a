"""User lookups and the admin capability check."""
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.errors import ForbiddenError, NotFoundError
from app.models.user import ProviderAccount, User

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def find_user_by_provider_id(db: Session, provider: str, external_id: str) -> Optional[User]:
    account = (
        db.query(ProviderAccount)
        .filter(ProviderAccount.provider == provider, ProviderAccount.provider_account_id == external_id)
        .first()
    )
    return account.user if account else None


def display_names(db: Session, user_ids: list[str]) -> dict[str, str]:
    if not user_ids:
        return {}
    users = db.query(User).filter(User.user_id.in_(user_ids)).all()
    return {u.user_id: u.display_name for u in users}


def is_admin(user: User) -> bool:
    """Capability check against the configured privileged identities."""
    identities = settings.admin_identities
    if not identities:
        return False
    return user.user_id.lower() in identities or (user.email or "").lower() in identities


def create_user(
    db: Session,
    name: Optional[str],
    email: Optional[str] = None,
    image: Optional[str] = None,
    provider: Optional[str] = None,
    provider_account_id: Optional[str] = None,
) -> User:
    user = User(name=name, email=email, image=image)
    db.add(user)
    db.flush()
    if provider and provider_account_id:
        db.add(ProviderAccount(user_id=user.user_id, provider=provider, provider_account_id=provider_account_id))
    db.commit()
    db.refresh(user)
    logger.info("Created user %s (%s)", user.user_id, user.display_name)
    return user


def update_user(db: Session, actor: User, user_id: str, updates: dict[str, Any]) -> User:
    """Admin-only rename / soft ban."""
    if not is_admin(actor):
        raise ForbiddenError("Only administrators may edit users")
    user = get_user(db, user_id)
    for field in ("custom_name", "is_banned"):
        if field in updates:
            setattr(user, field, updates[field])
    db.commit()
    db.refresh(user)
    logger.info("Admin %s updated user %s: %s", actor.user_id, user_id, sorted(updates))
    return user

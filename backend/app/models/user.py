"""User and ProviderAccount ORM models."""
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=True)  # provider-given
    custom_name = Column(String(100), nullable=True)  # set by an admin
    email = Column(String(255), nullable=True, unique=True)
    image = Column(String(500), nullable=True)
    is_banned = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    accounts = relationship("ProviderAccount", back_populates="user", cascade="all, delete-orphan")

    @property
    def display_name(self) -> str:
        return self.custom_name or self.name or "Player"


class ProviderAccount(Base):
    """Link between a user and an external identity (e.g. a Discord account)."""

    __tablename__ = "provider_accounts"
    __table_args__ = (UniqueConstraint("provider", "provider_account_id", name="uq_provider_account"),)

    account_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    provider = Column(String(50), nullable=False)
    provider_account_id = Column(String(100), nullable=False)

    user = relationship("User", back_populates="accounts")

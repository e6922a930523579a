"""Availability and SlotStatus ORM models."""
from sqlalchemy import Column, Integer, String, Date, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class Availability(Base):
    """One row per (user, date, hour) the user can play."""

    __tablename__ = "availabilities"
    __table_args__ = (UniqueConstraint("user_id", "date", "hour", name="uq_availability_user_date_hour"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    hour = Column(Integer, nullable=False)
    # Set when the row was auto-filled by a call (creation or accept)
    source_call_id = Column(String(36), ForeignKey("calls.call_id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User")


class SlotStatus(Base):
    """Notification state of the golden run starting at (date, start_hour)."""

    __tablename__ = "slot_statuses"

    date = Column(Date, primary_key=True)
    start_hour = Column(Integer, primary_key=True)
    notified = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

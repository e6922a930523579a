"""Match result ORM model."""
import uuid
from sqlalchemy import Column, String, Date, Integer, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class Match(Base):
    """A played match. Teams are player names; guests have no account."""

    __tablename__ = "matches"

    match_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    date = Column(Date, nullable=False, index=True)
    score_team1 = Column(Integer, nullable=False)
    score_team2 = Column(Integer, nullable=False)
    team1_names = Column(JSON, nullable=False, default=list)
    team2_names = Column(JSON, nullable=False, default=list)
    recorded_by = Column(String(36), ForeignKey("users.user_id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    recorder = relationship("User")

"""Call and CallResponse ORM models."""
import uuid
import enum
from sqlalchemy import Column, String, Date, Integer, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base

LAST_HOUR_OF_DAY = 23


class ResponseStatus(str, enum.Enum):
    accepted = "ACCEPTED"
    declined = "DECLINED"


class Call(Base):
    __tablename__ = "calls"

    call_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    creator_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    date = Column(Date, nullable=False, index=True)
    start_hour = Column(Integer, nullable=False)
    location = Column(String(255), nullable=False)
    duration_minutes = Column(Integer, nullable=False, default=60)
    price = Column(String(50), nullable=True)
    comment = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    creator = relationship("User")
    responses = relationship("CallResponse", back_populates="call", cascade="all, delete-orphan")

    @property
    def slots_count(self) -> int:
        # 1h of play books 4 hourly slots, 1h30 books 5
        return 5 if self.duration_minutes == 90 else 4

    @property
    def occupied_hours(self) -> list[int]:
        return [
            h for h in range(self.start_hour, self.start_hour + self.slots_count)
            if h <= LAST_HOUR_OF_DAY
        ]


class CallResponse(Base):
    __tablename__ = "call_responses"

    call_id = Column(String(36), ForeignKey("calls.call_id"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)
    status = Column(SAEnum(ResponseStatus), nullable=False)
    responded_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    call = relationship("Call", back_populates="responses")
    user = relationship("User")

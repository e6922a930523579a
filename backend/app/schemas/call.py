"""Pydantic schemas for Calls and RSVPs."""
from __future__ import annotations
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel

from app.models.call import ResponseStatus


class CallCreate(BaseModel):
    date: date
    hour: int
    location: str
    duration: int = 60
    price: Optional[str] = None
    comment: Optional[str] = None


class CallResponseOut(BaseModel):
    user_id: str
    status: ResponseStatus
    responded_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CallOut(BaseModel):
    call_id: str
    creator_id: str
    date: date
    start_hour: int
    location: str
    duration_minutes: int
    slots_count: int
    occupied_hours: list[int]
    price: Optional[str] = None
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    responses: list[CallResponseOut] = []

    model_config = {"from_attributes": True}


class RespondPayload(BaseModel):
    status: str  # ACCEPTED or DECLINED


class RosterEntry(BaseModel):
    user_id: str
    name: str


class RosterOut(BaseModel):
    accepted: list[RosterEntry] = []
    declined: list[RosterEntry] = []


class RespondOut(BaseModel):
    result: str
    status: Optional[str] = None
    roster: RosterOut = RosterOut()


class InteractionPayload(BaseModel):
    action: str
    call_id: str
    provider: str = "discord"
    external_id: str


class InteractionOut(BaseModel):
    content: str
    embed: Optional[dict] = None

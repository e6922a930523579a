"""Pydantic schemas for availability slots."""
from __future__ import annotations
from datetime import date
from pydantic import BaseModel


class SlotRef(BaseModel):
    date: date
    hour: int


class BatchSave(BaseModel):
    additions: list[SlotRef] = []
    removals: list[SlotRef] = []


class SlotUser(BaseModel):
    user_id: str
    name: str


class SlotOut(BaseModel):
    date: date
    hour: int
    count: int
    users: list[SlotUser] = []


class GridOut(BaseModel):
    my_slots: list[str] = []
    slots: list[SlotOut] = []


class ToggleOut(BaseModel):
    status: str


class BatchOut(BaseModel):
    status: str = "batch_processed"
    added: int
    removed: int

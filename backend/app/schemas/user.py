"""Pydantic schemas for Users."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class UserCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None
    provider: Optional[str] = None
    provider_account_id: Optional[str] = None


class UserUpdate(BaseModel):
    custom_name: Optional[str] = None
    is_banned: Optional[bool] = None


class UserOut(BaseModel):
    user_id: str
    name: Optional[str] = None
    custom_name: Optional[str] = None
    display_name: str
    image: Optional[str] = None
    is_banned: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

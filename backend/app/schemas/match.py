"""Pydantic schemas for match results and the leaderboard."""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class MatchCreate(BaseModel):
    date: date
    score_team1: int
    score_team2: int
    team1: list[str]
    team2: list[str]


class MatchOut(BaseModel):
    match_id: str
    date: date
    score_team1: int
    score_team2: int
    team1_names: list[str] = []
    team2_names: list[str] = []
    recorded_by: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PlayerStatsOut(BaseModel):
    name: str
    image: Optional[str] = None
    matches: int
    wins: int
    losses: int
    draws: int
    win_rate: int

    model_config = {"from_attributes": True}

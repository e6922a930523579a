"""Match result and leaderboard routes."""
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps import get_current_user
from app.models.user import User
from app.schemas.match import MatchCreate, MatchOut, PlayerStatsOut
from app.services import match_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=MatchOut, status_code=status.HTTP_201_CREATED)
def record_match(
    payload: MatchCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Record a played match with both teams and the final score."""
    return match_service.record_match(
        db,
        recorder=user,
        day=payload.date,
        score_team1=payload.score_team1,
        score_team2=payload.score_team2,
        team1=payload.team1,
        team2=payload.team2,
    )


@router.get("/", response_model=list[MatchOut])
def list_matches(from_date: Optional[date] = Query(None), db: Session = Depends(get_db)):
    """Most recent matches first."""
    return match_service.list_matches(db, from_date)


@router.get("/leaderboard", response_model=list[PlayerStatsOut])
def get_leaderboard(db: Session = Depends(get_db)):
    return match_service.leaderboard(db)


@router.delete("/{match_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_match(
    match_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Remove a wrongly entered match. Administrators only."""
    match_service.delete_match(db, match_id, user)

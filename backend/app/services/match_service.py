"""Match results and the leaderboard built from them."""
import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from app.errors import ForbiddenError, NotFoundError, ValidationError
from app.models.match import Match
from app.models.user import User
from app.scheduling.leaderboard import PlayerStats, compute_leaderboard
from app.services import user_service

logger = logging.getLogger(__name__)


def _clean_team(names: list[str], label: str) -> list[str]:
    cleaned = [n.strip() for n in names if n and n.strip()]
    if not cleaned:
        raise ValidationError(f"{label} needs at least one player")
    return cleaned


def record_match(
    db: Session,
    recorder: User,
    day: date,
    score_team1: int,
    score_team2: int,
    team1: list[str],
    team2: list[str],
) -> Match:
    if score_team1 < 0 or score_team2 < 0:
        raise ValidationError("Scores cannot be negative")
    team1 = _clean_team(team1, "Team 1")
    team2 = _clean_team(team2, "Team 2")
    overlap = {n.lower() for n in team1} & {n.lower() for n in team2}
    if overlap:
        raise ValidationError(f"Players on both teams: {', '.join(sorted(overlap))}")

    match = Match(
        date=day,
        score_team1=score_team1,
        score_team2=score_team2,
        team1_names=team1,
        team2_names=team2,
        recorded_by=recorder.user_id,
    )
    db.add(match)
    db.commit()
    db.refresh(match)
    logger.info("Match %s on %s recorded by %s: %d-%d", match.match_id, day, recorder.user_id, score_team1, score_team2)
    return match


def list_matches(db: Session, from_date: Optional[date] = None) -> list[Match]:
    query = db.query(Match)
    if from_date is not None:
        query = query.filter(Match.date >= from_date)
    return query.order_by(Match.date.desc(), Match.created_at.desc()).all()


def delete_match(db: Session, match_id: str, actor: User) -> None:
    if not user_service.is_admin(actor):
        raise ForbiddenError("Only administrators may delete matches")
    match = db.query(Match).filter(Match.match_id == match_id).first()
    if not match:
        raise NotFoundError("Match not found")
    db.delete(match)
    db.commit()
    logger.info("Admin %s deleted match %s", actor.user_id, match_id)


def leaderboard(db: Session) -> list[PlayerStats]:
    return compute_leaderboard(db.query(Match).all(), db.query(User).all())

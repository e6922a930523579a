"""Per-player results derived from recorded matches.

Team members are plain names. A name is tied to an account when it equals
the account's custom name or provider name (case-insensitive); otherwise it
is a guest. Banned accounts never appear, and neither do guests using a
banned account's name.
"""
from dataclasses import dataclass
from typing import Any, Iterable, Optional


@dataclass
class PlayerStats:
    name: str
    image: Optional[str] = None
    matches: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0

    @property
    def win_rate(self) -> int:
        if not self.matches:
            return 0
        return int(self.wins * 100 / self.matches + 0.5)


def _lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if value else None


def _find_account(users: list[Any], lowered: str) -> Optional[Any]:
    for user in users:
        if _lower(user.custom_name) == lowered or _lower(user.name) == lowered:
            return user
    return None


def compute_leaderboard(matches: Iterable[Any], users: Iterable[Any]) -> list[PlayerStats]:
    """Rank players by wins, then win rate, then name.

    ``matches`` expose ``score_team1``, ``score_team2``, ``team1_names`` and
    ``team2_names``; ``users`` expose ``name``, ``custom_name``, ``image``
    and ``is_banned``.
    """
    users = list(users)
    banned_names = {
        n for u in users if u.is_banned for n in (_lower(u.name), _lower(u.custom_name)) if n
    }
    stats: dict[str, PlayerStats] = {}

    for match in matches:
        for team, names in ((1, match.team1_names), (2, match.team2_names)):
            mine, theirs = (
                (match.score_team1, match.score_team2) if team == 1 else (match.score_team2, match.score_team1)
            )
            for raw in names or ():
                clean = (raw or "").strip()
                if not clean:
                    continue
                account = _find_account(users, clean.lower())
                if account is not None:
                    if account.is_banned:
                        continue
                elif clean.lower() in banned_names:
                    continue

                display = (account.custom_name if account is not None else None) or clean
                image = account.image if account is not None else None
                entry = stats.setdefault(display, PlayerStats(name=display, image=image))
                if entry.image is None and image:
                    entry.image = image

                entry.matches += 1
                if mine > theirs:
                    entry.wins += 1
                elif mine < theirs:
                    entry.losses += 1
                else:
                    entry.draws += 1

    return sorted(stats.values(), key=lambda s: (-s.wins, -s.win_rate, s.name.lower()))

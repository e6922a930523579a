"""Tests for leaderboard statistics."""
from types import SimpleNamespace

from app.scheduling.leaderboard import PlayerStats, compute_leaderboard


def _match(s1, s2, team1, team2):
    return SimpleNamespace(score_team1=s1, score_team2=s2, team1_names=team1, team2_names=team2)


def _user(name, custom_name=None, banned=False, image=None):
    return SimpleNamespace(name=name, custom_name=custom_name, is_banned=banned, image=image)


def _by_name(board):
    return {s.name: s for s in board}


class TestComputeLeaderboard:
    def test_wins_losses_draws(self):
        matches = [
            _match(5, 3, ["Ana", "Ben"], ["Cid", "Dan"]),
            _match(2, 2, ["Ana", "Cid"], ["Ben", "Dan"]),
        ]
        board = _by_name(compute_leaderboard(matches, []))
        assert (board["Ana"].wins, board["Ana"].losses, board["Ana"].draws) == (1, 0, 1)
        assert (board["Cid"].wins, board["Cid"].losses, board["Cid"].draws) == (0, 1, 1)
        assert board["Ana"].matches == 2

    def test_team_two_win(self):
        board = _by_name(compute_leaderboard([_match(1, 4, ["Ana"], ["Ben"])], []))
        assert board["Ben"].wins == 1
        assert board["Ana"].losses == 1

    def test_win_rate_rounds_half_up(self):
        assert PlayerStats(name="x", matches=3, wins=2).win_rate == 67
        assert PlayerStats(name="x", matches=8, wins=1).win_rate == 13
        assert PlayerStats(name="x").win_rate == 0

    def test_ranked_by_wins_then_win_rate(self):
        matches = [
            _match(1, 0, ["Ana"], ["Ben"]),
            _match(1, 0, ["Ana"], ["Ben"]),
            _match(0, 1, ["Ana"], ["Cid"]),
            _match(1, 0, ["Cid"], ["Ben"]),
            _match(1, 0, ["Dan"], ["Ben"]),
        ]
        board = compute_leaderboard(matches, [])
        # Cid and Ana both have 2 wins; Cid has the better rate
        assert [s.name for s in board][:3] == ["Cid", "Ana", "Dan"]
        assert board[-1].name == "Ben"

    def test_names_resolve_to_accounts_case_insensitively(self):
        users = [_user("bob_1987", custom_name="Bob", image="http://img/bob.png")]
        matches = [_match(3, 1, ["BOB_1987"], ["Eve"]), _match(0, 2, ["eve"], [" bob "])]
        board = _by_name(compute_leaderboard(matches, users))
        assert board["Bob"].matches == 2
        assert board["Bob"].wins == 2
        assert board["Bob"].image == "http://img/bob.png"

    def test_banned_accounts_and_their_names_excluded(self):
        users = [_user("Mallory", banned=True), _user("Trent", custom_name="Trudy", banned=True)]
        matches = [_match(1, 0, ["mallory", "Ana"], ["trudy", "Ben"])]
        board = _by_name(compute_leaderboard(matches, users))
        assert set(board) == {"Ana", "Ben"}

    def test_blank_names_ignored(self):
        board = compute_leaderboard([_match(1, 0, ["Ana", "  ", ""], ["Ben"])], [])
        assert sorted(s.name for s in board) == ["Ana", "Ben"]

"""Tests for match result endpoints and the leaderboard."""
from app.config import settings
from tests.conftest import MATCH_DAY, auth, create_test_user


def _record(client, user, team1, team2, s1=5, s2=3, day=MATCH_DAY):
    payload = {"date": day.isoformat(), "score_team1": s1, "score_team2": s2, "team1": team1, "team2": team2}
    return client.post("/api/matches/", json=payload, headers=auth(user))


class TestRecordMatch:
    def test_record_and_list(self, client):
        user = create_test_user(client, "Ana")
        resp = _record(client, user, ["Ana", " Ben "], ["Cid"])

        assert resp.status_code == 201, resp.text
        data = resp.json()
        assert data["team1_names"] == ["Ana", "Ben"]
        assert data["recorded_by"] == user["user_id"]

        listed = client.get("/api/matches/").json()
        assert [m["match_id"] for m in listed] == [data["match_id"]]

    def test_requires_identity(self, client):
        payload = {"date": MATCH_DAY.isoformat(), "score_team1": 1, "score_team2": 0, "team1": ["A"], "team2": ["B"]}
        assert client.post("/api/matches/", json=payload).status_code == 401

    def test_empty_team_rejected(self, client):
        user = create_test_user(client, "Ana")
        assert _record(client, user, ["Ana"], ["  "]).status_code == 400

    def test_player_on_both_teams_rejected(self, client):
        user = create_test_user(client, "Ana")
        assert _record(client, user, ["Ana", "Ben"], ["ben"]).status_code == 400

    def test_negative_score_rejected(self, client):
        user = create_test_user(client, "Ana")
        assert _record(client, user, ["Ana"], ["Ben"], s1=-1).status_code == 400


class TestDeleteMatch:
    def test_admin_only(self, client, monkeypatch):
        admin = create_test_user(client, "Admin", email="admin@example.com")
        user = create_test_user(client, "Ana")
        match = _record(client, user, ["Ana"], ["Ben"]).json()

        assert client.delete(f"/api/matches/{match['match_id']}", headers=auth(user)).status_code == 403

        monkeypatch.setattr(settings, "ADMIN_IDENTITIES", "admin@example.com")
        assert client.delete(f"/api/matches/{match['match_id']}", headers=auth(admin)).status_code == 204
        assert client.get("/api/matches/").json() == []
        assert client.delete(f"/api/matches/{match['match_id']}", headers=auth(admin)).status_code == 404


class TestLeaderboard:
    def test_leaderboard_reflects_results(self, client):
        ana = create_test_user(client, "Ana")
        _record(client, ana, ["Ana", "Ben"], ["Cid"], s1=5, s2=3)
        _record(client, ana, ["Ana"], ["Cid"], s1=1, s2=1)

        board = client.get("/api/matches/leaderboard").json()

        # Ben: one win at 100%; Ana: one win and a draw
        assert [s["name"] for s in board][:2] == ["Ben", "Ana"]
        ana_stats = board[1]
        assert (ana_stats["wins"], ana_stats["draws"], ana_stats["win_rate"]) == (1, 1, 50)
        cid = next(s for s in board if s["name"] == "Cid")
        assert (cid["losses"], cid["draws"]) == (1, 1)

    def test_banned_player_hidden(self, client, monkeypatch):
        admin = create_test_user(client, "Admin", email="admin@example.com")
        cheat = create_test_user(client, "Cheat")
        monkeypatch.setattr(settings, "ADMIN_IDENTITIES", "admin@example.com")
        _record(client, admin, ["Admin"], ["Cheat"], s1=0, s2=9)
        client.patch(f"/api/users/{cheat['user_id']}", json={"is_banned": True}, headers=auth(admin))

        names = [s["name"] for s in client.get("/api/matches/leaderboard").json()]
        assert names == ["Admin"]

"""Tests for golden-run confirmation and revocation."""
from app.config import settings
from app.models.availability import SlotStatus
from app.services import availability_service, golden_slot_service
from tests.conftest import MATCH_DAY, fill_slots, hours_of, make_users


def _status(db, start):
    db.expire_all()
    return db.query(SlotStatus).filter(SlotStatus.date == MATCH_DAY, SlotStatus.start_hour == start).first()


class TestConfirmation:
    def test_tenth_player_confirms_run_once(self, db, dispatcher):
        """10 players at 20h and 21h, 9 at 22h; the tenth at 22h completes 20h-23h."""
        users = make_users(db, 10)
        fill_slots(db, users, MATCH_DAY, [20, 21])
        fill_slots(db, users[:9], MATCH_DAY, [22])

        result = availability_service.toggle_slot(db, users[9], MATCH_DAY, 22, dispatcher)

        assert result == "added"
        assert dispatcher.count("MATCH CONFIRMED") == 1
        assert _status(db, 20).notified is True

    def test_confirmation_lists_common_players(self, db, dispatcher):
        users = make_users(db, 10)
        fill_slots(db, users, MATCH_DAY, [20, 21])
        fill_slots(db, users[:9], MATCH_DAY, [22])
        availability_service.toggle_slot(db, users[9], MATCH_DAY, 22, dispatcher)

        message, mention_all = dispatcher.sent[0]
        players = next(f["value"] for f in message["fields"] if f["name"] == "Players")
        assert "Player 00" in players and "Player 09" in players
        assert mention_all is False

    def test_replay_sends_nothing_new(self, db, dispatcher):
        users = make_users(db, 10)
        fill_slots(db, users, MATCH_DAY, [20, 21])
        fill_slots(db, users[:9], MATCH_DAY, [22])
        availability_service.toggle_slot(db, users[9], MATCH_DAY, 22, dispatcher)

        assert golden_slot_service.evaluate_addition(db, MATCH_DAY, 22, dispatcher) == []
        assert golden_slot_service.evaluate_addition(db, MATCH_DAY, 21, dispatcher) == []
        assert golden_slot_service.reconcile_day(db, MATCH_DAY, dispatcher) == ([], [])
        assert dispatcher.count("MATCH CONFIRMED") == 1

    def test_below_quorum_sends_nothing(self, db, dispatcher):
        users = make_users(db, 9)
        fill_slots(db, users, MATCH_DAY, [20, 21, 22])
        assert golden_slot_service.evaluate_addition(db, MATCH_DAY, 22, dispatcher) == []
        assert dispatcher.sent == []

    def test_confirm_is_conditional(self, db):
        assert golden_slot_service._confirm(db, MATCH_DAY, 14) is True
        assert golden_slot_service._confirm(db, MATCH_DAY, 14) is False

    def test_one_write_can_complete_several_runs(self, db, dispatcher):
        users = make_users(db, 10)
        fill_slots(db, users, MATCH_DAY, [10, 11, 13, 14])
        fill_slots(db, users[:9], MATCH_DAY, [12])

        availability_service.toggle_slot(db, users[9], MATCH_DAY, 12, dispatcher)

        # 10-13, 11-14 and 12-15 all contain 12h
        assert dispatcher.count("MATCH CONFIRMED") == 3


class TestRevocation:
    def _confirmed_four_hour_run(self, db, dispatcher, monkeypatch):
        monkeypatch.setattr(settings, "GOLDEN_RUN_LENGTH", 4)
        users = make_users(db, 10)
        fill_slots(db, users, MATCH_DAY, [20, 21, 22])
        fill_slots(db, users[:9], MATCH_DAY, [23])
        availability_service.toggle_slot(db, users[9], MATCH_DAY, 23, dispatcher)
        assert dispatcher.count("MATCH CONFIRMED") == 1
        return users

    def test_withdrawal_revokes_once(self, db, dispatcher, monkeypatch):
        users = self._confirmed_four_hour_run(db, dispatcher, monkeypatch)

        assert availability_service.toggle_slot(db, users[3], MATCH_DAY, 21, dispatcher) == "removed"
        assert dispatcher.count("WITHDRAWAL") == 1
        assert _status(db, 20).notified is False

        availability_service.toggle_slot(db, users[4], MATCH_DAY, 22, dispatcher)
        assert dispatcher.count("WITHDRAWAL") == 1

    def test_revocation_names_the_player_and_hour(self, db, dispatcher, monkeypatch):
        users = self._confirmed_four_hour_run(db, dispatcher, monkeypatch)
        availability_service.toggle_slot(db, users[3], MATCH_DAY, 21, dispatcher)

        message, _ = dispatcher.sent[-1]
        assert message["title"] == "WITHDRAWAL ON A 4H MATCH"
        assert "Player 03" in message["description"]
        assert "21h slot" in message["description"]
        assert "(20h - 24h)" in message["description"]

    def test_run_can_be_confirmed_again_after_revocation(self, db, dispatcher, monkeypatch):
        users = self._confirmed_four_hour_run(db, dispatcher, monkeypatch)
        availability_service.toggle_slot(db, users[3], MATCH_DAY, 21, dispatcher)
        availability_service.toggle_slot(db, users[3], MATCH_DAY, 21, dispatcher)

        assert dispatcher.count("MATCH CONFIRMED") == 2
        assert _status(db, 20).notified is True

    def test_removal_without_confirmed_run_is_silent(self, db, dispatcher):
        users = make_users(db, 3)
        fill_slots(db, users, MATCH_DAY, [15])
        availability_service.toggle_slot(db, users[0], MATCH_DAY, 15, dispatcher)
        assert dispatcher.sent == []


class TestCounts:
    def test_each_write_moves_count_by_one(self, db, dispatcher):
        users = make_users(db, 3)
        counts = []
        for user in users:
            availability_service.toggle_slot(db, user, MATCH_DAY, 18, dispatcher)
            counts.append(golden_slot_service.count_slot(db, MATCH_DAY, 18))
        availability_service.toggle_slot(db, users[1], MATCH_DAY, 18, dispatcher)
        counts.append(golden_slot_service.count_slot(db, MATCH_DAY, 18))
        assert counts == [1, 2, 3, 2]

    def test_notification_failure_does_not_fail_the_write(self, db):
        class BrokenDispatcher:
            def send(self, message, mention_all=False):
                raise RuntimeError("chat down")

        users = make_users(db, 10)
        fill_slots(db, users, MATCH_DAY, [20, 21])
        fill_slots(db, users[:9], MATCH_DAY, [22])

        result = availability_service.toggle_slot(db, users[9], MATCH_DAY, 22, BrokenDispatcher())

        assert result == "added"
        assert hours_of(db, users[9].user_id, MATCH_DAY) == [20, 21, 22]


class TestBatchReconcile:
    def test_batch_confirms_each_run_once(self, db, dispatcher):
        users = make_users(db, 10)
        fill_slots(db, users[:9], MATCH_DAY, [10, 11, 12])

        result = availability_service.save_batch(
            db, users[9], additions=[(MATCH_DAY, 10), (MATCH_DAY, 11), (MATCH_DAY, 12)], removals=[], dispatcher=dispatcher
        )

        assert result == {"added": 3, "removed": 0}
        assert dispatcher.count("MATCH CONFIRMED") == 1

    def test_batch_removal_revokes(self, db, dispatcher):
        users = make_users(db, 10)
        fill_slots(db, users, MATCH_DAY, [10, 11, 12])
        golden_slot_service.reconcile_day(db, MATCH_DAY, dispatcher)
        assert dispatcher.count("MATCH CONFIRMED") == 1

        availability_service.save_batch(db, users[0], additions=[], removals=[(MATCH_DAY, 11)], dispatcher=dispatcher)

        assert dispatcher.count("WITHDRAWAL") == 1
        message, _ = dispatcher.sent[-1]
        assert "Player 00" in message["description"]

    def test_sweep_picks_up_missed_confirmation(self, db, dispatcher):
        users = make_users(db, 10)
        fill_slots(db, users, MATCH_DAY, [16, 17, 18])

        confirmed, revoked = golden_slot_service.reconcile_day(db, MATCH_DAY, dispatcher)

        assert confirmed == [16]
        assert revoked == []

"""Consecutive-hour run detection over a SlotIndex."""
from datetime import date

from app.scheduling.slot_index import SlotIndex, UserRef


def candidate_starts(hour: int, run_length: int, opening: int, closing: int) -> list[int]:
    """Start hours of every run that contains ``hour``.

    A write at ``hour`` can only change runs starting in
    ``[hour - (run_length - 1), hour]``; starts are clipped so the run stays
    inside ``opening..closing``.
    """
    return [
        start for start in range(hour - run_length + 1, hour + 1)
        if start >= opening and start + run_length - 1 <= closing
    ]


def is_full_run(index: SlotIndex, day: date, start_hour: int, run_length: int, quorum: int) -> bool:
    return all(index.count(day, h) >= quorum for h in range(start_hour, start_hour + run_length))


def find_full_runs(
    index: SlotIndex,
    day: date,
    run_length: int,
    quorum: int,
    opening: int,
    closing: int,
) -> list[int]:
    """Return start hours of runs where every hour meets ``quorum`` (inclusive)."""
    return [
        start for start in range(opening, closing - run_length + 2)
        if is_full_run(index, day, start, run_length, quorum)
    ]


def common_users(index: SlotIndex, day: date, start_hour: int, run_length: int) -> list[UserRef]:
    """Users present at every hour of the run, sorted by name.

    Empty when any hour of the run has nobody.
    """
    common: set[str] | None = None
    names: dict[str, UserRef] = {}
    for h in range(start_hour, start_hour + run_length):
        users = index.users(day, h)
        ids = {u.user_id for u in users}
        for u in users:
            names.setdefault(u.user_id, u)
        common = ids if common is None else common & ids
        if not common:
            return []
    return sorted((names[uid] for uid in common or ()), key=lambda u: (u.name.lower(), u.user_id))

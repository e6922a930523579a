"""Pick the run with the most common players over a multi-day horizon."""
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from app.scheduling.runs import common_users
from app.scheduling.slot_index import SlotIndex, UserRef


@dataclass
class ReminderPick:
    date: date
    start_hour: int
    run_length: int
    count: int
    quorum: int
    users: list[UserRef] = field(default_factory=list)

    @property
    def end_hour(self) -> int:
        return self.start_hour + self.run_length

    @property
    def missing(self) -> int:
        return max(self.quorum - self.count, 0)

    @property
    def is_full(self) -> bool:
        return self.count >= self.quorum


def best_run(
    index: SlotIndex,
    days: Iterable[date],
    run_length: int,
    quorum: int,
    opening: int,
    closing: int,
) -> Optional[ReminderPick]:
    """Highest-overlap run over ``days``; ties go to the earlier date, then hour.

    Returns None when the index holds no availability at all, so an empty
    horizon is distinguishable from a best run with zero common players.
    """
    if index.is_empty():
        return None

    best: Optional[tuple[tuple[int, date, int], list[UserRef], date, int]] = None
    for day in set(days):
        for start in range(opening, closing - run_length + 2):
            users = common_users(index, day, start, run_length)
            key = (-len(users), day, start)
            if best is None or key < best[0]:
                best = (key, users, day, start)

    if best is None:
        return None
    _, users, day, start = best
    return ReminderPick(
        date=day,
        start_hour=start,
        run_length=run_length,
        count=len(users),
        quorum=quorum,
        users=users,
    )

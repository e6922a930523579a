"""SlotIndex — per-(date, hour) aggregation of availability rows.

The index is a pure snapshot built from availability records; it is rebuilt
per request from the database rather than shared between requests.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable, Optional


@dataclass(frozen=True, order=True)
class UserRef:
    user_id: str
    name: str = "Player"


@dataclass
class SlotAggregate:
    users: list[UserRef] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.users)

    @property
    def user_ids(self) -> set[str]:
        return {u.user_id for u in self.users}


def _as_date(value: Any) -> date:
    """Truncate storage values to a calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    return value


def _user_ref(record: Any) -> UserRef:
    user = getattr(record, "user", None)
    name = getattr(user, "display_name", None) if user is not None else None
    return UserRef(user_id=str(record.user_id), name=name or "Player")


class SlotIndex:
    """Mapping of (date, hour) to the users available there."""

    def __init__(self, slots: Optional[dict[tuple[date, int], SlotAggregate]] = None):
        self._slots: dict[tuple[date, int], SlotAggregate] = slots or {}

    @classmethod
    def build(cls, records: Iterable[Any]) -> "SlotIndex":
        """Group records exposing ``user_id``, ``date`` and ``hour`` (and optionally ``user``)."""
        slots: dict[tuple[date, int], SlotAggregate] = {}
        for record in records:
            key = (_as_date(record.date), int(record.hour))
            slots.setdefault(key, SlotAggregate()).users.append(_user_ref(record))
        return cls(slots)

    def aggregate(self, day: date, hour: int) -> SlotAggregate:
        return self._slots.get((day, hour)) or SlotAggregate()

    def count(self, day: date, hour: int) -> int:
        return self.aggregate(day, hour).count

    def user_ids(self, day: date, hour: int) -> set[str]:
        return self.aggregate(day, hour).user_ids

    def users(self, day: date, hour: int) -> list[UserRef]:
        return list(self.aggregate(day, hour).users)

    def dates(self) -> list[date]:
        return sorted({day for day, _ in self._slots})

    def items(self):
        return sorted(self._slots.items())

    def is_empty(self) -> bool:
        return not self._slots

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, key: tuple[date, int]) -> bool:
        return key in self._slots

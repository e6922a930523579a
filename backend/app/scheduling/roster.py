"""Call roster resolution: explicit RSVPs merged with implicit presence."""
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

ACCEPTED = "ACCEPTED"
DECLINED = "DECLINED"


@dataclass
class Roster:
    accepted: list[str] = field(default_factory=list)
    declined: list[str] = field(default_factory=list)


def _status_value(status: Any) -> str:
    return getattr(status, "value", status)


def implicit_attendees(occupied_hours: list[int], availability: Iterable[Any]) -> set[str]:
    """Users holding a slot at every occupied hour of the call."""
    span = set(occupied_hours)
    if not span:
        return set()
    hits = Counter(str(a.user_id) for a in availability if a.hour in span)
    return {uid for uid, n in hits.items() if n == len(span)}


def resolve_roster(
    occupied_hours: list[int],
    responses: Iterable[Any],
    availability: Iterable[Any],
    creator_id: Optional[str] = None,
) -> Roster:
    """Resolve who is in and who is out.

    ``responses`` expose ``user_id`` and ``status``; ``availability`` rows
    expose ``user_id`` and ``hour`` and must already be scoped to the call's
    date. An explicit decline always beats implicit presence.
    """
    explicit_accepted: set[str] = set()
    explicit_declined: set[str] = set()
    for response in responses:
        status = _status_value(response.status)
        if status == ACCEPTED:
            explicit_accepted.add(str(response.user_id))
        elif status == DECLINED:
            explicit_declined.add(str(response.user_id))

    accepted = explicit_accepted | (implicit_attendees(occupied_hours, availability) - explicit_declined)
    if creator_id is not None:
        accepted.add(str(creator_id))
    accepted -= explicit_declined

    return Roster(accepted=sorted(accepted), declined=sorted(explicit_declined))

"""Three-way reconciliation of server slots with locally pending edits.

A client editing the grid holds server-confirmed slots plus pending
additions and removals. Pending state wins for every slot it names until the
save is acknowledged; the save itself only needs the deltas that actually
change server state.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

Slot = tuple[date, int]


@dataclass
class PendingEdits:
    additions: set[Slot] = field(default_factory=set)
    removals: set[Slot] = field(default_factory=set)

    @classmethod
    def from_lists(cls, additions: Iterable[Slot], removals: Iterable[Slot]) -> "PendingEdits":
        adds = set(additions)
        removes = set(removals)
        # A slot named on both sides was toggled twice: no net edit
        both = adds & removes
        return cls(additions=adds - both, removals=removes - both)

    def is_empty(self) -> bool:
        return not self.additions and not self.removals

    def reconcile(self, server_slots: Iterable[Slot]) -> set[Slot]:
        """Effective slot set as the editing user should see it."""
        return (set(server_slots) - self.removals) | self.additions

    def operations(self, server_slots: Iterable[Slot]) -> tuple[list[Slot], list[Slot]]:
        """Writes needed to bring the server to the reconciled state."""
        current = set(server_slots)
        to_add = sorted(self.additions - current)
        to_remove = sorted(self.removals & current)
        return to_add, to_remove

"""
Month Closure

Tracks which competencies are closed. A closed competency refuses
transaction creation and deletion until it is explicitly reopened.
Budgets, cards and savings goals are not gated by closure.

The controller is an immutable value: close() and reopen() return a new
controller and leave the original untouched, so the caller can persist
the new state before adopting it.
"""

from enum import Enum
from typing import Iterable

from household_ledger.core.competency import competency_sort_key, parse_competency
from household_ledger.exceptions import AlreadyClosedError, MonthClosedError


class MonthState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class MonthClosureController:
    """Open/Closed state per competency. Unknown competencies are Open."""

    def __init__(self, closed_months: Iterable[str] = ()):
        self._closed = frozenset(closed_months)

    @property
    def closed_months(self) -> list[str]:
        """Closed competencies in chronological order."""
        return sorted(self._closed, key=competency_sort_key)

    def is_closed(self, competency: str) -> bool:
        return competency in self._closed

    def state(self, competency: str) -> MonthState:
        return MonthState.CLOSED if self.is_closed(competency) else MonthState.OPEN

    def close(self, competency: str) -> "MonthClosureController":
        """
        Close a competency.

        Raises:
            ValueError: If the competency is not MM/YYYY
            AlreadyClosedError: If it is already closed
        """
        parse_competency(competency)
        if self.is_closed(competency):
            raise AlreadyClosedError(competency)
        return MonthClosureController(self._closed | {competency})

    def reopen(self, competency: str) -> "MonthClosureController":
        """Reopen a competency. Reopening an open competency changes nothing."""
        parse_competency(competency)
        if not self.is_closed(competency):
            return self
        return MonthClosureController(self._closed - {competency})

    def ensure_open(self, competencies: Iterable[str]) -> None:
        """
        Guard for transaction create/delete.

        Raises:
            MonthClosedError: Naming the first closed competency found
        """
        for competency in competencies:
            if self.is_closed(competency):
                raise MonthClosedError(competency)

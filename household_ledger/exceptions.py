"""
Ledger Exceptions

Every error raised by a ledger operation is terminal for that
operation only. Nothing is retried automatically.
"""

from typing import Optional


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class ValidationError(LedgerError):
    """A required field is missing or invalid. Raised before any mutation."""

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Missing or invalid field: {field}")


class MonthClosedError(LedgerError):
    """Attempted to create or delete a transaction in a closed competency."""

    def __init__(self, competency: str):
        self.competency = competency
        super().__init__(f"Competency {competency} is closed")


class AlreadyClosedError(LedgerError):
    """Attempted to close a competency that is already closed."""

    def __init__(self, competency: str):
        self.competency = competency
        super().__init__(f"Competency {competency} is already closed")


class NotFoundError(LedgerError):
    """Entity not found in its collection."""

    def __init__(self, entity: str, entity_id: object):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class PersistenceError(LedgerError):
    """The key-value store rejected or failed a collection write."""

    def __init__(self, key: str, message: Optional[str] = None):
        self.key = key
        super().__init__(message or f"Failed to persist collection '{key}'")

"""
Entity Collections

Each entity collection is persisted as one JSON snapshot under its own
key in the key-value store. Every mutation rewrites the whole collection
with a single set().

The in-memory copy is only replaced after the store confirms the write,
so a failed write leaves both sides as they were before the operation.
Writers on the same key are serialized with an asyncio.Lock; writes on
different keys are independent and are not atomic together.
"""

import asyncio
from typing import Any, Callable, Optional, Sequence

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from household_ledger.events import LedgerEventLogger, get_event_logger
from household_ledger.exceptions import PersistenceError
from household_ledger.models.ledger import (
    Budget,
    CreditCard,
    CreditCardInvoice,
    Investment,
    RecurringTransaction,
    SavingsGoal,
    Transaction,
)
from household_ledger.services.storage.interface import KeyValueStoreInterface, StorageError


# Collection keys
TRANSACTIONS = "transactions"
BUDGETS = "budgets"
CREDIT_CARDS = "creditCards"
SAVINGS_GOALS = "savingsGoals"
CATEGORIES = "categories"
CLOSED_MONTHS = "closedMonths"
RECURRING_TRANSACTIONS = "recurringTransactions"
CREDIT_CARD_INVOICES = "creditCardInvoices"
INVESTMENTS = "investments"

INITIALIZED_KEY = "initialized"

_ADAPTERS: dict[str, TypeAdapter] = {
    TRANSACTIONS: TypeAdapter(tuple[Transaction, ...]),
    BUDGETS: TypeAdapter(tuple[Budget, ...]),
    CREDIT_CARDS: TypeAdapter(tuple[CreditCard, ...]),
    SAVINGS_GOALS: TypeAdapter(tuple[SavingsGoal, ...]),
    CATEGORIES: TypeAdapter(tuple[str, ...]),
    CLOSED_MONTHS: TypeAdapter(tuple[str, ...]),
    RECURRING_TRANSACTIONS: TypeAdapter(tuple[RecurringTransaction, ...]),
    CREDIT_CARD_INVOICES: TypeAdapter(tuple[CreditCardInvoice, ...]),
    INVESTMENTS: TypeAdapter(tuple[Investment, ...]),
}

COLLECTION_KEYS = tuple(_ADAPTERS)


class LedgerCollections:
    """
    In-memory snapshots of every collection, backed by a key-value store.

    Accessors return tuples; callers never mutate collections in place.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        event_logger: Optional[LedgerEventLogger] = None,
    ):
        self._store = store
        self._events = event_logger or get_event_logger()
        self._data: dict[str, tuple] = {key: () for key in COLLECTION_KEYS}
        self._locks: dict[str, asyncio.Lock] = {key: asyncio.Lock() for key in COLLECTION_KEYS}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def _adapter(self, name: str) -> TypeAdapter:
        try:
            return _ADAPTERS[name]
        except KeyError:
            raise KeyError(f"Unknown collection: {name}")

    async def load(self) -> dict[str, int]:
        """
        Read every collection from the store.

        Absent keys load as empty collections.

        Returns:
            Item count per collection

        Raises:
            PersistenceError: If a stored snapshot cannot be read or parsed
        """
        loaded: dict[str, tuple] = {}
        for name in COLLECTION_KEYS:
            try:
                raw = await self._store.get(name)
            except StorageError as e:
                raise PersistenceError(name, f"Failed to read collection '{name}': {e}") from e

            if raw is None or raw == "":
                loaded[name] = ()
                continue

            try:
                loaded[name] = self._adapter(name).validate_json(raw)
            except PydanticValidationError as e:
                raise PersistenceError(name, f"Corrupt collection '{name}': {e}") from e

        self._data = loaded
        self._loaded = True
        return {name: len(items) for name, items in loaded.items()}

    def get(self, name: str) -> tuple:
        """Current snapshot of a collection."""
        self._adapter(name)
        return self._data[name]

    async def _write(self, name: str, items: Sequence[Any]) -> tuple:
        adapter = self._adapter(name)
        snapshot = tuple(items)
        payload = adapter.dump_json(snapshot).decode("utf-8")

        try:
            ok = await self._store.set(name, payload)
        except StorageError as e:
            self._events.log_persistence_failed(name, str(e))
            raise PersistenceError(name, f"Failed to persist collection '{name}': {e}") from e

        if not ok:
            self._events.log_persistence_failed(name, "store refused the write")
            raise PersistenceError(name)

        self._data[name] = snapshot
        return snapshot

    async def replace_all(self, name: str, items: Sequence[Any]) -> tuple:
        """
        Persist `items` as the whole collection, then adopt it in memory.

        Raises:
            PersistenceError: If the store write failed (memory unchanged)
        """
        async with self._locks[name]:
            return await self._write(name, items)

    async def update(self, name: str, fn: Callable[[tuple], Sequence[Any]]) -> tuple:
        """
        Read-modify-write a collection under its lock.

        `fn` receives the current snapshot and returns the new contents.
        An exception raised by `fn` aborts the update before anything
        is written.
        """
        self._adapter(name)
        async with self._locks[name]:
            return await self._write(name, fn(self._data[name]))

    # =========================================================================
    # INITIALIZATION MARKER
    # =========================================================================

    async def is_initialized(self) -> bool:
        try:
            return await self._store.get(INITIALIZED_KEY) == "true"
        except StorageError as e:
            raise PersistenceError(INITIALIZED_KEY, f"Failed to read marker: {e}") from e

    async def mark_initialized(self) -> None:
        try:
            ok = await self._store.set(INITIALIZED_KEY, "true")
        except StorageError as e:
            self._events.log_persistence_failed(INITIALIZED_KEY, str(e))
            raise PersistenceError(INITIALIZED_KEY, f"Failed to write marker: {e}") from e
        if not ok:
            self._events.log_persistence_failed(INITIALIZED_KEY, "store refused the write")
            raise PersistenceError(INITIALIZED_KEY)

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._data[TRANSACTIONS]

    @property
    def budgets(self) -> tuple[Budget, ...]:
        return self._data[BUDGETS]

    @property
    def credit_cards(self) -> tuple[CreditCard, ...]:
        return self._data[CREDIT_CARDS]

    @property
    def savings_goals(self) -> tuple[SavingsGoal, ...]:
        return self._data[SAVINGS_GOALS]

    @property
    def categories(self) -> tuple[str, ...]:
        return self._data[CATEGORIES]

    @property
    def closed_months(self) -> tuple[str, ...]:
        return self._data[CLOSED_MONTHS]

    @property
    def recurring_transactions(self) -> tuple[RecurringTransaction, ...]:
        return self._data[RECURRING_TRANSACTIONS]

    @property
    def credit_card_invoices(self) -> tuple[CreditCardInvoice, ...]:
        return self._data[CREDIT_CARD_INVOICES]

    @property
    def investments(self) -> tuple[Investment, ...]:
        return self._data[INVESTMENTS]
